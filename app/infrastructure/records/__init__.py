"""
Infrastructure adapters for the records bounded context.
"""
