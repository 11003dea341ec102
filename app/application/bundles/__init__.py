"""
Application layer for the bundles bounded context.

Install, uninstall and admin-panel aggregation use cases.
No framework or infrastructure imports allowed.
"""
