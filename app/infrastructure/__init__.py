"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: PostgreSQL access through SQLAlchemy,
bundle folders on disk and the installed-bundles registry file.
"""
