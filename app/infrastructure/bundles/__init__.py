"""
Infrastructure adapters for the bundles bounded context.

Filesystem access to bundle directories, schema provisioning
against PostgreSQL and the JSON file bundle registry.
"""
