"""
Bundles bounded context, domain layer.

A bundle is a self-contained feature package installed as its own
database schema. This package holds the bundle naming rules, the
lifecycle results and the ports the installer depends on.
"""
