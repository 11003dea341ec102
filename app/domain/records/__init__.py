"""
Records bounded context, domain layer.

Everything needed to turn a request against a bundle table into a
role-scoped SQL statement, and to classify what the database answers:
- Query context and built statements
- The query builder
- Database error code translation
"""
