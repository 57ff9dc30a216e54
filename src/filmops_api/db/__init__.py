"""
Database access: connection pool, schema and one repository per resource.
"""
