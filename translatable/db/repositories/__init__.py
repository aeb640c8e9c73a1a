"""
Repository modules for database access.

`records` holds point operations on base tables; `variations` owns the
translation tables and their upsert.
"""
