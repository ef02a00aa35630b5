"""
Database package for chatmod.

- **db_connection.py**: ConnectionManager owning the single aiosqlite
  connection, with serialised write transactions.
- **db_schema.py**: SchemaManager creating the channel state tables.
"""
