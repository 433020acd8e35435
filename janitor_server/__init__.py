"""
Database-side components of the thumbnail janitor: configuration, the
database engine, the ORM mapping of the pre-existing tables, and the
record store that queries and clears thumbnail references.
"""
