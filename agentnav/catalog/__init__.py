"""Catalog — loading, validating, browsing, and mutating navigation data.

- Source reader: overlay first, bundled dataset as seed
- Mutation engine: create, update, delete with write-once id and logo
- Queries: search, category filter, newest-first ordering
"""
