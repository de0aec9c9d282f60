"""Database access for the query gateway.

`db.database` builds the shared connection pool; `db.paramstyle` rewrites the
`?` placeholders requests use into whatever the configured driver expects.
"""
