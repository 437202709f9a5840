"""DDL rendering for migration plans."""

from shift_engine.ddl.sql_server import SqlServerDdlGenerator, quote_identifier

__all__ = [
    "SqlServerDdlGenerator",
    "quote_identifier",
]
