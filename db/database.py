"""Connection pool construction for the query gateway.

The pool is a `databases.Database`; queries run on the driver connection
underneath a scoped `database.connection()` so the gateway can read affected
row counts and insert ids, which the `databases` query API does not expose.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from databases import Database, DatabaseURL

from db import paramstyle
from services.gateway_config import GatewayConfig, GatewayConfigError


@dataclass(frozen=True)
class Dialect:
    name: str
    paramstyle: str


MYSQL = Dialect(name="mysql", paramstyle=paramstyle.FORMAT)
SQLITE = Dialect(name="sqlite", paramstyle=paramstyle.QMARK)

_DIALECTS: Dict[str, Dialect] = {
    MYSQL.name: MYSQL,
    SQLITE.name: SQLITE,
}


def dialect_for_url(url: str) -> Dialect:
    name = DatabaseURL(url).dialect
    dialect = _DIALECTS.get(name)
    if dialect is None:
        supported = ", ".join(sorted(_DIALECTS))
        raise GatewayConfigError(f"Unsupported database scheme '{name}' (supported: {supported})")
    return dialect


def pool_options(config: GatewayConfig, dialect: Dialect) -> Dict[str, Any]:
    """Driver keyword arguments forwarded by `databases` to the pool/connect call."""
    if dialect is not MYSQL:
        # aiosqlite opens one connection per acquisition; it takes no pool options.
        return {}

    options: Dict[str, Any] = {
        "min_size": config.pool_min_size,
        "max_size": config.pool_max_size,
    }
    if config.multiple_statements:
        from pymysql.constants import CLIENT

        options["client_flag"] = CLIENT.MULTI_STATEMENTS
    return options


def build_database(config: GatewayConfig) -> Database:
    dialect = dialect_for_url(config.database_url)
    return Database(config.database_url, **pool_options(config, dialect))
