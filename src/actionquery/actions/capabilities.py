"""Storage engine capability checks."""

import re
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

__all__ = ["ServerInfo", "supports_json_extract"]


_MYSQL_DIALECTS = frozenset({"mysql", "mariadb"})
_MARIADB_MARKER = "MariaDB"
_MARIADB_REPLICATION_PREFIX = "5.5.5-"
_VERSION_PREFIX = re.compile(r"^\d+(\.\d+)*")

_MIN_MYSQL_JSON = Version("5.7")
_MIN_MARIADB_JSON = Version("10.2")
_MIN_SQLITE_JSON = Version("3.38")


@dataclass(frozen=True)
class ServerInfo:
    """Dialect name and raw version string reported by the storage engine."""

    dialect: str
    version: str


def supports_json_extract(server_info: ServerInfo) -> bool:
    """Check whether the storage engine can run ``JSON_EXTRACT`` predicates.

    MariaDB reports itself through a MySQL compatible version string such as
    ``5.5.5-10.6.12-MariaDB-1:10.6.12+maria~ubu2004``. For those the
    replication prefix is dropped and only the leading numeric part is compared.

    Args:
        server_info: Capability information of the connected engine.

    Returns:
        True if JSON extraction is available, False otherwise.
    """
    raw = server_info.version
    if server_info.dialect == "sqlite":
        return _parse(raw) >= _MIN_SQLITE_JSON

    if server_info.dialect not in _MYSQL_DIALECTS:
        return False

    if _MARIADB_MARKER in raw or server_info.dialect == "mariadb":
        raw = raw.removeprefix(_MARIADB_REPLICATION_PREFIX)
        return _parse(raw) >= _MIN_MARIADB_JSON

    return _parse(raw) >= _MIN_MYSQL_JSON


def _parse(raw: str) -> Version:
    match = _VERSION_PREFIX.match(raw.strip())
    if not match:
        return Version("0")
    try:
        return Version(match.group(0))
    except InvalidVersion:
        return Version("0")
