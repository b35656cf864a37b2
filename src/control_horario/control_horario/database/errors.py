"""Translate mysql-connector failures into store errors the services understand."""

from __future__ import annotations

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreError, StorePermissionError

_PERMISSION_ERRNOS = {
    errorcode.ER_ACCESS_DENIED_ERROR,
    errorcode.ER_DBACCESS_DENIED_ERROR,
    errorcode.ER_TABLEACCESS_DENIED_ERROR,
    errorcode.ER_COLUMNACCESS_DENIED_ERROR,
    errorcode.ER_SPECIFIC_ACCESS_DENIED_ERROR,
}
_SCHEMA_ERRNOS = {
    errorcode.ER_NO_SUCH_TABLE,
    errorcode.ER_BAD_FIELD_ERROR,
    errorcode.ER_BAD_DB_ERROR,
}
_INTEGRITY_ERRNOS = {
    errorcode.ER_DUP_ENTRY,
    errorcode.ER_NO_REFERENCED_ROW_2,
}
_NETWORK_ERRNOS = {
    errorcode.CR_CONNECTION_ERROR,
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.CR_SERVER_GONE_ERROR,
    errorcode.CR_SERVER_LOST,
}


def translate_mysql_error(error: mysql.connector.Error, *, context: str) -> StoreError:
    errno = getattr(error, "errno", None)

    if errno in _PERMISSION_ERRNOS:
        return StorePermissionError(f"Sin permisos en la base de datos ({context}): {error.msg}", errno=errno)
    if errno in _SCHEMA_ERRNOS:
        return StoreError(f"Esquema de base de datos incompleto ({context}): {error.msg}", kind="schema", errno=errno)
    if errno in _INTEGRITY_ERRNOS:
        return StoreError(f"Datos inconsistentes ({context}): {error.msg}", kind="integrity", errno=errno)
    if errno in _NETWORK_ERRNOS or isinstance(error, mysql.connector.InterfaceError):
        return StoreError(f"Base de datos no disponible ({context})", kind="network", errno=errno)
    return StoreError(f"Error de base de datos ({context}): {error}", kind="unknown", errno=errno)
