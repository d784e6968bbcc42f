"""Naming and type rules used to build the model.

The link builder, the updater and the generator receive a rule provider at
construction time. ``DefaultModelRules`` is the stock implementation; any
object matching ``ModelRules`` can replace it.
"""

import re
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dbmodel.core.entity import Entity


class JdbcType(IntEnum):
    """JDBC type codes (java.sql.Types) used by schema snapshots."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    BLOB = 2004
    CLOB = 2005
    NCLOB = 2011
    BOOLEAN = 16
    OTHER = 1111


# Neutral type for each JDBC type; numeric and boolean types get a
# primitive variant when the column is NOT NULL.
_NEUTRAL_TYPES: dict[int, str] = {
    JdbcType.BIT: "boolean",
    JdbcType.BOOLEAN: "boolean",
    JdbcType.TINYINT: "byte",
    JdbcType.SMALLINT: "short",
    JdbcType.INTEGER: "int",
    JdbcType.BIGINT: "long",
    JdbcType.FLOAT: "double",
    JdbcType.REAL: "float",
    JdbcType.DOUBLE: "double",
    JdbcType.NUMERIC: "decimal",
    JdbcType.DECIMAL: "decimal",
    JdbcType.CHAR: "string",
    JdbcType.VARCHAR: "string",
    JdbcType.LONGVARCHAR: "string",
    JdbcType.NCHAR: "string",
    JdbcType.NVARCHAR: "string",
    JdbcType.LONGNVARCHAR: "string",
    JdbcType.CLOB: "string",
    JdbcType.NCLOB: "string",
    JdbcType.DATE: "date",
    JdbcType.TIME: "time",
    JdbcType.TIMESTAMP: "timestamp",
    JdbcType.BINARY: "binary",
    JdbcType.VARBINARY: "binary",
    JdbcType.LONGVARBINARY: "binary",
    JdbcType.BLOB: "binary",
}

_WRAPPER_TYPES = {
    "boolean": "Boolean",
    "byte": "Byte",
    "short": "Short",
    "int": "Integer",
    "long": "Long",
    "float": "Float",
    "double": "Double",
}

# Database type names used when a snapshot gives no JDBC code
_TYPE_NAME_CODES: dict[str, int] = {
    "BIT": JdbcType.BIT,
    "BOOL": JdbcType.BOOLEAN,
    "BOOLEAN": JdbcType.BOOLEAN,
    "TINYINT": JdbcType.TINYINT,
    "SMALLINT": JdbcType.SMALLINT,
    "INT": JdbcType.INTEGER,
    "INT4": JdbcType.INTEGER,
    "INTEGER": JdbcType.INTEGER,
    "SERIAL": JdbcType.INTEGER,
    "BIGINT": JdbcType.BIGINT,
    "INT8": JdbcType.BIGINT,
    "BIGSERIAL": JdbcType.BIGINT,
    "FLOAT": JdbcType.FLOAT,
    "REAL": JdbcType.REAL,
    "DOUBLE": JdbcType.DOUBLE,
    "DOUBLE PRECISION": JdbcType.DOUBLE,
    "NUMERIC": JdbcType.NUMERIC,
    "DECIMAL": JdbcType.DECIMAL,
    "NUMBER": JdbcType.NUMERIC,
    "CHAR": JdbcType.CHAR,
    "CHARACTER": JdbcType.CHAR,
    "VARCHAR": JdbcType.VARCHAR,
    "VARCHAR2": JdbcType.VARCHAR,
    "CHARACTER VARYING": JdbcType.VARCHAR,
    "TEXT": JdbcType.LONGVARCHAR,
    "NCHAR": JdbcType.NCHAR,
    "NVARCHAR": JdbcType.NVARCHAR,
    "CLOB": JdbcType.CLOB,
    "DATE": JdbcType.DATE,
    "TIME": JdbcType.TIME,
    "TIMESTAMP": JdbcType.TIMESTAMP,
    "DATETIME": JdbcType.TIMESTAMP,
    "BINARY": JdbcType.BINARY,
    "VARBINARY": JdbcType.VARBINARY,
    "BYTEA": JdbcType.LONGVARBINARY,
    "BLOB": JdbcType.BLOB,
}


def jdbc_type_code(type_name: str) -> int:
    """Guess the JDBC type code of a database type name (``VARCHAR(20)`` -> 12)."""
    base = re.sub(r"\(.*\)", "", type_name or "").strip().upper()
    return int(_TYPE_NAME_CODES.get(base, JdbcType.OTHER))


class ModelRules(Protocol):
    """Naming and type inference capability consumed by the model builders."""

    def get_entity_class_name(self, table_name: str) -> str: ...

    def get_attribute_name(self, column_name: str) -> str: ...

    def get_attribute_type(self, db_type: str, jdbc_type_code: int, not_null: bool) -> str: ...

    def get_attribute_name_for_link_to_one(self, entity: "Entity", target_entity: "Entity") -> str: ...

    def get_attribute_name_for_link_to_many(self, entity: "Entity", target_entity: "Entity") -> str: ...


def _words(name: str) -> list[str]:
    """Split a database name into lowercase words (``ORDER_ITEMS`` -> order, items)."""
    parts = re.split(r"[^0-9A-Za-z]+", name)
    words = []
    for part in parts:
        if not part:
            continue
        if part.isupper() or part.islower():
            words.append(part.lower())
        else:
            # camelCase / PascalCase
            words.extend(w.lower() for w in re.findall(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])", part))
    return words


def uncapitalize(s: str) -> str:
    return s[:1].lower() + s[1:] if s else s


class DefaultModelRules:
    """Stock naming and type rules.

    - ``ORDER_ITEMS`` -> class ``OrderItems``
    - ``CUSTOMER_ID`` -> field ``customerId``
    - to-one link field: uncapitalized target class name (``customers``)
    - to-many link field: ``listOf`` + target class name (``listOfOrders``)

    Link field names are unique per entity: when the name is already taken by
    another link of the entity, the lowest free numeric suffix is appended
    (``customers2``, ``customers3``, ...).
    """

    to_many_prefix = "listOf"

    def get_entity_class_name(self, table_name: str) -> str:
        words = _words(table_name)
        if not words:
            return table_name
        name = "".join(w.capitalize() for w in words)
        if name[0].isdigit():
            name = "_" + name
        return name

    def get_attribute_name(self, column_name: str) -> str:
        words = _words(column_name)
        if not words:
            return column_name
        name = words[0] + "".join(w.capitalize() for w in words[1:])
        if name[0].isdigit():
            name = "_" + name
        return name

    def get_attribute_type(self, db_type: str, jdbc_type_code: int, not_null: bool) -> str:
        neutral = _NEUTRAL_TYPES.get(jdbc_type_code, "string")
        if neutral in _WRAPPER_TYPES and not not_null:
            # Nullable columns get the wrapper type
            return _WRAPPER_TYPES[neutral]
        return neutral

    def _disambiguate(self, name: str, entity: "Entity") -> str:
        """Return ``name`` or the first of ``name2``, ``name3``, ... not used by a link of the entity."""
        used = {link.field_name for link in entity.link_index.values()}
        candidate = name
        suffix = 2
        while candidate in used:
            candidate = f"{name}{suffix}"
            suffix += 1
        return candidate

    def get_attribute_name_for_link_to_one(self, entity: "Entity", target_entity: "Entity") -> str:
        name = uncapitalize(target_entity.class_name or self.get_entity_class_name(target_entity.table_name))
        return self._disambiguate(name, entity)

    def get_attribute_name_for_link_to_many(self, entity: "Entity", target_entity: "Entity") -> str:
        class_name = target_entity.class_name or self.get_entity_class_name(target_entity.table_name)
        return self._disambiguate(f"{self.to_many_prefix}{class_name}", entity)
