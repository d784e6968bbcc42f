"""Loaders for schema snapshots and change logs stored as YAML or JSON."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from dbmodel.changelog import ChangeLog, ChangeOnEntity, ChangeOnForeignKey, ChangeType
from dbmodel.core.model import DbModel
from dbmodel.errors import ChangeLogError, SchemaAccessError
from dbmodel.schema import DatabaseSchema, DatabaseTable

if TYPE_CHECKING:
    from dbmodel.generator import DbModelGenerator


def read_data(path: Path) -> dict:
    """Read a YAML or JSON file holding a top-level mapping (empty file -> {})."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(path.read_text())
    elif suffix == ".json":
        data = json.loads(path.read_text())
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level mapping expected")
    return data


def load_schema(path: str | Path) -> DatabaseSchema:
    """Load a schema snapshot from a YAML or JSON file.

    Example YAML:
        database_name: shop
        tables:
          - name: CUSTOMERS
            primary_key: [ID]
            columns:
              - name: ID
                type: INTEGER
                not_null: true
          - name: ORDERS
            primary_key: [ID]
            columns:
              - {name: ID, type: INTEGER, not_null: true}
              - {name: CUSTOMER_ID, type: INTEGER}
            foreign_keys:
              - name: FK_ORDERS_CUSTOMERS
                referenced_table: CUSTOMERS
                columns:
                  - {column: CUSTOMER_ID, referenced_column: ID}

    Raises:
        FileNotFoundError: If the file doesn't exist
        SchemaAccessError: If the content is not a valid snapshot
    """
    path = Path(path)
    data = read_data(path)
    try:
        schema = DatabaseSchema(**data)
    except ValidationError as e:
        raise SchemaAccessError(f"Invalid schema snapshot {path}: {e}", operation="load_schema") from e
    logging.debug("Schema %s loaded: %d table(s)", path, len(schema.tables))
    return schema


class FileSchemaSource:
    """Schema source reading a snapshot file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_schema(self) -> DatabaseSchema:
        return load_schema(self.path)


def load_change_log(path: str | Path, model: DbModel, generator: "DbModelGenerator") -> ChangeLog:
    """Load a change log describing changes against an existing model.

    Created and updated entities are described by their new table
    definition. The 'before' states are taken from the model. Foreign key
    changes of an updated entity are listed by name.

    Example YAML:
        changes:
          - type: created
            table: {name: PRODUCTS, primary_key: [ID], columns: [{name: ID, type: INTEGER}]}
          - type: updated
            table: {...new ORDERS definition...}
            foreign_keys:
              - {type: created, name: FK_ORDERS_PRODUCTS}
              - {type: deleted, name: FK_ORDERS_CUSTOMERS}
          - type: deleted
            name: SHIPMENTS

    Raises:
        ChangeLogError: If a change cannot be resolved against the model
    """
    path = Path(path)
    data = read_data(path)

    change_log = ChangeLog()
    for index, item in enumerate(data.get("changes") or [], start=1):
        try:
            change_type = ChangeType(str(item.get("type", "")).upper())
        except ValueError as e:
            raise ChangeLogError(f"{path}: change #{index} has an invalid type {item.get('type')!r}") from e

        if change_type == ChangeType.DELETED:
            name = item.get("name") or (item.get("table") or {}).get("name")
            before = model.find_entity(name) if name else None
            if before is None:
                raise ChangeLogError(f"{path}: deleted entity {name!r} is not in the model")
            change_log.add(ChangeOnEntity(ChangeType.DELETED, before=before))
            continue

        try:
            table = DatabaseTable(**(item.get("table") or {}))
        except ValidationError as e:
            raise ChangeLogError(f"{path}: change #{index} has an invalid table definition: {e}") from e
        after = generator.build_entity(table)

        if change_type == ChangeType.CREATED:
            change_log.add(ChangeOnEntity(ChangeType.CREATED, after=after))
            continue

        current = model.find_entity(table.name)
        if current is None:
            raise ChangeLogError(f"{path}: updated entity {table.name!r} is not in the model")
        change = ChangeOnEntity(ChangeType.UPDATED, before=current.model_copy(deep=True), after=after)
        for fk_item in item.get("foreign_keys") or []:
            change.add_change_on_foreign_key(_foreign_key_change(path, change, fk_item))
        change_log.add(change)

    return change_log


def _foreign_key_change(path: Path, change: ChangeOnEntity, item: dict) -> ChangeOnForeignKey:
    fk_type = ChangeType(str(item.get("type", "")).upper())
    name = item.get("name")
    before = change.before.get_foreign_key(name) if fk_type != ChangeType.CREATED else None
    after = change.after.get_foreign_key(name) if fk_type != ChangeType.DELETED else None
    if fk_type != ChangeType.CREATED and before is None:
        raise ChangeLogError(f"{path}: foreign key {name!r} not found in {change.entity_name} (before)")
    if fk_type != ChangeType.DELETED and after is None:
        raise ChangeLogError(f"{path}: foreign key {name!r} not found in {change.entity_name} (after)")
    return ChangeOnForeignKey(fk_type, before=before, after=after)
