"""Test utilities for building models by hand."""

from dbmodel.core.attribute import Attribute
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey, ForeignKeyColumn
from dbmodel.core.foreign_key_flags import set_entity_foreign_key_flags
from dbmodel.core.model import DbModel
from dbmodel.rules import DefaultModelRules

_rules = DefaultModelRules()


def make_entity(table_name: str, columns: list[str], primary_key: list[str] | None = None) -> Entity:
    """Create an entity with INTEGER columns.

    Args:
        table_name: Table name
        columns: Column names, in table order
        primary_key: Primary key columns (defaults to the first column)
    """
    if primary_key is None:
        primary_key = columns[:1]
    entity = Entity(table_name=table_name, class_name=_rules.get_entity_class_name(table_name))
    for position, column in enumerate(columns, start=1):
        entity.store_attribute(
            Attribute(
                column_name=column,
                name=_rules.get_attribute_name(column),
                type="int",
                database_type_name="INTEGER",
                jdbc_type_code=4,
                position=position,
                is_key_element=column in primary_key,
            )
        )
    return entity


def make_fk(table_name: str, name: str, referenced_table: str, pairs: list[tuple[str, str]]) -> ForeignKey:
    """Create a foreign key from (column, referenced column) pairs."""
    return ForeignKey(
        name=name,
        table_name=table_name,
        referenced_table_name=referenced_table,
        columns=[
            ForeignKeyColumn(sequence=i, column_name=column, referenced_column_name=referenced)
            for i, (column, referenced) in enumerate(pairs, start=1)
        ],
    )


def add_fk(entity: Entity, name: str, referenced_table: str, pairs: list[tuple[str, str]]) -> ForeignKey:
    """Create a foreign key, store it in the entity and refresh the attribute flags."""
    fk = make_fk(entity.table_name, name, referenced_table, pairs)
    entity.store_foreign_key(fk)
    set_entity_foreign_key_flags(entity)
    return fk


def make_model(*entities: Entity) -> DbModel:
    model = DbModel(database_name="test")
    for entity in entities:
        model.store_entity(entity)
    return model


def link_signature(model: DbModel) -> list[tuple]:
    """Comparable summary of all the links of a model."""
    return [
        (
            link.id,
            link.source_table_name,
            link.target_table_name,
            link.field_name,
            link.cardinality.value,
            link.owning_side,
            link.mirror_link_id,
            link.mapped_by,
        )
        for link in model.links
    ]


SHOP_SCHEMA_YAML = """
database_name: shop
product_name: PostgreSQL
tables:
  - name: CUSTOMERS
    primary_key: [ID]
    columns:
      - {name: ID, type: INTEGER, not_null: true}
      - {name: NAME, type: VARCHAR(40)}
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
  - name: PRODUCTS
    primary_key: [ID]
    columns:
      - {name: ID, type: INTEGER, not_null: true}
      - {name: PRICE, type: DECIMAL(10,2)}
  - name: ORDER_PRODUCTS
    primary_key: [ORDER_ID, PRODUCT_ID]
    columns:
      - {name: ORDER_ID, type: INTEGER, not_null: true}
      - {name: PRODUCT_ID, type: INTEGER, not_null: true}
    foreign_keys:
      - name: FK_OP_ORDERS
        referenced_table: ORDERS
        columns:
          - {column: ORDER_ID, referenced_column: ID}
      - name: FK_OP_PRODUCTS
        referenced_table: PRODUCTS
        columns:
          - {column: PRODUCT_ID, referenced_column: ID}
  - name: ORDER_TOTALS
    table_type: VIEW
    columns:
      - {name: ORDER_ID, type: INTEGER}
      - {name: TOTAL, type: DECIMAL}
"""
