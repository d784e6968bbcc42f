"""Plain views of the model for code generation templates.

The model classes are the single source of truth; these functions give
consumers that need a narrower shape (templates, JSON output) plain dicts.
"""

from dbmodel.core.attribute import Attribute
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey
from dbmodel.core.link import Link
from dbmodel.core.model import DbModel


def attribute_view(attribute: Attribute) -> dict:
    return {
        "name": attribute.name,
        "type": attribute.type,
        "column": attribute.column_name,
        "database_type": attribute.database_type_name,
        "not_null": attribute.not_null,
        "key": attribute.is_key_element,
        "fk": attribute.is_fk,
    }


def foreign_key_view(foreign_key: ForeignKey) -> dict:
    return {
        "name": foreign_key.name,
        "table": foreign_key.table_name,
        "referenced_table": foreign_key.referenced_table_name,
        "columns": [
            {"column": c.column_name, "referenced_column": c.referenced_column_name}
            for c in foreign_key.sorted_columns
        ],
    }


def link_view(link: Link) -> dict:
    """Convert a link to a dict, leaving out mapping details it does not carry."""
    view = {
        "id": link.id,
        "field_name": link.field_name,
        "cardinality": link.cardinality.value,
        "collection": link.is_collection,
        "owning_side": link.owning_side,
        "source_table": link.source_table_name,
        "target_table": link.target_table_name,
        "target_class": link.target_entity_class_name,
        "mirror_link_id": link.mirror_link_id,
        "fetch_type": link.fetch_type.value,
    }
    if link.foreign_key_name:
        view["foreign_key"] = link.foreign_key_name
    if link.mapped_by:
        view["mapped_by"] = link.mapped_by
    if link.join_columns:
        view["join_columns"] = [c.model_dump() for c in link.join_columns]
    if link.join_table is not None:
        view["join_table"] = link.join_table.model_dump()
    return view


def entity_view(entity: Entity, selected_links_only: bool = True) -> dict:
    links = entity.selected_links if selected_links_only else entity.links
    return {
        "class_name": entity.class_name,
        "table": entity.table_name,
        "catalog": entity.catalog,
        "schema": entity.schema_name,
        "join_table": entity.is_join_table,
        "attributes": [attribute_view(a) for a in entity.attributes],
        "foreign_keys": [foreign_key_view(fk) for fk in entity.foreign_keys],
        "links": [link_view(link) for link in links],
        "warnings": entity.warnings,
    }


def model_view(model: DbModel) -> dict:
    return {
        "database_name": model.database_name,
        "entities": [entity_view(entity) for entity in model.entities],
    }
