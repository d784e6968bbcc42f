"""Foreign key participation flags on attributes.

Must run before any link generation: downstream consumers rely on the
flags being in sync with the entity's foreign keys.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbmodel.core.entity import Entity
    from dbmodel.core.model import DbModel


def set_entity_foreign_key_flags(entity: "Entity") -> int:
    """Recompute the foreign key flags of every attribute of an entity.

    Args:
        entity: Entity to update

    Returns:
        Number of attributes flagged as foreign key elements
    """
    for attribute in entity.attribute_index.values():
        attribute.is_fk = False
        attribute.is_fk_simple = False
        attribute.is_fk_composite = False
        attribute.referenced_table_name = None

    for fk in entity.foreign_keys:
        for column in fk.columns:
            attribute = entity.get_attribute(column.column_name)
            if attribute is None:
                logging.warning(
                    "Foreign key %s references unknown column %s in table %s",
                    fk.name,
                    column.column_name,
                    entity.table_name,
                )
                continue
            attribute.is_fk = True
            if fk.is_composite:
                attribute.is_fk_composite = True
            else:
                attribute.is_fk_simple = True
                attribute.referenced_table_name = fk.referenced_table_name

    return sum(1 for a in entity.attribute_index.values() if a.is_fk)


def set_foreign_key_flags(model: "DbModel") -> int:
    """Recompute the foreign key flags for all the entities of a model."""
    count = 0
    for entity in model.entities:
        count += set_entity_foreign_key_flags(entity)
    return count
