"""Join table classification."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbmodel.core.entity import Entity


def is_join_table(entity: "Entity") -> bool:
    """Check whether an entity is a pure association table.

    An entity is a join table when:
    - it has exactly 2 foreign keys
    - all its columns are in the primary key
    - all its columns are in a foreign key

    Evaluated from the entity's current attributes and foreign keys on every
    call; nothing is cached.
    """
    if len(entity.foreign_key_index) != 2:
        return False

    fk_columns = {column.column_name for fk in entity.foreign_key_index.values() for column in fk.columns}

    for attribute in entity.attribute_index.values():
        if not attribute.is_key_element:
            return False
        if attribute.column_name not in fk_columns:
            return False

    return True
