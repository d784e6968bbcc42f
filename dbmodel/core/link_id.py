"""Deterministic link identities.

Ids are derived only from the foreign key (or join table) that defines a
relationship, so a relationship can be removed and regenerated without
looking at the links themselves.

- many-to-one relation: ``LINK_FK_<table>.<foreign key>_O`` / ``_I``
- many-to-many relation: ``LINK_JT_<join table>_O`` / ``_I``

The two prefixes keep both families apart in the same model.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbmodel.core.entity import Entity
    from dbmodel.core.foreign_key import ForeignKey

FOREIGN_KEY_PREFIX = "LINK_FK_"
JOIN_TABLE_PREFIX = "LINK_JT_"
OWNING_SUFFIX = "_O"
INVERSE_SUFFIX = "_I"


def _side(owning_side: bool) -> str:
    return OWNING_SUFFIX if owning_side else INVERSE_SUFFIX


def link_id_for_foreign_key(foreign_key: "ForeignKey", owning_side: bool) -> str:
    """Build the id of one side of the relation defined by a foreign key."""
    return f"{FOREIGN_KEY_PREFIX}{foreign_key.table_name}.{foreign_key.name}{_side(owning_side)}"


def link_id_for_join_table(join_table_entity: "Entity", owning_side: bool) -> str:
    """Build the id of one side of the many-to-many relation realized by a join table."""
    return f"{JOIN_TABLE_PREFIX}{join_table_entity.table_name}{_side(owning_side)}"


def link_ids_for_foreign_key(foreign_key: "ForeignKey") -> tuple[str, str]:
    """Return (owning id, inverse id) for a foreign key."""
    return link_id_for_foreign_key(foreign_key, True), link_id_for_foreign_key(foreign_key, False)


def link_ids_for_join_table(join_table_entity: "Entity") -> tuple[str, str]:
    """Return (owning id, inverse id) for a join table."""
    return link_id_for_join_table(join_table_entity, True), link_id_for_join_table(join_table_entity, False)


def mirror_link_id(link_id: str) -> str:
    """Return the id of the other side of the relationship.

    Raises:
        ValueError: If the id does not end with a side suffix
    """
    if link_id.endswith(OWNING_SUFFIX):
        return link_id[: -len(OWNING_SUFFIX)] + INVERSE_SUFFIX
    if link_id.endswith(INVERSE_SUFFIX):
        return link_id[: -len(INVERSE_SUFFIX)] + OWNING_SUFFIX
    raise ValueError(f"Invalid link id '{link_id}'")
