"""Model store: entities keyed by table name."""

from datetime import datetime

from pydantic import BaseModel, Field

from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey
from dbmodel.core.link import Link
from dbmodel.core.link_id import link_ids_for_foreign_key


class DbModel(BaseModel):
    """Database model: the entities of one schema snapshot and their links."""

    database_name: str = Field(default="", description="Logical database name")
    database_id: int | None = Field(default=None, description="Database id in the configuration")
    database_product_name: str = Field(default="", description="Database product (PostgreSQL, Derby, ...)")
    generation_date: datetime | None = Field(default=None, description="Model generation timestamp")

    entity_index: dict[str, Entity] = Field(default_factory=dict, description="Entities by table name")

    # Entities

    @property
    def entities(self) -> list[Entity]:
        """Entities sorted by table name (case-sensitive)."""
        return [self.entity_index[name] for name in sorted(self.entity_index)]

    @property
    def entity_count(self) -> int:
        return len(self.entity_index)

    def store_entity(self, entity: Entity) -> None:
        """Add or replace an entity."""
        self.entity_index[entity.table_name] = entity

    def find_entity(self, table_name: str) -> Entity | None:
        """Look up an entity, returning None when the table is not in the model."""
        return self.entity_index.get(table_name)

    def get_entity(self, table_name: str) -> Entity:
        """Get entity by table name.

        Raises:
            KeyError: If entity not found
        """
        if table_name not in self.entity_index:
            raise KeyError(f"Entity {table_name} not found")
        return self.entity_index[table_name]

    def remove_entity(self, table_name: str) -> Entity | None:
        return self.entity_index.pop(table_name, None)

    # Links

    @property
    def links(self) -> list[Link]:
        """All links of all entities, sorted by id."""
        return sorted((link for entity in self.entities for link in entity.links), key=lambda link: link.id)

    def remove_link_by_id(self, link_id: str) -> int:
        """Remove a link from whichever entity holds it.

        Returns:
            Number of links removed (0 when absent)
        """
        count = 0
        for entity in self.entity_index.values():
            count += entity.remove_link(link_id)
        return count

    def _remove_links_with_mirrors(self, predicate) -> int:
        to_remove = set()
        for entity in self.entity_index.values():
            for link in entity.link_index.values():
                if predicate(link):
                    to_remove.add(link.id)
                    if link.mirror_link_id:
                        to_remove.add(link.mirror_link_id)
        count = 0
        for link_id in sorted(to_remove):
            count += self.remove_link_by_id(link_id)
        return count

    def remove_links_by_entity_name(self, table_name: str) -> int:
        """Remove every link starting from, pointing to or going through a table.

        The other end of each removed link is removed as well.
        """
        return self._remove_links_with_mirrors(lambda link: link.uses_table(table_name))

    def remove_links_by_foreign_key(self, foreign_key: ForeignKey) -> int:
        """Remove the two links of the relation defined by a foreign key."""
        count = 0
        for link_id in link_ids_for_foreign_key(foreign_key):
            count += self.remove_link_by_id(link_id)
        return count

    def remove_links_by_join_table_name(self, join_table_name: str) -> int:
        """Remove the many-to-many links realized by a join table."""
        return self._remove_links_with_mirrors(lambda link: link.join_table_name == join_table_name)

    def remove_all_links(self) -> int:
        count = 0
        for entity in self.entity_index.values():
            count += entity.remove_all_links()
        return count
