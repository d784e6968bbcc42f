"""Link generation from foreign keys and join tables."""

import logging

from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey
from dbmodel.core.join_table import is_join_table
from dbmodel.core.link import Cardinality, FetchType, JoinColumn, JoinTable, Link
from dbmodel.core.link_id import link_ids_for_foreign_key, link_ids_for_join_table
from dbmodel.core.model import DbModel
from dbmodel.errors import InvalidJoinTableShape, ReferencedEntityNotFound
from dbmodel.rules import ModelRules


def build_join_columns(foreign_key: ForeignKey) -> list[JoinColumn]:
    """Build the join columns mirroring a foreign key's column pairs."""
    return [
        JoinColumn(name=column.column_name, referenced_column_name=column.referenced_column_name)
        for column in foreign_key.sorted_columns
    ]


class LinksManager:
    """Generates inter-entity links from foreign keys and join tables.

    Each relation is stored as two links: the owning side (which carries the
    mapping details) and the inverse side (mapped by the owning side's field).
    """

    def __init__(self, rules: ModelRules):
        self.rules = rules

    def rebuild_all_links(self, model: DbModel) -> int:
        """Generate all the links of a model.

        Existing links are removed first, then the relations of every entity
        are generated, entities taken in table name order.

        Args:
            model: Model to update

        Returns:
            Number of links generated
        """
        removed = model.remove_all_links()
        logging.debug("rebuild_all_links: %d existing link(s) removed", removed)

        count = 0
        for entity in model.entities:
            count += self.build_relations_for_entity(model, entity)

        logging.info("%d link(s) generated for %d entities", count, model.entity_count)
        return count

    def build_relations_for_entity(self, model: DbModel, entity: Entity) -> int:
        """Generate all the relations based on an entity's foreign keys.

        A join table yields one many-to-many relation; any other entity yields
        one many-to-one relation per foreign key.

        Returns:
            Number of links generated
        """
        if is_join_table(entity):
            logging.debug("build_relations_for_entity: %s is a join table", entity.table_name)
            self.build_many_to_many_relation(model, entity)
            return 2

        count = 0
        for fk in entity.foreign_keys:
            self.build_many_to_one_relation(model, entity, fk)
            count += 2
        return count

    def remove_relation(self, model: DbModel, foreign_key: ForeignKey) -> int:
        """Remove the relation (2 links) defined by a foreign key."""
        logging.debug("remove_relation: foreign key %s.%s", foreign_key.table_name, foreign_key.name)
        return model.remove_links_by_foreign_key(foreign_key)

    def remove_relations(self, model: DbModel, entity: Entity) -> int:
        """Remove every relation using an entity."""
        logging.debug("remove_relations: entity %s", entity.table_name)
        return model.remove_links_by_entity_name(entity.table_name)

    # Many-to-one relation ("OneToMany" inverse side)

    def build_many_to_one_relation(
        self, model: DbModel, owning_entity: Entity, foreign_key: ForeignKey
    ) -> tuple[Link, Link]:
        """Create the many-to-one relation defined by a foreign key.

        Args:
            model: Model holding both entities
            owning_entity: Entity owning the foreign key
            foreign_key: Foreign key defining the relation

        Returns:
            (owning side link, inverse side link)

        Raises:
            ReferencedEntityNotFound: If the referenced table is not in the model
        """
        inverse_entity = model.find_entity(foreign_key.referenced_table_name)
        if inverse_entity is None:
            raise ReferencedEntityNotFound(
                foreign_key.referenced_table_name, foreign_key.name, owning_entity.table_name
            )

        owning_id, inverse_id = link_ids_for_foreign_key(foreign_key)
        model.remove_link_by_id(inverse_id)
        model.remove_link_by_id(owning_id)

        logging.debug(
            "build_many_to_one_relation: %s %s --> %s", owning_id, owning_entity.table_name, inverse_entity.table_name
        )

        owning_link = Link(
            id=owning_id,
            foreign_key_name=foreign_key.name,
            owning_side=True,
            mirror_link_id=inverse_id,
            cardinality=Cardinality.MANY_TO_ONE,
            fetch_type=FetchType.DEFAULT,
            source_table_name=foreign_key.table_name,
            target_table_name=foreign_key.referenced_table_name,
            target_entity_class_name=inverse_entity.class_name,
            field_name=self.rules.get_attribute_name_for_link_to_one(owning_entity, inverse_entity),
            join_columns=build_join_columns(foreign_key),
        )
        owning_entity.store_link(owning_link)

        inverse_link = Link(
            id=inverse_id,
            foreign_key_name=foreign_key.name,
            owning_side=False,
            mirror_link_id=owning_id,
            mapped_by=owning_link.field_name,
            cardinality=Cardinality.ONE_TO_MANY,
            fetch_type=FetchType.DEFAULT,
            source_table_name=foreign_key.referenced_table_name,
            target_table_name=foreign_key.table_name,
            target_entity_class_name=owning_entity.class_name,
            field_name=self.rules.get_attribute_name_for_link_to_many(inverse_entity, owning_entity),
        )
        inverse_entity.store_link(inverse_link)

        return owning_link, inverse_link

    # Many-to-many relation

    def build_many_to_many_relation(self, model: DbModel, join_table_entity: Entity) -> tuple[Link, Link]:
        """Create the many-to-many relation realized by a join table.

        The foreign key whose name sorts first defines the owning side, the
        other one the inverse side.

        Returns:
            (owning side link, inverse side link)

        Raises:
            InvalidJoinTableShape: If the entity does not have exactly 2 foreign keys
            ReferencedEntityNotFound: If a referenced table is not in the model
        """
        foreign_keys = join_table_entity.foreign_keys
        if len(foreign_keys) != 2:
            raise InvalidJoinTableShape(join_table_entity.table_name, len(foreign_keys))

        owning_fk, inverse_fk = foreign_keys

        owning_entity = model.find_entity(owning_fk.referenced_table_name)
        if owning_entity is None:
            raise ReferencedEntityNotFound(owning_fk.referenced_table_name, owning_fk.name, join_table_entity.table_name)
        inverse_entity = model.find_entity(inverse_fk.referenced_table_name)
        if inverse_entity is None:
            raise ReferencedEntityNotFound(
                inverse_fk.referenced_table_name, inverse_fk.name, join_table_entity.table_name
            )

        owning_id, inverse_id = link_ids_for_join_table(join_table_entity)
        model.remove_link_by_id(inverse_id)
        model.remove_link_by_id(owning_id)

        logging.debug(
            "build_many_to_many_relation: %s %s <--> %s through %s",
            owning_id,
            owning_entity.table_name,
            inverse_entity.table_name,
            join_table_entity.table_name,
        )

        owning_link = Link(
            id=owning_id,
            join_table_name=join_table_entity.table_name,
            owning_side=True,
            mirror_link_id=inverse_id,
            cardinality=Cardinality.MANY_TO_MANY,
            fetch_type=FetchType.DEFAULT,
            source_table_name=owning_fk.referenced_table_name,
            target_table_name=inverse_fk.referenced_table_name,
            target_entity_class_name=inverse_entity.class_name,
            field_name=self.rules.get_attribute_name_for_link_to_many(owning_entity, inverse_entity),
            join_table=JoinTable(
                name=join_table_entity.table_name,
                schema_name=join_table_entity.schema_name,
                catalog=join_table_entity.catalog,
                join_columns=build_join_columns(owning_fk),
                inverse_join_columns=build_join_columns(inverse_fk),
            ),
        )
        owning_entity.store_link(owning_link)

        inverse_link = Link(
            id=inverse_id,
            join_table_name=join_table_entity.table_name,
            owning_side=False,
            mirror_link_id=owning_id,
            mapped_by=owning_link.field_name,
            cardinality=Cardinality.MANY_TO_MANY,
            fetch_type=FetchType.DEFAULT,
            source_table_name=inverse_fk.referenced_table_name,
            target_table_name=owning_fk.referenced_table_name,
            target_entity_class_name=owning_entity.class_name,
            field_name=self.rules.get_attribute_name_for_link_to_many(inverse_entity, owning_entity),
        )
        inverse_entity.store_link(inverse_link)

        return owning_link, inverse_link
