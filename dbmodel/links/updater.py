"""Incremental link maintenance driven by a change log."""

import logging

from dbmodel.changelog import ChangeLog, ChangeOnEntity, ChangeType
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key_flags import set_entity_foreign_key_flags
from dbmodel.core.join_table import is_join_table
from dbmodel.core.model import DbModel
from dbmodel.links.builder import LinksManager
from dbmodel.rules import ModelRules


class LinksUpdater:
    """Applies a change log to a model, touching only the affected links.

    Uses the same link construction primitives as the full pass, so a
    relation built incrementally is identical to one built by
    ``LinksManager.rebuild_all_links``.
    """

    def __init__(self, rules: ModelRules, links_manager: LinksManager | None = None):
        self.rules = rules
        self.links_manager = links_manager or LinksManager(rules)

    def update_links(self, model: DbModel, change_log: ChangeLog) -> int:
        """Update the model's entities and links according to a change log.

        Args:
            model: Model to update in place
            change_log: Entity changes to apply, in order

        Returns:
            Number of links created or removed
        """
        count = 0
        for change in change_log:
            if change.change_type == ChangeType.CREATED:
                entity = change.entity_created
                logging.debug("update_links: entity CREATED %s", entity.table_name)
                model.store_entity(entity)
                set_entity_foreign_key_flags(entity)
                count += self.links_manager.build_relations_for_entity(model, entity)
            elif change.change_type == ChangeType.UPDATED:
                was_join_table = is_join_table(change.before)
                entity = self._sync_entity(model, change)
                logging.debug("update_links: entity UPDATED %s", entity.table_name)
                count += self._update_entity_links(model, entity, change, was_join_table)
            elif change.change_type == ChangeType.DELETED:
                entity = change.entity_deleted
                logging.debug("update_links: entity DELETED %s", entity.table_name)
                count += self.links_manager.remove_relations(model, entity)
                model.remove_entity(entity.table_name)

        logging.info("%d link(s) created or removed for %d change(s)", count, len(change_log))
        return count

    def _sync_entity(self, model: DbModel, change: ChangeOnEntity) -> Entity:
        """Bring the model's entity to a copy of the 'after' state, keeping its links."""
        after = change.after
        entity = model.find_entity(after.table_name)
        if entity is None:
            entity = after.model_copy(deep=True)
            model.store_entity(entity)
        elif entity is not after:
            entity.class_name = after.class_name or entity.class_name
            entity.catalog = after.catalog
            entity.schema_name = after.schema_name
            entity.database_type = after.database_type
            entity.comment = after.comment
            entity.attribute_index = {k: v.model_copy(deep=True) for k, v in after.attribute_index.items()}
            entity.foreign_key_index = {k: v.model_copy(deep=True) for k, v in after.foreign_key_index.items()}
        set_entity_foreign_key_flags(entity)
        return entity

    def _update_entity_links(
        self, model: DbModel, entity: Entity, change: ChangeOnEntity, was_join_table: bool = False
    ) -> int:
        if not change.changes_on_foreign_keys:
            return 0

        count = 0
        if is_join_table(entity):
            # A join table relation is all or nothing: rebuild both sides.
            # Relations keyed by the changed foreign keys go too, in case the
            # entity was a standard entity before this change.
            for fk_change in change.changes_on_foreign_keys:
                for fk in (fk_change.before, fk_change.after):
                    if fk is not None:
                        count += model.remove_links_by_foreign_key(fk)
            count += model.remove_links_by_join_table_name(entity.table_name)
            self.links_manager.build_many_to_many_relation(model, entity)
            return count + 2

        if was_join_table:
            count += model.remove_links_by_join_table_name(entity.table_name)

        for fk_change in change.changes_on_foreign_keys:
            if fk_change.change_type == ChangeType.CREATED:
                self.links_manager.build_many_to_one_relation(model, entity, fk_change.foreign_key_created)
                count += 2
            elif fk_change.change_type == ChangeType.UPDATED:
                count += self.links_manager.remove_relation(model, fk_change.before)
                self.links_manager.build_many_to_one_relation(model, entity, fk_change.after)
                count += 2
            elif fk_change.change_type == ChangeType.DELETED:
                count += self.links_manager.remove_relation(model, fk_change.foreign_key_deleted)
        return count
