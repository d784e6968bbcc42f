"""Change log: differences between two schema snapshots.

Computing the differences is the caller's job. The records here only carry
them, checking that each record's before/after states fit its change type.
"""

from enum import Enum

from dbmodel.core.attribute import Attribute
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey
from dbmodel.errors import ChangeLogError


class ChangeType(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


def _check_states(change_type: ChangeType, before, after, what: str) -> None:
    if change_type == ChangeType.CREATED:
        if before is not None or after is None:
            raise ChangeLogError(f"{what} CREATED must have an 'after state' and no 'before state'")
    elif change_type == ChangeType.DELETED:
        if before is None or after is not None:
            raise ChangeLogError(f"{what} DELETED must have a 'before state' and no 'after state'")
    elif change_type == ChangeType.UPDATED:
        if before is None or after is None:
            raise ChangeLogError(f"{what} UPDATED must have both a 'before state' and an 'after state'")
    else:
        raise ChangeLogError(f"Invalid change type: {change_type}")


class ChangeOnColumn:
    """Change on one column of an entity."""

    def __init__(self, change_type: ChangeType, before: Attribute | None = None, after: Attribute | None = None):
        change_type = ChangeType(change_type)
        _check_states(change_type, before, after, "Column")
        self.change_type = change_type
        self.before = before
        self.after = after

    @property
    def column_name(self) -> str:
        return (self.after or self.before).column_name


class ChangeOnForeignKey:
    """Change on one foreign key of an entity."""

    def __init__(self, change_type: ChangeType, before: ForeignKey | None = None, after: ForeignKey | None = None):
        change_type = ChangeType(change_type)
        _check_states(change_type, before, after, "Foreign key")
        self.change_type = change_type
        self.before = before
        self.after = after

    @property
    def foreign_key_name(self) -> str:
        return (self.after or self.before).name

    @property
    def foreign_key_created(self) -> ForeignKey:
        if self.change_type != ChangeType.CREATED:
            raise ChangeLogError("Not a CREATED foreign key")
        return self.after

    @property
    def foreign_key_deleted(self) -> ForeignKey:
        if self.change_type != ChangeType.DELETED:
            raise ChangeLogError("Not a DELETED foreign key")
        return self.before

    def __repr__(self) -> str:
        return f"ChangeOnForeignKey({self.change_type.value}, {self.foreign_key_name})"


class ChangeOnEntity:
    """Changes summary for one entity."""

    def __init__(
        self,
        change_type: ChangeType,
        before: Entity | None = None,
        after: Entity | None = None,
        changes_on_foreign_keys: list[ChangeOnForeignKey] | None = None,
        changes_on_columns: list[ChangeOnColumn] | None = None,
    ):
        change_type = ChangeType(change_type)
        _check_states(change_type, before, after, "Entity")
        if change_type == ChangeType.UPDATED and before.table_name != after.table_name:
            raise ChangeLogError(
                f"Entity name is different between 'before' ({before.table_name}) and 'after' ({after.table_name})"
            )
        self.change_type = change_type
        self.before = before
        self.after = after
        self.changes_on_foreign_keys: list[ChangeOnForeignKey] = list(changes_on_foreign_keys or [])
        self.changes_on_columns: list[ChangeOnColumn] = list(changes_on_columns or [])
        self.database_type_changed = False
        self.database_comment_changed = False

    @property
    def entity_name(self) -> str:
        return (self.after or self.before).table_name

    @property
    def entity_created(self) -> Entity:
        if self.change_type != ChangeType.CREATED:
            raise ChangeLogError("Not a CREATED entity")
        return self.after

    @property
    def entity_deleted(self) -> Entity:
        if self.change_type != ChangeType.DELETED:
            raise ChangeLogError("Not a DELETED entity")
        return self.before

    def add_change_on_foreign_key(self, change: ChangeOnForeignKey) -> None:
        self.changes_on_foreign_keys.append(change)

    def add_change_on_column(self, change: ChangeOnColumn) -> None:
        self.changes_on_columns.append(change)

    @property
    def number_of_changes(self) -> int:
        """Changes on columns + changes on foreign keys + type and comment changes."""
        count = len(self.changes_on_columns) + len(self.changes_on_foreign_keys)
        count += 1 if self.database_type_changed else 0
        count += 1 if self.database_comment_changed else 0
        return count

    def __repr__(self) -> str:
        return f"ChangeOnEntity({self.change_type.value}, {self.entity_name})"


class ChangeLog:
    """Ordered list of entity changes."""

    def __init__(self, changes: list[ChangeOnEntity] | None = None):
        self.changes: list[ChangeOnEntity] = list(changes or [])

    def add(self, change: ChangeOnEntity) -> None:
        self.changes.append(change)

    def __iter__(self):
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def get_change(self, entity_name: str) -> ChangeOnEntity | None:
        for change in self.changes:
            if change.entity_name == entity_name:
                return change
        return None
