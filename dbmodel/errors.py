"""Errors raised while building and maintaining the model graph."""


class DbModelError(Exception):
    """Base class for all dbmodel errors."""

    pass


class ReferencedEntityNotFound(DbModelError):
    """Raised when a foreign key references a table that is not in the model."""

    def __init__(self, table_name: str, foreign_key_name: str, referencing_table: str | None = None):
        self.table_name = table_name
        self.foreign_key_name = foreign_key_name
        self.referencing_table = referencing_table
        source = f" in table '{referencing_table}'" if referencing_table else ""
        super().__init__(
            f"No referenced table '{table_name}' for foreign key '{foreign_key_name}'{source}"
        )


class InvalidJoinTableShape(DbModelError):
    """Raised when a join table entity does not have exactly two foreign keys."""

    def __init__(self, table_name: str, foreign_key_count: int):
        self.table_name = table_name
        self.foreign_key_count = foreign_key_count
        super().__init__(
            f"Entity '{table_name}' (join table) has {foreign_key_count} foreign key(s) (2 expected)"
        )


class SchemaAccessError(DbModelError):
    """Raised when a schema snapshot cannot be read or converted.

    Carries the table and the operation that failed so the message is
    enough to diagnose the problem.
    """

    def __init__(self, message: str, table_name: str | None = None, operation: str | None = None):
        self.table_name = table_name
        self.operation = operation
        context = []
        if operation:
            context.append(f"operation={operation}")
        if table_name:
            context.append(f"table={table_name}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ChangeLogError(DbModelError):
    """Raised when a change record has an inconsistent before/after state."""

    pass
