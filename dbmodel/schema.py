"""Schema snapshot definitions.

A snapshot is what schema acquisition produces: tables, columns and foreign
keys as read from a database catalog. Reading a live database is out of
scope here; snapshots come from a ``SchemaSource`` or from files (see
``dbmodel.loaders``).
"""

from typing import Protocol

from pydantic import BaseModel, Field


class DatabaseColumn(BaseModel):
    """Column metadata."""

    name: str = Field(..., description="Column name")
    type: str = Field(default="VARCHAR", description="Database type name")
    jdbc_type_code: int | None = Field(default=None, description="JDBC type code (guessed from type when omitted)")
    size: int | None = Field(default=None, description="Size or numeric precision")
    not_null: bool = Field(default=False, description="NOT NULL constraint")
    primary_key: bool = Field(default=False, description="Column is in the primary key")
    auto_increment: bool = Field(default=False, description="Column is auto-incremented")
    ordinal_position: int | None = Field(default=None, description="Position in the table (1-based)")
    default_value: str | None = Field(default=None, description="Database default value")
    comment: str | None = Field(default=None, description="Column comment")


class DatabaseForeignKeyColumn(BaseModel):
    """Column pair of a foreign key."""

    column: str = Field(..., description="Column in the owning table")
    referenced_column: str = Field(..., description="Column in the referenced table")
    sequence: int | None = Field(default=None, description="Position in the key (1-based)")


class DatabaseForeignKey(BaseModel):
    """Foreign key metadata."""

    name: str = Field(..., description="Foreign key name")
    referenced_table: str = Field(..., description="Referenced table name")
    columns: list[DatabaseForeignKeyColumn] = Field(default_factory=list)
    update_rule: int = Field(default=3, description="Update rule code")
    delete_rule: int = Field(default=3, description="Delete rule code")
    deferrability: int = Field(default=7, description="Deferrability code")


class DatabaseTable(BaseModel):
    """Table metadata."""

    name: str = Field(..., description="Table name")
    catalog: str | None = None
    schema_name: str | None = None
    table_type: str = Field(default="TABLE", description="TABLE, VIEW, ...")
    comment: str | None = None
    primary_key: list[str] = Field(default_factory=list, description="Primary key columns")
    columns: list[DatabaseColumn] = Field(default_factory=list)
    foreign_keys: list[DatabaseForeignKey] = Field(default_factory=list)

    def get_column(self, name: str) -> DatabaseColumn | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def get_foreign_key(self, name: str) -> DatabaseForeignKey | None:
        for fk in self.foreign_keys:
            if fk.name == name:
                return fk
        return None


class DatabaseSchema(BaseModel):
    """Snapshot of all the tables of a database."""

    database_name: str = ""
    product_name: str = ""
    tables: list[DatabaseTable] = Field(default_factory=list)

    def get_table(self, name: str) -> DatabaseTable | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None


class SchemaSource(Protocol):
    """Anything able to produce a schema snapshot."""

    def load_schema(self) -> DatabaseSchema: ...
