"""Foreign key definitions."""

from pydantic import BaseModel, Field


class ForeignKeyColumn(BaseModel):
    """One column pair of a foreign key."""

    sequence: int = Field(default=1, description="Position of the column in the foreign key (1-based)")
    column_name: str = Field(..., description="Column in the owning table")
    referenced_column_name: str = Field(..., description="Column in the referenced table")
    update_rule: int = Field(default=3, description="Update rule code (DatabaseMetaData.importedKeyNoAction)")
    delete_rule: int = Field(default=3, description="Delete rule code (DatabaseMetaData.importedKeyNoAction)")
    deferrable: int = Field(default=7, description="Deferrability code (DatabaseMetaData.importedKeyNotDeferrable)")


class ForeignKey(BaseModel):
    """Foreign key owned by an entity.

    The name is unique within the owning entity only, so the owning table
    name is part of the key's identity.
    """

    name: str = Field(..., description="Foreign key name (unique within the owning table)")
    table_name: str = Field(..., description="Owning table")
    referenced_table_name: str = Field(..., description="Referenced table")
    columns: list[ForeignKeyColumn] = Field(default_factory=list, description="Column pairs")

    @property
    def sorted_columns(self) -> list[ForeignKeyColumn]:
        """Column pairs ordered by sequence."""
        return sorted(self.columns, key=lambda c: c.sequence)

    @property
    def column_names(self) -> list[str]:
        return [c.column_name for c in self.sorted_columns]

    @property
    def is_composite(self) -> bool:
        return len(self.columns) > 1

    @property
    def update_rule(self) -> int:
        return self.columns[0].update_rule if self.columns else 3

    @property
    def delete_rule(self) -> int:
        return self.columns[0].delete_rule if self.columns else 3

    @property
    def deferrable(self) -> int:
        return self.columns[0].deferrable if self.columns else 7

    def store_column(self, column: ForeignKeyColumn) -> None:
        """Add a column pair, replacing any pair with the same sequence."""
        self.columns = [c for c in self.columns if c.sequence != column.sequence]
        self.columns.append(column)
