"""Attribute definitions."""

from pydantic import BaseModel, Field


class Attribute(BaseModel):
    """Attribute (column projection) of an entity."""

    column_name: str = Field(..., description="Database column name")
    name: str = Field(default="", description="Field name in the generated class")
    type: str = Field(default="string", description="Neutral model type (string, int, date, ...)")

    database_type_name: str = Field(default="", description="Original database type (VARCHAR, INTEGER, ...)")
    jdbc_type_code: int = Field(default=0, description="JDBC type code (java.sql.Types)")
    not_null: bool = Field(default=False, description="Column declared NOT NULL")
    size: int | None = Field(default=None, description="Column size or numeric precision")
    position: int = Field(default=0, description="Ordinal position in the table")
    database_default_value: str | None = Field(default=None, description="Default value declared in the database")
    comment: str = Field(default="", description="Column comment")

    is_key_element: bool = Field(default=False, description="Column is part of the primary key")
    is_auto_incremented: bool = Field(default=False, description="Column is auto-incremented")

    # Set by the foreign key flag pass, before any link generation
    is_fk: bool = Field(default=False, description="Column participates in at least one foreign key")
    is_fk_simple: bool = Field(default=False, description="Column is a single-column foreign key")
    is_fk_composite: bool = Field(default=False, description="Column is part of a multi-column foreign key")
    referenced_table_name: str | None = Field(
        default=None, description="Table referenced by the simple foreign key using this column"
    )
