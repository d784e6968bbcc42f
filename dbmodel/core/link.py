"""Link definitions.

A link is one directed end of a bidirectional relationship between two
entities. Every relationship is stored as two links (owning side and inverse
side) referencing each other by id.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Cardinality(str, Enum):
    """Cardinality of a link, seen from its source entity."""

    MANY_TO_ONE = "MANY_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_MANY = "MANY_TO_MANY"


class FetchType(str, Enum):
    """Fetch policy of a link."""

    DEFAULT = "DEFAULT"
    EAGER = "EAGER"
    LAZY = "LAZY"


class JoinColumn(BaseModel):
    """Join column mapping (local column -> referenced column)."""

    name: str = Field(..., description="Local column name")
    referenced_column_name: str = Field(..., description="Referenced column name")
    unique: bool = False
    nullable: bool = True
    insertable: bool = False
    updatable: bool = False


class JoinTable(BaseModel):
    """Join table descriptor, carried by the owning side of a many-to-many link."""

    name: str = Field(..., description="Join table name")
    schema_name: str | None = Field(default=None, description="Join table schema")
    catalog: str | None = Field(default=None, description="Join table catalog")
    join_columns: list[JoinColumn] = Field(
        default_factory=list, description="Columns referencing the owning side entity"
    )
    inverse_join_columns: list[JoinColumn] = Field(
        default_factory=list, description="Columns referencing the inverse side entity"
    )


class Link(BaseModel):
    """One end of a relationship between two entities."""

    id: str = Field(..., description="Link id (see dbmodel.core.link_id)")
    foreign_key_name: str = Field(default="", description="Foreign key name (empty for many-to-many)")
    join_table_name: str = Field(default="", description="Join table name (empty for many-to-one)")

    owning_side: bool = Field(..., description="True for the owning side of the relationship")
    mirror_link_id: str = Field(default="", description="Id of the other end of the relationship")
    mapped_by: str | None = Field(default=None, description="Owning side field name (inverse side only)")

    cardinality: Cardinality
    fetch_type: FetchType = FetchType.DEFAULT

    source_table_name: str
    target_table_name: str
    target_entity_class_name: str = ""
    field_name: str = ""

    join_columns: list[JoinColumn] = Field(
        default_factory=list, description="Join columns (owning side of a many-to-one link only)"
    )
    join_table: JoinTable | None = Field(
        default=None, description="Join table (owning side of a many-to-many link only)"
    )

    selected: bool = Field(default=True, description="Link is used by code generation")

    @property
    def is_collection(self) -> bool:
        """True when the field holds several target instances."""
        return self.cardinality in (Cardinality.ONE_TO_MANY, Cardinality.MANY_TO_MANY)

    def uses_table(self, table_name: str) -> bool:
        """True if the link starts from, points to or goes through the given table."""
        return table_name in (self.source_table_name, self.target_table_name) or (
            bool(self.join_table_name) and self.join_table_name == table_name
        )
