"""Entity definitions.

An entity is a database table mapped to a class. It owns its attributes,
foreign keys and links, each stored by a stable key. Read accessors sort at
read time so iteration order never depends on insertion order.
"""

from pydantic import BaseModel, Field

from dbmodel.core.attribute import Attribute
from dbmodel.core.foreign_key import ForeignKey
from dbmodel.core.link import Link


class Entity(BaseModel):
    """Entity (table) definition."""

    table_name: str = Field(..., description="Database table name (unique in the model)")
    class_name: str = Field(default="", description="Class name for code generation")
    catalog: str | None = Field(default=None, description="Database catalog")
    schema_name: str | None = Field(default=None, description="Database schema")
    database_type: str | None = Field(default="TABLE", description="Database object type (TABLE, VIEW, ...)")
    comment: str = Field(default="", description="Table comment")

    attribute_index: dict[str, Attribute] = Field(default_factory=dict, description="Attributes by column name")
    foreign_key_index: dict[str, ForeignKey] = Field(default_factory=dict, description="Foreign keys by name")
    link_index: dict[str, Link] = Field(default_factory=dict, description="Links by id")

    def __str__(self) -> str:
        return (
            f"{self.class_name}|{self.table_name}|{self.catalog}|{self.schema_name}|{self.database_type}"
            f"|columns={len(self.attribute_index)}|foreignKeys={len(self.foreign_key_index)}"
            f"|links={len(self.link_index)}"
        )

    @property
    def is_join_table(self) -> bool:
        from dbmodel.core.join_table import is_join_table

        return is_join_table(self)

    @property
    def is_table_type(self) -> bool:
        return bool(self.database_type) and self.database_type.strip().upper() == "TABLE"

    @property
    def is_view_type(self) -> bool:
        return bool(self.database_type) and self.database_type.strip().upper() == "VIEW"

    # Attributes

    @property
    def attributes(self) -> list[Attribute]:
        """Attributes sorted by ordinal position (the original database order)."""
        return sorted(self.attribute_index.values(), key=lambda a: (a.position, a.column_name))

    @property
    def key_attributes(self) -> list[Attribute]:
        return [a for a in self.attributes if a.is_key_element]

    def store_attribute(self, attribute: Attribute) -> None:
        self.attribute_index[attribute.column_name] = attribute

    def get_attribute(self, column_name: str) -> Attribute | None:
        return self.attribute_index.get(column_name)

    def has_primary_key(self) -> bool:
        return any(a.is_key_element for a in self.attribute_index.values())

    @property
    def warnings(self) -> list[str]:
        warnings = []
        if not self.has_primary_key():
            warnings.append("No Primary Key")
        return warnings

    # Foreign keys

    @property
    def foreign_keys(self) -> list[ForeignKey]:
        """Foreign keys sorted by name."""
        return [self.foreign_key_index[name] for name in sorted(self.foreign_key_index)]

    def store_foreign_key(self, foreign_key: ForeignKey) -> None:
        if foreign_key.table_name != self.table_name:
            raise ValueError(
                f"Foreign key {foreign_key.name} belongs to table {foreign_key.table_name}, not {self.table_name}"
            )
        self.foreign_key_index[foreign_key.name] = foreign_key

    def get_foreign_key(self, name: str) -> ForeignKey | None:
        return self.foreign_key_index.get(name)

    def remove_foreign_key(self, name: str) -> ForeignKey | None:
        return self.foreign_key_index.pop(name, None)

    # Links

    @property
    def links(self) -> list[Link]:
        """Links sorted by id."""
        return [self.link_index[link_id] for link_id in sorted(self.link_index)]

    @property
    def selected_links(self) -> list[Link]:
        return [link for link in self.links if link.selected]

    def links_to(self, table_name: str) -> list[Link]:
        """Get all the links targeting the given table."""
        return [link for link in self.links if link.target_table_name == table_name]

    def store_link(self, link: Link) -> None:
        """Add or replace a link."""
        self.link_index[link.id] = link

    def get_link(self, link_id: str) -> Link | None:
        return self.link_index.get(link_id)

    def remove_link(self, link_id: str) -> int:
        """Remove a link by id.

        Returns:
            1 if the link was removed, 0 if it was not there
        """
        return 1 if self.link_index.pop(link_id, None) is not None else 0

    def remove_all_links(self) -> int:
        count = len(self.link_index)
        self.link_index.clear()
        return count
