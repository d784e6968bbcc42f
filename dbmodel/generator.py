"""Model generation from a schema snapshot."""

import logging
import re
from datetime import datetime

from dbmodel.config import DbModelConfig
from dbmodel.core.attribute import Attribute
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey, ForeignKeyColumn
from dbmodel.core.foreign_key_flags import set_foreign_key_flags
from dbmodel.core.model import DbModel
from dbmodel.errors import DbModelError, SchemaAccessError
from dbmodel.links.builder import LinksManager
from dbmodel.rules import DefaultModelRules, ModelRules, jdbc_type_code
from dbmodel.schema import DatabaseColumn, DatabaseForeignKey, DatabaseSchema, DatabaseTable, SchemaSource


class DbModelGenerator:
    """Builds a model (entities and links) from a schema snapshot.

    Steps:
    1. one entity per accepted table, with its attributes and foreign keys
    2. foreign key flags on attributes (must run before link generation)
    3. all the links between entities
    """

    def __init__(self, rules: ModelRules | None = None, config: DbModelConfig | None = None):
        self.rules = rules or DefaultModelRules()
        self.config = config or DbModelConfig()
        self.links_manager = LinksManager(self.rules)

    def generate_from_source(self, source: SchemaSource) -> DbModel:
        """Load a snapshot from a schema source and generate the model.

        Raises:
            SchemaAccessError: If the source fails to produce a snapshot
        """
        try:
            schema = source.load_schema()
        except DbModelError:
            raise
        except Exception as e:
            raise SchemaAccessError(f"Cannot load schema: {e}", operation="load_schema") from e
        return self.generate(schema)

    def generate(self, schema: DatabaseSchema) -> DbModel:
        """Generate the model from a schema snapshot."""
        model = DbModel(
            database_name=self.config.database_name or schema.database_name,
            database_id=self.config.database_id,
            database_product_name=schema.product_name,
            generation_date=datetime.now(),
        )

        for table in schema.tables:
            if not self.accept_table(table):
                logging.warning("Table %s skipped (%s)", table.name, table.table_type)
                continue
            model.store_entity(self.build_entity(table))
        logging.info("%d table(s) loaded", model.entity_count)

        set_foreign_key_flags(model)
        self.links_manager.rebuild_all_links(model)
        return model

    def accept_table(self, table: DatabaseTable) -> bool:
        """Check the table type and name filters of the configuration."""
        table_types = [t.upper() for t in self.config.table_types]
        if table_types and (table.table_type or "").upper() not in table_types:
            return False
        if self.config.table_name_include and not re.search(self.config.table_name_include, table.name):
            return False
        if self.config.table_name_exclude and re.search(self.config.table_name_exclude, table.name):
            return False
        return True

    def build_entity(self, table: DatabaseTable) -> Entity:
        """Create an entity (attributes and foreign keys) from a snapshot table.

        Raises:
            SchemaAccessError: If the table cannot be converted
        """
        try:
            entity = Entity(
                table_name=table.name,
                class_name=self.rules.get_entity_class_name(table.name),
                catalog=table.catalog,
                schema_name=table.schema_name,
                database_type=table.table_type,
                comment=table.comment or "",
            )
            for position, column in enumerate(table.columns, start=1):
                entity.store_attribute(self.build_attribute(table, column, position))
            for fk in table.foreign_keys:
                entity.store_foreign_key(self.build_foreign_key(table, fk))
        except DbModelError:
            raise
        except Exception as e:
            raise SchemaAccessError(f"Cannot build entity: {e}", table_name=table.name, operation="build_entity") from e

        logging.debug("Entity %s built", entity)
        return entity

    def build_attribute(self, table: DatabaseTable, column: DatabaseColumn, position: int) -> Attribute:
        code = column.jdbc_type_code if column.jdbc_type_code is not None else jdbc_type_code(column.type)
        attribute = Attribute(
            column_name=column.name,
            name=self.rules.get_attribute_name(column.name),
            type=self.rules.get_attribute_type(column.type, code, column.not_null),
            database_type_name=column.type,
            jdbc_type_code=code,
            not_null=column.not_null,
            size=column.size,
            position=column.ordinal_position or position,
            database_default_value=column.default_value,
            comment=column.comment or "",
            is_key_element=column.primary_key or column.name in table.primary_key,
            is_auto_incremented=column.auto_increment,
        )
        logging.debug(
            "   - Column %s (%s : %s) ---> %s (%s)",
            column.name,
            code,
            column.type,
            attribute.name,
            attribute.type,
        )
        return attribute

    def build_foreign_key(self, table: DatabaseTable, fk: DatabaseForeignKey) -> ForeignKey:
        foreign_key = ForeignKey(name=fk.name, table_name=table.name, referenced_table_name=fk.referenced_table)
        for sequence, column in enumerate(fk.columns, start=1):
            foreign_key.store_column(
                ForeignKeyColumn(
                    sequence=column.sequence or sequence,
                    column_name=column.column,
                    referenced_column_name=column.referenced_column,
                    update_rule=fk.update_rule,
                    delete_rule=fk.delete_rule,
                    deferrable=fk.deferrability,
                )
            )
        return foreign_key
