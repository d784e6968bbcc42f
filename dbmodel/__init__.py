"""dbmodel: entities and navigational links inferred from a relational schema."""

__version__ = "0.1.0"

from dbmodel.changelog import ChangeLog, ChangeOnColumn, ChangeOnEntity, ChangeOnForeignKey, ChangeType
from dbmodel.core.attribute import Attribute
from dbmodel.core.entity import Entity
from dbmodel.core.foreign_key import ForeignKey, ForeignKeyColumn
from dbmodel.core.join_table import is_join_table
from dbmodel.core.link import Cardinality, FetchType, JoinColumn, JoinTable, Link
from dbmodel.core.model import DbModel
from dbmodel.errors import (
    ChangeLogError,
    DbModelError,
    InvalidJoinTableShape,
    ReferencedEntityNotFound,
    SchemaAccessError,
)
from dbmodel.generator import DbModelGenerator
from dbmodel.links import LinksManager, LinksUpdater
from dbmodel.rules import DefaultModelRules, ModelRules

__all__ = [
    "Attribute",
    "Cardinality",
    "ChangeLog",
    "ChangeLogError",
    "ChangeOnColumn",
    "ChangeOnEntity",
    "ChangeOnForeignKey",
    "ChangeType",
    "DbModel",
    "DbModelError",
    "DbModelGenerator",
    "DefaultModelRules",
    "Entity",
    "FetchType",
    "ForeignKey",
    "ForeignKeyColumn",
    "InvalidJoinTableShape",
    "JoinColumn",
    "JoinTable",
    "Link",
    "LinksManager",
    "LinksUpdater",
    "ModelRules",
    "ReferencedEntityNotFound",
    "SchemaAccessError",
    "is_join_table",
]
