"""Link generation and maintenance."""

from dbmodel.links.builder import LinksManager
from dbmodel.links.updater import LinksUpdater

__all__ = ["LinksManager", "LinksUpdater"]
