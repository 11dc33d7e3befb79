"""Data source plugins package."""

from plugins.data_sources.base import DataSourcePlugin
from plugins.data_sources.project import ProjectDataSource

__all__ = ["DataSourcePlugin", "ProjectDataSource"]
