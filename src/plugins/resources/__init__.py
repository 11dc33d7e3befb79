"""
Resource plugins package.

Resource plugins implement the create/read/update/delete/import hooks for
one managed resource type.
"""

from plugins.resources.base import ResourcePlugin
from plugins.resources.project import ProjectResource

__all__ = ["ResourcePlugin", "ProjectResource"]
