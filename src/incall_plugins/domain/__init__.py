"""
Domain layer: value objects and collaborator interfaces.
"""

from .models import (
    PluginInfo,
    ContactInfo,
    CallMethodInfo,
    ContactDataRow,
    ContactDataQuery,
    LookupLevel,
    LookupTarget,
)
from .interfaces import (
    PluginCatalog,
    ContactDataProvider,
    InviteResolver,
    PluginInfoCallback,
    PluginInfoListener,
)

__all__ = [
    "PluginInfo",
    "ContactInfo",
    "CallMethodInfo",
    "ContactDataRow",
    "ContactDataQuery",
    "LookupLevel",
    "LookupTarget",
    "PluginCatalog",
    "ContactDataProvider",
    "InviteResolver",
    "PluginInfoCallback",
    "PluginInfoListener",
]
