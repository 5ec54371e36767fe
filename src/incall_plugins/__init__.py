"""
incall_plugins - in-call plugin aggregation for contacts

Builds the list of in-call communication plugins relevant to a contact:
plugins the contact already has an account with, and plugins the contact
could be invited to.
"""

__version__ = "1.0.0"

from .domain import (
    PluginInfo,
    ContactInfo,
    CallMethodInfo,
    ContactDataRow,
    ContactDataQuery,
    PluginCatalog,
    ContactDataProvider,
    InviteResolver,
    PluginInfoCallback,
    PluginInfoListener,
)
from .framework import (
    AggregationHandle,
    PluginInfoAggregationTask,
    PluginInfoCache,
    InCallPluginRegistry,
)
from .infrastructure.exceptions import (
    InCallPluginsException,
    PluginInfoValidationError,
    UnsupportedLookupTargetError,
)

__all__ = [
    "PluginInfo",
    "ContactInfo",
    "CallMethodInfo",
    "ContactDataRow",
    "ContactDataQuery",
    "PluginCatalog",
    "ContactDataProvider",
    "InviteResolver",
    "PluginInfoCallback",
    "PluginInfoListener",
    "AggregationHandle",
    "PluginInfoAggregationTask",
    "PluginInfoCache",
    "InCallPluginRegistry",
    "InCallPluginsException",
    "PluginInfoValidationError",
    "UnsupportedLookupTargetError",
]
