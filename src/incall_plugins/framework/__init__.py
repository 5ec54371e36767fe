"""
Framework layer: plugin info aggregation, caching, catalog and configuration.
"""

from .aggregation_task import AggregationHandle, PluginInfoAggregationTask
from .plugin_info_cache import PluginInfoCache
from .lookup import classify_lookup_uri, CONTACTS_CONTENT_URI, DATA_CONTENT_URI
from .plugin_management import InCallPluginRegistry

__all__ = [
    "AggregationHandle",
    "PluginInfoAggregationTask",
    "PluginInfoCache",
    "classify_lookup_uri",
    "CONTACTS_CONTENT_URI",
    "DATA_CONTENT_URI",
    "InCallPluginRegistry",
]
