"""
Plugin Management for incall_plugins

Provides the in-memory catalog of installed in-call plugins.
"""

from .plugin_registry import InCallPluginRegistry

__all__ = [
    'InCallPluginRegistry'
]
