"""
Plugin Registry Module

In-memory catalog of installed in-call plugins with enable/disable support.
"""

import logging
import threading
from dataclasses import replace
from typing import Dict, FrozenSet, Optional

from ...domain.interfaces import PluginCatalog
from ...domain.models import CallMethodInfo
from ...infrastructure.exceptions import PluginError

logger = logging.getLogger(__name__)


class InCallPluginRegistry(PluginCatalog):
    """
    Thread-safe registry of in-call plugins.

    Catalog reads return copies so an aggregation run works on a snapshot that
    later registrations cannot change.
    """

    def __init__(self):
        self._call_methods: Dict[str, CallMethodInfo] = {}
        self._registry_lock = threading.RLock()

        logger.debug("InCallPluginRegistry initialized")

    def register_plugin(self, call_method: CallMethodInfo) -> None:
        """Register or replace a plugin, keyed by its component."""
        if not call_method.component:
            raise PluginError(
                message="Cannot register a plugin without a component",
                mime_type=call_method.video_callable_mime_type
            )

        with self._registry_lock:
            replaced = call_method.component in self._call_methods
            self._call_methods[call_method.component] = call_method

        logger.info(
            f"Plugin {'replaced' if replaced else 'registered'}: {call_method.component}",
            extra={
                "mime_type": call_method.video_callable_mime_type,
                "enabled": call_method.enabled
            }
        )

    def unregister_plugin(self, component: str) -> bool:
        """Remove a plugin. Returns False if it was not registered."""
        with self._registry_lock:
            removed = self._call_methods.pop(component, None)

        if removed is None:
            logger.warning(f"Plugin not registered: {component}")
            return False

        logger.info(f"Plugin unregistered: {component}")
        return True

    def set_enabled(self, component: str, enabled: bool) -> None:
        """Enable or disable a registered plugin."""
        with self._registry_lock:
            call_method = self._call_methods.get(component)
            if call_method is None:
                raise PluginError(
                    message=f"Plugin not found: {component}",
                    component=component
                )
            self._call_methods[component] = replace(call_method, enabled=enabled)

        logger.info(f"Plugin {'enabled' if enabled else 'disabled'}: {component}")

    def get_call_method(self, component: str) -> Optional[CallMethodInfo]:
        with self._registry_lock:
            return self._call_methods.get(component)

    def get_all_call_methods(self) -> Dict[str, CallMethodInfo]:
        """Get all registered plugins, enabled or not."""
        with self._registry_lock:
            return self._call_methods.copy()

    def get_all_enabled_call_methods(self) -> Dict[str, CallMethodInfo]:
        with self._registry_lock:
            return {
                component: call_method
                for component, call_method in self._call_methods.items()
                if call_method.enabled
            }

    def get_all_enabled_video_callable_mime_types(self) -> FrozenSet[str]:
        with self._registry_lock:
            return frozenset(
                call_method.video_callable_mime_type
                for call_method in self._call_methods.values()
                if call_method.enabled and call_method.video_callable_mime_type
            )

    def get_video_callable_mime_type_string(self) -> str:
        """Enabled video-callable mime types joined for a provider IN clause."""
        return "','".join(sorted(self.get_all_enabled_video_callable_mime_types()))

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._call_methods)
