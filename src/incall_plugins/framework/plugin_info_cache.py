"""
Per-call cache of aggregated plugin info.
"""

import logging
import threading
import weakref
from typing import Dict, List, Optional

from ..domain.interfaces import PluginInfoCallback, PluginInfoListener
from ..domain.models import ContactInfo, PluginInfo
from ..infrastructure.observability.logging import call_context
from .aggregation_task import AggregationHandle, PluginInfoAggregationTask

logger = logging.getLogger(__name__)


class _CacheCallback(PluginInfoCallback):
    """Stores one aggregation result in the cache and notifies the listener."""

    def __init__(self, cache: 'PluginInfoCache', call_id: str, listener: Optional[PluginInfoListener]):
        self._cache = cache
        self._call_id = call_id
        self._listener = weakref.ref(listener) if listener is not None else None

    def on_plugin_info_loaded(self, plugin_infos: Optional[List[PluginInfo]]) -> None:
        with call_context(self._call_id):
            self._cache._store(self._call_id, plugin_infos, self)

            listener = self._listener() if self._listener is not None else None
            if listener is not None:
                listener.on_plugin_info_complete(self._call_id, plugin_infos)


class PluginInfoCache:
    """
    Caches the plugin info list of each call.

    Only one aggregation is in flight at a time: refreshing any call cancels
    the previous aggregation, whose result is then never stored.
    """

    def __init__(self, task: PluginInfoAggregationTask):
        self._task = task
        self._entries: Dict[str, Optional[List[PluginInfo]]] = {}
        self._lock = threading.RLock()
        self._in_flight: Optional[AggregationHandle] = None
        # Handles hold their callback weakly; the cache keeps it alive.
        self._pending_callback: Optional[_CacheCallback] = None

    def refresh(
        self,
        call_id: str,
        contact: ContactInfo,
        is_emergency: bool = False,
        listener: Optional[PluginInfoListener] = None
    ) -> bool:
        """
        Start aggregating plugin info for a call.

        Returns:
            True if an aggregation was started, False if the contact is an
            emergency number or has neither a lookup URI nor a number
        """
        if is_emergency or not (contact.lookup_uri or contact.number):
            logger.debug(f"Skipping plugin lookup for call {call_id}")
            return False

        with self._lock:
            if self._in_flight is not None:
                self._in_flight.cancel()

            callback = _CacheCallback(self, call_id, listener)
            self._pending_callback = callback
            self._in_flight = self._task.execute(contact, callback)

        return True

    def _store(self, call_id: str, plugin_infos: Optional[List[PluginInfo]], callback: _CacheCallback) -> None:
        with self._lock:
            self._entries[call_id] = plugin_infos
            if self._pending_callback is callback:
                self._pending_callback = None
                self._in_flight = None

        logger.debug(
            "Plugin info cached",
            extra={"plugin_count": len(plugin_infos) if plugin_infos is not None else None}
        )

    def get(self, call_id: str) -> Optional[List[PluginInfo]]:
        """Cached plugin info of a call, None if absent or not yet loaded."""
        with self._lock:
            return self._entries.get(call_id)

    def contains(self, call_id: str) -> bool:
        with self._lock:
            return call_id in self._entries

    def remove(self, call_id: str) -> None:
        with self._lock:
            self._entries.pop(call_id, None)

    def clear(self) -> None:
        """Drop all entries and cancel the in-flight aggregation."""
        with self._lock:
            if self._in_flight is not None:
                self._in_flight.cancel()
            self._in_flight = None
            self._pending_callback = None
            self._entries.clear()
