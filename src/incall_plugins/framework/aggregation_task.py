"""
Plugin Info Aggregation

Builds the list of in-call plugins relevant to a contact by merging the
contact's plugin data rows with the catalog of enabled plugins, off the
caller's thread, and delivers the result to a callback exactly once.
"""

import asyncio
import inspect
import logging
import threading
import weakref
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Union

from ..domain.interfaces import (
    ContactDataProvider, InviteResolver, PluginCatalog, PluginInfoCallback
)
from ..domain.models import CallMethodInfo, ContactDataQuery, ContactInfo, LookupTarget, PluginInfo
from ..infrastructure.exceptions import AggregationError, PluginInfoValidationError
from ..infrastructure.observability.logging import correlation_context
from .configuration.core import InCallPluginsConfiguration
from .configuration.models import AggregationConfiguration
from .lookup import classify_lookup_uri

logger = logging.getLogger(__name__)

PluginInfoResult = Optional[List[PluginInfo]]
CallbackTarget = Union[PluginInfoCallback, Callable[[PluginInfoResult], None]]

# Concurrent invite lookups across all runs of one task.
INVITE_WORKERS = 4


def _weak_callback(callback: Optional[CallbackTarget]) -> Callable[[], Optional[Callable[[PluginInfoResult], None]]]:
    """Return a resolver yielding the deliverable callable, or None once the target is gone."""
    if callback is None:
        return lambda: None

    if hasattr(callback, 'on_plugin_info_loaded'):
        try:
            ref = weakref.ref(callback)
        except TypeError:
            return lambda: callback.on_plugin_info_loaded

        def resolve_target():
            target = ref()
            return target.on_plugin_info_loaded if target is not None else None
        return resolve_target

    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)

    # Plain functions belong to no caller instance
    return lambda: callback


class AggregationHandle:
    """
    Handle on one scheduled aggregation.

    Holds the callback target weakly and delivers the result at most once,
    unless cancel() was called first.
    """

    def __init__(self, callback: Optional[CallbackTarget], loop: Optional[asyncio.AbstractEventLoop] = None):
        self._resolve_callback = _weak_callback(callback)
        self._loop = loop
        self._future: Optional[Future] = None
        self._cancelled = threading.Event()
        self._delivered = False
        self._delivery_lock = threading.Lock()

    def _attach(self, future: Future) -> None:
        self._future = future
        future.add_done_callback(self._on_done)

    def cancel(self) -> bool:
        """Suppress callback delivery and cancel the work if it has not started."""
        self._cancelled.set()
        if self._future is not None:
            self._future.cancel()
        return True

    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def delivered(self) -> bool:
        """Whether the callback has been invoked."""
        with self._delivery_lock:
            return self._delivered

    def result(self, timeout: Optional[float] = None) -> PluginInfoResult:
        """Wait for the aggregation result. Re-raises errors from the worker."""
        if self._future is None:
            raise AggregationError("Aggregation was never scheduled", operation="result")
        return self._future.result(timeout)

    def _on_done(self, future: Future) -> None:
        if future.cancelled():
            logger.debug("Aggregation cancelled before it started")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Plugin info aggregation failed: {error}", exc_info=error)
            return

        if self._loop is not None:
            try:
                self._loop.call_soon_threadsafe(self._deliver, future.result())
            except RuntimeError:
                logger.debug("Event loop closed, dropping plugin info result")
        else:
            self._deliver(future.result())

    def _deliver(self, result: PluginInfoResult) -> None:
        with self._delivery_lock:
            if self._delivered or self._cancelled.is_set():
                return
            target = self._resolve_callback()
            if target is None:
                logger.debug("Callback target released, dropping plugin info result")
                return
            self._delivered = True

        try:
            target(result)
        except Exception as e:
            logger.error(f"Error in plugin info callback: {e}", exc_info=e)


class PluginInfoAggregationTask:
    """
    Merges a contact's plugin data rows with the enabled plugin catalog.

    Each call to execute() or run_async() is an independent run: the working
    index is local to the run and the catalog is read once as a snapshot.
    Runs execute on the task's executor, never on the caller's thread.
    """

    def __init__(
        self,
        catalog: PluginCatalog,
        contact_data: ContactDataProvider,
        invite_resolver: InviteResolver,
        config: Optional[AggregationConfiguration] = None,
        executor: Optional[Executor] = None
    ):
        self._catalog = catalog
        self._contact_data = contact_data
        self._invite_resolver = invite_resolver
        self._config = config or AggregationConfiguration()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="incall-plugins"
        )
        self._invite_executor = ThreadPoolExecutor(
            max_workers=INVITE_WORKERS,
            thread_name_prefix="incall-plugins-invite"
        )
        self._shutdown = False

    @classmethod
    def from_configuration(
        cls,
        configuration: InCallPluginsConfiguration,
        catalog: PluginCatalog,
        contact_data: ContactDataProvider,
        invite_resolver: InviteResolver
    ) -> 'PluginInfoAggregationTask':
        """Create a task using the aggregation settings of a loaded configuration."""
        return cls(catalog, contact_data, invite_resolver, config=configuration.get_aggregation_config())

    def execute(
        self,
        contact: Optional[ContactInfo],
        callback: Optional[CallbackTarget],
        loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> AggregationHandle:
        """
        Schedule an aggregation for a contact.

        Args:
            contact: Contact to aggregate plugins for, may be None
            callback: PluginInfoCallback or callable receiving the result, held weakly
            loop: Event loop to deliver the callback on; defaults to the worker thread

        Returns:
            AggregationHandle for cancellation and waiting

        Raises:
            UnsupportedLookupTargetError: If the contact's lookup URI cannot be classified
            AggregationError: If the task has been shut down
        """
        self._ensure_running("execute")
        self._lookup_target(contact)

        handle = AggregationHandle(callback, loop)
        handle._attach(self._executor.submit(self.do_in_background, contact))
        return handle

    async def run_async(self, contact: Optional[ContactInfo]) -> PluginInfoResult:
        """Run an aggregation on the task's executor and await its result."""
        self._ensure_running("run_async")
        self._lookup_target(contact)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.do_in_background, contact)

    def do_in_background(self, contact: Optional[ContactInfo]) -> PluginInfoResult:
        """
        Aggregate the plugins relevant to a contact. Blocks on collaborator calls.

        Returns:
            Relevant plugins, an empty list when the contact is None, or None
            when no enabled plugin has a video-callable mime type
        """
        with correlation_context():
            if contact is None:
                logger.debug("No contact given, skipping plugin lookup")
                return []

            plugins = self._catalog.get_all_enabled_call_methods() or {}
            mime_types = frozenset(self._catalog.get_all_enabled_video_callable_mime_types() or ())

            if not mime_types:
                logger.info("No in-call plugins found with video callable mime types")
                return None

            working_index: Dict[str, PluginInfo.Builder] = {}
            target = self._lookup_target(contact)
            if target is not None:
                self._seed_from_contact_data(target, mime_types, working_index)
            contact_mime_types = len(working_index)

            plugin_infos = self._overlay_catalog(plugins, contact, working_index)

            logger.info(
                "Plugin info aggregation completed",
                extra={
                    "catalog_size": len(plugins),
                    "contact_mime_types": contact_mime_types,
                    "plugin_count": len(plugin_infos)
                }
            )
            return plugin_infos

    def _seed_from_contact_data(
        self,
        target: LookupTarget,
        mime_types: FrozenSet[str],
        working_index: Dict[str, PluginInfo.Builder]
    ) -> None:
        try:
            rows = self._contact_data.query(ContactDataQuery(target=target, mime_types=mime_types))
        except Exception as e:
            logger.warning(f"Contact data query failed: {e}", extra={"query_uri": target.query_uri})
            return
        if rows is None:
            logger.warning("Contact data query returned no cursor", extra={"query_uri": target.query_uri})
            return

        # Several rows with one mime type collapse to the last row
        for row in rows:
            working_index[row.mime_type] = (
                PluginInfo.Builder()
                .set_user_id(row.identifier)
                .set_mime_type(row.mime_type)
            )

    def _overlay_catalog(
        self,
        plugins: Dict[str, CallMethodInfo],
        contact: ContactInfo,
        working_index: Dict[str, PluginInfo.Builder]
    ) -> List[PluginInfo]:
        plugin_infos: List[PluginInfo] = []
        emitted_mime_types = set()

        for call_method in plugins.values():
            mime_type = call_method.video_callable_mime_type

            if mime_type in emitted_mime_types:
                logger.warning(
                    f"Skipping plugin {call_method.component}: mime type already provided by another plugin",
                    extra={"mime_type": mime_type}
                )
                continue

            builder = working_index.get(mime_type)
            seeded = builder is not None
            if not seeded:
                logger.debug(
                    f"Contact has no account with plugin {call_method.component}, looking up invite"
                )
                builder = (
                    PluginInfo.Builder()
                    .set_user_id(None)
                    .set_mime_type(mime_type)
                    .set_invite_action(self._resolve_invite(call_method, contact))
                )
                working_index[mime_type] = builder

            builder.set_plugin_component(call_method.component) \
                .set_plugin_title(call_method.name) \
                .set_color_icon(call_method.brand_icon) \
                .set_single_color_icon(call_method.single_color_brand_icon)

            try:
                plugin_infos.append(builder.build())
            except PluginInfoValidationError as e:
                logger.error(
                    f"Failed to build PluginInfo for {call_method.component}",
                    extra={"missing_fields": e.missing_fields}
                )
                # The invite belongs to this component only
                if not seeded:
                    del working_index[mime_type]
                continue

            emitted_mime_types.add(mime_type)

        return plugin_infos

    def _resolve_invite(self, call_method: CallMethodInfo, contact: ContactInfo) -> Optional[Any]:
        """
        Look up the invite action of a plugin, bounded by the invite timeout.

        A resolver still running at the timeout cannot be interrupted; it keeps
        its invite worker until it returns. shutdown() does not wait for it.
        """
        timeout = self._config.invite_timeout_seconds
        future = self._invite_executor.submit(
            self._invite_resolver.get_invite_action, call_method.component, contact
        )
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                f"Invite lookup timed out for {call_method.component}",
                extra={"timeout_seconds": timeout}
            )
        except Exception as e:
            logger.warning(f"Invite lookup failed for {call_method.component}: {e}")
        return None

    def _lookup_target(self, contact: Optional[ContactInfo]) -> Optional[LookupTarget]:
        if contact is None or not contact.lookup_uri:
            return None
        return classify_lookup_uri(
            contact.lookup_uri,
            contacts_uri=self._config.contacts_content_uri,
            data_uri=self._config.data_content_uri
        )

    def _ensure_running(self, operation: str) -> None:
        if self._shutdown:
            raise AggregationError("Aggregation task has been shut down", operation=operation)

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting work and release the executors the task owns."""
        self._shutdown = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)
        self._invite_executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> 'PluginInfoAggregationTask':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)
