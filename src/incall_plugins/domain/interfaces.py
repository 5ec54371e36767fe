"""
Core Domain Interfaces

Defines the collaborator contracts the aggregation task depends on. Platform
integrations implement these; the package ships in-memory implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
from .models import CallMethodInfo, ContactDataQuery, ContactDataRow, ContactInfo, PluginInfo


class PluginCatalog(ABC):
    """
    Source of the enabled in-call plugins.

    Both calls are synchronous and should return snapshots; the aggregation
    task reads them once per run.
    """

    @abstractmethod
    def get_all_enabled_call_methods(self) -> Dict[str, CallMethodInfo]:
        """
        Get all enabled plugins.

        Returns:
            Dict[str, CallMethodInfo]: Plugin component identifier to catalog entry
        """
        pass

    @abstractmethod
    def get_all_enabled_video_callable_mime_types(self) -> FrozenSet[str]:
        """
        Get the video-callable mime types across all enabled plugins.

        Returns:
            FrozenSet[str]: Mime types, empty when no plugin is configured
        """
        pass


class ContactDataProvider(ABC):
    """Access to the contact data rows holding plugin identifiers."""

    @abstractmethod
    def query(self, query: ContactDataQuery) -> Optional[Iterable[ContactDataRow]]:
        """
        Query the data rows of a contact.

        Args:
            query: Lookup target and mime type filter

        Returns:
            Matching rows, or None when the provider could not be reached
        """
        pass


class InviteResolver(ABC):
    """Resolves the deferred action that invites a contact to a plugin."""

    @abstractmethod
    def get_invite_action(self, component: str, contact: ContactInfo) -> Optional[Any]:
        """
        Resolve an invite action. May block.

        Args:
            component: Plugin component identifier
            contact: Contact to invite

        Returns:
            An opaque invite action, or None when the plugin offers none
        """
        pass


class PluginInfoCallback(ABC):
    """Receives the result of a plugin info aggregation."""

    @abstractmethod
    def on_plugin_info_loaded(self, plugin_infos: Optional[List[PluginInfo]]) -> None:
        """
        Called once when an aggregation completes.

        Args:
            plugin_infos: Relevant plugins, an empty list when none are,
                or None when no video-callable plugin is configured
        """
        pass


class PluginInfoListener(ABC):
    """Notified when the plugin info of a call has been refreshed."""

    @abstractmethod
    def on_plugin_info_complete(self, call_id: str, plugin_infos: Optional[List[PluginInfo]]) -> None:
        pass
