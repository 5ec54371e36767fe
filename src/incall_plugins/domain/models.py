"""
Core Domain Models

Defines the value objects exchanged between the aggregation task and its
collaborators: the PluginInfo result entity and its builder, the contact
reference, catalog entries and contact data queries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional

from ..infrastructure.exceptions import PluginInfoValidationError


@dataclass(frozen=True)
class PluginInfo:
    """Describes one in-call plugin relevant to a contact."""
    plugin_component: str
    plugin_title: str
    mime_type: str
    color_icon: Any
    single_color_icon: Any
    user_id: Optional[str] = None
    invite_action: Optional[Any] = None

    @property
    def is_invite(self) -> bool:
        """True when the contact has no account with this plugin yet."""
        return self.user_id is None

    class Builder:
        """
        Single-shot accumulator for PluginInfo.

        Every setter returns the builder so calls can be chained. A builder
        must not be mutated and rebuilt after a successful build().
        """

        REQUIRED_FIELDS = (
            'plugin_component', 'plugin_title', 'mime_type', 'color_icon', 'single_color_icon'
        )

        def __init__(self):
            self.plugin_component: Optional[str] = None
            self.plugin_title: Optional[str] = None
            self.user_id: Optional[str] = None
            self.mime_type: Optional[str] = None
            self.color_icon: Optional[Any] = None
            self.single_color_icon: Optional[Any] = None
            self.invite_action: Optional[Any] = None

        def set_plugin_component(self, plugin_component: Optional[str]) -> 'PluginInfo.Builder':
            self.plugin_component = plugin_component
            return self

        def set_plugin_title(self, plugin_title: Optional[str]) -> 'PluginInfo.Builder':
            self.plugin_title = plugin_title
            return self

        def set_user_id(self, user_id: Optional[str]) -> 'PluginInfo.Builder':
            self.user_id = user_id
            return self

        def set_mime_type(self, mime_type: Optional[str]) -> 'PluginInfo.Builder':
            self.mime_type = mime_type
            return self

        def set_color_icon(self, color_icon: Optional[Any]) -> 'PluginInfo.Builder':
            self.color_icon = color_icon
            return self

        def set_single_color_icon(self, single_color_icon: Optional[Any]) -> 'PluginInfo.Builder':
            self.single_color_icon = single_color_icon
            return self

        def set_invite_action(self, invite_action: Optional[Any]) -> 'PluginInfo.Builder':
            self.invite_action = invite_action
            return self

        def missing_fields(self) -> List[str]:
            """Names of required fields that are still unset."""
            return [name for name in self.REQUIRED_FIELDS if getattr(self, name) is None]

        def is_complete(self) -> bool:
            return not self.missing_fields()

        def build(self) -> 'PluginInfo':
            """
            Finalize the accumulated fields into an immutable PluginInfo.

            Raises:
                PluginInfoValidationError: If any required field is unset
            """
            missing = self.missing_fields()
            if missing:
                raise PluginInfoValidationError(missing)

            return PluginInfo(
                plugin_component=self.plugin_component,
                plugin_title=self.plugin_title,
                mime_type=self.mime_type,
                color_icon=self.color_icon,
                single_color_icon=self.single_color_icon,
                user_id=self.user_id,
                invite_action=self.invite_action,
            )


@dataclass(frozen=True)
class ContactInfo:
    """Contact reference handed to the aggregation task and the invite resolver."""
    name: Optional[str] = None
    number: Optional[str] = None
    lookup_uri: Optional[str] = None


@dataclass(frozen=True)
class CallMethodInfo:
    """Catalog entry describing one installed in-call plugin."""
    component: str
    name: str
    video_callable_mime_type: Optional[str]
    brand_icon: Any = None
    single_color_brand_icon: Any = None
    enabled: bool = True


@dataclass(frozen=True)
class ContactDataRow:
    """A contact data row carrying a plugin-specific identifier."""
    identifier: Optional[str]
    mime_type: Optional[str]


class LookupLevel(Enum):
    """Granularity of a contact lookup URI."""
    CONTACT = "contact"
    DATA = "data"


@dataclass(frozen=True)
class LookupTarget:
    """A classified lookup URI and the URI its data rows are queried from."""
    uri: str
    level: LookupLevel
    query_uri: str


# Column names of the contact data table queried for plugin identifiers.
MIMETYPE_COLUMN = "mimetype"
DATA1_COLUMN = "data1"


@dataclass(frozen=True)
class ContactDataQuery:
    """Query for a contact's data rows restricted to a set of mime types."""
    target: LookupTarget
    mime_types: FrozenSet[str] = field(default_factory=frozenset)

    def selection(self) -> str:
        """Render the provider selection clause for this query."""
        if not self.mime_types:
            return ""
        joined = "','".join(sorted(self.mime_types))
        return f"{MIMETYPE_COLUMN} IN ('{joined}') AND {DATA1_COLUMN} NOT NULL"
