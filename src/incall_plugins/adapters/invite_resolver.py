"""
In-memory invite resolver.
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

from ..domain.interfaces import InviteResolver
from ..domain.models import ContactInfo


class InMemoryInviteResolver(InviteResolver):
    """Returns a preconfigured invite action per plugin component and records every lookup."""

    def __init__(self, invite_actions: Optional[Dict[str, Any]] = None):
        self._invite_actions: Dict[str, Any] = dict(invite_actions or {})
        self._lock = threading.Lock()
        self.calls: List[Tuple[str, ContactInfo]] = []

    def set_invite_action(self, component: str, invite_action: Any) -> None:
        with self._lock:
            self._invite_actions[component] = invite_action

    def get_invite_action(self, component: str, contact: ContactInfo) -> Optional[Any]:
        with self._lock:
            self.calls.append((component, contact))
            return self._invite_actions.get(component)
