"""
In-memory collaborator implementations.
"""

from .contact_data_store import InMemoryContactDataStore
from .invite_resolver import InMemoryInviteResolver

__all__ = [
    "InMemoryContactDataStore",
    "InMemoryInviteResolver",
]
