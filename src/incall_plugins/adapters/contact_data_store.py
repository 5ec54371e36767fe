"""
In-memory contact data provider.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional

from ..domain.interfaces import ContactDataProvider
from ..domain.models import ContactDataQuery, ContactDataRow

logger = logging.getLogger(__name__)


class InMemoryContactDataStore(ContactDataProvider):
    """
    Contact data rows kept in memory, keyed by the URI they are queried from.

    Queries filter rows the way the contact provider selection does: the
    mime type must be one of the requested ones and the identifier must be set.
    """

    def __init__(self):
        self._rows: Dict[str, List[ContactDataRow]] = defaultdict(list)
        self._lock = threading.Lock()
        self.query_count = 0

    def add_row(self, uri: str, identifier: Optional[str], mime_type: str) -> ContactDataRow:
        row = ContactDataRow(identifier=identifier, mime_type=mime_type)
        with self._lock:
            self._rows[uri].append(row)
        return row

    def remove_rows(self, uri: str) -> None:
        with self._lock:
            self._rows.pop(uri, None)

    def query(self, query: ContactDataQuery) -> Optional[List[ContactDataRow]]:
        with self._lock:
            self.query_count += 1
            if query.target.query_uri not in self._rows:
                logger.debug(f"No contact data for {query.target.query_uri}")
                return None
            rows = list(self._rows[query.target.query_uri])

        return [
            row for row in rows
            if row.mime_type in query.mime_types and row.identifier is not None
        ]
