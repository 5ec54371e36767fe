"""
Contact lookup URI classification.
"""

from ..domain.models import LookupLevel, LookupTarget
from ..infrastructure.exceptions import UnsupportedLookupTargetError

CONTACTS_CONTENT_URI = "content://com.android.contacts/contacts"
DATA_CONTENT_URI = "content://com.android.contacts/data"

# Sub-directory of a contact URI that lists the contact's data rows.
CONTACT_DATA_DIRECTORY = "data"


def classify_lookup_uri(
    lookup_uri: str,
    contacts_uri: str = CONTACTS_CONTENT_URI,
    data_uri: str = DATA_CONTENT_URI
) -> LookupTarget:
    """
    Classify a lookup URI as contact-level or data-level.

    Contact URIs are queried through their data sub-directory, data URIs as-is.

    Raises:
        UnsupportedLookupTargetError: If the URI is neither a contact nor a data URI
    """
    if lookup_uri.startswith(contacts_uri):
        if lookup_uri.endswith(CONTACT_DATA_DIRECTORY):
            query_uri = lookup_uri
        else:
            query_uri = f"{lookup_uri.rstrip('/')}/{CONTACT_DATA_DIRECTORY}"
        return LookupTarget(uri=lookup_uri, level=LookupLevel.CONTACT, query_uri=query_uri)

    if lookup_uri.startswith(data_uri):
        return LookupTarget(uri=lookup_uri, level=LookupLevel.DATA, query_uri=lookup_uri)

    raise UnsupportedLookupTargetError(lookup_uri)
