"""
Google API samples: paginated listings and reports, gap filling for sparse
time-series reports, and a local refresh-token cache for installed apps.
"""

from .paging import Page, iter_token_pages, iter_offset_pages, consume_pages
from .reports import ReportTable, DateRange, fill_date_gaps
from .auth import AuthManager, CredentialCache, StoredCredential, ClientSecrets, ClientSecretsStore

__version__ = "0.1.0"

__all__ = [
    # Pagination
    "Page",
    "iter_token_pages",
    "iter_offset_pages",
    "consume_pages",

    # Reports
    "ReportTable",
    "DateRange",
    "fill_date_gaps",

    # Authentication
    "AuthManager",
    "CredentialCache",
    "StoredCredential",
    "ClientSecrets",
    "ClientSecretsStore",
]
