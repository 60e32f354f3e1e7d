from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Account:
    """
    Represents an AdSense account and, when fetched as a tree, its sub-accounts.
    Args:
        account_id: Unique identifier of the account.
        name: Display name of the account.
        premium: Whether the account is a premium account.
        timezone: Account time zone.
        sub_accounts: Child accounts, populated by get_account_tree.
    """
    account_id: Optional[str] = None
    name: Optional[str] = None
    premium: Optional[bool] = None
    timezone: Optional[str] = None
    sub_accounts: List["Account"] = field(default_factory=list)

    def __str__(self):
        return f"Account with ID \"{self.account_id}\" and name \"{self.name}\""


@dataclass
class AdClient:
    """
    Represents an ad client (one product an account participates in).
    Args:
        ad_client_id: Unique identifier, e.g. 'ca-pub-1234567890'.
        product_code: Product this ad client belongs to (AFC, AFS, ...).
        supports_reporting: Whether reports can be generated for it.
    """
    ad_client_id: Optional[str] = None
    product_code: Optional[str] = None
    supports_reporting: bool = False

    def __str__(self):
        return f"Ad client for product \"{self.product_code}\" with ID \"{self.ad_client_id}\""


@dataclass
class AdUnit:
    ad_unit_id: Optional[str] = None
    code: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None

    def __str__(self):
        return f"Ad unit with code \"{self.code}\", name \"{self.name}\" and status \"{self.status}\""


@dataclass
class CustomChannel:
    custom_channel_id: Optional[str] = None
    code: Optional[str] = None
    name: Optional[str] = None

    def __str__(self):
        return f"Custom channel with code \"{self.code}\" and name \"{self.name}\""


@dataclass
class UrlChannel:
    url_channel_id: Optional[str] = None
    url_pattern: Optional[str] = None

    def __str__(self):
        return f"URL channel with URL pattern \"{self.url_pattern}\""


@dataclass
class SavedReport:
    saved_report_id: Optional[str] = None
    name: Optional[str] = None

    def __str__(self):
        return f"Saved report with ID \"{self.saved_report_id}\" and name \"{self.name}\""
