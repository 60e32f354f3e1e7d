from typing import Any, Dict, List
import logging

from .types import Account, AdClient, AdUnit, CustomChannel, SavedReport, UrlChannel

logger = logging.getLogger(__name__)


def from_google_account(google_account: Dict[str, Any]) -> Account:
    """
    Create an Account, including any sub-account tree, from an API response.

    Args:
        google_account: Dictionary containing account data from the AdSense API

    Returns:
        Account instance populated with the data from the dictionary
    """
    return Account(
        account_id=google_account.get('id'),
        name=google_account.get('name'),
        premium=google_account.get('premium'),
        timezone=google_account.get('timezone'),
        sub_accounts=[from_google_account(sub) for sub in google_account.get('subAccounts') or []],
    )


def from_google_ad_client(google_ad_client: Dict[str, Any]) -> AdClient:
    return AdClient(
        ad_client_id=google_ad_client.get('id'),
        product_code=google_ad_client.get('productCode'),
        supports_reporting=bool(google_ad_client.get('supportsReporting')),
    )


def from_google_ad_unit(google_ad_unit: Dict[str, Any]) -> AdUnit:
    return AdUnit(
        ad_unit_id=google_ad_unit.get('id'),
        code=google_ad_unit.get('code'),
        name=google_ad_unit.get('name'),
        status=google_ad_unit.get('status'),
    )


def from_google_custom_channel(google_channel: Dict[str, Any]) -> CustomChannel:
    return CustomChannel(
        custom_channel_id=google_channel.get('id'),
        code=google_channel.get('code'),
        name=google_channel.get('name'),
    )


def from_google_url_channel(google_channel: Dict[str, Any]) -> UrlChannel:
    return UrlChannel(
        url_channel_id=google_channel.get('id'),
        url_pattern=google_channel.get('urlPattern'),
    )


def from_google_saved_report(google_report: Dict[str, Any]) -> SavedReport:
    return SavedReport(
        saved_report_id=google_report.get('id'),
        name=google_report.get('name'),
    )


def format_account_tree(account: Account, level: int = 0) -> List[str]:
    """
    Render an account and its sub-accounts, indenting two spaces per level.

    Args:
        account: Root of the tree to render
        level: Depth of the root account

    Returns:
        One line per account, depth-first
    """
    lines = [f"{'  ' * level}{account} was found."]
    for sub_account in account.sub_accounts:
        lines.extend(format_account_tree(sub_account, level + 1))
    return lines
