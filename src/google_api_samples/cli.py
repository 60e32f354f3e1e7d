"""
Command line entry point for the Google API samples.

Usage:
    google-api-samples adsense --days 7 --max-page-size 50
    google-api-samples adsense --async --ad-client-id ca-pub-1234567890
    google-api-samples dfareporting --profile-id 1234
    google-api-samples clear-credentials
"""

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .auth import AuthManager, ClientSecrets, ClientSecretsStore, CredentialCache
from .exceptions import GoogleApiSamplesError
from .paging import DEFAULT_ROW_LIMIT
from .reports import DateRange
from .samples import ManagementApiConsumer, run_async_adsense_calls, run_dfareporting_calls
from .services.adsense import (
    ADSENSE_API_NAME, ADSENSE_API_VERSION, ADSENSE_SCOPE_READONLY, AdSenseApiService, AsyncAdSenseApiService
)
from .services.dfareporting import (
    DFAREPORTING_API_NAME, DFAREPORTING_API_VERSION, DFAREPORTING_SCOPE, DfaReportingApiService
)

logger = logging.getLogger(__name__)

ADSENSE_STORAGE_NAME = "google.samples.python.adsense"
DFAREPORTING_STORAGE_NAME = "google.samples.python.dfareporting"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class SampleConfig:
    """
    Settings for one run of a sample command.
    Args:
        command: Sub-command to run ('adsense', 'dfareporting', 'clear-credentials').
        max_page_size: Items requested per page from list endpoints.
        row_limit: Maximum report rows read through pagination.
        days: Length of the report date range, ending today.
        ad_client_id: Ad client to report on; defaults to the first one found.
        profile_id: DFA Reporting profile; defaults to the first one found.
        client_secrets: Path to client.dat or a downloaded client secrets JSON file.
        storage_name: Overrides the credential cache entry name.
        non_interactive: Never prompt or open a browser.
        fill_gaps: Insert placeholder rows for days without data.
        use_async: Run the aiogoogle-based AdSense walkthrough.
        download: Print the generated DFA report file.
        log_level: Root logging level.
    """
    command: str
    max_page_size: int = 50
    row_limit: int = DEFAULT_ROW_LIMIT
    days: int = 7
    ad_client_id: Optional[str] = None
    profile_id: Optional[str] = None
    client_secrets: Optional[str] = None
    storage_name: Optional[str] = None
    non_interactive: bool = False
    fill_gaps: bool = True
    use_async: bool = False
    download: bool = True
    log_level: str = "WARNING"


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--max-page-size", type=_positive_int, default=50,
                        help="Maximum number of items requested per page")
    common.add_argument("--client-secrets", default=os.getenv("GOOGLE_SAMPLES_CLIENT_SECRETS"),
                        help="Path to client.dat or a client secrets JSON file")
    common.add_argument("--storage-name", help="Name of the cached credential entry")
    common.add_argument("--non-interactive", action="store_true",
                        help="Fail instead of prompting for credentials or consent")
    common.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging level")

    parser = argparse.ArgumentParser(prog="google-api-samples", description="Google API client samples")
    subparsers = parser.add_subparsers(dest="command", required=True)

    adsense = subparsers.add_parser("adsense", parents=[common], help="AdSense Management API walkthrough")
    adsense.add_argument("--ad-client-id", help="Ad client to report on")
    adsense.add_argument("--days", type=_positive_int, default=7, help="Report on this many past days")
    adsense.add_argument("--row-limit", type=_positive_int, default=DEFAULT_ROW_LIMIT,
                         help="Maximum report rows read through pagination")
    adsense.add_argument("--no-fill-gaps", dest="fill_gaps", action="store_false",
                         help="Do not insert placeholder rows for days without data")
    adsense.add_argument("--async", dest="use_async", action="store_true", help="Use the async client")

    dfareporting = subparsers.add_parser("dfareporting", parents=[common], help="DFA Reporting API walkthrough")
    dfareporting.add_argument("--profile-id", help="User profile to use")
    dfareporting.add_argument("--days", type=_positive_int, default=7, help="Report on this many past days")
    dfareporting.add_argument("--no-download", dest="download", action="store_false",
                              help="Do not print the generated report file")

    subparsers.add_parser("clear-credentials", parents=[common], help="Delete cached credentials")
    return parser


def parse_config(argv: Optional[Sequence[str]] = None) -> SampleConfig:
    args = vars(build_parser().parse_args(argv))
    fields = SampleConfig.__dataclass_fields__
    return SampleConfig(**{key: value for key, value in args.items() if key in fields})


def _is_json_secrets(path: Optional[str]) -> bool:
    return bool(path) and path.endswith(".json")


def load_client_secrets(config: SampleConfig) -> ClientSecrets:
    if _is_json_secrets(config.client_secrets):
        return ClientSecrets.from_json_file(config.client_secrets)
    prompt = None if config.non_interactive else input
    return ClientSecretsStore(config.client_secrets).ensure_full(prompt=prompt)


def build_auth_manager(config: SampleConfig, scopes: List[str], storage_name: str) -> AuthManager:
    return AuthManager(
        client_secrets=load_client_secrets(config),
        scopes=scopes,
        cache=CredentialCache(),
        storage_name=config.storage_name or storage_name,
        interactive=not config.non_interactive,
    )


def run_adsense(config: SampleConfig) -> None:
    auth = build_auth_manager(config, [ADSENSE_SCOPE_READONLY], ADSENSE_STORAGE_NAME)
    date_range = DateRange.last_days(config.days)

    if config.use_async:
        asyncio.run(_run_adsense_async(auth, config, date_range))
        return

    adsense = AdSenseApiService(auth.get_service(ADSENSE_API_NAME, ADSENSE_API_VERSION), config.max_page_size)
    consumer = ManagementApiConsumer(
        adsense, date_range, page_size=config.max_page_size,
        row_limit=config.row_limit, fill_gaps=config.fill_gaps
    )
    consumer.run_calls(config.ad_client_id)


async def _run_adsense_async(auth: AuthManager, config: SampleConfig, date_range: DateRange) -> None:
    async with auth.get_async_service(ADSENSE_API_NAME, ADSENSE_API_VERSION) as (aiogoogle, api):
        adsense = AsyncAdSenseApiService(aiogoogle, api, config.max_page_size)
        await run_async_adsense_calls(
            adsense, date_range, config.ad_client_id, page_size=config.max_page_size,
            row_limit=config.row_limit, fill_gaps=config.fill_gaps
        )


def run_dfareporting(config: SampleConfig) -> None:
    auth = build_auth_manager(config, [DFAREPORTING_SCOPE], DFAREPORTING_STORAGE_NAME)
    dfareporting = DfaReportingApiService(auth.get_service(DFAREPORTING_API_NAME, DFAREPORTING_API_VERSION))
    run_dfareporting_calls(
        dfareporting, DateRange.last_days(config.days), config.profile_id,
        max_page_size=config.max_page_size, download=config.download,
    )


def run_clear_credentials(config: SampleConfig) -> None:
    cache = CredentialCache()
    names = [config.storage_name] if config.storage_name else [ADSENSE_STORAGE_NAME, DFAREPORTING_STORAGE_NAME]
    for name in names:
        if cache.delete(name):
            print(f"Removed cached credential {name}")
    if not _is_json_secrets(config.client_secrets) and ClientSecretsStore(config.client_secrets).clear():
        print("Removed client credentials")


COMMANDS = {
    "adsense": run_adsense,
    "dfareporting": run_dfareporting,
    "clear-credentials": run_clear_credentials,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = parse_config(argv)
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        COMMANDS[config.command](config)
    except GoogleApiSamplesError as e:
        logger.error("%s failed: %s", config.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
