import pytest
import sys
from datetime import date
from pathlib import Path
from unittest.mock import Mock

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def mock_adsense_service():
    """Mock AdSense v1.4 service for testing."""
    return Mock()


@pytest.fixture
def mock_dfareporting_service():
    """Mock DFA Reporting service for testing."""
    return Mock()


@pytest.fixture
def sample_date_range():
    """Three day range used by report tests."""
    from google_api_samples.reports import DateRange
    return DateRange(date(2024, 1, 1), date(2024, 1, 3))


@pytest.fixture
def sample_report_response():
    """Sample AdSense reports.generate response with a missing day."""
    return {
        "kind": "adsense#report",
        "totalMatchedRows": "2",
        "headers": [
            {"name": "DATE", "type": "DIMENSION"},
            {"name": "PAGE_VIEWS", "type": "METRIC_TALLY"},
            {"name": "EARNINGS", "type": "METRIC_CURRENCY", "currency": "USD"}
        ],
        "rows": [
            ["2024-01-01", "120", "1.50"],
            ["2024-01-03", "98", "0.75"]
        ],
        "totals": ["", "218", "2.25"],
        "averages": ["", "109", "1.12"]
    }


@pytest.fixture
def sample_account_response():
    """Sample AdSense account with a sub-account tree."""
    return {
        "id": "pub-1234567890",
        "name": "Main Account",
        "premium": False,
        "timezone": "America/New_York",
        "subAccounts": [
            {
                "id": "pub-1111111111",
                "name": "Child Account",
                "subAccounts": [{"id": "pub-2222222222", "name": "Grandchild Account"}]
            }
        ]
    }


@pytest.fixture
def credential_cache(tmp_path):
    """Credential cache writing into a temporary directory."""
    from google_api_samples.auth import CredentialCache
    return CredentialCache(directory=str(tmp_path / "auth"), application_name="tests")

