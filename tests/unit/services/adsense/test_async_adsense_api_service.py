import pytest
from unittest.mock import AsyncMock, Mock

from aiogoogle.excs import HTTPError

from google_api_samples.exceptions import AdSenseNotFoundError, AdSensePermissionError
from google_api_samples.services.adsense import AsyncAdSenseApiService


def make_report_page(rows, total_matched_rows, headers=("DATE", "PAGE_VIEWS")):
    response = {"headers": [{"name": name} for name in headers], "rows": rows}
    if total_matched_rows is not None:
        response["totalMatchedRows"] = str(total_matched_rows)
    return response


@pytest.mark.unit
@pytest.mark.adsense
class TestAsyncAdSenseApiService:
    """Test cases for the aiogoogle-backed AdSense service."""

    @pytest.fixture
    def mock_aiogoogle(self):
        return AsyncMock()

    @pytest.fixture
    def mock_api(self):
        return Mock()

    @pytest.mark.asyncio
    async def test_list_accounts(self, mock_aiogoogle, mock_api):
        mock_aiogoogle.as_user.side_effect = [
            {"items": [{"id": "pub-1"}], "nextPageToken": "A"},
            {"items": [{"id": "pub-2"}]},
        ]

        accounts = await AsyncAdSenseApiService(mock_aiogoogle, mock_api, max_page_size=1).list_accounts()

        assert [a.account_id for a in accounts] == ["pub-1", "pub-2"]
        assert mock_aiogoogle.as_user.await_count == 2
        assert mock_api.accounts.list.call_args_list[1].kwargs == {"maxResults": 1, "pageToken": "A"}

    @pytest.mark.asyncio
    async def test_list_ad_clients_for_account(self, mock_aiogoogle, mock_api):
        mock_aiogoogle.as_user.return_value = {"items": [{"id": "ca-pub-1", "productCode": "AFC"}]}

        ad_clients = await AsyncAdSenseApiService(mock_aiogoogle, mock_api).list_ad_clients("pub-1")

        assert ad_clients[0].product_code == "AFC"
        assert mock_api.accounts.adclients.list.call_args.kwargs["accountId"] == "pub-1"

    @pytest.mark.asyncio
    async def test_generate_report_with_paging(self, mock_aiogoogle, mock_api, sample_date_range):
        mock_aiogoogle.as_user.side_effect = [
            make_report_page([["2024-01-01", "1"], ["2024-01-03", "3"]], 3),
            make_report_page([["2024-01-04", "4"]], 3),
        ]

        table = await AsyncAdSenseApiService(mock_aiogoogle, mock_api).generate_report_with_paging(
            "ca-pub-1", sample_date_range, page_size=2, fill_gaps=True
        )

        assert table.column_values("DATE") == ["2024-01-01", "2024-01-03", "2024-01-04", "2024-01-02"]
        starts = [c.kwargs["startIndex"] for c in mock_api.reports.generate.call_args_list]
        assert starts == [0, 2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, error", [(403, AdSensePermissionError), (404, AdSenseNotFoundError)])
    async def test_http_errors_are_translated(self, mock_aiogoogle, mock_api, status, error):
        mock_error_response = Mock()
        mock_error_response.status_code = status
        mock_aiogoogle.as_user.side_effect = HTTPError("failed", res=mock_error_response)

        with pytest.raises(error):
            await AsyncAdSenseApiService(mock_aiogoogle, mock_api).list_accounts()
