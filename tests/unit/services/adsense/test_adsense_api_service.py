import pytest
from datetime import date
from unittest.mock import Mock

from googleapiclient.errors import HttpError

from google_api_samples.exceptions import (
    AdSenseError, AdSenseNotFoundError, AdSensePermissionError, ValidationError
)
from google_api_samples.reports import DateRange
from google_api_samples.services.adsense import AdSenseApiService, Account
from google_api_samples.services.adsense.api_service import build_report_params
from google_api_samples.services.adsense.utils import format_account_tree


def make_report_page(rows, total_matched_rows, headers=("DATE", "PAGE_VIEWS")):
    response = {"headers": [{"name": name} for name in headers], "rows": rows}
    if total_matched_rows is not None:
        response["totalMatchedRows"] = str(total_matched_rows)
    return response


def http_error(status):
    resp = Mock()
    resp.status = status
    return HttpError(resp=resp, content=b'error')


@pytest.mark.unit
@pytest.mark.adsense
class TestAdSenseListings:
    """Test cases for paginated AdSense listings."""

    def test_list_accounts_walks_every_page(self, mock_adsense_service):
        list_method = mock_adsense_service.accounts.return_value.list
        list_method.return_value.execute.side_effect = [
            {"items": [{"id": "pub-1", "name": "One"}], "nextPageToken": "A"},
            {"items": [{"id": "pub-2", "name": "Two"}]},
        ]

        accounts = AdSenseApiService(mock_adsense_service, max_page_size=1).list_accounts()

        assert [a.account_id for a in accounts] == ["pub-1", "pub-2"]
        assert list_method.call_args_list[0].kwargs == {"maxResults": 1}
        assert list_method.call_args_list[1].kwargs == {"maxResults": 1, "pageToken": "A"}

    def test_list_ad_clients_for_account(self, mock_adsense_service):
        list_method = mock_adsense_service.accounts.return_value.adclients.return_value.list
        list_method.return_value.execute.return_value = {
            "items": [{"id": "ca-pub-1", "productCode": "AFC", "supportsReporting": True}]
        }

        ad_clients = AdSenseApiService(mock_adsense_service).list_ad_clients("pub-1")

        assert ad_clients[0].ad_client_id == "ca-pub-1"
        assert ad_clients[0].supports_reporting is True
        assert list_method.call_args.kwargs["accountId"] == "pub-1"

    def test_list_ad_clients_default_account(self, mock_adsense_service):
        mock_adsense_service.adclients.return_value.list.return_value.execute.return_value = {"items": []}
        assert AdSenseApiService(mock_adsense_service).list_ad_clients() == []

    def test_list_ad_units(self, mock_adsense_service):
        list_method = mock_adsense_service.adunits.return_value.list
        list_method.return_value.execute.return_value = {
            "items": [{"id": "u1", "code": "123", "name": "Banner", "status": "ACTIVE"}]
        }

        ad_units = AdSenseApiService(mock_adsense_service).list_ad_units("ca-pub-1")

        assert str(ad_units[0]) == 'Ad unit with code "123", name "Banner" and status "ACTIVE"'
        assert list_method.call_args.kwargs["adClientId"] == "ca-pub-1"

    def test_list_custom_channels_for_ad_unit(self, mock_adsense_service):
        list_method = mock_adsense_service.adunits.return_value.customchannels.return_value.list
        list_method.return_value.execute.return_value = {"items": [{"id": "c1", "code": "9", "name": "Sports"}]}

        channels = AdSenseApiService(mock_adsense_service).list_custom_channels_for_ad_unit("ca-pub-1", "u1")

        assert channels[0].name == "Sports"
        assert list_method.call_args.kwargs["adUnitId"] == "u1"

    def test_list_url_channels(self, mock_adsense_service):
        mock_adsense_service.urlchannels.return_value.list.return_value.execute.return_value = {
            "items": [{"id": "x", "urlPattern": "example.com"}]
        }
        channels = AdSenseApiService(mock_adsense_service).list_url_channels("ca-pub-1")
        assert channels[0].url_pattern == "example.com"

    def test_list_saved_reports(self, mock_adsense_service):
        mock_adsense_service.reports.return_value.saved.return_value.list.return_value.execute.return_value = {
            "items": [{"id": "r1", "name": "Weekly"}]
        }
        reports = AdSenseApiService(mock_adsense_service).list_saved_reports()
        assert str(reports[0]) == 'Saved report with ID "r1" and name "Weekly"'

    def test_get_account_tree(self, mock_adsense_service, sample_account_response):
        get_method = mock_adsense_service.accounts.return_value.get
        get_method.return_value.execute.return_value = sample_account_response

        account = AdSenseApiService(mock_adsense_service).get_account_tree("pub-1234567890")

        get_method.assert_called_once_with(accountId="pub-1234567890", tree=True)
        assert format_account_tree(account) == [
            'Account with ID "pub-1234567890" and name "Main Account" was found.',
            '  Account with ID "pub-1111111111" and name "Child Account" was found.',
            '    Account with ID "pub-2222222222" and name "Grandchild Account" was found.',
        ]

    @pytest.mark.parametrize("status, error", [
        (403, AdSensePermissionError),
        (404, AdSenseNotFoundError),
        (500, AdSenseError),
    ])
    def test_http_errors_are_translated(self, mock_adsense_service, status, error):
        mock_adsense_service.accounts.return_value.list.return_value.execute.side_effect = http_error(status)
        with pytest.raises(error):
            AdSenseApiService(mock_adsense_service).list_accounts()

    def test_invalid_max_page_size(self, mock_adsense_service):
        with pytest.raises(ValidationError):
            AdSenseApiService(mock_adsense_service, max_page_size=0)


@pytest.mark.unit
@pytest.mark.adsense
class TestAdSenseReports:
    """Test cases for AdSense report generation."""

    def test_build_report_params(self, sample_date_range):
        params = build_report_params(
            "ca-pub-1", sample_date_range, ["EARNINGS"], ["DATE"], ["+DATE"], ["COUNTRY_CODE==US"]
        )
        assert params == {
            "startDate": "2024-01-01",
            "endDate": "2024-01-03",
            "filter": ["AD_CLIENT_ID==ca-pub-1", "COUNTRY_CODE==US"],
            "metric": ["EARNINGS"],
            "dimension": ["DATE"],
            "sort": ["+DATE"],
        }

    def test_build_report_params_without_ad_client(self, sample_date_range):
        params = build_report_params(None, sample_date_range, ["EARNINGS"], [], [])
        assert "filter" not in params

    def test_generate_report_fills_gaps(self, mock_adsense_service, sample_report_response, sample_date_range):
        generate = mock_adsense_service.reports.return_value.generate
        generate.return_value.execute.return_value = sample_report_response

        table = AdSenseApiService(mock_adsense_service).generate_report(
            "ca-pub-1", sample_date_range, fill_gaps=True
        )

        assert table.column_values("DATE") == ["2024-01-01", "2024-01-03", "2024-01-02"]
        assert generate.call_args.kwargs["filter"] == ["AD_CLIENT_ID==ca-pub-1"]

    def test_generate_report_with_paging(self, mock_adsense_service):
        generate = mock_adsense_service.reports.return_value.generate
        rows = [[f"2024-01-{day:02d}", str(day)] for day in range(1, 6)]
        generate.return_value.execute.side_effect = [
            make_report_page(rows[0:2], 5),
            make_report_page(rows[2:4], 5),
            make_report_page(rows[4:5], 5),
        ]

        table = AdSenseApiService(mock_adsense_service).generate_report_with_paging(
            "ca-pub-1", DateRange(date(2024, 1, 1), date(2024, 1, 5)), page_size=2
        )

        assert table.rows == rows
        assert [(c.kwargs["startIndex"], c.kwargs["maxResults"]) for c in generate.call_args_list] == [
            (0, 2), (2, 2), (4, 1)
        ]

    def test_generate_report_with_paging_respects_row_limit(self, mock_adsense_service, sample_date_range):
        generate = mock_adsense_service.reports.return_value.generate

        def respond(startIndex, maxResults, **kwargs):
            rows = [["2024-01-01", str(i)] for i in range(startIndex, startIndex + maxResults)]
            response = Mock()
            response.execute.return_value = make_report_page(rows, 100000)
            return response

        generate.side_effect = respond

        table = AdSenseApiService(mock_adsense_service).generate_report_with_paging(
            None, sample_date_range, page_size=1500
        )

        assert len(table.rows) == 5000
        assert generate.call_args_list[-1].kwargs["maxResults"] == 500

    def test_generate_report_with_paging_empty(self, mock_adsense_service, sample_date_range):
        mock_adsense_service.reports.return_value.generate.return_value.execute.return_value = \
            make_report_page([], 0)

        table = AdSenseApiService(mock_adsense_service).generate_report_with_paging(
            "ca-pub-1", sample_date_range, fill_gaps=True
        )

        assert table.is_empty()

    def test_generate_saved_report(self, mock_adsense_service):
        generate = mock_adsense_service.reports.return_value.saved.return_value.generate
        generate.return_value.execute.return_value = make_report_page([["2024-01-01", "3"]], 1)

        table = AdSenseApiService(mock_adsense_service).generate_saved_report("saved-1", page_size=10)

        assert table.rows == [["2024-01-01", "3"]]
        generate.assert_called_once_with(savedReportId="saved-1", startIndex=0, maxResults=10)

    def test_query_builder_runs_against_service(self, mock_adsense_service, sample_report_response):
        mock_adsense_service.reports.return_value.generate.return_value.execute.return_value = \
            sample_report_response

        table = (AdSenseApiService(mock_adsense_service).query()
                 .for_ad_client("ca-pub-1")
                 .between("2024-01-01", "2024-01-03")
                 .metrics("PAGE_VIEWS", "EARNINGS")
                 .execute())

        assert len(table.rows) == 2
        kwargs = mock_adsense_service.reports.return_value.generate.call_args.kwargs
        assert kwargs["metric"] == ["PAGE_VIEWS", "EARNINGS"]
        assert kwargs["dimension"] == ["DATE"]

    def test_consumer_errors_between_pages_are_not_translated(self, mock_adsense_service, sample_date_range):
        mock_adsense_service.reports.return_value.generate.return_value.execute.side_effect = [
            make_report_page([["2024-01-01", "1"]], 2),
            make_report_page([["2024-01-02", "2"]], 2),
        ]
        pages = AdSenseApiService(mock_adsense_service).iter_report_pages(
            "ca-pub-1", sample_date_range, page_size=1
        )

        next(pages)
        with pytest.raises(HttpError):
            pages.throw(http_error(500))

    def test_report_page_errors_are_translated(self, mock_adsense_service, sample_date_range):
        mock_adsense_service.reports.return_value.generate.return_value.execute.side_effect = [
            make_report_page([["2024-01-01", "1"]], 2),
            http_error(404),
        ]
        pages = AdSenseApiService(mock_adsense_service).iter_report_pages(
            "ca-pub-1", sample_date_range, page_size=1
        )

        next(pages)
        with pytest.raises(AdSenseNotFoundError):
            next(pages)

    def test_report_errors_are_translated(self, mock_adsense_service, sample_date_range):
        mock_adsense_service.reports.return_value.generate.return_value.execute.side_effect = http_error(403)
        with pytest.raises(AdSensePermissionError):
            AdSenseApiService(mock_adsense_service).generate_report_with_paging("ca-pub-1", sample_date_range)


@pytest.mark.unit
@pytest.mark.adsense
class TestAccountFormatting:

    def test_account_str(self):
        assert str(Account(account_id="pub-1", name="Main")) == 'Account with ID "pub-1" and name "Main"'
