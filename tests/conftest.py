"""
Shared fixtures: a fixed clock, canned API rows and a mocked API resource.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError


@pytest.fixture
def now():
    return datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def date_page_rows():
    """Three [date, page] rows over two pages and two days."""
    return [
        {'keys': ['2024-01-03', 'https://example.com/blog/a'], 'clicks': 5.0, 'impressions': 50.0,
         'ctr': 0.1, 'position': 3.2},
        {'keys': ['2024-01-02', 'https://example.com/blog/a'], 'clicks': 2.0, 'impressions': 30.0,
         'ctr': 0.0667, 'position': 4.1},
        {'keys': ['2024-01-03', 'https://example.com/'], 'clicks': 1.0, 'impressions': 40.0,
         'ctr': 0.025, 'position': 7.5},
    ]


@pytest.fixture
def page_rows():
    """[page] rows sorted by descending clicks, as the API returns them."""
    return [
        {'keys': ['https://example.com/a'], 'clicks': 8, 'impressions': 100, 'ctr': 0.08, 'position': 2.0},
        {'keys': ['https://example.com/b'], 'clicks': 2, 'impressions': 40, 'ctr': 0.05, 'position': 5.0},
        {'keys': ['https://example.com/c'], 'clicks': 0, 'impressions': 60, 'ctr': 0.0, 'position': 9.0},
    ]


def make_resource(rows=None, sites=None, sitemaps=None):
    resource = MagicMock()
    resource.searchanalytics.return_value.query.return_value.execute.return_value = {'rows': rows or []}
    resource.sites.return_value.list.return_value.execute.return_value = {
        'siteEntry': [{'siteUrl': s, 'permissionLevel': 'siteOwner'} for s in sites or []]
    }
    resource.sitemaps.return_value.list.return_value.execute.return_value = {
        'sitemap': [{'path': p} for p in sitemaps or []]
    }
    return resource


@pytest.fixture
def resource_factory():
    return make_resource


def request_body(resource):
    """Returns the body of the last search analytics query sent to the resource."""
    return resource.searchanalytics.return_value.query.call_args.kwargs['body']


@pytest.fixture
def last_request():
    return request_body


@pytest.fixture
def http_error():
    """Builds the HttpError the API client raises for a failed call."""
    def _http_error(status=500):
        return HttpError(httplib2.Response({'status': status}), b'backend error')
    return _http_error
