from urllib.parse import urljoin

import responses
from responses import matchers

from geodetect import GeodetectClient


def _add_api_response(
    path, verb=responses.GET, json=None, match=None, body=None, status=None
):
    if status:
        expected_status = status
    else:
        if verb == responses.GET:
            expected_status = 200
        elif verb == responses.POST:
            expected_status = 201
        elif verb == responses.PUT:
            expected_status = 204
        elif verb == responses.DELETE:
            expected_status = 204
    match_list = [matchers.header_matcher({"X-Api-Key": API_KEY})]
    if match:
        match_list.append(match)
    return responses.add(
        verb,
        path,
        body=body,
        json=json,
        match=match_list,
        status=expected_status,
    )


def _client(monkeypatch, max_retries=0, timeout=1, **kwargs):
    monkeypatch.setenv("GEODETECT_BASE_URL", TEST_API_URL)
    monkeypatch.setenv("GEODETECT_API_KEY", API_KEY)
    return GeodetectClient(timeout=timeout, max_retries=max_retries, **kwargs)


def api_url(path):
    return urljoin(TEST_API_URL, path)


def calls_to(url, method=None):
    """The recorded `responses` calls whose URL (without query string) is `url`"""
    return [
        c for c in responses.calls
        if c.request.url.split("?")[0] == url and (method is None or c.request.method == method)
    ]


def add_mock_operations_responses(*statuses, operation_id=None, **kwargs):
    """Registers one status answer per given status, returned in order"""
    for status in statuses:
        data = {"type": "mock_operation_type", "status": status}
        data.update(kwargs)
        _add_api_response(api_url("operations/%s/" % (operation_id or OPERATION_ID)), json=data)


TEST_API_URL = "http://example.com/public/api/v2/"
TEST_STORAGE_URL = "http://storage.example.com/"
API_KEY = "1234"
TEST_POLL_INTERVAL = 0.1
OPERATION_ID = "d2b94adf-85f2-4c3d-9ba9-0996f25bc161"
OP_RESP = {"operation_id": OPERATION_ID, "poll_interval": TEST_POLL_INTERVAL}
DETECTOR_ID = "123e4567-e89b-12d3-a456-426655440000"
RASTER_ID = "f1de9a34-07f3-4ebc-989b-fe1e8e140183"
UPLOAD_ID = "7fa216e4-12ea-4bc3-bc58-0cc72c0187c9"
FOLDER_ID = "fff1f673-f1eb-4a92-83a5-7fba55e66a5c"
