from __future__ import annotations

import logging
import os
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Generic, Iterator, TypeVar
from urllib.parse import urlencode, urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from geodetect.exceptions import APIError
from geodetect.polling import OperationPoller, OperationResponse
from geodetect.transport import send
from geodetect.uploads import StagedUpload, UploadPayload, check_upload_file, upload_to_blobstore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.picterra.ch/public/api/v2/"
API_KEY_ENV = "GEODETECT_API_KEY"
BASE_URL_ENV = "GEODETECT_BASE_URL"


def _get_distr_name():
    return "geodetect"


def _get_version() -> str:
    try:
        return version(_get_distr_name())
    except PackageNotFoundError:
        return "no_version"


def _check_resp_is_ok(resp: requests.Response, msg: str = "Error from API") -> None:
    """
    Raises APIError unless the response has a 2xx status code

    This has to run before the body is parsed, as a streamed body can only be read once.
    """
    if not 200 <= resp.status_code < 300:
        raise APIError(
            "%s: status code %d" % (msg, resp.status_code), resp.status_code, resp.text
        )


class _RequestsSession(requests.Session):
    """
    Override requests session to to implement a global session timeout
    """

    def __init__(self, *args, **kwargs):
        self.timeout = kwargs.pop("timeout")
        super().__init__(*args, **kwargs)
        self.headers.update(
            {
                "User-Agent": "%s-python/%s %s"
                % (_get_distr_name(), _get_version(), self.headers["User-Agent"])
            }
        )

    def request(self, *args, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(*args, **kwargs)


T = TypeVar("T")


class ResultsPage(Generic[T]):
    """
    One page of a paginated list returned by the API

    List endpoints return their objects splitted in pages of a fixed
    dimension. Once you have a ResultsPage you can:
    * check its length with `len()` (eg `len(page)`)
    * access a single element with the index operator `[]` (eg `page[5]`)
    * turn it into a list of dictionaries with  `list()` (eg `list(page)`)
    * get the next page with `.next()`; this returns None on the last page
    """

    def __init__(self, url: str, fetch: Callable[[str], requests.Response]):
        resp = fetch(url)
        _check_resp_is_ok(resp)
        r: dict[str, Any] = resp.json()
        next_url: str | None = r["next"]
        results: list[T] = r["results"]

        self._fetch = fetch
        self._next_url = next_url
        self._results = results
        self._url = url

    def next(self) -> ResultsPage[T] | None:
        return ResultsPage(self._next_url, self._fetch) if self._next_url else None

    def __len__(self) -> int:
        return len(self._results)

    def __getitem__(self, key: int) -> T:
        return self._results[key]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._results))

    def __str__(self) -> str:
        return f"{len(self._results)} results from {self._url}"


class BaseAPIClient:
    """
    Transport, polling and upload plumbing shared by the API calls
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = 30,
        operation_timeout: float = 3600,
        max_retries: int = 0,
        backoff_factor: float = 10,
    ):
        """
        Credentials and base url are resolved once, here: an explicit argument wins,
        then the GEODETECT_API_KEY / GEODETECT_BASE_URL environment variables, then
        (base url only) the public API default.

        Args:
            api_key: the API key used to authenticate to the API
            base_url: the API base url, ending in the API version path
            timeout: number of seconds before a request to the API times out
            operation_timeout: max number of seconds to wait for an asynchronous
                operation (upload processing, training, detection) to complete
            max_retries: max attempts when ecountering gateway issues or throttles;
                0 (the default) disables automatic retries
            backoff_factor: factor used in the backoff algorithm; see retry_strategy comment below
        """
        if base_url is None:
            base_url = os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)
        if api_key is None:
            api_key = os.environ.get(API_KEY_ENV, None)
        if not api_key:
            raise APIError(
                "api_key is not given and %s environment variable is not defined" % API_KEY_ENV
            )
        if not base_url.endswith("/"):
            base_url += "/"
        logger.info(
            "Using base_url=%s; %d max retries, %s backoff, %s timeout and %s operation timeout.",
            base_url,
            max_retries,
            backoff_factor,
            timeout,
            operation_timeout,
        )
        self.base_url = base_url
        self.operation_timeout = operation_timeout
        # Session default timeout applies to API calls only, storage transfers
        # go through plain requests (see uploads.py)
        self.sess = _RequestsSession(timeout=timeout)
        # Retry (opt-in): the HTTP codes for throttling (429) plus possible gateway problems
        # (50*), for GET only as the other verbs are not idempotent; the algorithm is
        # {<backoff_factor> * (2 **<retries-1>}; once retries are exhausted the last
        # response is returned, so its status ends up in an APIError
        if max_retries > 0:
            retry_strategy = Retry(
                total=max_retries,
                status_forcelist=[429, 502, 503, 504],
                backoff_factor=backoff_factor,
                allowed_methods=["GET"],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self.sess.mount("https://", adapter)
            self.sess.mount("http://", adapter)
        # Authentication
        self.sess.headers.update({"X-Api-Key": api_key})

    def _full_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        url = urljoin(self.base_url, path.lstrip("/"))
        if not params:
            return url
        else:
            qstr = urlencode(params)
            return "%s?%s" % (url, qstr)

    def _request(
        self,
        path: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        internal: bool = True,
        **kwargs,
    ) -> requests.Response:
        """
        Sends a request either to the API or to an arbitrary URL

        Args:
            path: a path relative to the API base url if `internal`, an absolute URL otherwise
            method: HTTP verb
            headers: extra headers for this request
            internal: when True the request is authenticated with the API key,
                when False (eg pre-signed storage URLs) no credential is sent
            kwargs: passed to `requests` (json, data, params, stream, ...)
        """
        if internal:
            return send(method, self._full_url(path), self.sess, headers=headers, **kwargs)
        return send(method, path, headers=headers, **kwargs)

    def _get_operation_response(self, operation_id: str) -> requests.Response:
        resp = self._request("operations/%s/" % operation_id)
        _check_resp_is_ok(resp, "Failure getting operation %s" % operation_id)
        return resp

    def _wait_until_operation_completes(
        self, operation_response: OperationResponse
    ) -> dict[str, Any]:
        """Polls an operation an returns its data"""
        poller = OperationPoller(
            self._get_operation_response,
            operation_response["operation_id"],
            operation_response["poll_interval"],
            self.operation_timeout,
        )
        return poller.wait()

    def _staged_upload(
        self,
        initiate_path: str,
        commit_path: str,
        payload: UploadPayload,
        initiate_body: dict[str, Any] | None = None,
        commit_body: dict[str, Any] | None = None,
        id_field: str = "upload_id",
    ) -> tuple[str, dict[str, Any]]:
        """
        Moves a payload to the API: get an upload URL, send the payload there,
        commit the upload and wait for the server to process it

        Args:
            initiate_path: endpoint returning the upload url and id
            commit_path: commit endpoint, with an `{upload_id}` placeholder
            payload: local filename to stream, or JSON-serializable object
            initiate_body: optional JSON metadata for the initiate call
            commit_body: optional JSON body for the commit call
            id_field: name of the id field in the initiate response

        Returns:
            The upload (or resource) id and the completed operation data
        """
        if not isinstance(payload, (dict, list)):
            check_upload_file(payload)
        # Get upload URL
        resp = self._request(initiate_path, "POST", json=initiate_body)
        _check_resp_is_ok(resp, "Failure obtaining an upload")
        upload = StagedUpload.from_response(resp.json(), id_field)
        # Upload to blobstore
        upload_to_blobstore(upload.upload_url, payload)
        # Commit upload
        resp = self._request(
            commit_path.format(upload_id=upload.upload_id), "POST", json=commit_body
        )
        _check_resp_is_ok(resp, "Failure committing upload %s" % upload.upload_id)
        # Poll for operation completion
        operation = self._wait_until_operation_completes(resp.json())
        return upload.upload_id, operation

    def _return_results_page(
        self, resource_endpoint: str, params: dict[str, Any] | None = None
    ) -> ResultsPage:
        if params is None:
            params = {}
        if "page_number" not in params:
            params["page_number"] = 1

        url = self._full_url("%s/" % resource_endpoint, params=params)
        # `next` links are absolute URLs, so pages are fetched as-is with the session
        return ResultsPage(url, lambda u: send("GET", u, self.sess))

    def _paginate_through_list(
        self, resource_endpoint: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        data: list[dict[str, Any]] = []
        page: ResultsPage | None = self._return_results_page(resource_endpoint, params)
        while page is not None:
            logger.debug("Fetched %s", page)
            data += list(page)
            page = page.next()
        return data

    def get_operation(self, operation_id: str) -> dict[str, Any]:
        """
        Returns the current data of an operation, without waiting for it

        Args:
            operation_id: The id of the operation
        """
        return self._get_operation_response(operation_id).json()
