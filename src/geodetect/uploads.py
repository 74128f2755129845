"""
Transfers to and from the pre-signed storage URLs handed out by the API

These requests bypass the client session on purpose: they must not carry the
API key, and the session timeout is disabled (requests default) since moving
large rasters can take a long time.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Union

import requests

from geodetect.exceptions import APIError, TransportError, ValidationError
from geodetect.transport import send

logger = logging.getLogger(__name__)

CHUNK_SIZE_BYTES = 8192  # 8 KiB

# Either the path of a local file, or a JSON-serializable object
UploadPayload = Union[str, "os.PathLike[str]", dict, list]


@dataclass
class StagedUpload:
    """Where to send a payload and how to refer to it when committing"""

    upload_id: str
    upload_url: str

    @classmethod
    def from_response(cls, data: dict[str, Any], id_field: str = "upload_id") -> StagedUpload:
        return cls(upload_id=str(data[id_field]), upload_url=str(data["upload_url"]))


def check_upload_file(filename: str | os.PathLike[str]):
    if not (os.path.exists(filename) and os.path.isfile(filename)):
        raise ValidationError("filename", str(filename), "an existing regular file")


def _check_storage_resp(resp: requests.Response):
    if not 200 <= resp.status_code < 300:
        raise APIError(
            "Error from storage: status code %d" % resp.status_code,
            resp.status_code,
            resp.text,
        )


def upload_to_blobstore(upload_url: str, payload: UploadPayload):
    """
    PUTs a payload to a pre-signed upload URL

    Files are streamed from disk rather than read in memory
    (https://requests.readthedocs.io/en/latest/user/advanced/#streaming-uploads),
    anything else is sent as JSON.

    Raises:
        APIError: storage answered with a non-2xx status; this is never retried as a
            partial write to a pre-signed URL cannot be resumed
    """
    if isinstance(payload, (str, os.PathLike)):
        check_upload_file(payload)
        # binary recommended by requests stream upload
        with open(payload, "rb") as f:
            logger.debug("Opening and streaming to upload file %s" % payload)
            resp = send("PUT", upload_url, data=f)
    else:
        resp = send("PUT", upload_url, json=payload)
    try:
        _check_storage_resp(resp)
    except APIError:
        logger.error("Error when uploading to blobstore %s" % upload_url)
        raise


def download_to_file(url: str, filename: str | os.PathLike[str]):
    """Streams the content of an (unauthenticated) URL to a local file, chunk by chunk"""
    with send("GET", url, stream=True) as r:
        _check_storage_resp(r)
        with open(filename, "wb+") as f:
            logger.debug("Downloading to file %s.." % filename)
            try:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE_BYTES):
                    if chunk:  # filter out keep-alive new chunks
                        f.write(chunk)
            except requests.exceptions.RequestException as e:
                raise TransportError("Error when downloading %s: %s" % (url, e)) from e
