from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TypedDict

import requests

from geodetect.exceptions import OperationFailed, TimedOut

logger = logging.getLogger(__name__)

# Operations report "success", rasters and uploads "ready"
SUCCESS_STATUSES = ("success", "ready")
FAILURE_STATUSES = ("failed",)
# Fraction of the poll interval we wait before the first check
FIRST_POLL_DELAY = 0.1


class OperationResponse(TypedDict):
    operation_id: str
    poll_interval: float


class OperationPoller:
    """
    Polls an operation until it reaches a terminal status

    Args:
        fetch: called with the operation id, returns the status response (already
            checked to be a 2xx one) of the operation
        operation_id: The id of the operation to wait for
        poll_interval: Seconds between two status checks, as given by the server
        timeout: Seconds after which we stop polling and raise `TimedOut`
        sleep: sleep function, overridable for tests
        clock: monotonic clock function, overridable for tests
    """

    def __init__(
        self,
        fetch: Callable[[str], requests.Response],
        operation_id: str,
        poll_interval: float,
        timeout: float,
        sleep: Callable[[float], Any] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetch = fetch
        self.operation_id = operation_id
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def wait(self) -> dict[str, Any]:
        """
        Blocks until the operation succeeds, returning its last status body

        Raises:
            OperationFailed: the operation reached the 'failed' status
            TimedOut: the deadline passed while the operation was still running
        """
        deadline = self._clock() + self.timeout
        # Just sleep for a short while the first time
        self._sleep(self.poll_interval * FIRST_POLL_DELAY)
        while True:
            logger.info("Polling operation id %s" % self.operation_id)
            data = self.fetch(self.operation_id).json()
            status = data["status"]
            logger.info("status=%s" % status)
            if status in SUCCESS_STATUSES:
                return data
            if status in FAILURE_STATUSES:
                raise OperationFailed(self.operation_id, data.get("errors"))
            now = self._clock()
            if now >= deadline:
                raise TimedOut(self.operation_id, self.timeout)
            # Never sleep past the deadline, there is one last check right at it
            self._sleep(min(self.poll_interval, max(0, deadline - now)))
