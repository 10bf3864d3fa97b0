# src/taskmaster/core/connectivity.py

from __future__ import annotations

import logging

from .ports import TaskApi
from .reducer import ServerStatus

logger = logging.getLogger(__name__)


class ConnectivityProber:
    """
    Health-check gate for the backend.

    Transport failures do not raise from `probe()`: a non-200 answer, a timeout
    or a connection error all map to OFFLINE. The timeout bound comes from the
    API client.
    Retries are user-initiated only.
    """

    def __init__(self, api: TaskApi) -> None:
        self._api = api

    async def probe(self) -> ServerStatus:
        healthy = await self._api.check_health()
        status = ServerStatus.ONLINE if healthy else ServerStatus.OFFLINE
        logger.info("Probe result: %s", status.value)
        return status
