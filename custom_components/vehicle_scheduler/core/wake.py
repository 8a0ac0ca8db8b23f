"""Wake-and-fetch with bounded polling."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ..const import WAKE_MAX_ATTEMPTS, WAKE_RETRY_DELAY_SECONDS
from ..exceptions import DeviceUnreachable
from ..models import InactivityMode, StateSnapshot
from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from .context import InactivityHint
    from .vehicle import VehicleClient


class WakeRetryController:
    """Makes sure the vehicle answers before a command is sent.

    A sleeping vehicle is woken with up to ``max_attempts`` wake signals,
    ``retry_delay`` seconds apart. Worst case this blocks the calling task for
    about max_attempts * retry_delay seconds.
    """

    def __init__(
        self,
        client: VehicleClient,
        inactivity: InactivityHint,
        max_attempts: int = WAKE_MAX_ATTEMPTS,
        retry_delay: float = WAKE_RETRY_DELAY_SECONDS,
    ) -> None:
        self.client = client
        self.inactivity = inactivity
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._logger = get_logger()

    async def async_ensure_awake_and_fetch(self) -> StateSnapshot:
        """Return a valid snapshot, waking the vehicle if needed.

        Raises:
            DeviceUnreachable: No valid snapshot after max_attempts wake attempts
        """
        self.inactivity.set_state(InactivityMode.AWAKE)

        snapshot = await self.client.async_query_state()
        if snapshot.valid:
            return snapshot

        self._logger.info("VEHICLE_ASLEEP_WAKING", max_attempts=self.max_attempts)

        for attempt in range(1, self.max_attempts + 1):
            await self.client.async_wake()
            snapshot = await self.client.async_query_state()
            if snapshot.valid:
                self._logger.info("VEHICLE_AWAKE", attempt=attempt)
                return snapshot

            self._logger.debug("WAKE_ATTEMPT_FAILED", attempt=attempt)
            if attempt < self.max_attempts:
                await asyncio.sleep(self.retry_delay)

        self._logger.warning("VEHICLE_UNREACHABLE", attempts=self.max_attempts)
        raise DeviceUnreachable(self.max_attempts)
