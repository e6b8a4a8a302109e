"""Command/response exchange with one connected device."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Protocol

from .exceptions import BLETimeoutError
from .protocol import Command, validate_ack_response

_LOGGER = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 5.0
RESYNC_WINDOW = 0.5


class CommandTransport(Protocol):
    """What a session needs from the connection it owns."""

    async def write_command(self, data: bytes) -> None: ...

    async def read_response(self, timeout: float = ...) -> bytes: ...

    def discard_notifications(self) -> int: ...


class SessionState(Enum):
    """Exchange state of a DeviceSession."""
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DeviceSession:
    """Correlates one outgoing command with the next notification.

    Exchanges are serialized: a second operate() call waits until the first
    one has resolved. Notifications left over from an earlier exchange are
    discarded before each write.

    After a timed-out exchange the device may still answer it, possibly while
    the next command is being written. The session is then out of sync: the
    next operate() waits RESYNC_WINDOW before discarding, and after its write
    keeps collecting notifications for RESYNC_WINDOW, using the last one
    received. Notifications arrive in order, so the reply to the current
    command follows any late reply to the previous one.

    There is no retry here; the caller decides what to do with a failure.
    """

    def __init__(self, connection: CommandTransport, timeout: float = DEFAULT_COMMAND_TIMEOUT):
        """Initialize session.

        Args:
            connection: Connection owned exclusively by this session
            timeout: Default per-exchange timeout in seconds (default: 5)
        """
        self._connection = connection
        self.timeout = timeout
        self.state = SessionState.IDLE
        self._lock = asyncio.Lock()
        self._out_of_sync = False

    @property
    def busy(self) -> bool:
        """Whether an exchange is in flight or queued."""
        return self._lock.locked()

    @property
    def out_of_sync(self) -> bool:
        """Whether the previous exchange timed out and may still be answered."""
        return self._out_of_sync

    async def operate(self, command: Command, timeout: float | None = None) -> None:
        """Send a command and wait for its acknowledgement.

        The timeout bounds the write and the response wait together. Time
        spent queued behind another exchange or settling after a timed-out
        one is not counted.

        Args:
            command: Command to send
            timeout: Override for the session timeout, in seconds

        Raises:
            BLEConnectionError: If the write fails (propagated unchanged)
            BLETimeoutError: If no response arrives in time
            InvalidResponseError: If the response opcode or length is not accepted
        """
        timeout = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()

        async with self._lock:
            resync = self._out_of_sync
            if resync:
                await asyncio.sleep(min(timeout, RESYNC_WINDOW))
            dropped = self._connection.discard_notifications()
            if dropped:
                _LOGGER.debug("Discarded %d stale notification(s)", dropped)

            self.state = SessionState.AWAITING_RESPONSE
            deadline = loop.time() + timeout
            _LOGGER.debug("Sending %s: %s", command.name, command.payload.hex())

            try:
                try:
                    await asyncio.wait_for(
                        self._connection.write_command(command.payload),
                        timeout=timeout,
                    )
                except asyncio.TimeoutError as e:
                    raise BLETimeoutError(
                        f"Write of {command.name} not confirmed within {timeout}s"
                    ) from e

                response = await self._connection.read_response(
                    timeout=max(deadline - loop.time(), 0.0)
                )
                if resync:
                    response = await self._latest_notification(response, deadline, loop)
                _LOGGER.debug("Response to %s: %s", command.name, response.hex())
                validate_ack_response(response, command)
            except BLETimeoutError:
                self._out_of_sync = True
                self.state = SessionState.FAILED
                raise
            except BaseException:
                self.state = SessionState.FAILED
                raise

            self._out_of_sync = False
            self.state = SessionState.SUCCEEDED

    async def _latest_notification(
            self,
            response: bytes,
            deadline: float,
            loop: asyncio.AbstractEventLoop,
    ) -> bytes:
        """Return the last notification received within the resync window."""
        window_end = min(loop.time() + RESYNC_WINDOW, deadline)
        while True:
            remaining = window_end - loop.time()
            if remaining <= 0:
                break
            try:
                later = await self._connection.read_response(timeout=remaining)
            except BLETimeoutError:
                break
            _LOGGER.debug("Dropping late reply %s", response.hex())
            response = later
        return response
