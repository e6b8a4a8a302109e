"""Shared fixtures: payloads captured from real devices."""

from __future__ import annotations

import pytest

from switchbot_ble.exceptions import BLETimeoutError


@pytest.fixture
def real_humidifier_service_data() -> bytes:
    """Humidifier advertisement: on, manual mode, 50%."""
    return bytes.fromhex("6580000032000000")


@pytest.fixture
def real_bot_service_data() -> bytes:
    """Bot advertisement: press mode, 100% battery."""
    return bytes.fromhex("480064")


@pytest.fixture
def real_meter_service_data() -> bytes:
    """Meter advertisement: 22.5C, 45% humidity, 88% battery."""
    return bytes.fromhex("54005805962d")


@pytest.fixture
def real_success_response() -> bytes:
    return b"\x01\x00\x00"


class FakeConnection:
    """Stand-in for BLEConnection that replays canned responses."""

    def __init__(self, responses: bytes | list[bytes] | None = None, write_error: Exception | None = None):
        if responses is None:
            self._responses: list[bytes] = []
        elif isinstance(responses, list):
            self._responses = responses[:]
        else:
            self._responses = [responses]
        self.write_error = write_error
        self.written: list[bytes] = []
        self.read_timeouts: list[float] = []
        self.discarded = 0
        self.pending: list[bytes] = []

    def notify(self, data: bytes) -> None:
        """Queue an unsolicited notification."""
        self.pending.append(data)

    def discard_notifications(self) -> int:
        dropped = len(self.pending)
        self.pending.clear()
        self.discarded += dropped
        return dropped

    async def write_command(self, data: bytes) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.written.append(data)

    async def read_response(self, timeout: float = 5.0) -> bytes:
        self.read_timeouts.append(timeout)
        if self.pending:
            return self.pending.pop(0)
        if not self._responses:
            raise BLETimeoutError(f"No response received within {timeout}s")
        return self._responses.pop(0)


@pytest.fixture
def fake_connection_factory():
    return FakeConnection
