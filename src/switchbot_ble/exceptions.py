"""Exceptions raised by the SwitchBot BLE package."""

from __future__ import annotations


class SwitchBotError(Exception):
    """Base exception for all SwitchBot BLE errors."""


class BLEConnectionError(SwitchBotError):
    """Connecting to or writing to the device failed."""


class BLETimeoutError(SwitchBotError):
    """No response arrived within the allotted time."""


class ProtocolError(SwitchBotError):
    """Device response did not follow the expected protocol."""


class InvalidResponseError(ProtocolError):
    """Response opcode or length does not match any accepted acknowledgement."""

    def __init__(self, response: bytes, message: str | None = None):
        self.response = bytes(response)
        super().__init__(message or f"The device returned an error: 0x{self.hex}")

    @property
    def hex(self) -> str:
        """Raw response bytes as a lowercase hex string."""
        return self.response.hex()


class DecodeError(SwitchBotError):
    """Payload for a known model could not be decoded."""

    def __init__(self, model: int, data: bytes, reason: str):
        self.model = model
        self.data = bytes(data)
        self.reason = reason
        super().__init__(f"Cannot decode model 0x{model:02x} payload {self.data.hex()}: {reason}")


class LengthMismatchError(DecodeError):
    """Payload length does not match the model's layout."""

    def __init__(self, model: int, data: bytes, expected: tuple[int, ...]):
        self.expected = expected
        wanted = " or ".join(str(n) for n in expected)
        super().__init__(model, data, f"length mismatch: got {len(data)} bytes, expected {wanted}")


class UnknownModelError(SwitchBotError):
    """Model identifier is not present in the codec table."""

    def __init__(self, model: int):
        self.model = model
        super().__init__(f"Unknown model identifier: 0x{model:02x}")


class UnsupportedActionError(SwitchBotError):
    """Model does not support the requested action."""


class ValidationError(SwitchBotError):
    """Caller-supplied argument violates a declared rule.

    Attributes:
        code: Machine-readable code such as ``VALUE_OVERFLOW``
        name: Offending field name (None for the argument object itself)
    """

    def __init__(self, code: str, message: str, name: str | None = None):
        self.code = code
        self.name = name
        super().__init__(message)
