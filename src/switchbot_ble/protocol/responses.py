"""BLE response validation."""

from __future__ import annotations

from ..exceptions import InvalidResponseError
from .commands import Command


def validate_ack_response(data: bytes, command: Command) -> None:
    """Validate the acknowledgement for a command.

    The first response byte is an opcode that must be one of the command's
    accepted codes, and the response must have the expected length.

    Args:
        data: Raw response data
        command: Command that was sent

    Raises:
        InvalidResponseError: If response is empty, has the wrong length or
            carries an unaccepted opcode
    """
    if not data:
        raise InvalidResponseError(data, "The device returned an empty response")

    if command.response_length is not None and len(data) != command.response_length:
        raise InvalidResponseError(data)

    if data[0] not in command.accepted_codes:
        raise InvalidResponseError(data)
