"""BLE protocol commands for SwitchBot devices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ..models.enums import CurtainMode, HumidifierGear, ResponseCode


class CommandCode(IntEnum):
    """Leading bytes of SwitchBot commands."""

    REQUEST = 0x57             # Every command starts with this header

    # Bot-style commands: [0x57][0x01][action]
    BOT_ACTION = 0x01

    # Extended commands: [0x57][0x0F][sub-opcode...]
    EXTENDED = 0x0F
    CURTAIN = 0x45             # 0x57 0x0F 0x45 ...
    HUMIDIFIER = 0x43          # 0x57 0x0F 0x43 0x81 ...


class BotAction(IntEnum):
    """Third byte of bot-style commands."""

    PRESS = 0x00
    TURN_ON = 0x01
    TURN_OFF = 0x02
    DOWN = 0x03
    UP = 0x04


# Protocol constants
SERVICE_UUID = "cba20d00-224d-11e6-9fb8-0002a5d5c51b"
WRITE_CHARACTERISTIC_UUID = "cba20002-224d-11e6-9fb8-0002a5d5c51b"
NOTIFY_CHARACTERISTIC_UUID = "cba20003-224d-11e6-9fb8-0002a5d5c51b"

ADVERTISEMENT_SERVICE_UUID = "0000fd3d-0000-1000-8000-00805f9b34fb"
LEGACY_ADVERTISEMENT_SERVICE_UUID = "00000d00-0000-1000-8000-00805f9b34fb"
MANUFACTURER_ID = 0x0969  # 2409 decimal

RESPONSE_LENGTH = 3

BOT_ACCEPTED_CODES = frozenset({ResponseCode.SUCCESS, ResponseCode.SUCCESS_ALT})
CURTAIN_ACCEPTED_CODES = frozenset({ResponseCode.SUCCESS})

HUMIDIFIER_AUTO_LEVEL = 0x80
HUMIDIFIER_GEAR_LEVELS = {
    HumidifierGear.GEAR_1: 0x22,
    HumidifierGear.GEAR_2: 0x43,
    HumidifierGear.GEAR_3: 0x64,
}


@dataclass(frozen=True, slots=True)
class Command:
    """One operation request and the acknowledgements that complete it.

    Attributes:
        name: Action name, used in logs
        payload: Bytes written to the device
        accepted_codes: Response opcodes treated as success
        response_length: Required response length (None to accept any length)
    """

    name: str
    payload: bytes
    accepted_codes: frozenset[int]
    response_length: int | None = RESPONSE_LENGTH


def build_bot_command(action: BotAction) -> Command:
    """Build a bot-style command.

    Returns:
        Command bytes: [0x57][0x01][action]
    """
    return Command(
        name=action.name.lower(),
        payload=bytes([CommandCode.REQUEST, CommandCode.BOT_ACTION, action]),
        accepted_codes=BOT_ACCEPTED_CODES,
    )


def build_curtain_position_command(
        position: int,
        mode: CurtainMode | int = CurtainMode.DEFAULT,
) -> Command:
    """Build command to move a curtain to a position.

    Args:
        position: Target position percent (0 = open, 100 = closed)
        mode: Motor mode (0 = performance, 1 = silent, 0xFF = device default)

    Returns:
        Command bytes: [0x57][0x0F][0x45][0x01][0x05][mode][position]
    """
    return Command(
        name="run_to_position",
        payload=bytes([
            CommandCode.REQUEST,
            CommandCode.EXTENDED,
            CommandCode.CURTAIN,
            0x01,
            0x05,
            mode & 0xFF,
            position,
        ]),
        accepted_codes=CURTAIN_ACCEPTED_CODES,
    )


def build_curtain_pause_command() -> Command:
    """Build command to stop a moving curtain.

    Returns:
        Command bytes: [0x57][0x0F][0x45][0x01][0x00][0xFF]
    """
    return Command(
        name="pause",
        payload=bytes([CommandCode.REQUEST, CommandCode.EXTENDED, CommandCode.CURTAIN, 0x01, 0x00, 0xFF]),
        accepted_codes=CURTAIN_ACCEPTED_CODES,
    )


def build_humidifier_level_command(level: int, name: str = "set_percentage") -> Command:
    """Build command to set the humidifier output level.

    Args:
        level: Raw level byte (0-100 percent, 0x80 for auto)
        name: Action name for logs

    Returns:
        Command bytes: [0x57][0x0F][0x43][0x81][0x01][0x01][level][0xFF x4]
    """
    return Command(
        name=name,
        payload=bytes([
            CommandCode.REQUEST,
            CommandCode.EXTENDED,
            CommandCode.HUMIDIFIER,
            0x81,
            0x01,
            0x01,
            level,
        ]) + b"\xff" * 4,
        accepted_codes=BOT_ACCEPTED_CODES,
    )
