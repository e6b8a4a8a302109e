from __future__ import annotations

from enum import IntEnum
from typing import Final


class ModelId(IntEnum):
    """Model identifier byte (low 7 bits of service data byte 0).

    Values are the ASCII codes the firmware advertises.
    """
    BOT = 0x48             # 'H'
    METER = 0x54           # 'T'
    METER_PLUS = 0x69      # 'i'
    HUMIDIFIER = 0x65      # 'e'
    CURTAIN = 0x63         # 'c'
    CONTACT_SENSOR = 0x64  # 'd'
    MOTION_SENSOR = 0x73   # 's'


MODEL_NAMES: Final[dict[ModelId, str]] = {
    ModelId.BOT: "WoHand",
    ModelId.METER: "WoSensorTH",
    ModelId.METER_PLUS: "WoSensorTHPlus",
    ModelId.HUMIDIFIER: "WoHumi",
    ModelId.CURTAIN: "WoCurtain",
    ModelId.CONTACT_SENSOR: "WoContact",
    ModelId.MOTION_SENSOR: "WoPresence",
}


def get_model_name(model: ModelId | int) -> str | None:
    """Get firmware model name, if known."""
    try:
        return MODEL_NAMES[ModelId(model)]
    except (ValueError, KeyError):
        return None


class ResponseCode(IntEnum):
    """First byte of a command response."""
    SUCCESS = 0x01
    # Accepted as terminal success for bot-style commands. The firmware
    # does not document whether this means busy or accepted-pending.
    SUCCESS_ALT = 0x05


class CurtainMode(IntEnum):
    """Curtain motor speed mode for position commands."""
    PERFORMANCE = 0x00
    SILENT = 0x01
    DEFAULT = 0xFF


class HumidifierGear(IntEnum):
    """Humidifier quick gear presets, as reported in advertisements."""
    GEAR_1 = 101
    GEAR_2 = 102
    GEAR_3 = 103


class HallState(IntEnum):
    """Contact sensor magnet state."""
    CLOSED = 0
    OPEN = 1
    LEFT_OPEN = 2


class LightLevel(IntEnum):
    """Coarse ambient light level reported by sensors."""
    DARK = 1
    BRIGHT = 2
