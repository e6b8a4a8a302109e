"""Per-model service data decoders.

Every decoder receives the full service data payload (model byte included),
checks its length before reading any offset, and returns a fresh state record.
Decoders never keep a reference to the payload.
"""

from __future__ import annotations

from ..exceptions import DecodeError, LengthMismatchError
from ..models.enums import HallState, HumidifierGear, LightLevel, ModelId
from ..models.state import (
    BotState,
    ContactState,
    CurtainState,
    HumidifierState,
    MeterState,
    MotionState,
)

MODEL_MASK = 0x7F

BOT_LENGTH = 3
METER_LENGTH = 6
HUMIDIFIER_LENGTH = 8
CURTAIN_LENGTHS = (5, 6)
CONTACT_LENGTH = 9
MOTION_LENGTH = 6


def _check_length(model: ModelId, data: bytes, *expected: int) -> None:
    if len(data) not in expected:
        raise LengthMismatchError(model, data, expected)


def parse_bot(data: bytes) -> BotState:
    """Parse Bot (WoHand) service data.

    Format (3 bytes):
    - [0]: model byte
    - [1]: bit7 = switch mode, bit6 = off (inverted state)
    - [2]: bits0-6 = battery percent
    """
    _check_length(ModelId.BOT, data, BOT_LENGTH)
    byte1 = data[1]
    return BotState(
        switch_mode=bool(byte1 & 0b10000000),
        is_on=not (byte1 & 0b01000000),
        battery=data[2] & 0b01111111,
    )


def _parse_meter(model: ModelId, data: bytes) -> MeterState:
    _check_length(model, data, METER_LENGTH)
    byte3, byte4, byte5 = data[3], data[4], data[5]

    sign = 1 if byte4 & 0b10000000 else -1
    temperature_c = sign * ((byte4 & 0b01111111) + (byte3 & 0b00001111) / 10)
    temperature_f = round(temperature_c * 9 / 5 + 32, 1)

    return MeterState(
        temperature_c=round(temperature_c, 1),
        temperature_f=temperature_f,
        fahrenheit=bool(byte5 & 0b10000000),
        humidity=byte5 & 0b01111111,
        battery=data[2] & 0b01111111,
    )


def parse_meter(data: bytes) -> MeterState:
    """Parse Meter (WoSensorTH) service data.

    Format (6 bytes):
    - [2]: bits0-6 = battery percent
    - [3]: bits0-3 = tenths of a degree Celsius
    - [4]: bit7 = positive sign, bits0-6 = whole degrees Celsius
    - [5]: bit7 = device displays Fahrenheit, bits0-6 = relative humidity
    """
    return _parse_meter(ModelId.METER, data)


def parse_meter_plus(data: bytes) -> MeterState:
    """Parse Meter Plus service data (same layout as Meter)."""
    return _parse_meter(ModelId.METER_PLUS, data)


def parse_humidifier(data: bytes) -> HumidifierState:
    """Parse Humidifier (WoHumi) service data.

    Format (8 bytes):
    - [0]: header (ignored)
    - [1]: bit7 = on
    - [4]: bit7 = auto mode, bits0-6 = percentage 0-100 or quick gear 101-103

    Auto mode forces the reported percentage to 0 whatever the low bits hold.
    """
    _check_length(ModelId.HUMIDIFIER, data, HUMIDIFIER_LENGTH)
    byte1 = data[1]
    byte4 = data[4]

    on_state = bool(byte1 & 0b10000000)
    auto_mode = bool(byte4 & 0b10000000)
    level = byte4 & 0b01111111

    if auto_mode:
        return HumidifierState(on_state=on_state, auto_mode=True, percentage=0)

    if level <= 100:
        return HumidifierState(on_state=on_state, auto_mode=False, percentage=level)

    try:
        gear = HumidifierGear(level)
    except ValueError:
        raise DecodeError(
            ModelId.HUMIDIFIER, data, f"unrecognized humidity level {level}"
        ) from None

    return HumidifierState(on_state=on_state, auto_mode=False, percentage=None, quick_gear=gear)


def parse_curtain(data: bytes) -> CurtainState:
    """Parse Curtain (WoCurtain) service data.

    Format (5 bytes, 6 on newer firmware):
    - [1]: bit6 = calibrated
    - [2]: bits0-6 = battery percent
    - [3]: bit7 = in motion, bits0-6 = position percent
    - [4]: bits4-7 = light level
    """
    _check_length(ModelId.CURTAIN, data, *CURTAIN_LENGTHS)
    byte3 = data[3]
    return CurtainState(
        calibrated=bool(data[1] & 0b01000000),
        battery=data[2] & 0b01111111,
        in_motion=bool(byte3 & 0b10000000),
        position=max(min(byte3 & 0b01111111, 100), 0),
        light_level=(data[4] >> 4) & 0x0F,
    )


def parse_contact(data: bytes) -> ContactState:
    """Parse Contact sensor (WoContact) service data.

    Format (9 bytes):
    - [1]: bit7 = scope tested, bit6 = motion detected
    - [2]: bits0-6 = battery percent
    - [3]: bits1-2 = hall state, bit0 = bright
    - [8]: bits0-3 = button press counter
    """
    _check_length(ModelId.CONTACT_SENSOR, data, CONTACT_LENGTH)
    byte1 = data[1]
    byte3 = data[3]

    try:
        hall_state = HallState((byte3 >> 1) & 0b11)
    except ValueError:
        raise DecodeError(
            ModelId.CONTACT_SENSOR, data, f"unrecognized hall state {(byte3 >> 1) & 0b11}"
        ) from None

    return ContactState(
        scope_tested=bool(byte1 & 0b10000000),
        movement=bool(byte1 & 0b01000000),
        battery=data[2] & 0b01111111,
        hall_state=hall_state,
        bright=bool(byte3 & 0b00000001),
        button_count=data[8] & 0b00001111,
    )


def parse_motion(data: bytes) -> MotionState:
    """Parse Motion sensor (WoPresence) service data.

    Format (6 bytes):
    - [1]: bit7 = scope tested, bit6 = motion detected
    - [2]: bits0-6 = battery percent
    - [5]: bits0-1 = light level (1 dark, 2 bright)
    """
    _check_length(ModelId.MOTION_SENSOR, data, MOTION_LENGTH)
    byte1 = data[1]
    raw_light = data[5] & 0b00000011
    try:
        light_level: LightLevel | None = LightLevel(raw_light)
    except ValueError:
        light_level = None

    return MotionState(
        scope_tested=bool(byte1 & 0b10000000),
        movement=bool(byte1 & 0b01000000),
        battery=data[2] & 0b01111111,
        light_level=light_level,
    )


def model_from_service_data(data: bytes) -> int:
    """Extract the raw model identifier (high flag bit masked off)."""
    if not data:
        raise ValueError("Service data is empty")
    return data[0] & MODEL_MASK
