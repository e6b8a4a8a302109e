"""Decoded per-model device state records.

One frozen record is produced per advertisement decode. Records carry no
identity; callers correlate them over time by BLE address.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import HallState, HumidifierGear, LightLevel


@dataclass(frozen=True, slots=True)
class BotState:
    """Bot (WoHand) state.

    Attributes:
        switch_mode: True when the light switch add-on (switch mode) is in use
        is_on: Switch state (only meaningful in switch mode)
        battery: Battery level in percent
    """
    switch_mode: bool
    is_on: bool
    battery: int


@dataclass(frozen=True, slots=True)
class MeterState:
    """Meter / Meter Plus (WoSensorTH) state."""
    temperature_c: float
    temperature_f: float
    fahrenheit: bool
    humidity: int
    battery: int


@dataclass(frozen=True, slots=True)
class HumidifierState:
    """Humidifier (WoHumi) state.

    In auto mode percentage is always 0. When a quick gear preset is active
    percentage is None and quick_gear holds the preset.
    """
    on_state: bool
    auto_mode: bool
    percentage: int | None
    quick_gear: HumidifierGear | None = None


@dataclass(frozen=True, slots=True)
class CurtainState:
    """Curtain (WoCurtain) state."""
    calibrated: bool
    battery: int
    in_motion: bool
    position: int
    light_level: int


@dataclass(frozen=True, slots=True)
class ContactState:
    """Contact sensor (WoContact) state."""
    scope_tested: bool
    movement: bool
    battery: int
    hall_state: HallState
    bright: bool
    button_count: int


@dataclass(frozen=True, slots=True)
class MotionState:
    """Motion sensor (WoPresence) state."""
    scope_tested: bool
    movement: bool
    battery: int
    light_level: LightLevel | None


DeviceState = BotState | MeterState | HumidifierState | CurtainState | ContactState | MotionState
