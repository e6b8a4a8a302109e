"""Data models for SwitchBot devices."""

from .advertisement import SwitchBotAdvertisement
from .enums import (
    MODEL_NAMES,
    CurtainMode,
    HallState,
    HumidifierGear,
    LightLevel,
    ModelId,
    ResponseCode,
    get_model_name,
)
from .state import (
    BotState,
    ContactState,
    CurtainState,
    DeviceState,
    HumidifierState,
    MeterState,
    MotionState,
)

__all__ = [
    "SwitchBotAdvertisement",
    "BotState",
    "ContactState",
    "CurtainState",
    "DeviceState",
    "HumidifierState",
    "MeterState",
    "MotionState",
    "CurtainMode",
    "HallState",
    "HumidifierGear",
    "LightLevel",
    "ModelId",
    "ResponseCode",
    "MODEL_NAMES",
    "get_model_name",
]
