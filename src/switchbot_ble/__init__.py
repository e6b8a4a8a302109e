"""SwitchBot BLE Protocol Package.

  Pure Python package for decoding SwitchBot BLE advertisements and
  controlling SwitchBot devices.
  """

from .device import (
    SwitchBotBot,
    SwitchBotCurtain,
    SwitchBotDevice,
    SwitchBotHumidifier,
    create_device,
)
from .discovery import (
    AdvertisementDispatcher,
    discover_devices,
    extract_service_data,
    parse_service_data,
)
from .exceptions import (
    BLEConnectionError,
    BLETimeoutError,
    DecodeError,
    InvalidResponseError,
    LengthMismatchError,
    ProtocolError,
    SwitchBotError,
    UnknownModelError,
    UnsupportedActionError,
    ValidationError,
)
from .models.advertisement import SwitchBotAdvertisement
from .models.enums import (
    CurtainMode,
    HallState,
    HumidifierGear,
    LightLevel,
    ModelId,
    ResponseCode,
    get_model_name,
)
from .models.state import (
    BotState,
    ContactState,
    CurtainState,
    DeviceState,
    HumidifierState,
    MeterState,
    MotionState,
)
from .protocol import (
    ADVERTISEMENT_SERVICE_UUID,
    CODEC_TABLE,
    MANUFACTURER_ID,
    SERVICE_UUID,
    Command,
    decode,
    encode,
)
from .session import DeviceSession, SessionState
from .validation import CheckResult, ParameterChecker, Rule, ValidationIssue

__version__ = "0.1.0"

__all__ = [
    # Main API
    "SwitchBotDevice",
    "SwitchBotBot",
    "SwitchBotCurtain",
    "SwitchBotHumidifier",
    "create_device",
    "DeviceSession",
    "SessionState",
    "AdvertisementDispatcher",
    "discover_devices",
    # Exceptions
    "SwitchBotError",
    "BLEConnectionError",
    "BLETimeoutError",
    "ProtocolError",
    "InvalidResponseError",
    "DecodeError",
    "LengthMismatchError",
    "UnknownModelError",
    "UnsupportedActionError",
    "ValidationError",
    # Models
    "SwitchBotAdvertisement",
    "DeviceState",
    "BotState",
    "MeterState",
    "HumidifierState",
    "CurtainState",
    "ContactState",
    "MotionState",
    "Command",
    # Enums
    "ModelId",
    "ResponseCode",
    "CurtainMode",
    "HumidifierGear",
    "HallState",
    "LightLevel",
    "get_model_name",
    # Codec / validation
    "CODEC_TABLE",
    "decode",
    "encode",
    "ParameterChecker",
    "Rule",
    "CheckResult",
    "ValidationIssue",
    # Utilities
    "parse_service_data",
    "extract_service_data",
    # Constants
    "SERVICE_UUID",
    "ADVERTISEMENT_SERVICE_UUID",
    "MANUFACTURER_ID",
]
