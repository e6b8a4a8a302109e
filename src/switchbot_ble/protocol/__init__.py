"""BLE protocol implementation."""

from .codec import (
    CODEC_TABLE,
    MIN_SERVICE_DATA_LENGTH,
    ActionSpec,
    ModelCodec,
    decode,
    encode,
    get_codec,
)
from .commands import (
    ADVERTISEMENT_SERVICE_UUID,
    LEGACY_ADVERTISEMENT_SERVICE_UUID,
    MANUFACTURER_ID,
    NOTIFY_CHARACTERISTIC_UUID,
    SERVICE_UUID,
    WRITE_CHARACTERISTIC_UUID,
    BotAction,
    Command,
    CommandCode,
    build_bot_command,
    build_curtain_pause_command,
    build_curtain_position_command,
    build_humidifier_level_command,
)
from .decoders import model_from_service_data
from .responses import validate_ack_response

__all__ = [
    "CommandCode",
    "BotAction",
    "Command",
    "SERVICE_UUID",
    "WRITE_CHARACTERISTIC_UUID",
    "NOTIFY_CHARACTERISTIC_UUID",
    "ADVERTISEMENT_SERVICE_UUID",
    "LEGACY_ADVERTISEMENT_SERVICE_UUID",
    "MANUFACTURER_ID",
    "build_bot_command",
    "build_curtain_position_command",
    "build_curtain_pause_command",
    "build_humidifier_level_command",
    "CODEC_TABLE",
    "MIN_SERVICE_DATA_LENGTH",
    "ActionSpec",
    "ModelCodec",
    "get_codec",
    "decode",
    "encode",
    "model_from_service_data",
    "validate_ack_response",
]
