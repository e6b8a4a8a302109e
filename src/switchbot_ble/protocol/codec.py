"""Model codec table: model identifier -> (decoder, supported actions)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..exceptions import UnknownModelError, UnsupportedActionError
from ..models.enums import MODEL_NAMES, CurtainMode, HumidifierGear, ModelId
from ..models.state import DeviceState
from ..validation import ParameterChecker, Rule, RuleSet
from . import decoders
from .commands import (
    HUMIDIFIER_AUTO_LEVEL,
    HUMIDIFIER_GEAR_LEVELS,
    BotAction,
    Command,
    build_bot_command,
    build_curtain_pause_command,
    build_curtain_position_command,
    build_humidifier_level_command,
)


@dataclass(frozen=True, slots=True)
class ActionSpec:
    """One supported action: argument rules plus a command builder."""

    build: Callable[[Mapping[str, Any]], Command]
    rules: RuleSet = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ModelCodec:
    """Decode/encode capability pair for one model."""

    model: ModelId
    name: str
    decode: Callable[[bytes], DeviceState]
    actions: Mapping[str, ActionSpec] = field(default_factory=dict)
    min_length: int = 3


def _bot_action(action: BotAction) -> ActionSpec:
    return ActionSpec(build=lambda args: build_bot_command(action))


BOT_ACTIONS: Mapping[str, ActionSpec] = {
    "press": _bot_action(BotAction.PRESS),
    "turn_on": _bot_action(BotAction.TURN_ON),
    "turn_off": _bot_action(BotAction.TURN_OFF),
    "down": _bot_action(BotAction.DOWN),
    "up": _bot_action(BotAction.UP),
}

CURTAIN_POSITION_RULES: RuleSet = {
    "position": Rule(type="integer", required=True, min=0, max=100),
    "mode": Rule(type="integer", min=0, max=1),
}

CURTAIN_MODE_RULES: RuleSet = {
    "mode": Rule(type="integer", min=0, max=1),
}

HUMIDIFIER_PERCENTAGE_RULES: RuleSet = {
    "percentage": Rule(type="integer", required=True, min=0, max=100),
}

HUMIDIFIER_GEAR_RULES: RuleSet = {
    "gear": Rule(type="integer", required=True, min=1, max=3),
}


def _curtain_mode(args: Mapping[str, Any]) -> int:
    mode = args.get("mode")
    return CurtainMode.DEFAULT if mode is None else int(mode)


CURTAIN_ACTIONS: Mapping[str, ActionSpec] = {
    "run_to_position": ActionSpec(
        build=lambda args: build_curtain_position_command(int(args["position"]), _curtain_mode(args)),
        rules=CURTAIN_POSITION_RULES,
    ),
    "open": ActionSpec(
        build=lambda args: build_curtain_position_command(0, _curtain_mode(args)),
        rules=CURTAIN_MODE_RULES,
    ),
    "close": ActionSpec(
        build=lambda args: build_curtain_position_command(100, _curtain_mode(args)),
        rules=CURTAIN_MODE_RULES,
    ),
    "pause": ActionSpec(build=lambda args: build_curtain_pause_command()),
}

HUMIDIFIER_ACTIONS: Mapping[str, ActionSpec] = {
    **BOT_ACTIONS,
    "set_percentage": ActionSpec(
        build=lambda args: build_humidifier_level_command(int(args["percentage"])),
        rules=HUMIDIFIER_PERCENTAGE_RULES,
    ),
    "set_auto_mode": ActionSpec(
        build=lambda args: build_humidifier_level_command(HUMIDIFIER_AUTO_LEVEL, "set_auto_mode"),
    ),
    "set_quick_gear": ActionSpec(
        build=lambda args: build_humidifier_level_command(
            HUMIDIFIER_GEAR_LEVELS[HumidifierGear(100 + int(args["gear"]))],
            "set_quick_gear",
        ),
        rules=HUMIDIFIER_GEAR_RULES,
    ),
}


def _codec(model: ModelId, decode: Callable[[bytes], DeviceState], actions=None, min_length: int = 3) -> ModelCodec:
    return ModelCodec(
        model=model,
        name=MODEL_NAMES[model],
        decode=decode,
        actions=MappingProxyType(dict(actions or {})),
        min_length=min_length,
    )


# Append-only. New models get a new entry; existing entries never change layout.
CODEC_TABLE: Mapping[ModelId, ModelCodec] = MappingProxyType({
    ModelId.BOT: _codec(ModelId.BOT, decoders.parse_bot, BOT_ACTIONS, decoders.BOT_LENGTH),
    ModelId.METER: _codec(ModelId.METER, decoders.parse_meter, min_length=decoders.METER_LENGTH),
    ModelId.METER_PLUS: _codec(ModelId.METER_PLUS, decoders.parse_meter_plus, min_length=decoders.METER_LENGTH),
    ModelId.HUMIDIFIER: _codec(
        ModelId.HUMIDIFIER, decoders.parse_humidifier, HUMIDIFIER_ACTIONS, decoders.HUMIDIFIER_LENGTH
    ),
    ModelId.CURTAIN: _codec(
        ModelId.CURTAIN, decoders.parse_curtain, CURTAIN_ACTIONS, min(decoders.CURTAIN_LENGTHS)
    ),
    ModelId.CONTACT_SENSOR: _codec(
        ModelId.CONTACT_SENSOR, decoders.parse_contact, min_length=decoders.CONTACT_LENGTH
    ),
    ModelId.MOTION_SENSOR: _codec(
        ModelId.MOTION_SENSOR, decoders.parse_motion, min_length=decoders.MOTION_LENGTH
    ),
})

MIN_SERVICE_DATA_LENGTH = min(codec.min_length for codec in CODEC_TABLE.values())


def get_codec(model: ModelId | int) -> ModelCodec:
    """Look up the codec for a model identifier.

    Raises:
        UnknownModelError: If the model is not in the table
    """
    try:
        return CODEC_TABLE[ModelId(model)]
    except ValueError:
        raise UnknownModelError(int(model)) from None


def decode(model: ModelId | int, data: bytes) -> DeviceState:
    """Decode a service data payload for a model.

    Args:
        model: Model identifier
        data: Full service data payload (model byte included)

    Returns:
        Model-specific state record

    Raises:
        UnknownModelError: If the model is not in the table
        DecodeError: If the payload does not match the model's layout
    """
    return get_codec(model).decode(bytes(data))


def encode(model: ModelId | int, action: str, args: Mapping[str, Any] | None = None) -> Command:
    """Build the command for one action of a model.

    Args:
        model: Model identifier
        action: Action name, e.g. "turn_on" or "run_to_position"
        args: Action arguments, checked against the action's rules

    Returns:
        Command ready to be sent by a DeviceSession

    Raises:
        UnknownModelError: If the model is not in the table
        UnsupportedActionError: If the model has no such action
        ValidationError: If args violate the action's rules
    """
    codec = get_codec(model)
    spec = codec.actions.get(action)
    if spec is None:
        raise UnsupportedActionError(f"{codec.name} does not support action {action!r}")

    args = args or {}
    ParameterChecker.ensure(args, spec.rules)
    return spec.build(args)
