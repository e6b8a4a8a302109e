"""SwitchBot BLE device classes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .models.enums import ModelId, get_model_name
from .protocol import Command, encode
from .session import DEFAULT_COMMAND_TIMEOUT, DeviceSession
from .transport import BLEConnection

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice

_LOGGER = logging.getLogger(__name__)


class SwitchBotDevice:
    """Connected SwitchBot device.

    Every action is checked against the model's argument rules, encoded by
    the codec table and sent through a DeviceSession.

    Usage:
        async with SwitchBotBot("AA:BB:CC:DD:EE:FF") as bot:
            await bot.press()

        # Generic access by action name
        async with SwitchBotDevice(mac, ModelId.CURTAIN) as curtain:
            await curtain.execute("run_to_position", position=40)
    """

    MODEL: ModelId | None = None

    def __init__(
            self,
            mac_address: str,
            model: ModelId | None = None,
            ble_device: BLEDevice | None = None,
            timeout: float = 10.0,
            command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ):
        """Initialize SwitchBot device.

        Args:
            mac_address: Device MAC address
            model: Model identifier (defaults to the class model)
            ble_device: Optional BLEDevice from a scanner callback
            timeout: BLE connection timeout in seconds (default: 10)
            command_timeout: Per-command response timeout in seconds (default: 5)
        """
        model = model if model is not None else self.MODEL
        if model is None:
            raise ValueError("A model is required for a generic SwitchBotDevice")

        self.mac_address = mac_address
        self.model = ModelId(model)
        self._connection = BLEConnection(mac_address, ble_device, timeout)
        self._session = DeviceSession(self._connection, timeout=command_timeout)

    async def __aenter__(self) -> SwitchBotDevice:
        """Connect to device."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Disconnect from device."""
        await self.disconnect()

    @property
    def model_name(self) -> str | None:
        return get_model_name(self.model)

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    async def connect(self) -> None:
        await self._connection.connect()
        _LOGGER.info("Connected to %s (%s)", self.mac_address, self.model_name)

    async def disconnect(self) -> None:
        await self._connection.disconnect()
        _LOGGER.info("Disconnected from %s", self.mac_address)

    async def operate(self, command: Command, timeout: float | None = None) -> None:
        """Send a prebuilt command and wait for its acknowledgement."""
        await self._session.operate(command, timeout=timeout)

    async def execute(self, action: str, timeout: float | None = None, **args: Any) -> None:
        """Run one named action of this device's model.

        Args:
            action: Action name, e.g. "turn_on"
            timeout: Override for the command timeout, in seconds
            **args: Action arguments

        Raises:
            UnsupportedActionError: If the model has no such action
            ValidationError: If arguments violate the action's rules
            BLEConnectionError: If the write fails
            BLETimeoutError: If no response arrives in time
            InvalidResponseError: If the device rejects the command
        """
        command = encode(self.model, action, args)
        _LOGGER.debug("%s: %s(%s)", self.mac_address, action, args)
        await self.operate(command, timeout=timeout)


class _BotStyleActions:
    """press/turn_on/turn_off/down/up, shared by Bot and Humidifier."""

    async def press(self: Any) -> None:
        await self.execute("press")

    async def turn_on(self: Any) -> None:
        await self.execute("turn_on")

    async def turn_off(self: Any) -> None:
        await self.execute("turn_off")

    async def down(self: Any) -> None:
        await self.execute("down")

    async def up(self: Any) -> None:
        await self.execute("up")


class SwitchBotBot(_BotStyleActions, SwitchBotDevice):
    """SwitchBot Bot (WoHand)."""

    MODEL = ModelId.BOT


class SwitchBotHumidifier(_BotStyleActions, SwitchBotDevice):
    """SwitchBot Humidifier (WoHumi)."""

    MODEL = ModelId.HUMIDIFIER

    async def set_percentage(self, percentage: int) -> None:
        """Set manual humidifier output (0-100 percent)."""
        await self.execute("set_percentage", percentage=percentage)

    async def set_auto_mode(self) -> None:
        await self.execute("set_auto_mode")

    async def set_quick_gear(self, gear: int) -> None:
        """Select quick gear preset 1, 2 or 3."""
        await self.execute("set_quick_gear", gear=gear)


class SwitchBotCurtain(SwitchBotDevice):
    """SwitchBot Curtain (WoCurtain).

    Position 0 is fully open and 100 fully closed. Mode 0 is performance,
    1 is silent; leave it unset to use the device default.
    """

    MODEL = ModelId.CURTAIN

    async def open(self, mode: int | None = None) -> None:
        await self.execute("open", mode=mode)

    async def close(self, mode: int | None = None) -> None:
        await self.execute("close", mode=mode)

    async def pause(self) -> None:
        await self.execute("pause")

    async def run_to_position(self, position: int, mode: int | None = None) -> None:
        await self.execute("run_to_position", position=position, mode=mode)


DEVICE_CLASSES: dict[ModelId, type[SwitchBotDevice]] = {
    ModelId.BOT: SwitchBotBot,
    ModelId.HUMIDIFIER: SwitchBotHumidifier,
    ModelId.CURTAIN: SwitchBotCurtain,
}


def create_device(mac_address: str, model: ModelId | int, **kwargs: Any) -> SwitchBotDevice:
    """Create the most specific device class for a model."""
    model = ModelId(model)
    cls = DEVICE_CLASSES.get(model, SwitchBotDevice)
    return cls(mac_address, model=model, **kwargs)
