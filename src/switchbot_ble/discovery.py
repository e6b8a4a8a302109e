"""Advertisement dispatch and device discovery."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from bleak import BleakScanner

from .exceptions import DecodeError, UnknownModelError
from .models.advertisement import SwitchBotAdvertisement
from .models.enums import ModelId
from .protocol import (
    ADVERTISEMENT_SERVICE_UUID,
    LEGACY_ADVERTISEMENT_SERVICE_UUID,
    MIN_SERVICE_DATA_LENGTH,
    get_codec,
    model_from_service_data,
)

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice
    from bleak.backends.scanner import AdvertisementData

_LOGGER = logging.getLogger(__name__)

AdvertisementCallback = Callable[[SwitchBotAdvertisement], None]
DecodeErrorCallback = Callable[[str, DecodeError], None]

SERVICE_DATA_UUIDS = (ADVERTISEMENT_SERVICE_UUID, LEGACY_ADVERTISEMENT_SERVICE_UUID)


def extract_service_data(service_data: Mapping[str, bytes]) -> bytes | None:
    """Pick the SwitchBot payload out of a scanner's service data mapping."""
    for uuid in SERVICE_DATA_UUIDS:
        payload = service_data.get(uuid)
        if payload is not None:
            return bytes(payload)
    return None


def parse_service_data(
        address: str,
        data: bytes,
        rssi: int | None = None,
) -> SwitchBotAdvertisement:
    """Decode one service data payload into a normalized record.

    Args:
        address: BLE address of the advertising device
        data: Service data payload, model byte first
        rssi: Optional signal strength

    Returns:
        SwitchBotAdvertisement for the device

    Raises:
        UnknownModelError: If the model byte is not a known model
        DecodeError: If the payload does not match the model's layout
    """
    codec = get_codec(model_from_service_data(data))
    return SwitchBotAdvertisement(
        address=address,
        model=codec.model,
        model_name=codec.name,
        state=codec.decode(data),
        rssi=rssi,
    )


class AdvertisementDispatcher:
    """Decode advertisement events and fan them out to subscribers.

    Advertisements without SwitchBot service data, too short to hold any
    known payload, or from unknown models are dropped silently; most nearby
    BLE traffic is unrelated. Decode errors for known models are logged and
    reported to error subscribers. A callback that raises is logged and does
    not stop delivery to the other subscribers.

    Usage:
        dispatcher = AdvertisementDispatcher()
        dispatcher.subscribe(print, model=ModelId.HUMIDIFIER)
        scanner = BleakScanner(detection_callback=dispatcher.detection_callback)
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[AdvertisementCallback, ModelId | None]] = []
        self._error_subscribers: list[DecodeErrorCallback] = []

    def subscribe(
            self,
            callback: AdvertisementCallback,
            model: ModelId | None = None,
    ) -> Callable[[], None]:
        """Register a callback for decoded advertisements.

        Args:
            callback: Called with each SwitchBotAdvertisement
            model: Only deliver records for this model (default: all)

        Returns:
            Function that removes the subscription
        """
        entry = (callback, model)
        self._subscribers.append(entry)

        def _unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return _unsubscribe

    def subscribe_errors(self, callback: DecodeErrorCallback) -> Callable[[], None]:
        """Register a callback for decode errors of known models."""
        self._error_subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._error_subscribers:
                self._error_subscribers.remove(callback)

        return _unsubscribe

    def handle(
            self,
            address: str,
            service_data: bytes | None,
            manufacturer_data: bytes | None = None,
            rssi: int | None = None,
    ) -> SwitchBotAdvertisement | None:
        """Process one advertisement event.

        Args:
            address: BLE address of the advertising device
            service_data: SwitchBot service data payload, if any
            manufacturer_data: Manufacturer data payload (unused by current decoders)
            rssi: Optional signal strength

        Returns:
            The emitted record, or None if the advertisement was dropped
        """
        if not service_data or len(service_data) < MIN_SERVICE_DATA_LENGTH:
            return None

        try:
            record = parse_service_data(address, service_data, rssi)
        except UnknownModelError:
            return None
        except DecodeError as err:
            _LOGGER.warning("Malformed advertisement from %s: %s", address, err)
            for error_callback in list(self._error_subscribers):
                try:
                    error_callback(address, err)
                except Exception:
                    _LOGGER.exception("Error in decode error callback")
            return None

        for callback, model in list(self._subscribers):
            if model is None or model == record.model:
                try:
                    callback(record)
                except Exception:
                    _LOGGER.exception("Error in advertisement callback")

        return record

    def detection_callback(self, device: BLEDevice, advertisement_data: AdvertisementData) -> None:
        """BleakScanner detection callback."""
        payload = extract_service_data(advertisement_data.service_data)
        if payload is None:
            return
        self.handle(
            device.address,
            payload,
            rssi=advertisement_data.rssi,
        )


async def discover_devices(
        timeout: float = 5.0,
        model: ModelId | None = None,
) -> dict[str, SwitchBotAdvertisement]:
    """Scan for SwitchBot devices.

    Args:
        timeout: Scan duration in seconds (default: 5)
        model: Only return devices of this model (default: all)

    Returns:
        Latest decoded advertisement per device address
    """
    found: dict[str, SwitchBotAdvertisement] = {}
    dispatcher = AdvertisementDispatcher()

    def _record(advertisement: SwitchBotAdvertisement) -> None:
        found[advertisement.address] = advertisement

    dispatcher.subscribe(_record, model=model)

    _LOGGER.debug("Scanning for SwitchBot devices (%.1fs)", timeout)
    scanner = BleakScanner(detection_callback=dispatcher.detection_callback)
    await scanner.start()
    try:
        await asyncio.sleep(timeout)
    finally:
        await scanner.stop()

    _LOGGER.debug("Discovered %d SwitchBot device(s)", len(found))
    return found
