"""Test advertisement dispatch."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from switchbot_ble.discovery import (
    AdvertisementDispatcher,
    extract_service_data,
    parse_service_data,
)
from switchbot_ble.exceptions import DecodeError, UnknownModelError
from switchbot_ble.models.advertisement import SwitchBotAdvertisement
from switchbot_ble.models.enums import ModelId
from switchbot_ble.models.state import HumidifierState
from switchbot_ble.protocol.commands import (
    ADVERTISEMENT_SERVICE_UUID,
    LEGACY_ADVERTISEMENT_SERVICE_UUID,
)

ADDRESS = "AA:BB:CC:DD:EE:FF"


@pytest.fixture
def dispatcher() -> AdvertisementDispatcher:
    return AdvertisementDispatcher()


class TestParseServiceData:
    """Test normalized record construction."""

    def test_humidifier_record(self, real_humidifier_service_data):
        record = parse_service_data(ADDRESS, real_humidifier_service_data, rssi=-60)

        assert record == SwitchBotAdvertisement(
            address=ADDRESS,
            model=ModelId.HUMIDIFIER,
            model_name="WoHumi",
            state=HumidifierState(on_state=True, auto_mode=False, percentage=50),
            rssi=-60,
        )

    def test_flag_bit_on_model_byte(self, real_bot_service_data):
        data = bytes([real_bot_service_data[0] | 0x80]) + real_bot_service_data[1:]
        assert parse_service_data(ADDRESS, data).model == ModelId.BOT

    def test_unknown_model(self):
        with pytest.raises(UnknownModelError):
            parse_service_data(ADDRESS, b"\x01\x02\x03")

    def test_as_dict(self, real_humidifier_service_data):
        record = parse_service_data(ADDRESS, real_humidifier_service_data)
        assert record.as_dict() == {
            "address": ADDRESS,
            "model": "e",
            "model_name": "WoHumi",
            "state": {"on_state": True, "auto_mode": False, "percentage": 50, "quick_gear": None},
            "rssi": None,
        }


class TestDispatcher:
    """Test subscription and drop behaviour."""

    def test_emits_to_subscribers(self, dispatcher, real_humidifier_service_data):
        received: list[SwitchBotAdvertisement] = []
        dispatcher.subscribe(received.append)

        record = dispatcher.handle(ADDRESS, real_humidifier_service_data)

        assert received == [record]
        assert record.state.percentage == 50

    def test_model_filter(self, dispatcher, real_humidifier_service_data, real_bot_service_data):
        humidifiers: list[SwitchBotAdvertisement] = []
        dispatcher.subscribe(humidifiers.append, model=ModelId.HUMIDIFIER)

        dispatcher.handle(ADDRESS, real_bot_service_data)
        dispatcher.handle(ADDRESS, real_humidifier_service_data)

        assert [r.model for r in humidifiers] == [ModelId.HUMIDIFIER]

    def test_unsubscribe(self, dispatcher, real_bot_service_data):
        received: list[SwitchBotAdvertisement] = []
        unsubscribe = dispatcher.subscribe(received.append)
        unsubscribe()
        unsubscribe()

        dispatcher.handle(ADDRESS, real_bot_service_data)

        assert received == []

    @pytest.mark.parametrize("payload", [None, b"", b"\x48", b"\x48\x00"])
    def test_absent_or_short_service_data_dropped(self, dispatcher, payload):
        received: list[SwitchBotAdvertisement] = []
        errors: list[DecodeError] = []
        dispatcher.subscribe(received.append)
        dispatcher.subscribe_errors(lambda address, err: errors.append(err))

        assert dispatcher.handle(ADDRESS, payload) is None
        assert received == []
        assert errors == []

    def test_unknown_model_dropped_silently(self, dispatcher, caplog):
        received: list[SwitchBotAdvertisement] = []
        errors: list[DecodeError] = []
        dispatcher.subscribe(received.append)
        dispatcher.subscribe_errors(lambda address, err: errors.append(err))

        with caplog.at_level("WARNING"):
            assert dispatcher.handle(ADDRESS, b"\x01\x02\x03\x04") is None

        assert received == []
        assert errors == []
        assert caplog.records == []

    def test_malformed_known_model_reported(self, dispatcher, caplog):
        received: list[SwitchBotAdvertisement] = []
        errors: list[tuple[str, DecodeError]] = []
        dispatcher.subscribe(received.append)
        dispatcher.subscribe_errors(lambda address, err: errors.append((address, err)))

        with caplog.at_level("WARNING"):
            # Humidifier model byte, but 5 bytes instead of 8
            assert dispatcher.handle(ADDRESS, b"\x65\x80\x00\x00\x32") is None

        assert received == []
        assert len(errors) == 1
        assert errors[0][0] == ADDRESS
        assert errors[0][1].model == ModelId.HUMIDIFIER
        assert "Malformed advertisement" in caplog.text

    def test_failing_subscriber_does_not_starve_others(self, dispatcher, real_humidifier_service_data, caplog):
        received: list[SwitchBotAdvertisement] = []

        def broken(record: SwitchBotAdvertisement) -> None:
            raise RuntimeError("boom")

        dispatcher.subscribe(broken)
        dispatcher.subscribe(received.append)

        with caplog.at_level("ERROR"):
            record = dispatcher.handle(ADDRESS, real_humidifier_service_data)

        assert received == [record]
        assert "Error in advertisement callback" in caplog.text

    def test_failing_error_subscriber_does_not_starve_others(self, dispatcher, caplog):
        errors: list[DecodeError] = []

        def broken(address: str, err: DecodeError) -> None:
            raise RuntimeError("boom")

        dispatcher.subscribe_errors(broken)
        dispatcher.subscribe_errors(lambda address, err: errors.append(err))

        with caplog.at_level("ERROR"):
            assert dispatcher.handle(ADDRESS, b"\x65\x80\x00\x00\x32") is None

        assert len(errors) == 1
        assert "Error in decode error callback" in caplog.text

    def test_interleaved_devices(self, dispatcher, real_humidifier_service_data, real_meter_service_data):
        received: list[SwitchBotAdvertisement] = []
        dispatcher.subscribe(received.append)

        dispatcher.handle("11:11:11:11:11:11", real_humidifier_service_data)
        dispatcher.handle("22:22:22:22:22:22", real_meter_service_data)
        dispatcher.handle("11:11:11:11:11:11", real_humidifier_service_data)

        assert [r.address for r in received] == [
            "11:11:11:11:11:11",
            "22:22:22:22:22:22",
            "11:11:11:11:11:11",
        ]
        assert received[0] == received[2]


class TestBleakAdapter:
    """Test the BleakScanner detection callback."""

    def test_extract_current_uuid(self):
        assert extract_service_data({ADVERTISEMENT_SERVICE_UUID: bytearray(b"\x48\x00\x64")}) == b"\x48\x00\x64"

    def test_extract_legacy_uuid(self):
        assert extract_service_data({LEGACY_ADVERTISEMENT_SERVICE_UUID: b"\x48\x00\x64"}) == b"\x48\x00\x64"

    def test_extract_missing(self):
        assert extract_service_data({"0000feaf-0000-1000-8000-00805f9b34fb": b"\x01"}) is None

    def test_detection_callback(self, dispatcher, real_humidifier_service_data):
        received: list[SwitchBotAdvertisement] = []
        dispatcher.subscribe(received.append)
        device = SimpleNamespace(address=ADDRESS, name="WoHumi")
        advertisement_data = SimpleNamespace(
            service_data={ADVERTISEMENT_SERVICE_UUID: real_humidifier_service_data},
            manufacturer_data={},
            rssi=-71,
        )

        dispatcher.detection_callback(device, advertisement_data)

        assert len(received) == 1
        assert received[0].rssi == -71

    def test_detection_callback_ignores_other_devices(self, dispatcher):
        received: list[SwitchBotAdvertisement] = []
        dispatcher.subscribe(received.append)
        advertisement_data = SimpleNamespace(service_data={}, manufacturer_data={0x004C: b"\x02"}, rssi=-40)

        dispatcher.detection_callback(SimpleNamespace(address=ADDRESS, name=None), advertisement_data)

        assert received == []
