"""Test advertisement record model."""

from dataclasses import FrozenInstanceError

import pytest

from switchbot_ble.models.advertisement import SwitchBotAdvertisement
from switchbot_ble.models.enums import HallState, ModelId
from switchbot_ble.models.state import BotState, ContactState


class TestSwitchBotAdvertisement:
    """Test the normalized advertisement envelope."""

    def test_as_dict_flattens_state(self):
        record = SwitchBotAdvertisement(
            address="AA:BB:CC:DD:EE:FF",
            model=ModelId.BOT,
            model_name="WoHand",
            state=BotState(switch_mode=True, is_on=False, battery=90),
            rssi=-55,
        )

        assert record.as_dict() == {
            "address": "AA:BB:CC:DD:EE:FF",
            "model": "H",
            "model_name": "WoHand",
            "state": {"switch_mode": True, "is_on": False, "battery": 90},
            "rssi": -55,
        }

    def test_enum_fields_kept_in_dict(self):
        record = SwitchBotAdvertisement(
            address="AA:BB:CC:DD:EE:FF",
            model=ModelId.CONTACT_SENSOR,
            model_name="WoContact",
            state=ContactState(
                scope_tested=False,
                movement=False,
                battery=100,
                hall_state=HallState.CLOSED,
                bright=False,
                button_count=0,
            ),
        )

        assert record.as_dict()["state"]["hall_state"] is HallState.CLOSED
        assert record.rssi is None

    def test_records_are_immutable(self):
        record = SwitchBotAdvertisement(
            address="AA:BB:CC:DD:EE:FF",
            model=ModelId.BOT,
            model_name="WoHand",
            state=BotState(switch_mode=False, is_on=True, battery=100),
        )

        with pytest.raises(FrozenInstanceError):
            record.rssi = -10  # type: ignore[misc]
