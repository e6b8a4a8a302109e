import pytest

from switchbot_ble.models.enums import CurtainMode
from switchbot_ble.protocol.commands import (
    BOT_ACCEPTED_CODES,
    CURTAIN_ACCEPTED_CODES,
    RESPONSE_LENGTH,
    BotAction,
    CommandCode,
    build_bot_command,
    build_curtain_pause_command,
    build_curtain_position_command,
    build_humidifier_level_command,
)


class TestCommandBuilders:
    """Test command builders produce the exact bytes devices expect."""

    @pytest.mark.parametrize(
        ("action", "expected"),
        [
            (BotAction.PRESS, b"\x57\x01\x00"),
            (BotAction.TURN_ON, b"\x57\x01\x01"),
            (BotAction.TURN_OFF, b"\x57\x01\x02"),
            (BotAction.DOWN, b"\x57\x01\x03"),
            (BotAction.UP, b"\x57\x01\x04"),
        ],
    )
    def test_build_bot_command(self, action, expected):
        cmd = build_bot_command(action)
        assert cmd.payload == expected
        assert cmd.name == action.name.lower()
        assert cmd.accepted_codes == BOT_ACCEPTED_CODES
        assert cmd.response_length == RESPONSE_LENGTH

    def test_build_curtain_position_command(self):
        cmd = build_curtain_position_command(75, CurtainMode.PERFORMANCE)
        # Format: [0x57][0x0F][0x45][0x01][0x05][mode][position]
        assert cmd.payload == b"\x57\x0f\x45\x01\x05\x00\x4b"
        assert cmd.accepted_codes == CURTAIN_ACCEPTED_CODES

    def test_build_curtain_position_default_mode(self):
        assert build_curtain_position_command(0).payload == b"\x57\x0f\x45\x01\x05\xff\x00"

    def test_build_curtain_pause_command(self):
        assert build_curtain_pause_command().payload == b"\x57\x0f\x45\x01\x00\xff"

    def test_build_humidifier_auto_command(self):
        cmd = build_humidifier_level_command(0x80, "set_auto_mode")
        assert cmd.payload == bytes.fromhex("570f4381010180ffffffff")
        assert cmd.name == "set_auto_mode"

    def test_every_command_starts_with_request_header(self):
        for cmd in (
            build_bot_command(BotAction.PRESS),
            build_curtain_pause_command(),
            build_humidifier_level_command(10),
        ):
            assert cmd.payload[0] == CommandCode.REQUEST

    def test_commands_are_immutable(self):
        cmd = build_bot_command(BotAction.PRESS)
        with pytest.raises(AttributeError):
            cmd.payload = b"\x00"  # type: ignore[misc]
