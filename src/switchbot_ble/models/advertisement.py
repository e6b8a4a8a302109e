"""BLE advertisement data structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .enums import ModelId
from .state import DeviceState


@dataclass(frozen=True, slots=True)
class SwitchBotAdvertisement:
    """Normalized record for one decoded SwitchBot advertisement.

    Attributes:
        address: BLE address of the advertising device
        model: Model identifier
        model_name: Firmware model name (e.g. "WoHumi")
        state: Model-specific decoded state
        rssi: Signal strength, when the scanner reports it
    """
    address: str
    model: ModelId
    model_name: str
    state: DeviceState
    rssi: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Flatten into a plain dict (state fields under "state")."""
        return {
            "address": self.address,
            "model": chr(self.model),
            "model_name": self.model_name,
            "state": asdict(self.state),
            "rssi": self.rssi,
        }
