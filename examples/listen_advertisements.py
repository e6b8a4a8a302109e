"""Listen for SwitchBot BLE advertisements and print decoded state.

Usage:
    uv run python examples/listen_advertisements.py --duration 30
    uv run python examples/listen_advertisements.py --model e --all
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from bleak import BleakScanner

from switchbot_ble import (
    AdvertisementDispatcher,
    DecodeError,
    ModelId,
    SwitchBotAdvertisement,
)


@dataclass
class SeenDevice:
    """Track per-device state changes."""

    last_state: object = None
    packets_seen: int = 0
    packets_printed: int = 0


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _print_record(record: SwitchBotAdvertisement) -> None:
    """Print one decoded advertisement."""
    fields = " ".join(f"{key}={value}" for key, value in record.as_dict()["state"].items())
    print(f"[{_timestamp()}] {record.model_name} ({record.address}) rssi={record.rssi} {fields}")


async def listen(duration: float, print_all: bool, model: ModelId | None) -> None:
    """Listen for advertisements and print decoded records."""
    seen: dict[str, SeenDevice] = {}
    models_seen: Counter[str] = Counter()
    errors_seen: Counter[str] = Counter()
    dispatcher = AdvertisementDispatcher()

    def on_record(record: SwitchBotAdvertisement) -> None:
        entry = seen.setdefault(record.address, SeenDevice())
        entry.packets_seen += 1
        models_seen[record.model_name] += 1

        changed = record.state != entry.last_state
        if not print_all and not changed:
            return

        entry.last_state = record.state
        entry.packets_printed += 1
        _print_record(record)

    def on_error(address: str, err: DecodeError) -> None:
        errors_seen[address] += 1
        print(f"[{_timestamp()}] ({address}) decode_error={err}")

    dispatcher.subscribe(on_record, model=model)
    dispatcher.subscribe_errors(on_error)

    print("Listening for SwitchBot advertisements...")
    if duration > 0:
        print(f"Duration: {duration:.1f}s")
    else:
        print("Duration: unlimited (Ctrl+C to stop)")
    print("Mode: printing all packets" if print_all else "Mode: printing only changed state")

    scanner = BleakScanner(detection_callback=dispatcher.detection_callback)
    await scanner.start()
    try:
        if duration > 0:
            await asyncio.sleep(duration)
        else:
            while True:
                await asyncio.sleep(1)
    finally:
        await scanner.stop()

    print("\nSummary:")
    print(f"  devices_seen={len(seen)}")
    print(f"  models_seen={dict(models_seen)}")
    print(f"  decode_errors={dict(errors_seen)}")
    for address, entry in sorted(seen.items()):
        print(
            f"  {address}: packets_seen={entry.packets_seen}, packets_printed={entry.packets_printed}"
        )


def _model_arg(value: str) -> ModelId:
    if len(value) == 1:
        return ModelId(ord(value))
    return ModelId[value.upper()]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Listen for SwitchBot BLE advertisements and decode their state."
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=30.0,
        help="Listen duration in seconds (0 = run until Ctrl+C). Default: 30",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Print every packet (default: print only changed state).",
    )
    parser.add_argument(
        "--model",
        type=_model_arg,
        default=None,
        help="Only show one model, by model byte (e.g. 'e') or name (e.g. 'humidifier').",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    try:
        asyncio.run(listen(duration=args.duration, print_all=args.all, model=args.model))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
