"""Packet radio with a bounded receive queue and a transmit log."""

from __future__ import annotations

import operator
from collections import deque
from dataclasses import dataclass, replace
from typing import Optional

RATE_1MBIT = 0
RATE_2MBIT = 1
_RATE_250KBIT = 2  # deprecated, accepted only as a raw value

MAX_CHANNEL = 83
TICKS_PERIOD = 1 << 30

_POWER_DBM = (-30, -20, -16, -12, -8, -4, 0, 4)
_STRING_HEADER = b"\x01\x00\x01"


@dataclass(frozen=True)
class RadioConfig:
    """Radio settings; ``base0`` is the address and ``prefix0`` the group."""

    max_payload: int = 32
    queue_len: int = 3
    channel: int = 7
    power_dbm: int = 0
    base0: int = 0x75626974
    prefix0: int = 0
    data_rate: int = RATE_1MBIT


@dataclass(frozen=True)
class _Packet:
    payload: bytes
    rssi: int
    timestamp_us: int


def _in(low: int, value: int, high: int) -> bool:
    return low <= value <= high


class Radio:
    """A simulated radio: ``send*`` appends to ``sent``, ``deliver`` feeds the queue."""

    def __init__(self, *, enabled: bool = True) -> None:
        self._config = RadioConfig()
        self._queue: Optional[deque] = None
        self.sent: list[bytes] = []
        self.reconfigurations = 0
        if enabled:
            self.on()

    @property
    def settings(self) -> RadioConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._queue is not None

    def _ensure_enabled(self) -> deque:
        if self._queue is None:
            raise ValueError("radio is not enabled")
        return self._queue

    def reset(self) -> None:
        """Restore the default settings."""
        self._config = RadioConfig()

    def config(self, **kwargs: object) -> None:
        """Change settings by keyword; nothing changes if any value is rejected."""
        changes: dict[str, int] = {}
        for name, raw in kwargs.items():
            value = operator.index(raw)
            if name == "length":
                ok = _in(1, value, 251)
                changes["max_payload"] = value
            elif name == "queue":
                ok = _in(1, value, 254)
                changes["queue_len"] = value
            elif name == "channel":
                ok = _in(0, value, MAX_CHANNEL)
                changes["channel"] = value
            elif name == "power":
                ok = _in(0, value, 7)
                if ok:
                    changes["power_dbm"] = _POWER_DBM[value]
            elif name == "data_rate":
                ok = value in (_RATE_250KBIT, RATE_1MBIT, RATE_2MBIT)
                changes["data_rate"] = value
            elif name == "address":
                ok = True
                changes["base0"] = value & 0xFFFFFFFF
            elif name == "group":
                ok = _in(0, value, 255)
                changes["prefix0"] = value
            else:
                raise ValueError(f"unknown argument '{name}'")
            if not ok:
                raise ValueError(f"value out of range for argument '{name}'")

        new_config = replace(self._config, **changes)
        old_config = self._config
        self._config = new_config
        if self._queue is None:
            return
        if (
            new_config.max_payload != old_config.max_payload
            or new_config.queue_len != old_config.queue_len
        ):
            # Buffer sizes changed: restart the radio with fresh buffers.
            self._queue = None
            self.on()
        else:
            self.reconfigurations += 1

    def on(self) -> None:
        if self._queue is None:
            self._queue = deque()

    def off(self) -> None:
        self._queue = None

    def _transmit(self, frame: bytes) -> None:
        self.sent.append(frame[: self._config.max_payload])

    def send_bytes(self, data: object) -> None:
        """Send raw bytes (any object with the buffer protocol)."""
        frame = bytes(memoryview(data))
        self._ensure_enabled()
        self._transmit(frame)

    def send(self, message: object) -> None:
        """Send a string, framed so that ``receive`` recognises it."""
        if isinstance(message, str):
            data = message.encode("utf-8")
        elif isinstance(message, (bytes, bytearray)):
            data = bytes(message)
        else:
            raise TypeError("can't convert to str implicitly")
        self._ensure_enabled()
        self._transmit(_STRING_HEADER + data)

    def deliver(self, payload: object, rssi: int = 0, timestamp_us: int = 0) -> bool:
        """Hand a received packet to the radio; return False if it was dropped."""
        data = bytes(memoryview(payload))
        if not -255 <= rssi <= 0:
            raise ValueError("rssi must be between -255 and 0")
        if self._queue is None:
            return False
        if len(data) > self._config.max_payload:
            return False
        if len(self._queue) >= self._config.queue_len:
            return False
        self._queue.append(_Packet(data, rssi, timestamp_us & 0xFFFFFFFF))
        return True

    def _pop(self) -> Optional[_Packet]:
        queue = self._ensure_enabled()
        return queue.popleft() if queue else None

    def receive_bytes(self) -> Optional[bytes]:
        packet = self._pop()
        return None if packet is None else packet.payload

    def receive(self) -> Optional[str]:
        """The next packet as a string, or None if nothing is waiting."""
        packet = self._pop()
        if packet is None:
            return None
        if not packet.payload.startswith(_STRING_HEADER):
            raise ValueError("received packet is not a string")
        return packet.payload[len(_STRING_HEADER):].decode("utf-8")

    def receive_bytes_into(self, buffer: object) -> Optional[int]:
        """Copy the next packet into ``buffer``; return the packet's full length."""
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("object with buffer protocol required to be writable")
        view = view.cast("B")
        packet = self._pop()
        if packet is None:
            return None
        count = min(len(view), len(packet.payload))
        view[:count] = packet.payload[:count]
        return len(packet.payload)

    def receive_full(self) -> Optional[tuple[bytes, int, int]]:
        """The next packet as ``(payload, rssi, timestamp_us)``."""
        packet = self._pop()
        if packet is None:
            return None
        return (packet.payload, packet.rssi, packet.timestamp_us & (TICKS_PERIOD - 1))