"""Quadrature encoder position and speed tracking."""

from dataclasses import dataclass, field

SPEED_PERIOD_MS = 10


def _int16(value):
    return (value + 0x8000) % 0x10000 - 0x8000


@dataclass
class Encoder:
    """Pulse counter with a speed estimate refreshed every 10 ms."""

    reversed: bool = False
    count: int = field(default=0, init=False)
    speed: int = field(default=0, init=False)
    last_count: int = field(default=0, init=False)
    last_time: int = field(default=0, init=False)

    def update(self, direction):
        """Record one edge moving in ``direction`` (+1 or -1)."""
        if self.reversed:
            self.count = _int16(self.count - direction)
        else:
            self.count = _int16(self.count + direction)

    def process(self, current_time):
        """Refresh the speed (pulses per second) if at least 10 ms have passed."""
        time_delta = (current_time - self.last_time) & 0xFFFFFFFF
        if time_delta < SPEED_PERIOD_MS:
            return
        speed = _int16((self.count - self.last_count) * (1000 // time_delta))
        self.speed = _int16(-speed) if self.reversed else speed
        self.last_count = self.count
        self.last_time = current_time