"""Simulated peripherals of the controller board.

Covers the GPIO ports, the three-channel PWM timer, the quadrature edge
detector and the buffered UART.
"""

from dataclasses import dataclass
from enum import IntEnum

from .circbuffer import CircularBuffer

F_CPU = 16_000_000
SYSTEM_TICK_MS = 1

TIMER1_TOP = 666
TIMER1_CHANNEL_NUM = 3

EXTINT_CHANNELS = 3

UART_TX_BUFFER_SIZE = 128
UART_RX_BUFFER_SIZE = 128


class PinMode(IntEnum):
    """Direction of a GPIO pin."""

    INPUT = 0x00
    OUTPUT = 0x01


def _check_pin(pin):
    if not 0 <= pin < 8:
        raise ValueError(f"pin must be in range 0..7, got {pin}")


@dataclass
class GpioPort:
    """An 8-bit port with a direction register and an output register."""

    name: str = ""
    ddr: int = 0
    port: int = 0

    def configure_pin(self, pin, mode):
        """Make ``pin`` an output or an input."""
        _check_pin(pin)
        if mode == PinMode.OUTPUT:
            self.ddr |= 1 << pin
        else:
            self.ddr &= ~(1 << pin) & 0xFF

    def set_pin(self, pin, state):
        """Drive ``pin`` high when ``state`` is true, low otherwise."""
        _check_pin(pin)
        if state:
            self.port |= 1 << pin
        else:
            self.port &= ~(1 << pin) & 0xFF


class PwmTimer:
    """Fast-PWM timer with one compare output per channel."""

    def __init__(self, top=TIMER1_TOP, channels=TIMER1_CHANNEL_NUM):
        self.top = top
        self._compare = [top] * channels
        self._enabled = [False] * channels

    def _check_channel(self, channel):
        if not 0 <= channel < len(self._compare):
            raise ValueError(f"no PWM channel {channel}")

    def set_channel_duty(self, channel, duty):
        """Set the duty of ``channel`` on a 0..255 scale; 0 turns the output off."""
        self._check_channel(channel)
        if not 0 <= duty <= 255:
            raise ValueError(f"duty must be in range 0..255, got {duty}")
        value = duty * self.top // 255
        if value > 0:
            self._enabled[channel] = True
            self._compare[channel] = value
        else:
            self._enabled[channel] = False

    def is_enabled(self, channel):
        """Return whether the output of ``channel`` is connected."""
        self._check_channel(channel)
        return self._enabled[channel]

    def compare_value(self, channel):
        """Return the compare register of ``channel``."""
        self._check_channel(channel)
        return self._compare[channel]


class EdgeDetector:
    """Turns sampled quadrature A/B levels into direction events.

    ``callback`` is called with ``(channel, direction)`` for every change
    of an A line, ``direction`` being +1 or -1.
    """

    def __init__(self, callback, channels=EXTINT_CHANNELS):
        self._callback = callback
        self._last_a = [False] * channels

    def poll(self, a_states, b_states):
        """Compare the new A/B levels with the previous ones and report edges."""
        a_now = [bool(level) for level in a_states]
        b_now = [bool(level) for level in b_states]
        if len(a_now) != len(self._last_a) or len(b_now) != len(self._last_a):
            raise ValueError(f"expected {len(self._last_a)} levels per line")
        for channel, (a, b, last) in enumerate(zip(a_now, b_now, self._last_a)):
            if last and not a:
                self._callback(channel, 1 if b else -1)
            elif a and not last:
                self._callback(channel, -1 if b else 1)
        self._last_a = a_now


class Uart:
    """Serial port with ring buffers on both directions."""

    def __init__(self, baud, tx_size=UART_TX_BUFFER_SIZE, rx_size=UART_RX_BUFFER_SIZE):
        if baud <= 0:
            raise ValueError(f"baud rate must be positive, got {baud}")
        self.baud = baud
        self.ubrr = F_CPU // 16 // baud - 1
        self._tx = CircularBuffer(tx_size)
        self._rx = CircularBuffer(rx_size)
        self.tx_interrupt_enabled = False

    def receive(self, byte):
        """Store a byte arriving from the line, overwriting the oldest if full."""
        self._rx.put(byte)

    def send(self, data):
        """Queue ``data`` (bytes or ASCII text) for transmission."""
        if isinstance(data, str):
            data = data.encode("ascii")
        for byte in bytes(data):
            self._tx.put(byte)
            self.tx_interrupt_enabled = True

    def pending(self):
        """Return the number of received bytes waiting to be read."""
        return len(self._rx)

    def read(self):
        """Return the oldest received byte."""
        return self._rx.get()

    def transmit_byte(self):
        """Take the next queued byte off the line, or ``None`` if nothing is queued."""
        byte = self._tx.get() if len(self._tx) else None
        if not len(self._tx):
            self.tx_interrupt_enabled = False
        return byte