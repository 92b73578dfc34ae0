"""Controller tying together the actuators, encoders and serial protocol."""

from .actuator import ACTUATOR_RANGE, Actuator
from .encoder import Encoder
from .hardware import EdgeDetector, GpioPort, PwmTimer, Uart
from .logger import ENDL, Logger
from .protocol import FrameParser, generate_answer

VERSION = "v1.08"
UART_BAUD = 9600
ACTUATOR_COUNT = 3
STATUS_PERIOD_MS = 200

# (encoder reversed, direction pin, PWM channel, actuator reversed)
_CHANNELS = (
    (True, 4, 0, True),
    (False, 5, 1, False),
    (False, 6, 2, False),
)


def _half(value):
    return value // 2 if value >= 0 else -(-value // 2)


def _int16(value):
    return (value + 0x8000) % 0x10000 - 0x8000


class Controller:
    """Runs the three actuators from serial requests and reports their status."""

    def __init__(self):
        self.uart = Uart(UART_BAUD)
        self.logger = Logger(self.uart.send)
        self.gpio = GpioPort("D")
        self.pwm = PwmTimer()
        self.encoders = []
        self.actuators = []
        for encoder_reversed, pin, channel, reverse in _CHANNELS:
            encoder = Encoder(reversed=encoder_reversed)
            self.encoders.append(encoder)
            self.actuators.append(
                Actuator(encoder, self.pwm, self.gpio, pin, channel, reverse=reverse)
            )
        self.parser = FrameParser(self.on_frame)
        self.edge_detector = EdgeDetector(self.on_edge)
        self._next_status_time = 0

    def start(self):
        """Print the start banner and home every actuator."""
        self.logger.print("Start programu\n")
        self.logger.print("Wersja: ")
        self.logger.print(VERSION)
        self.logger.print(ENDL)
        self.logger.print_value("Liczba silownikow: ", ACTUATOR_COUNT)
        self.logger.print_value("Zakres pracy: ", ACTUATOR_RANGE)
        self.logger.print(ENDL)
        for actuator in self.actuators:
            actuator.start_homing()

    def on_edge(self, channel, direction):
        """Count one encoder edge on ``channel``."""
        self.encoders[channel].update(direction)

    def on_frame(self, fields):
        """Handle a parsed request: target positions followed by a homing flag."""
        if len(fields) - 1 != ACTUATOR_COUNT:
            return
        if fields[-1] & 0xFF == 1:
            for actuator in self.actuators:
                actuator.start_homing()
            return
        for actuator, position in zip(self.actuators, fields):
            actuator.set_target_pos(_int16(position * 2))

    def status_frame(self):
        """Return the answer frame with positions, targets and error codes."""
        fields = []
        for actuator in self.actuators:
            fields.append(_half(actuator.current_pos))
            fields.append(_half(actuator.target_pos))
        fields.extend(int(actuator.error_code) for actuator in self.actuators)
        return generate_answer(fields)

    def step(self, now):
        """Run one pass of the main loop at time ``now`` in milliseconds.

        Returns the status frame if one was sent during this pass.
        """
        while self.uart.pending():
            self.parser.feed_byte(self.uart.read())

        for encoder, actuator in zip(self.encoders, self.actuators):
            encoder.process(now)
            actuator.process(now)

        if self._next_status_time <= now:
            frame = self.status_frame()
            self.uart.send(frame)
            self._next_status_time = now + STATUS_PERIOD_MS
            return frame
        return None