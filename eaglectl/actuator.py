"""Linear actuator control: homing, PID positioning and blockage handling."""

from enum import Enum, IntEnum

from .hardware import PinMode
from .pid import Pid

ACTUATOR_OFFSET = 5
ACTUATOR_RANGE = 505
ATTEMPT_COUNT = 3
ATTEMPT_TIME_MS = 500

PROCESS_PERIOD_MS = 1

PID_KP = 5000
PID_KI = 500
PID_KD = 2400
PID_INTEGRAL_LIMIT = 200
PID_RAMP_RATE = 5
DEFAULT_PID_SCALE_FACTOR = 1000

RETREAT_DISTANCE = 40
HOMING_SETPOINT = -1000
HOMING_SETTLE_MS = 2000
HOMING_RETURN_TIMEOUT_MS = 10000
HOMING_TIMEOUT_MS = 5000
HOMING_SPEED = 120


def _int16(value):
    return (value + 0x8000) % 0x10000 - 0x8000


def _uint16(value):
    return value & 0xFFFF


class ActuatorState(Enum):
    NORMAL = 0
    ATTEMPTING_RETURN = 1
    ATTEMPTING = 2
    ERROR = 3
    HOMING_RETURN = 4
    HOMING = 5


class ActuatorError(IntEnum):
    OK = 0x00
    BLOCKED = 0x01
    OK_HOMING = 0x02


_HOMING_STATES = (ActuatorState.HOMING_RETURN, ActuatorState.HOMING)
_BUSY_STATES = _HOMING_STATES + (ActuatorState.ATTEMPTING, ActuatorState.ATTEMPTING_RETURN)
_PID_STATES = (
    ActuatorState.NORMAL,
    ActuatorState.ATTEMPTING,
    ActuatorState.ATTEMPTING_RETURN,
    ActuatorState.HOMING_RETURN,
)


class Actuator:
    """One actuator driven by a direction pin and a PWM channel.

    Positions are in encoder pulses. Call :meth:`process` with the current
    time in milliseconds as often as possible.
    """

    def __init__(
        self,
        encoder,
        pwm,
        dir_port,
        dir_pin,
        pwm_channel,
        reverse=False,
        pid_scale_factor=DEFAULT_PID_SCALE_FACTOR,
    ):
        self.encoder = encoder
        self.pwm = pwm
        self.dir_port = dir_port
        self.dir_pin = dir_pin
        self.pwm_channel = pwm_channel
        self.reverse = bool(reverse)

        self.state = ActuatorState.NORMAL
        self.error_code = ActuatorError.OK
        self.target_pos = 0
        self.speed = 0
        self.attempt_count = 0
        self.blocked_pos = 0
        self._last_speed = 0
        self._last_time = 0
        self._stop_time = 0
        self._homing_time = 0

        self.pid = Pid(
            kp=PID_KP,
            ki=PID_KI,
            kd=PID_KD,
            output_min=-255,
            output_max=255,
            integral_limit=PID_INTEGRAL_LIMIT,
            ramp_rate=PID_RAMP_RATE,
            scale_factor=pid_scale_factor,
        )
        dir_port.configure_pin(dir_pin, PinMode.OUTPUT)

        self._handlers = {
            ActuatorState.NORMAL: self._process_normal,
            ActuatorState.ATTEMPTING: self._process_attempting,
            ActuatorState.ATTEMPTING_RETURN: self._process_attempting_return,
            ActuatorState.HOMING_RETURN: self._process_homing_return,
            ActuatorState.HOMING: self._process_homing,
            ActuatorState.ERROR: self._process_error,
        }

    @property
    def current_pos(self):
        return self.encoder.count

    def start_homing(self):
        """Drive back to the end stop to find the zero position."""
        if self.state in _HOMING_STATES:
            return
        self.state = ActuatorState.HOMING_RETURN
        self.error_code = ActuatorError.OK_HOMING
        self._homing_time = 0
        self._stop_time = 0
        self.target_pos = 0
        self.pid.setpoint = HOMING_SETPOINT

    def set_target_pos(self, target_pos):
        """Move to ``target_pos``; ignored while homing or retrying."""
        if self.state in _BUSY_STATES:
            return
        target_pos = min(target_pos, ACTUATOR_RANGE * 2)
        if self.target_pos == target_pos:
            return
        self.target_pos = target_pos
        self.state = ActuatorState.NORMAL
        self.error_code = ActuatorError.OK
        self.attempt_count = 0
        self.pid.setpoint = target_pos

    def process(self, current_time):
        """Advance the control loop to ``current_time`` (milliseconds)."""
        time_delta = _uint16(current_time - self._last_time)
        if time_delta < PROCESS_PERIOD_MS:
            return
        self._last_time = current_time

        if self.state in _PID_STATES:
            self.speed = self.pid.update(self.current_pos)

        self._handlers[self.state](time_delta)
        self._control(self.speed)

    def _is_stopped(self):
        return self.encoder.speed == 0

    def _is_blocked(self):
        return self.speed != 0 and self.encoder.speed == 0

    def _retreat(self):
        self.blocked_pos = self.current_pos
        self._stop_time = 0
        if self.blocked_pos < self.target_pos:
            self.pid.setpoint = self.blocked_pos - RETREAT_DISTANCE
        else:
            self.pid.setpoint = self.blocked_pos + RETREAT_DISTANCE
        self.state = ActuatorState.ATTEMPTING_RETURN

    def _fail(self):
        self.speed = 0
        self.error_code = ActuatorError.BLOCKED
        self.state = ActuatorState.ERROR

    def _process_normal(self, time_delta):
        if not self._is_blocked():
            self._stop_time = 0
            return
        self._stop_time = _uint16(self._stop_time + time_delta)
        if self._stop_time >= ATTEMPT_TIME_MS:
            self.attempt_count = 0
            self._retreat()

    def _process_attempting(self, time_delta):
        if not self._is_blocked():
            return
        self._stop_time = _uint16(self._stop_time + time_delta)
        if self._stop_time < ATTEMPT_TIME_MS:
            return
        attempt = self.attempt_count
        self.attempt_count = (self.attempt_count + 1) & 0xFF
        if attempt < ATTEMPT_COUNT - 1:
            self._retreat()
        else:
            self._stop_time = 0
            self._fail()

    def _process_attempting_return(self, time_delta):
        if abs(self.current_pos - self.blocked_pos) >= RETREAT_DISTANCE:
            self.pid.setpoint = self.target_pos
            self.state = ActuatorState.ATTEMPTING

    def _process_homing_return(self, time_delta):
        if self._is_stopped():
            self._stop_time = _uint16(self._stop_time + time_delta)
            if self._stop_time >= HOMING_SETTLE_MS:
                self._homing_time = 0
                self._stop_time = 0
                self.encoder.count = 0
                self.speed = HOMING_SPEED
                self.state = ActuatorState.HOMING
        else:
            self._homing_time = _uint16(self._homing_time + time_delta)
            self._stop_time = 0
            if self._homing_time >= HOMING_RETURN_TIMEOUT_MS:
                self.encoder.count = 0
                self._fail()

    def _process_homing(self, time_delta):
        if self.encoder.count > 0:
            self.speed = 0
            self.encoder.count = _int16(-ACTUATOR_OFFSET * 2)
            self.pid.setpoint = 0
            self._stop_time = 0
            self.error_code = ActuatorError.OK
            self.state = ActuatorState.NORMAL
            return
        self._homing_time = _uint16(self._homing_time + time_delta)
        if self._homing_time >= HOMING_TIMEOUT_MS:
            self.encoder.count = 0
            self._fail()

    def _process_error(self, time_delta):
        self.speed = 0

    def _control(self, speed):
        forward = (speed > 0 and not self.reverse) or (speed < 0 and self.reverse)
        self.dir_port.set_pin(self.dir_pin, 0 if forward else 1)
        if self.speed == self._last_speed:
            return
        self.pwm.set_channel_duty(self.pwm_channel, min(abs(speed), 255))
        self._last_speed = self.speed