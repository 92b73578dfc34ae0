"""Integer PID controller with output ramping."""

from dataclasses import dataclass, field


def _trunc_div(numerator, denominator):
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _int16(value):
    return (value + 0x8000) % 0x10000 - 0x8000


@dataclass
class Pid:
    """PID controller working on integers.

    The weighted sum of the terms is divided by ``scale_factor``, clamped to
    the output range, and the output changes by ``ramp_rate`` per update.
    """

    kp: int
    ki: int
    kd: int
    output_min: int
    output_max: int
    integral_limit: int
    ramp_rate: int
    scale_factor: int
    setpoint: int = field(default=0, init=False)
    integral: int = field(default=0, init=False)
    prev_error: int = field(default=0, init=False)
    last_output: int = field(default=0, init=False)

    def __post_init__(self):
        if self.scale_factor == 0:
            raise ValueError("scale_factor must not be zero")

    def update(self, current_value):
        """Return the next output for the measured ``current_value``."""
        error = self.setpoint - current_value
        derivative = error - self.prev_error

        if error == 0:
            self.integral = 0
        self.integral = max(-self.integral_limit, min(self.integral_limit, self.integral + error))

        output = _trunc_div(
            self.kp * error + self.ki * self.integral + self.kd * derivative,
            self.scale_factor,
        )
        output = max(self.output_min, min(self.output_max, output))

        if output > self.last_output:
            output = min(self.last_output + self.ramp_rate, self.output_max)
        elif output < self.last_output:
            output = max(self.last_output - self.ramp_rate, self.output_min)

        self.last_output = output
        self.prev_error = error
        return _int16(output)