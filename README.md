# eaglectl

`eaglectl` holds the control logic of a small motion rig with three linear
actuators. Each actuator is driven by a PWM channel plus a direction pin and
reports its position through a quadrature encoder. A host talks to the rig
over a serial line using short ASCII frames protected by a CRC-8.

The package models every part of that loop in plain Python, so the behaviour
of the controller can be exercised, tested and simulated in software. It has
no dependencies outside the standard library.

## What is inside

| Module                 | Purpose                                                        |
|------------------------|----------------------------------------------------------------|
| `eaglectl.crc`         | `crc8(data)` – CRC-8, polynomial `0x07`, initial value `0x00`  |
| `eaglectl.circbuffer`  | `CircularBuffer` – power-of-two ring buffer, overwrites when full |
| `eaglectl.logger`      | `Logger` – text output with `print`, `println`, `print_value`  |
| `eaglectl.encoder`     | `Encoder` – edge counting and speed estimation every 10 ms     |
| `eaglectl.pid`         | `Pid` – integer PID with integral clamp, output clamp and ramp |
| `eaglectl.protocol`    | `FrameParser`, `generate_answer`, `parse_digits`               |
| `eaglectl.hardware`    | `GpioPort`, `PwmTimer`, `EdgeDetector`, `Uart`, `PinMode`      |
| `eaglectl.actuator`    | `Actuator`, `ActuatorState`, `ActuatorError`                   |
| `eaglectl.core`        | `Controller` – ties actuators, encoders and protocol together  |

## The serial protocol

A request from the host looks like this:

```
MMNR33,<pos0>,<pos1>,<pos2>,<homing>,<crc>\r\n
```

* A frame ends at a CR or an LF byte.
* The three positions are target positions in protocol units; the controller
  doubles them before handing them to the actuators, and targets above 1010
  encoder pulses are clamped.
* If `<homing>` is `1`, all actuators start the homing sequence and the
  positions are ignored.
* `<crc>` is the CRC-8 of the frame from the `M` of the prefix up to and
  including the last comma after the prefix. A CRC of `0` disables the check.
* Frames with a wrong prefix, more than 64 bytes, too many fields or fields
  longer than 7 characters are dropped. Fields are read as decimal digits
  without validation (`parse_digits`).
* A request whose field count is not three positions plus the homing flag is
  ignored by `Controller.on_frame`.

Every 200 ms the controller produces a status frame:

```
MMNT44,<cur0>,<tgt0>,<cur1>,<tgt1>,<cur2>,<tgt2>,<err0>,<err1>,<err2>,<crc>\r\n
```

Current and target positions are halved back to protocol units. The error
codes are those of `ActuatorError`: `0` for OK, `1` for a blocked actuator
and `2` while homing is in progress.

## Actuator behaviour

Each `Actuator` runs a state machine (`ActuatorState`) once per millisecond:

* **Homing** (`start_homing`) drives the actuator back until the encoder
  reports no motion for two seconds, zeroes the encoder, then drives out until
  the first positive count and sets the position to a fixed offset of -10
  pulses. If the return phase keeps moving for 10 s, or the outward phase
  finds no count within 5 s, the actuator goes to the error state.
* **Normal** follows `target_pos` through the PID loop. If the motor is driven
  but the encoder reports no motion for 500 ms, the actuator backs off by 40
  pulses and tries again; after three more blocked attempts it enters the
  error state with `ActuatorError.BLOCKED` and stops.
* New targets are ignored while homing or retrying.

## Using it in Python

```python
from eaglectl.crc import crc8
from eaglectl.protocol import FrameParser, generate_answer

received = []
parser = FrameParser(received.append)
body = b"MMNR33,100,200,300,0,"
parser.feed(body + str(crc8(body)).encode() + b"\r\n")
# received == [[100, 200, 300, 0]]

print(generate_answer([1, 2, 3]), end="")
```

`Controller` from `eaglectl.core` is the top level:

```python
from eaglectl.core import Controller

controller = Controller()
controller.start()                 # banner to the UART, homes every actuator
for byte in b"MMNR33,100,200,300,0,0\n":
    controller.uart.receive(byte)  # bytes arriving from the host
frame = controller.step(0)         # parses input, runs the loop, may return a status frame
```

* `step(now)` drains received bytes into the parser, updates every encoder
  and actuator, and every 200 ms queues a status frame on the UART and
  returns it (otherwise `None`).
* `on_edge(channel, direction)` counts one encoder edge; `edge_detector.poll`
  turns sampled A/B levels into such edges.
* `on_frame(fields)` applies a decoded request; `status_frame()` returns the
  current status frame.
* Bytes queued for sending are taken off one at a time with
  `controller.uart.transmit_byte()`.

## What it does not do

The package does not open a serial port, read real input pins or drive real
outputs, and it has no command-line program or clock of its own. The caller
supplies incoming bytes, encoder edges and the current time in milliseconds,
and collects outgoing bytes from the `Uart` object.

## Running the tests

The test suite uses pytest, available through the `test` extra:

```
pip install -e ".[test]"
pytest
```