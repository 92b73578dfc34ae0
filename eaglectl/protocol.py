"""Serial text protocol: request parsing and answer generation.

Requests look like ``MMNR33,<f1>,<f2>,...,<crc>`` terminated by CR or LF.
The CRC covers everything up to and including the last comma; a CRC field
of 0 disables the check. Answers look like ``MMNT44,<f1>,...,<crc>\\r\\n``.
"""

from .crc import crc8

CHANNELS = 3
REQUEST_PREFIX = b"MMNR33,"
RESPONSE_PREFIX = "MMNT44,"

FRAME_SIZE = 64
FIELD_BUFFER_SIZE = 8
MAX_FIELDS = 16


def _int16(value):
    return (value + 0x8000) % 0x10000 - 0x8000


def parse_digits(text):
    """Convert a string of decimal digits to a 16-bit signed integer.

    Characters are not validated: each one contributes its code minus
    the code of ``'0'``, and the result wraps like a 16-bit integer.
    """
    codes = text.encode("latin-1") if isinstance(text, str) else bytes(text)
    value = 0
    for code in codes:
        value = _int16(value * 10 + (code - ord("0")))
    return value


def generate_answer(fields):
    """Return the answer frame carrying ``fields``."""
    body = RESPONSE_PREFIX + "".join(f"{int(value)}," for value in fields)
    crc = crc8(body.encode("ascii"))
    return f"{body}{crc}\r\n"


class FrameParser:
    """Byte-by-byte request parser.

    ``callback`` is called with the list of fields of every accepted
    frame, the CRC field excluded.
    """

    def __init__(self, callback):
        self._callback = callback
        self._frame = bytearray(FRAME_SIZE)
        self._field_buffer = bytearray(FIELD_BUFFER_SIZE)
        self._fields = [0] * MAX_FIELDS
        self._reset()

    def _reset(self):
        self._field_buffer_index = 0
        self._prefix_index = 0
        self._frame_index = 0
        self._field_num = 0
        self._last_comma_index = 0

    def _current_field(self):
        return parse_digits(self._field_buffer[: self._field_buffer_index])

    def feed_byte(self, byte):
        """Process one received byte."""
        if byte in (0x0D, 0x0A):
            self._finish_frame()
        elif self._prefix_index >= len(REQUEST_PREFIX):
            self._field_byte(byte)
        elif byte == REQUEST_PREFIX[self._prefix_index]:
            self._frame[self._frame_index] = byte
            self._frame_index += 1
            self._prefix_index += 1
        else:
            self._reset()

    def feed(self, data):
        """Process every byte of ``data``."""
        for byte in bytes(data):
            self.feed_byte(byte)

    def _finish_frame(self):
        if self._prefix_index < len(REQUEST_PREFIX):
            self._reset()
            return
        self._fields[self._field_num] = self._current_field()
        self._field_num += 1

        frame_crc = self._fields[self._field_num - 1] & 0xFF
        crc = crc8(self._frame[: self._last_comma_index])
        if crc == frame_crc or frame_crc == 0:
            self._callback(self._fields[: self._field_num - 1])
        self._reset()

    def _field_byte(self, byte):
        self._frame[self._frame_index] = byte
        if self._frame_index < FRAME_SIZE - 1:
            self._frame_index += 1
        else:
            self._reset()

        if byte == ord(","):
            self._fields[self._field_num] = self._current_field()
            self._last_comma_index = self._frame_index
            self._field_buffer_index = 0
            if self._field_num < MAX_FIELDS - 2:
                self._field_num += 1
            else:
                self._reset()
        elif self._field_buffer_index < FIELD_BUFFER_SIZE - 1:
            self._field_buffer[self._field_buffer_index] = byte
            self._field_buffer_index += 1
        else:
            self._reset()