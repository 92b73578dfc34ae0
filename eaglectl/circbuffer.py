"""Fixed-size ring buffer of bytes."""


class CircularBuffer:
    """Byte FIFO whose size is a power of two.

    Writing to a full buffer overwrites the oldest element.
    """

    def __init__(self, size):
        if size <= 0 or size & (size - 1):
            raise ValueError(f"buffer size must be a power of two, got {size}")
        self._data = bytearray(size)
        self._size = size
        self._mask = size - 1
        self._head = 0
        self._tail = 0

    @property
    def size(self):
        return self._size

    def put(self, element):
        """Append a byte, dropping the oldest one if the buffer is full."""
        if len(self) == self._size:
            self._tail += 1
        self._data[self._head & self._mask] = element & 0xFF
        self._head += 1

    def get(self):
        """Remove and return the oldest byte."""
        if not len(self):
            raise IndexError("get from an empty buffer")
        value = self._data[self._tail & self._mask]
        self._tail += 1
        return value

    def clear(self):
        """Discard all stored bytes."""
        self._head = 0
        self._tail = 0

    def capacity(self):
        """Return how many bytes can still be put before the buffer is full."""
        return (self._tail - self._head - 1) & self._mask

    def __len__(self):
        return self._head - self._tail