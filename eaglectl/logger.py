"""Text logger that hands every string to a sink callable."""

ENDL = "\n"


class Logger:
    """Sends text pieces to ``sink``, a callable taking one string."""

    def __init__(self, sink):
        self._sink = sink

    def print(self, text):
        """Send ``text`` as it is."""
        self._sink(text)

    def println(self, text):
        """Send ``text`` followed by a line end."""
        self.print(text)
        self.print(ENDL)

    def print_value(self, label, value):
        """Send ``label``, then the decimal ``value`` and a line end."""
        self.print(label)
        self.print(f"{int(value)}{ENDL}")