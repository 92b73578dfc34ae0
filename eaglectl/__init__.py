"""Control logic for a three-axis encoder-driven linear actuator rig."""

__version__ = "1.0.8"