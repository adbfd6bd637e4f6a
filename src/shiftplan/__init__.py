"""shiftplan - monthly shift schedule generation, validation and statistics."""
__version__ = "0.1.0"
