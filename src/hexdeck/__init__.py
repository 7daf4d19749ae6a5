"""hexdeck menubar companion: keeps the local hexdeck server running."""

__version__ = "0.1.0"
