"""Serial port listing, configuration and communication through termios."""

__version__ = "0.1.0"