"""Discovery of serial devices present on the system."""

from __future__ import annotations

import glob
from collections.abc import Iterable

DEFAULT_PATTERNS: tuple[str, ...] = ("/dev/ttyUSB*", "/dev/ttyACM*")


def list_serial_ports(patterns: Iterable[str] | None = None) -> list[str]:
    """Return the sorted device paths that match any of the glob patterns.

    With no patterns, USB serial adapters (``ttyUSB``) and CDC-ACM devices
    (``ttyACM``) under ``/dev`` are listed. A pattern that matches nothing
    adds nothing.
    """
    if patterns is None:
        patterns = DEFAULT_PATTERNS
    found: set[str] = set()
    for pattern in patterns:
        found.update(glob.glob(pattern))
    return sorted(found)


def format_port_list(ports: Iterable[str]) -> str:
    """Render port paths one per line, ending in a newline; empty if none."""
    return "".join(f"{port}\n" for port in ports)