"""Opening, configuring and talking to a serial port through termios."""

from __future__ import annotations

import os
import re
import termios
from dataclasses import dataclass

_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)

_BAUD_CONSTANTS: dict[int, int] = {
    int(name[1:]): getattr(termios, name)
    for name in dir(termios)
    if re.fullmatch(r"B\d+", name)
}
_BAUD_VALUES: dict[int, int] = {
    constant: rate for rate, constant in _BAUD_CONSTANTS.items()
}

_DATA_BITS = {
    5: termios.CS5,
    6: termios.CS6,
    7: termios.CS7,
    8: termios.CS8,
}
_CRTSCTS = getattr(termios, "CRTSCTS", 0)
_PARITIES = ("N", "E", "O")


class SerialPortError(OSError):
    """Raised when the serial device cannot be opened, configured or used."""


def baud_constant(baudrate: int) -> int:
    """Return the termios speed constant for a baud rate in bits per second."""
    try:
        return _BAUD_CONSTANTS[baudrate]
    except KeyError:
        raise ValueError(f"unsupported baud rate: {baudrate}") from None


def baud_value(constant: int) -> int:
    """Return the baud rate in bits per second for a termios speed constant."""
    try:
        return _BAUD_VALUES[constant]
    except KeyError:
        raise ValueError(f"unknown baud rate constant: {constant}") from None


@dataclass(frozen=True)
class PortSettings:
    """Line settings for a serial port; the defaults are 9600 8N1, raw input."""

    baudrate: int = 9600
    data_bits: int = 8
    parity: str = "N"
    stop_bits: int = 1
    canonical: bool = False
    software_flow_control: bool = False
    hardware_flow_control: bool = False
    output_processing: bool = True
    vmin: int | None = None
    vtime: int | None = None

    def __post_init__(self) -> None:
        baud_constant(self.baudrate)
        if self.data_bits not in _DATA_BITS:
            raise ValueError(f"data bits must be 5 to 8, not {self.data_bits}")
        if self.parity not in _PARITIES:
            raise ValueError(f"parity must be one of N, E, O, not {self.parity!r}")
        if self.stop_bits not in (1, 2):
            raise ValueError(f"stop bits must be 1 or 2, not {self.stop_bits}")
        for name in ("vmin", "vtime"):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 255:
                raise ValueError(f"{name} must be between 0 and 255, not {value}")


def _set(flags: int, mask: int, on: bool) -> int:
    return flags | mask if on else flags & ~mask


def apply_settings(attributes: list, settings: PortSettings) -> list:
    """Return a copy of tcgetattr-style attributes changed to match settings."""
    iflag, oflag, cflag, lflag, _, _, cc = attributes
    cc = list(cc)

    speed = baud_constant(settings.baudrate)

    lflag = _set(
        lflag,
        termios.ICANON | termios.ECHO | termios.ECHOE | termios.ISIG,
        settings.canonical,
    )
    iflag = _set(
        iflag,
        termios.IXON | termios.IXOFF | termios.IXANY,
        settings.software_flow_control,
    )
    cflag = _set(cflag, _CRTSCTS, settings.hardware_flow_control)
    cflag |= termios.CREAD | termios.CLOCAL

    cflag = _set(cflag, termios.PARENB, settings.parity != "N")
    cflag = _set(cflag, termios.PARODD, settings.parity == "O")
    cflag = _set(cflag, termios.CSTOPB, settings.stop_bits == 2)
    cflag = (cflag & ~termios.CSIZE) | _DATA_BITS[settings.data_bits]

    oflag = _set(oflag, termios.OPOST, settings.output_processing)

    if settings.vmin is not None:
        cc[termios.VMIN] = settings.vmin
    if settings.vtime is not None:
        cc[termios.VTIME] = settings.vtime

    return [iflag, oflag, cflag, lflag, speed, speed, cc]


class SerialPort:
    """A serial device opened read-write without becoming the controlling tty."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._fd: int | None = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def open(self) -> None:
        """Open the device; raise SerialPortError if it cannot be opened."""
        if self._fd is not None:
            raise SerialPortError(f"{self.path} is already open")
        try:
            self._fd = os.open(self.path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise SerialPortError(
                exc.errno, f"Failed to open serial port: {exc.strerror}", self.path
            ) from exc

    def close(self) -> None:
        """Close the device; closing twice does nothing."""
        if self._fd is not None:
            fd, self._fd = self._fd, None
            os.close(fd)

    def __enter__(self) -> SerialPort:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fileno(self) -> int:
        if self._fd is None:
            raise SerialPortError(f"{self.path} is not open")
        return self._fd

    def _attributes(self) -> list:
        try:
            return termios.tcgetattr(self.fileno())
        except termios.error as exc:
            raise SerialPortError(
                f"Failed to get termios settings of {self.path}: {exc}"
            ) from exc

    def configure(self, settings: PortSettings) -> None:
        """Apply settings to the device immediately."""
        attributes = apply_settings(self._attributes(), settings)
        try:
            termios.tcsetattr(self.fileno(), termios.TCSANOW, attributes)
        except termios.error as exc:
            raise SerialPortError(
                f"Failed to update termios settings of {self.path}: {exc}"
            ) from exc

    def input_baudrate(self) -> int:
        return baud_value(self._attributes()[_ISPEED])

    def output_baudrate(self) -> int:
        return baud_value(self._attributes()[_OSPEED])

    def flush(self) -> None:
        """Discard data waiting in both the input and output buffers."""
        try:
            termios.tcflush(self.fileno(), termios.TCIOFLUSH)
        except termios.error as exc:
            raise SerialPortError(f"tcflush failed on {self.path}: {exc}") from exc

    def write(self, data: bytes | str) -> int:
        """Write data and return the number of bytes written."""
        if isinstance(data, str):
            data = data.encode("ascii")
        try:
            return os.write(self.fileno(), data)
        except OSError as exc:
            raise SerialPortError(
                exc.errno, f"Failed to write to serial port: {exc.strerror}", self.path
            ) from exc

    def read(self, size: int) -> bytes:
        """Read up to size bytes, as the device's VMIN/VTIME settings allow."""
        try:
            return os.read(self.fileno(), size)
        except OSError as exc:
            raise SerialPortError(
                exc.errno, f"Failed to read from serial port: {exc.strerror}", self.path
            ) from exc