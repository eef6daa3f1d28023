"""Command line tool: send a character to a serial device and print its reply."""

from __future__ import annotations

import argparse
import sys
import time
from typing import TextIO

from termport.port import PortSettings, SerialPort, SerialPortError
from termport.ports import format_port_list, list_serial_ports

_RULE = "+" + "-" * 36 + "+\n"
_BANNER = (
    "\n+--------------------------------------------------+"
    "\n| Linux Serial Port Programming (termios API)      |"
    "\n+--------------------------------------------------+"
    "\n[Bi-Directional Communication (Read/Write)]\n"
)


def prompt_port(stdin: TextIO | None = None, stdout: TextIO | None = None) -> str:
    """List the serial devices found, ask for one and return the name typed.

    Everything from the first newline on is dropped; at end of input the
    empty string is returned.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stdout.write("\n listing available serial ports \n")
    stdout.write(_RULE)
    stdout.write(format_port_list(list_serial_ports()))
    stdout.write(_RULE)
    stdout.write("\nEnter the serial port device (e.g., /dev/ttyUSB0)-> ")
    stdout.flush()
    line = stdin.readline()
    return line.split("\n", 1)[0]


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the command."""
    parser = argparse.ArgumentParser(
        prog="termport",
        description=(
            "Open a serial device, send a character and print the reply. "
            "Without a device name the available devices are listed and "
            "one is asked for."
        ),
    )
    parser.add_argument("port", nargs="?", help="serial device, e.g. /dev/ttyACM0")
    parser.add_argument(
        "--open-only",
        action="store_true",
        help="only open and close the device",
    )
    parser.add_argument("--baudrate", type=int, default=9600, help="default 9600")
    parser.add_argument("--send", default="A", help="text to send (default A)")
    parser.add_argument(
        "--delay",
        type=float,
        default=3.0,
        help="seconds to wait after opening, while the board resets (default 3)",
    )
    parser.add_argument(
        "--vmin", type=int, default=25, help="minimum bytes per read (default 25)"
    )
    parser.add_argument(
        "--vtime",
        type=int,
        default=10,
        help="read timeout in tenths of a second (default 10)",
    )
    parser.add_argument(
        "--size", type=int, default=99, help="most bytes to read (default 99)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="report every step"
    )
    return parser


def _exchange(port: SerialPort, settings: PortSettings, args: argparse.Namespace) -> int:
    verbose = args.verbose
    if verbose:
        print(f"\nDelay for {args.delay:g} seconds, for the board to get stabilized")
    if args.delay > 0:
        time.sleep(args.delay)

    try:
        port.configure(settings)
    except SerialPortError as exc:
        print(f"\n{exc}", file=sys.stderr)
        return 1
    if verbose:
        print("\nSuccessfully updated termios settings")

    try:
        port.flush()
    except SerialPortError as exc:
        print(f"tcflush: {exc}", file=sys.stderr)

    payload = args.send.encode("utf-8")
    try:
        written = port.write(payload)
        print(f"\nCharacter Send       = {args.send}")
        print(f"Number of Bytes Send = {written}")
        received = port.read(args.size)
    except SerialPortError as exc:
        print(f"\n{exc}", file=sys.stderr)
        return 1

    text = received.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    print(f"\nBytes Received from Serial Port = {len(received)} ")
    print(f"\nData Received from Serial Port  = {text}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the command; return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = PortSettings(
            baudrate=args.baudrate,
            output_processing=False,
            vmin=args.vmin,
            vtime=args.vtime,
        )
    except ValueError as exc:
        parser.error(str(exc))
    if args.size < 1:
        parser.error(f"size must be at least 1, not {args.size}")

    if args.verbose:
        print(_BANNER)
    path = args.port if args.port is not None else prompt_port()

    port = SerialPort(path)
    try:
        port.open()
    except SerialPortError as exc:
        print(f"\n{exc}", file=sys.stderr)
        return 1
    try:
        print(f"\nConnection to Port {path} Opened fd = {port.fileno()} ")
        if args.open_only:
            return 0
        return _exchange(port, settings, args)
    finally:
        port.close()


if __name__ == "__main__":
    sys.exit(main())