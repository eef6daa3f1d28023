# termport

A small toolkit for serial ports on Linux. It is built on the standard `termios`
module and has no other dependencies.

It can:

- list the serial devices that are present (`/dev/ttyUSB*` and `/dev/ttyACM*` by
  default);
- open a port read-write without making it the controlling terminal;
- configure the port's baud rate, data bits, parity, stop bits, flow control,
  canonical mode, output processing and the `VMIN`/`VTIME` read settings;
- report the input and output baud rates the port ended up with;
- flush, write to and read from the port.

## Installation

```
pip install .
```

## Command line

```
termport [port] [options]
```

Without a `port` argument the command prints the serial devices it finds and asks
for one on standard input. It then opens the port and prints its file descriptor.
Next it waits for the board to settle (opening the port resets an Arduino),
configures the port for raw 8N1 communication with output processing turned off,
flushes both buffers, sends the text given with `--send` and prints how many
bytes were sent. Last, it reads the reply and prints how many bytes were received
and the reply itself.

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--open-only` | off | only open and close the port |
| `--baudrate N` | 9600 | baud rate |
| `--send TEXT` | `A` | text to send |
| `--delay SECONDS` | 3 | wait after opening the port |
| `--vmin N` | 25 | minimum bytes per read (`VMIN`, 0–255) |
| `--vtime N` | 10 | read timeout in tenths of a second (`VTIME`, 0–255) |
| `--size N` | 99 | the most bytes to read, at least 1 |
| `-v`, `--verbose` | off | print a banner and report each step |

The command exits with status 0 on success. It exits with 1 when the port
cannot be opened, configured, written to or read from. A failed flush is
reported and the run goes on. An unsupported baud rate or an out-of-range
`--vmin`, `--vtime` or `--size` is rejected as a usage error.

## Library use

```python
from termport.ports import list_serial_ports, format_port_list
from termport.port import SerialPort, PortSettings

print(format_port_list(list_serial_ports(["/dev/ttyUSB*", "/dev/ttyACM*"])), end="")

with SerialPort("/dev/ttyACM0") as port:
    port.configure(PortSettings(output_processing=False, vmin=25, vtime=10))
    print(port.input_baudrate(), port.output_baudrate())
    port.flush()
    port.write(b"A")
    print(port.read(99))
```

- `list_serial_ports(patterns=None)` returns the sorted, de-duplicated paths that
  match the glob patterns. `format_port_list(ports)` returns them one per line.
- `PortSettings` is a frozen dataclass. Its defaults give 9600 baud, 8 data
  bits, no parity, 1 stop bit, non-canonical input and no flow control. Output
  processing stays on, and `VMIN` and `VTIME` are left as they are. Invalid
  values raise `ValueError`.
- `apply_settings(attributes, settings)` returns a changed copy of a
  `termios.tcgetattr` list without touching any device.
- `baud_constant(rate)` and `baud_value(constant)` convert between baud rates
  and `termios` speed constants. Both raise `ValueError` for values they do not
  know.
- `SerialPort` can be used as a context manager or through `open()` and
  `close()`. Closing twice is harmless. `write()` accepts bytes or an ASCII
  string.

Failures to open, configure, flush, read from or write to a port raise
`SerialPortError`, a subclass of `OSError`.

## What it does not do

`termport` performs a single exchange: one write followed by one read. It has
no interactive terminal or continuous monitor mode, and it does not handle
modem control lines. It works only on POSIX systems that provide `termios`.

## Tests

```
pip install .[test]
pytest
```