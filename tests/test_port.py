import errno
import os
import termios

import pytest

from termport.port import (
    PortSettings,
    SerialPort,
    SerialPortError,
    apply_settings,
    baud_constant,
    baud_value,
)


@pytest.fixture
def pty_pair():
    master, slave = os.openpty()
    path = os.ttyname(slave)
    yield master, path
    os.close(master)
    os.close(slave)


def _blank_attributes(fill):
    cc = [0] * 32
    return [fill, fill, fill, fill, termios.B4800, termios.B4800, cc]


def test_baud_constant_matches_termios():
    assert baud_constant(9600) == termios.B9600
    assert baud_constant(19200) == termios.B19200


@pytest.mark.parametrize("rate", [4800, 9600, 19200, 115200])
def test_baud_round_trip(rate):
    assert baud_value(baud_constant(rate)) == rate


def test_unsupported_baud_rate():
    with pytest.raises(ValueError):
        baud_constant(12345)


def test_unknown_baud_constant():
    with pytest.raises(ValueError):
        baud_value(-1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"baudrate": 12345},
        {"data_bits": 9},
        {"parity": "X"},
        {"stop_bits": 3},
        {"vmin": 256},
        {"vtime": -1},
    ],
)
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValueError):
        PortSettings(**kwargs)


def test_apply_default_settings_gives_raw_8n1():
    attrs = _blank_attributes(~0 & 0xFFFFFFFF)
    iflag, oflag, cflag, lflag, ispeed, ospeed, _ = apply_settings(
        attrs, PortSettings()
    )
    assert lflag & (termios.ICANON | termios.ECHO | termios.ECHOE | termios.ISIG) == 0
    assert iflag & (termios.IXON | termios.IXOFF | termios.IXANY) == 0
    assert cflag & (termios.PARENB | termios.CSTOPB) == 0
    assert cflag & termios.CSIZE == termios.CS8
    assert cflag & (termios.CREAD | termios.CLOCAL) == termios.CREAD | termios.CLOCAL
    if hasattr(termios, "CRTSCTS"):
        assert cflag & termios.CRTSCTS == 0
    assert oflag & termios.OPOST == termios.OPOST
    assert ispeed == ospeed == termios.B9600


def test_apply_settings_sets_cc_and_output():
    attrs = _blank_attributes(0)
    settings = PortSettings(output_processing=False, vmin=25, vtime=10)
    _, oflag, cflag, _, _, _, cc = apply_settings(attrs, settings)
    assert oflag & termios.OPOST == 0
    assert cc[termios.VMIN] == 25
    assert cc[termios.VTIME] == 10
    assert cflag & termios.CSIZE == termios.CS8


def test_apply_settings_parity_and_stop_bits():
    attrs = _blank_attributes(0)
    _, _, cflag, _, _, _, _ = apply_settings(
        attrs, PortSettings(parity="O", stop_bits=2, data_bits=7)
    )
    assert cflag & termios.PARENB
    assert cflag & termios.PARODD
    assert cflag & termios.CSTOPB
    assert cflag & termios.CSIZE == termios.CS7


def test_apply_settings_leaves_input_untouched():
    attrs = _blank_attributes(0)
    snapshot = [list(x) if isinstance(x, list) else x for x in attrs]
    apply_settings(attrs, PortSettings(vmin=5))
    assert attrs == snapshot


def test_open_missing_device_raises():
    port = SerialPort("/nonexistent/ttyACM0")
    with pytest.raises(SerialPortError) as info:
        port.open()
    assert info.value.errno == errno.ENOENT
    assert port.is_open is False


def test_fileno_requires_open_port():
    with pytest.raises(SerialPortError):
        SerialPort("/dev/null").fileno()


def test_context_manager_opens_and_closes(pty_pair):
    _, path = pty_pair
    with SerialPort(path) as port:
        assert port.fileno() >= 0
    assert port.is_open is False
    port.close()
    assert port.is_open is False


def test_configure_non_terminal_raises(tmp_path):
    target = tmp_path / "plain"
    target.write_text("")
    with SerialPort(str(target)) as port:
        with pytest.raises(SerialPortError):
            port.configure(PortSettings())


def test_configure_sets_baudrate(pty_pair):
    _, path = pty_pair
    with SerialPort(path) as port:
        port.configure(PortSettings(baudrate=19200))
        assert port.input_baudrate() == 19200
        assert port.output_baudrate() == 19200
        port.configure(PortSettings())
        assert port.input_baudrate() == 9600


def test_write_reaches_other_end(pty_pair):
    master, path = pty_pair
    with SerialPort(path) as port:
        port.configure(PortSettings())
        port.flush()
        assert port.write(b"A") == 1
        assert os.read(master, 1) == b"A"


def test_read_gets_data_from_other_end(pty_pair):
    master, path = pty_pair
    with SerialPort(path) as port:
        port.configure(PortSettings(vmin=1, vtime=0))
        os.write(master, b"hi")
        received = b""
        while len(received) < 2:
            received += port.read(2 - len(received))
        assert received == b"hi"


def test_write_on_closed_port_raises():
    with pytest.raises(SerialPortError):
        SerialPort("/dev/null").write(b"A")


def test_double_open_raises(pty_pair):
    _, path = pty_pair
    with SerialPort(path) as port:
        with pytest.raises(SerialPortError):
            port.open()