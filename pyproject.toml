[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "termport"
version = "0.1.0"
description = "List, open, configure and talk to serial ports on Linux through termios"
requires-python = ">=3.10"
dependencies = []
keywords = ["serial", "termios", "tty", "arduino", "uart"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
termport = "termport.cli:main"

[tool.setuptools.packages.find]
include = ["termport*"]

[tool.pytest.ini_options]
addopts = "-ra"
