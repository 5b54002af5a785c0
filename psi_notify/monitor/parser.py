"""
Pressure Record Parser

Reads the kernel's PSI record format:

    some avg10=0.00 avg60=0.00 avg300=0.00 total=0
    full avg10=0.00 avg60=0.00 avg300=0.00 total=0

CPU records only guarantee the ``some`` line. Only the three averages are
used; the label and ``total`` are ignored. The files are backed by seq_file
in the kernel, so reading them line by line is consistent.

SPDX-License-Identifier: BUSL-1.1
"""

import logging
import math
from pathlib import Path

from psi_notify.monitor.models import PressureReading, PressureSample

logger = logging.getLogger(__name__)

# Longest valid line without total= is ~45 chars; total= is a 64-bit counter.
MAX_LINE_LENGTH = 256

AVERAGE_KEYS = ("avg10", "avg60", "avg300")


class PressureReadError(Exception):
    """Base class for failures reading a pressure file."""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


class PressureOpenError(PressureReadError):
    """The pressure file could not be opened or read."""


class PrematureEOFError(PressureReadError):
    """The pressure file ended before a required line."""


class UnparseableLineError(PressureReadError):
    """A pressure line did not contain the three averages."""


def parse_pressure_line(line: str) -> PressureSample:
    """
    Parse one PSI line into a PressureSample.

    Fields may appear in any order. Tokens without ``=`` (the label) and keys
    other than the averages (``total``) are ignored.

    Raises:
        ValueError: If any average is missing, duplicated, or not a
            finite non-negative number
    """
    averages: dict[str, float] = {}
    for token in line.split():
        key, sep, raw = token.partition("=")
        if not sep or key not in AVERAGE_KEYS:
            continue
        if key in averages:
            raise ValueError(f"duplicate field {key!r}")
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"invalid value for {key}: {raw!r}") from None
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"invalid value for {key}: {raw!r}")
        averages[key] = value

    missing = [key for key in AVERAGE_KEYS if key not in averages]
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")

    return PressureSample(
        ten=averages["avg10"],
        sixty=averages["avg60"],
        three_hundred=averages["avg300"],
    )


def _read_line(stream, path: Path, pressure_type: str) -> PressureSample:
    try:
        line = stream.readline(MAX_LINE_LENGTH + 1)
    except OSError as e:
        raise PressureOpenError(path, f"read failed: {e}") from e

    if not line:
        raise PrematureEOFError(path, f"premature end of input before '{pressure_type}' line")
    if len(line.rstrip("\n")) > MAX_LINE_LENGTH:
        raise UnparseableLineError(path, f"'{pressure_type}' line exceeds {MAX_LINE_LENGTH} characters")

    try:
        return parse_pressure_line(line)
    except ValueError as e:
        raise UnparseableLineError(path, f"can't parse '{pressure_type}': {e}") from e


def read_pressure(path: Path | str, has_full: bool) -> PressureReading:
    """
    Read a pressure file fresh and parse its averages.

    Args:
        path: Pressure file to open
        has_full: Whether the second ``full`` line is required

    Returns:
        PressureReading with ``full`` set only when requested

    Raises:
        PressureOpenError: The file could not be opened or read
        PrematureEOFError: A required line is missing
        UnparseableLineError: A required line is malformed
    """
    path = Path(path)
    try:
        stream = open(path, encoding="ascii", errors="replace")
    except OSError as e:
        raise PressureOpenError(path, f"open failed: {e.strerror or e}") from e

    with stream:
        some = _read_line(stream, path, "some")
        full = _read_line(stream, path, "full") if has_full else None

    logger.debug(f"Read {path}: some={some.values()} full={full.values() if full else None}")
    return PressureReading(some=some, full=full)
