from __future__ import annotations

from typing import TextIO

from packlook.cmd_base import Base


def output_of(stream: TextIO) -> str:
    """Everything written to a captured command stream so far."""
    stream.flush()
    stream.seek(0)
    return stream.read()


def assert_status(cmd: Base, expected: int) -> None:
    assert cmd.status == expected, f"exit status {cmd.status}, wanted {expected}"


def assert_stdout(stdout: TextIO, expected: str) -> None:
    data = output_of(stdout)
    assert data == expected, f"stdout was {data!r}, wanted {expected!r}"


def assert_stderr(stderr: TextIO, expected: str) -> None:
    data = output_of(stderr)
    assert data == expected, f"stderr was {data!r}, wanted {expected!r}"
