from __future__ import annotations

import io
from functools import cached_property
from pathlib import Path
from typing import MutableMapping, TextIO

from packlook.repository import Repository


class Base:
    def __init__(
        self,
        _dir: Path,
        env: MutableMapping[str, str],
        args: list[str],
        stdin: TextIO,
        stdout: TextIO,
        stderr: TextIO,
    ):
        self.dir: Path = _dir
        self.env: MutableMapping[str, str] = env
        self.args: list[str] = args
        self.stdin: TextIO = stdin
        self.stdout: TextIO = stdout
        self.stderr: TextIO = stderr
        self.status: int | None = None

    @cached_property
    def repo(self) -> Repository:
        git_dir = self.env.get("GIT_DIR")
        if git_dir:
            return Repository(self.expanded_path(git_dir))
        return Repository(self.dir / ".git")

    def exit(self, status: int = 0) -> None:
        self.status = status
        raise ExitSignal(self.status)

    def execute(self) -> int:
        try:
            self.run()
            self.status = 0
        except ExitSignal as e:
            self.status = e.status

        self.stdout.flush()
        self.stderr.flush()

        assert self.status is not None
        return self.status

    def expanded_path(self, path: str) -> Path:
        return (self.dir / path).absolute()

    def run(self) -> None:
        raise NotImplementedError(f"{self.__class__.__name__}.run() not implemented")

    def println(self, string: str) -> None:
        if isinstance(self.stdout, io.BufferedIOBase):
            self.stdout.write((string + "\n").encode("utf-8"))
        else:
            self.stdout.write(string + "\n")

    def eprintln(self, string: str) -> None:
        if isinstance(self.stderr, io.BufferedIOBase):
            self.stderr.write((string + "\n").encode("utf-8"))
        else:
            self.stderr.write(string + "\n")

    def write_bytes(self, data: bytes) -> None:
        if isinstance(self.stdout, io.BufferedIOBase):
            self.stdout.write(data)
        elif isinstance(getattr(self.stdout, "buffer", None), io.BufferedIOBase):
            self.stdout.flush()
            self.stdout.buffer.write(data)  # type: ignore[attr-defined]
        else:
            self.stdout.write(data.decode("utf-8", errors="replace"))


class ExitSignal(Exception):
    def __init__(self, status: int = 0) -> None:
        super().__init__(f"Exit with status {status}")
        self.status: int | None = status
