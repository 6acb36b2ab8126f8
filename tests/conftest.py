from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO
from pathlib import Path
from typing import Callable, Mapping, Protocol, TypeAlias

import pytest
from freezegun import freeze_time

from packlook.author import Author
from packlook.cmd_base import Base
from packlook.command import Command
from packlook.commit import Commit
from tests.pack_helpers import PackBuilder

PackCmdResult: TypeAlias = tuple[Base, StringIO, StringIO]

FROZEN_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

MakeCommit: TypeAlias = Callable[[str, str, list[str]], Commit]
WritePack: TypeAlias = Callable[[PackBuilder, str], Path]


class PackCmd(Protocol):
    def __call__(
        self, *argv: str, env: Mapping[str, str] | None = None
    ) -> PackCmdResult: ...


@pytest.fixture
def repo_path(tmp_path: Path) -> Path:
    path = tmp_path / "test_repo"
    (path / ".git" / "objects" / "pack").mkdir(parents=True)
    return path


@pytest.fixture
def git_path(repo_path: Path) -> Path:
    return repo_path / ".git"


@pytest.fixture
def pack_dir(git_path: Path) -> Path:
    return git_path / "objects" / "pack"


@pytest.fixture
def write_pack(pack_dir: Path) -> WritePack:
    def _write_pack(builder: PackBuilder, name: str) -> Path:
        return builder.write(pack_dir, name)

    return _write_pack


@pytest.fixture
def make_commit() -> MakeCommit:
    def _make_commit(message: str, tree: str, parents: list[str]) -> Commit:
        with freeze_time(FROZEN_TIME):
            author = Author("A. U. Thor", "author@example.com", datetime.now().astimezone())
        return Commit(parents, tree, author, author, message)

    return _make_commit


@pytest.fixture
def packlook_cmd(repo_path: Path) -> PackCmd:
    def _packlook_cmd(*argv: str, env: Mapping[str, str] | None = None) -> PackCmdResult:
        stdout = StringIO()
        stderr = StringIO()
        cmd = Command.execute(
            repo_path,
            dict(env or {}),
            ["packlook"] + list(argv),
            StringIO(),
            stdout,
            stderr,
        )
        return cmd, stdout, stderr

    return _packlook_cmd
