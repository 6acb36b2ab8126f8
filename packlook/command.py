from __future__ import annotations

from pathlib import Path
from typing import MutableMapping, TextIO, Type

from packlook.cmd_base import Base
from packlook.cmd_cat_file import CatFile
from packlook.cmd_verify_pack import VerifyPack
from packlook.config import ParseError


class Command:
    class Unknown(Exception):
        pass

    COMMANDS: dict[str, Type[Base]] = {
        "cat-file": CatFile,
        "verify-pack": VerifyPack,
    }

    @staticmethod
    def execute(
        _dir: Path,
        env: MutableMapping[str, str],
        argv: list[str],
        stdin: TextIO,
        stdout: TextIO,
        stderr: TextIO,
    ) -> Base:
        name = argv[1]
        args = argv[2:]

        if name not in Command.COMMANDS:
            raise Command.Unknown(f"{name} is not a packlook command")

        cmd_class = Command.COMMANDS[name]
        cmd: Base = cmd_class(_dir, env, args, stdin, stdout, stderr)

        try:
            cmd.repo.setup_logging()
        except ParseError as e:
            cmd.eprintln(f"fatal: {e}")
            cmd.status = 128
            return cmd

        cmd.execute()

        return cmd
