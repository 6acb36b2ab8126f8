from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable

from packlook.cmd_base import Base
from packlook.config import ParseError
from packlook.pack import PackError
from packlook.pack_locator import INDEX_EXT, PACK_EXT
from packlook.pack_object import PackObject
from packlook.pack_verifier import verify_pack


def plural(count: int) -> str:
    return "" if count == 1 else "s"


class VerifyPack(Base):
    def define_options(self) -> None:
        self.options: dict[str, bool] = {"verbose": False}
        positional = []

        for arg in self.args:
            if arg in ("-v", "--verbose"):
                self.options["verbose"] = True
            elif arg.startswith("-"):
                self.eprintln(f"error: unknown option `{arg}'")
                self.exit(129)
            else:
                positional.append(arg)

        if not positional:
            self.eprintln("usage: packlook verify-pack [-v] <pack>...")
            self.exit(129)

        self.args = positional

    def run(self) -> None:
        self.define_options()
        status = 0

        for arg in self.args:
            base = self.base_path(arg)
            try:
                self.verify_one(base)
            except (PackError, ParseError, OSError) as e:
                self.eprintln(f"error: {base}{PACK_EXT}: {e}")
                status = 1

        self.exit(status)

    def base_path(self, arg: str) -> Path:
        path = self.expanded_path(arg)
        if path.name.endswith(PACK_EXT):
            return path.with_name(path.name[: -len(PACK_EXT)])
        if path.name.endswith(INDEX_EXT):
            return path.with_name(path.name[: -len(INDEX_EXT)])
        return path

    def verify_one(self, base: Path) -> None:
        pack = base.with_name(base.name + PACK_EXT)
        index = base.with_name(base.name + INDEX_EXT)

        with open(pack, "rb") as pack_file, open(index, "rb") as index_file:
            objects = verify_pack(pack_file, index_file)

        if not self.options["verbose"]:
            return

        max_depth = self.repo.max_delta_depth
        for obj in objects.values():
            obj.resolve(objects, max_depth)

        for obj in sorted(objects.values(), key=lambda o: o.offset):
            self.println(self.describe(obj))

        self.print_histogram(objects.values())
        self.println(f"{pack}: ok")

    def describe(self, obj: PackObject) -> str:
        line = f"{obj.oid} {obj.type():<6} {obj.size} {obj.size_in_pack} {obj.offset}"
        if obj.kind.is_delta:
            line += f" {obj.depth} {obj.base_oid}"
        return line

    def print_histogram(self, objects: Iterable[PackObject]) -> None:
        depths = Counter(obj.depth for obj in objects)

        if depths[0]:
            self.println(f"non delta: {depths[0]} object{plural(depths[0])}")

        for depth in sorted(d for d in depths if d > 0):
            count = depths[depth]
            self.println(f"chain length = {depth}: {count} object{plural(count)}")
