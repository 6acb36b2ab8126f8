from __future__ import annotations

from packlook.cmd_base import Base
from packlook.config import ParseError
from packlook.pack import ObjectNotFound, PackError
from packlook.pack_object import PackObject
from packlook.tree import Tree

USAGE = "usage: packlook cat-file (-t | -s | -p) <object>"


class CatFile(Base):
    def define_options(self) -> None:
        self.options: dict[str, str | None] = {"mode": None}
        positional = []

        for arg in self.args:
            if arg in ("-t", "-s", "-p"):
                if self.options["mode"] is not None:
                    self.usage()
                self.options["mode"] = arg[1]
            elif arg.startswith("-"):
                self.usage()
            else:
                positional.append(arg)

        if self.options["mode"] is None or len(positional) != 1:
            self.usage()

        self.args = positional

    def usage(self) -> None:
        self.eprintln(USAGE)
        self.exit(129)

    def run(self) -> None:
        self.define_options()
        name = self.args[0]

        try:
            obj = self.load_object(name)

            if self.options["mode"] == "t":
                self.println(obj.type())
            elif self.options["mode"] == "s":
                assert obj.resolved_data is not None
                self.println(str(len(obj.resolved_data)))
            else:
                self.pretty_print(obj)
        except ObjectNotFound:
            self.eprintln(f"fatal: Not a valid object name {name}")
            self.exit(128)
        except (PackError, ParseError) as e:
            self.eprintln(f"fatal: {e}")
            self.exit(128)

        self.exit(0)

    def load_object(self, name: str) -> PackObject:
        locator = self.repo.locator
        obj, objects = locator.locate(name)
        obj.resolve(objects, locator.max_depth)
        return obj

    def pretty_print(self, obj: PackObject) -> None:
        normalized = obj.normalize()

        if isinstance(normalized, Tree):
            self.write_bytes(str(normalized).encode("utf-8"))
        else:
            assert obj.resolved_data is not None
            self.write_bytes(obj.resolved_data)
