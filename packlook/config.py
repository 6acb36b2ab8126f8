from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Sequence, TextIO, Tuple, TypeAlias

ConfigValue: TypeAlias = bool | int | str

SECTION_LINE: Pattern[str] = re.compile(
    r'^\s*\[([a-z0-9-]+)( "(.+)")?\]\s*(?:$|#|;)', re.I
)
VARIABLE_LINE: Pattern[str] = re.compile(
    r"^\s*([a-z][a-z0-9-]*)\s*=\s*(.*?)\s*(?:$|#|;)", re.I | re.M
)
BLANK_LINE: Pattern[str] = re.compile(r"^\s*(?:$|#|;)")
INTEGER: Pattern[str] = re.compile(r"^-?(?:0|[1-9][0-9]*)$")


class ParseError(Exception):
    pass


@dataclass
class Section:
    name: Sequence[str]

    @staticmethod
    def normalize(name: Sequence[str]) -> tuple[str, str] | None:
        if not name:
            return None
        head = name[0].lower()
        tail = ".".join(name[1:])
        return (head, tail)


@dataclass
class Variable:
    name: str
    value: ConfigValue

    @staticmethod
    def normalize(name: Optional[str]) -> Optional[str]:
        return name.lower() if name else None


@dataclass
class Line:
    text: str
    section: Section
    variable: Optional[Variable] = None

    @property
    def normal_variable(self) -> Optional[str]:
        return Variable.normalize(self.variable.name) if self.variable else None


class ConfigFile:
    """Read-only view of a git-style config file."""

    def __init__(self, path: Path) -> None:
        self.path: Path = path
        self.lines: dict[tuple[str, str] | None, List[Line]] = defaultdict(list)
        self.loaded: bool = False

    def open(self) -> None:
        if not self.loaded:
            self.read_config_file()

    def get(self, key: Sequence[str]) -> ConfigValue | None:
        try:
            return self.get_all(key)[-1]
        except IndexError:
            return None

    def get_all(self, key: Sequence[str]) -> List[ConfigValue]:
        self.open()
        section, var = self.split_key(key)
        return [ln.variable.value for ln in self.find_lines(section, var) if ln.variable]

    def get_int(self, key: Sequence[str], default: int) -> int:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParseError(f"bad numeric config value {value!r} for {'.'.join(key)}")
        return value

    @staticmethod
    def split_key(key: Sequence[str]) -> Tuple[List[str], str]:
        parts = list(map(str, key))
        var = parts.pop()
        return (parts, var)

    def find_lines(self, key: Sequence[str], var: str) -> List[Line]:
        name = Section.normalize(key)
        if name not in self.lines:
            return []

        normal = Variable.normalize(var)
        return [ln for ln in self.lines[name] if ln.normal_variable == normal]

    def read_config_file(self) -> None:
        self.lines = defaultdict(list)
        section = Section([])
        count = 0

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                while True:
                    try:
                        raw = self.read_line(fh)
                    except EOFError:
                        break
                    count += 1
                    line = self.parse_line(section, raw, count)
                    section = line.section
                    self.lines[Section.normalize(section.name)].append(line)
        except FileNotFoundError:
            pass

        self.loaded = True

    @staticmethod
    def read_line(fh: TextIO) -> str:
        buffer = ""
        while True:
            chunk = fh.readline()
            if chunk == "":
                if buffer:
                    return buffer
                raise EOFError
            buffer += chunk
            if not buffer.endswith("\\\n"):
                return buffer

    def parse_line(self, section: Section, line: str, number: int) -> Line:
        if m := SECTION_LINE.match(line):
            section = Section([m.group(1)] + ([m.group(3)] if m.group(3) else []))
            return Line(line, section)
        if m := VARIABLE_LINE.match(line.replace("\\\n", "")):
            variable = Variable(m.group(1), self.parse_value(m.group(2)))
            return Line(line, section, variable)
        if BLANK_LINE.match(line):
            return Line(line, section)
        raise ParseError(f"bad config line {number} in file {self.path}")

    @staticmethod
    def parse_value(value: str) -> ConfigValue:
        lower = value.lower()
        if lower in {"yes", "on", "true"}:
            return True
        if lower in {"no", "off", "false"}:
            return False
        if INTEGER.match(value):
            return int(value)
        return value
