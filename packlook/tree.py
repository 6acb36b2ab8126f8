from __future__ import annotations

from typing import MutableMapping

from packlook.db_entry import DatabaseEntry


def git_sort_key(item: tuple[str, DatabaseEntry]) -> str:
    name, entry = item
    if entry.is_tree():
        return name + "/"
    return name


class Tree:
    def __init__(self, entries: MutableMapping[str, DatabaseEntry] | None = None) -> None:
        self.entries: MutableMapping[str, DatabaseEntry] = (
            entries if entries is not None else {}
        )
        self.oid: str = ""

    @classmethod
    def parse(cls, payload: bytes) -> "Tree":
        entries: MutableMapping[str, DatabaseEntry] = {}
        idx = 0
        end = len(payload)

        while idx < end:
            sp = payload.find(b" ", idx)
            if sp == -1:
                raise ValueError(f"tree entry at {idx} has no mode")
            mode = int(payload[idx:sp].decode(), 8)
            idx = sp + 1

            nul = payload.find(b"\x00", idx)
            if nul == -1:
                raise ValueError(f"tree entry at {idx} has no name terminator")
            name = payload[idx:nul].decode("utf-8", errors="replace")
            idx = nul + 1

            oid_bytes = payload[idx : idx + 20]
            if len(oid_bytes) != 20:
                raise ValueError(f"tree entry {name!r} has a truncated object id")
            idx += 20

            entries[name] = DatabaseEntry(oid=oid_bytes.hex(), mode=mode)

        return cls(entries)

    def type(self) -> str:
        return "tree"

    def to_bytes(self) -> bytes:
        parts = []
        for name, entry in sorted(self.entries.items(), key=git_sort_key):
            header = f"{entry.mode:o} {name}".encode("utf-8") + b"\x00"
            parts.append(header + bytes.fromhex(entry.oid))
        return b"".join(parts)

    def __str__(self) -> str:
        lines = []
        for name, entry in self.entries.items():
            lines.append(f"{entry.mode:06o} {entry.type()} {entry.oid}\t{name}")
        return "".join(line + "\n" for line in lines)
