from __future__ import annotations


class Blob:
    """File contents taken from a pack. Any byte string is a valid blob."""

    def __init__(self, data: bytes, oid: str = "") -> None:
        self.data: bytes = data
        self.oid: str = oid

    @classmethod
    def parse(cls, data: bytes, oid: str = "") -> Blob:
        return cls(data, oid)

    @property
    def size(self) -> int:
        return len(self.data)

    def type(self) -> str:
        return "blob"

    def __repr__(self) -> str:
        return f"Blob(oid={self.oid!r}, size={self.size})"
