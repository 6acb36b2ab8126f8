from __future__ import annotations

from io import BytesIO

from packlook.numbers import VarIntLE
from packlook.pack import InvalidDelta, InvalidPack
from packlook.pack_delta import Delta
from packlook.pack_stream import Stream

GIT_MAX_COPY: int = 0x10000


class Expander:
    def __init__(self, delta: bytes) -> None:
        self.delta = Stream(BytesIO(delta))
        try:
            self.source_size: int = self.read_size()
            self.target_size: int = self.read_size()
        except InvalidPack as e:
            raise InvalidDelta("truncated delta header") from e

    @staticmethod
    def expand(source: bytes, delta: bytes) -> bytes:
        return Expander(delta)._expand(source)

    def _expand(self, source: bytes) -> bytes:
        self.check_size(source, self.source_size, "source")
        target = bytearray()

        while not self.delta.eof:
            try:
                byte = self.delta.readbyte()

                if byte == 0:
                    raise InvalidDelta("unexpected delta opcode 0")

                if byte < 0x80:
                    insert = Delta.Insert.parse(self.delta, byte)
                    target += insert.data
                else:
                    copy = Delta.Copy.parse(self.delta, byte)
                    size = copy.size if copy.size != 0 else GIT_MAX_COPY

                    if copy.offset + size > len(source):
                        raise InvalidDelta(
                            f"copy of {size} bytes at {copy.offset} exceeds source"
                        )
                    target += source[copy.offset : copy.offset + size]
            except InvalidPack as e:
                raise InvalidDelta("truncated delta instruction") from e

        self.check_size(target, self.target_size, "target")
        return bytes(target)

    def read_size(self) -> int:
        return VarIntLE.read(self.delta, 7)[1]

    def check_size(self, buffer: bytes | bytearray, size: int, name: str) -> None:
        if len(buffer) != size:
            raise InvalidDelta(
                f"failed to apply delta: {name} is {len(buffer)} bytes, expected {size}"
            )
