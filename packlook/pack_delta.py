from __future__ import annotations

import struct

from packlook.numbers import ByteSource, PackedInt56LE, VarIntLE


class Delta:
    """Instruction codec for git's delta format. A delta is two size
    prefixes (source, target) followed by Copy and Insert operations."""

    class Copy:
        def __init__(self, offset: int, size: int) -> None:
            self.offset = offset
            self.size = size

        @classmethod
        def parse(cls, stream: ByteSource, byte: int) -> "Delta.Copy":
            value = PackedInt56LE.read(stream, byte)
            offset = value & 0xFFFFFFFF
            size = value >> 32
            return cls(offset, size)

        def to_bytes(self) -> bytes:
            value = (self.size << 32) | self.offset
            byte_array = PackedInt56LE.write(value)
            byte_array[0] |= 0x80
            return bytes(byte_array)

        def __eq__(self, other: object) -> bool:
            if not isinstance(other, Delta.Copy):
                return NotImplemented
            return self.offset == other.offset and self.size == other.size

        def __repr__(self) -> str:
            return f"Copy(offset={self.offset}, size={self.size})"

    class Insert:
        def __init__(self, data: bytes) -> None:
            self.data = data

        @classmethod
        def parse(cls, stream, byte: int) -> "Delta.Insert":
            return cls(stream.read(byte))

        def to_bytes(self) -> bytes:
            if not (0 < len(self.data) <= 127):
                raise ValueError("Insert data must be between 1 and 127 bytes.")
            return struct.pack(f"B{len(self.data)}s", len(self.data), self.data)

        def __eq__(self, other: object) -> bool:
            if not isinstance(other, Delta.Insert):
                return NotImplemented
            return self.data == other.data

        def __repr__(self) -> str:
            return f"Insert(data={self.data!r})"

    @staticmethod
    def encode(
        source_size: int, target_size: int, ops: list["Delta.Copy | Delta.Insert"]
    ) -> bytes:
        parts = [VarIntLE.write(source_size, 7), VarIntLE.write(target_size, 7)]
        parts.extend(op.to_bytes() for op in ops)
        return b"".join(parts)
