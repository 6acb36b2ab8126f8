from __future__ import annotations

import hashlib
import struct
from typing import BinaryIO, Iterator

from packlook.pack import (
    CHECKSUM_SIZE,
    IDX_MAX_OFFSET,
    IDX_SIGNATURE,
    IDX_VERSION,
    InvalidPack,
)


class Index:
    HEADER_SIZE: int = 8
    FANOUT_SIZE: int = 1024

    OID_LAYER: int = 2
    CRC_LAYER: int = 3
    OFS_LAYER: int = 4

    SIZES: dict[int, int] = {
        OID_LAYER: 20,
        CRC_LAYER: 4,
        OFS_LAYER: 4,
    }

    def __init__(self, _input: BinaryIO) -> None:
        self.data: bytes = _input.read()
        self.load_header()
        self.load_fanout_table()

        self.pack_checksum: bytes = self.data[-2 * CHECKSUM_SIZE : -CHECKSUM_SIZE]
        self.checksum: bytes = self.data[-CHECKSUM_SIZE:]

    @property
    def count(self) -> int:
        return self.fanout[-1]

    def load_header(self) -> None:
        if len(self.data) < self.HEADER_SIZE + self.FANOUT_SIZE + 2 * CHECKSUM_SIZE:
            raise InvalidPack("index file is too short")

        signature, version = struct.unpack(">II", self.data[: self.HEADER_SIZE])

        if signature != IDX_SIGNATURE:
            raise InvalidPack(f"bad index signature: {signature:#x}")

        if version != IDX_VERSION:
            raise InvalidPack(f"unsupported index version: {version}")

    def load_fanout_table(self) -> None:
        start = self.HEADER_SIZE
        self.fanout = struct.unpack(">256I", self.data[start : start + self.FANOUT_SIZE])

        if any(a > b for a, b in zip(self.fanout, self.fanout[1:])):
            raise InvalidPack("index fan-out table is not monotonic")

        minimum = self.offset_for(self.OFS_LAYER + 1, 0) + 2 * CHECKSUM_SIZE
        if len(self.data) < minimum:
            raise InvalidPack("index file is truncated")

    def offset_for(self, layer: int, pos: int) -> int:
        offset = self.HEADER_SIZE + self.FANOUT_SIZE

        for n, size in self.SIZES.items():
            if n < layer:
                offset += size * self.count

        return offset + pos * self.SIZES.get(layer, 8)

    def verify_checksum(self) -> None:
        digest = hashlib.sha1(self.data[:-CHECKSUM_SIZE]).digest()
        if digest != self.checksum:
            raise InvalidPack("Checksum does not match value read from index")

    def oid_at(self, pos: int) -> str:
        start = self.offset_for(self.OID_LAYER, pos)
        return self.data[start : start + 20].hex()

    def crc32_at(self, pos: int) -> int:
        return self.read_int32(self.CRC_LAYER, pos)

    def offset_at(self, pos: int) -> int:
        offset = self.read_int32(self.OFS_LAYER, pos)

        if offset < IDX_MAX_OFFSET:
            return offset

        ext = offset & (IDX_MAX_OFFSET - 1)
        start = self.offset_for(self.OFS_LAYER + 1, ext)
        data = self.data[start : start + 8]

        if len(data) != 8 or start + 8 > len(self.data) - 2 * CHECKSUM_SIZE:
            raise InvalidPack(f"large offset {ext} is out of range")

        return int.from_bytes(data, "big")

    def read_int32(self, layer: int, pos: int) -> int:
        start = self.offset_for(layer, pos)
        return int.from_bytes(self.data[start : start + 4], "big")

    def entries(self) -> Iterator[tuple[str, int, int]]:
        """Yield (oid, offset, crc32) for every object, in name order."""
        previous = ""

        for pos in range(self.count):
            oid = self.oid_at(pos)

            if oid <= previous:
                raise InvalidPack(f"index names are not sorted at {oid}")

            if not self.fanout_slot(pos, oid):
                raise InvalidPack(f"index fan-out does not cover {oid}")

            previous = oid
            yield oid, self.offset_at(pos), self.crc32_at(pos)

    def fanout_slot(self, pos: int, oid: str) -> bool:
        prefix = int(oid[:2], 16)
        low = 0 if prefix == 0 else self.fanout[prefix - 1]
        return low <= pos < self.fanout[prefix]
