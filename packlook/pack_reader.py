from __future__ import annotations

import struct
import zlib

from packlook.numbers import VarIntBE, VarIntLE
from packlook.pack import (
    HEADER_FORMAT,
    HEADER_SIZE,
    SIGNATURE,
    VERSION,
    InvalidPack,
    Kind,
    OfsDelta,
    Record,
    RefDelta,
)
from packlook.pack_stream import Stream

ZLIB_CHUNK_SIZE: int = 256


class Reader:
    def __init__(self, f: Stream) -> None:
        self.input: Stream = f
        self.count: int = 0

    def read_header(self) -> None:
        data = self.input.read(HEADER_SIZE)
        signature, version, self.count = struct.unpack(HEADER_FORMAT, data)

        if signature != SIGNATURE:
            raise InvalidPack(f"bad pack signature: {signature!r}")

        if version != VERSION:
            raise InvalidPack(f"unsupported pack version: {version}")

    def read_record(self) -> Record | OfsDelta | RefDelta:
        ty, size = self.read_record_header()

        if ty in (Kind.COMMIT, Kind.TREE, Kind.BLOB, Kind.TAG):
            data = self.read_zlib_stream(size)
            return Record(Kind(ty), size, data)

        elif ty == Kind.OFS_DELTA:
            offset = VarIntBE.read(self.input)
            return OfsDelta(offset, size, self.read_zlib_stream(size))

        elif ty == Kind.REF_DELTA:
            base_oid = self.input.read(20).hex()
            return RefDelta(base_oid, size, self.read_zlib_stream(size))

        else:
            raise InvalidPack(f"Unknown pack object type: {ty}")

    def read_record_header(self) -> tuple[int, int]:
        first, size = VarIntLE.read(self.input, 4)
        ty = (first >> 4) & 0x7
        return ty, size

    def read_zlib_stream(self, size: int) -> bytes:
        decompressor = zlib.decompressobj()
        output = bytearray()

        while not decompressor.eof:
            chunk = self.input.read_chunk(ZLIB_CHUNK_SIZE)
            if not chunk:
                raise InvalidPack(f"truncated zlib stream at offset {self.input.offset}")

            try:
                output.extend(decompressor.decompress(chunk))
            except zlib.error as e:
                raise InvalidPack(f"Zlib decompression error: {e}") from e

        if decompressor.unused_data:
            self.input.unread(len(decompressor.unused_data))

        output.extend(decompressor.flush())

        if len(output) != size:
            raise InvalidPack(
                f"inflated size {len(output)} does not match declared size {size}"
            )

        return bytes(output)
