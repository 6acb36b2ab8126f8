from __future__ import annotations

import logging
import zlib
from typing import BinaryIO

from packlook.pack import InvalidPack, OfsDelta, Record, RefDelta
from packlook.pack_index import Index
from packlook.pack_object import PackObject
from packlook.pack_reader import Reader
from packlook.pack_stream import Stream

log = logging.getLogger(__name__)


class Verifier:
    """
    Reads a whole pack and its index, checks that they agree with each
    other and with their checksums, and lists every object in the pack.
    """

    def __init__(self, pack_file: BinaryIO, index_file: BinaryIO) -> None:
        self.stream: Stream = Stream(pack_file)
        self.reader: Reader = Reader(self.stream)
        self.index_file: BinaryIO = index_file

        self.records: dict[int, tuple[Record | OfsDelta | RefDelta, int, int]] = {}
        self.oids: dict[int, str] = {}
        self.pack_checksum: bytes = b""

    def verify(self) -> dict[str, PackObject]:
        self.read_pack()
        self.read_index()
        return self.build_objects()

    def read_pack(self) -> None:
        self.reader.read_header()

        for _ in range(self.reader.count):
            offset = self.stream.offset
            record, raw = self.stream.capture(self.reader.read_record)
            self.records[offset] = (record, len(raw), zlib.crc32(raw))

        self.pack_checksum = self.stream.verify_checksum()

        if not self.stream.eof:
            raise InvalidPack("unexpected data after pack checksum")

    def read_index(self) -> None:
        index = Index(self.index_file)
        index.verify_checksum()

        if index.count != self.reader.count:
            raise InvalidPack(
                f"index lists {index.count} objects but pack holds {self.reader.count}"
            )

        if index.pack_checksum != self.pack_checksum:
            raise InvalidPack("index does not belong to this pack")

        for oid, offset, crc32 in index.entries():
            entry = self.records.get(offset)
            if entry is None:
                raise InvalidPack(f"index places {oid} at {offset} but no object starts there")

            if offset in self.oids:
                raise InvalidPack(f"index places {oid} and {self.oids[offset]} at {offset}")

            if entry[2] != crc32:
                raise InvalidPack(f"CRC32 mismatch for {oid}")

            self.oids[offset] = oid

    def build_objects(self) -> dict[str, PackObject]:
        objects: dict[str, PackObject] = {}

        for offset, (record, size_in_pack, _) in self.records.items():
            oid = self.oids[offset]

            if isinstance(record, Record):
                obj = PackObject(oid, offset, record.data, record.ty, record.size, size_in_pack)

            elif isinstance(record, OfsDelta):
                base_oid = self.oids.get(offset - record.base_ofs)
                if base_oid is None:
                    raise InvalidPack(f"{oid} refers to a base at an unknown offset")
                obj = PackObject(
                    oid, offset, record.delta_data, record.ty, record.size, size_in_pack, base_oid
                )

            else:
                obj = PackObject(
                    oid,
                    offset,
                    record.delta_data,
                    record.ty,
                    record.size,
                    size_in_pack,
                    record.base_oid,
                )

            objects[oid] = obj

        log.debug("verified pack with %d objects", len(objects))

        return {oid: objects[oid] for oid in sorted(objects)}


def verify_pack(pack_file: BinaryIO, index_file: BinaryIO) -> dict[str, PackObject]:
    return Verifier(pack_file, index_file).verify()
