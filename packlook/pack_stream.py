from __future__ import annotations

import hashlib
from typing import BinaryIO, Callable, Optional, TypeVar

from packlook.pack import CHECKSUM_SIZE, InvalidPack

T = TypeVar("T")


class Stream:
    """
    Binary input wrapper that

    • maintains a running SHA-1 of every byte consumed,
    • supports an in-memory read-ahead buffer,
    • lets callers "capture" the exact bytes one record occupies.
    """

    def __init__(self, inp: BinaryIO, buffer: bytes = b"") -> None:
        self.input: BinaryIO = inp
        self.digest = hashlib.sha1()
        self.offset: int = 0
        self.buffer = bytearray(buffer)
        self._capture: Optional[bytearray] = None

    def capture(self, block: Callable[[], T]) -> tuple[T, bytes]:
        """
        Execute *block* while recording every byte it consumes.
        Returns (block_result, captured_bytes).
        """
        self._capture = bytearray()
        try:
            result = block()
            return result, bytes(self._capture)
        finally:
            self.digest.update(self._capture)
            self._capture = None

    def unread(self, size: int) -> None:
        """
        Give back the last *size* bytes of the active capture so the next
        read returns them again. Used after a zlib stream over-reads.
        """
        if self._capture is None or size > len(self._capture):
            raise ValueError(f"cannot unread {size} bytes outside a capture")

        data = self._capture[len(self._capture) - size :]
        del self._capture[len(self._capture) - size :]

        self.buffer = bytearray(data) + self.buffer
        self.offset -= size

    def verify_checksum(self) -> bytes:
        """
        Packs end with a SHA-1 of everything preceding the checksum itself.
        Compare it with the running digest and return it.
        """
        expected = self.digest.digest()
        checksum = self._read_buffered(CHECKSUM_SIZE)

        if checksum != expected:
            raise InvalidPack("Checksum does not match value read from pack")

        return checksum

    def read(self, size: int) -> bytes:
        data = self._read_buffered(size)
        if len(data) < size:
            raise InvalidPack(f"unexpected end of pack at offset {self.offset}")

        self._update_state(data)
        return data

    def read_chunk(self, size: int) -> bytes:
        data = self._read_buffered(size)
        self._update_state(data)
        return data

    def readbyte(self) -> int:
        return self.read(1)[0]

    @property
    def eof(self) -> bool:
        if self.buffer:
            return False

        b = self.input.read(1)
        if not b:
            return True

        self.buffer.extend(b)
        return False

    def _read_buffered(self, size: int) -> bytes:
        from_buf = bytes(self.buffer[:size])
        del self.buffer[: len(from_buf)]

        needed = size - len(from_buf)
        if needed <= 0:
            return from_buf

        return from_buf + (self.input.read(needed) or b"")

    def _update_state(self, data: bytes) -> None:
        self.offset += len(data)
        if self._capture is not None:
            self._capture.extend(data)
        else:
            self.digest.update(data)
