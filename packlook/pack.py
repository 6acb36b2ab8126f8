from __future__ import annotations

from enum import IntEnum

HEADER_SIZE: int = 12
HEADER_FORMAT: str = ">4sII"
SIGNATURE: bytes = b"PACK"
VERSION: int = 2

IDX_SIGNATURE: int = 0xFF744F63
IDX_VERSION: int = 2
IDX_MAX_OFFSET: int = 0x80000000

CHECKSUM_SIZE: int = 20

MAX_DELTA_DEPTH: int = 4095


class Kind(IntEnum):
    COMMIT = 1
    TREE = 2
    BLOB = 3
    TAG = 4
    OFS_DELTA = 6
    REF_DELTA = 7

    @property
    def is_delta(self) -> bool:
        # delta kinds sort after every full-content kind
        return self >= Kind.OFS_DELTA

    def __str__(self) -> str:
        return self.name.lower().replace("_", "-")

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class PackError(Exception):
    pass


class InvalidPack(PackError):
    def __init__(self, message: str, archive: str | None = None) -> None:
        if archive is not None:
            message = f"{archive}: {message}"
        super().__init__(message)
        self.archive: str | None = archive


class InvalidDelta(PackError):
    pass


class MissingData(PackError):
    def __init__(self, oid: str) -> None:
        super().__init__(f"base object data is missing: {oid}")
        self.oid: str = oid


class UnknownBase(PackError):
    def __init__(self, oid: str, base_oid: str) -> None:
        super().__init__(f"base object not in dictionary: {base_oid} (needed by {oid})")
        self.oid: str = oid
        self.base_oid: str = base_oid


class DeltaApplicationError(PackError):
    def __init__(self, oid: str, base_oid: str, cause: Exception) -> None:
        super().__init__(f"failed to apply delta for {oid} against {base_oid}: {cause}")
        self.oid: str = oid
        self.base_oid: str = base_oid
        self.cause: Exception = cause


class CyclicChain(PackError):
    def __init__(self, oid: str, chain: list[str]) -> None:
        super().__init__(f"delta chain of {oid} loops back to {chain[-1]}")
        self.oid: str = oid
        self.chain: list[str] = chain


class ChainTooDeep(PackError):
    def __init__(self, oid: str, max_depth: int) -> None:
        super().__init__(f"delta chain of {oid} is deeper than {max_depth}")
        self.oid: str = oid
        self.max_depth: int = max_depth


class KindMismatch(PackError):
    def __init__(self, oid: str, expected: str, actual: str) -> None:
        super().__init__(f"pack object {oid} is not a {expected}: {actual}")
        self.oid: str = oid
        self.expected: str = expected
        self.actual: str = actual


class ParseFailure(PackError):
    def __init__(self, oid: str, ty: str, cause: Exception) -> None:
        super().__init__(f"cannot parse {ty} {oid}: {cause}")
        self.oid: str = oid
        self.cause: Exception = cause


class ObjectNotFound(PackError):
    def __init__(self, name: str) -> None:
        super().__init__(f"object not in any packfiles: {name}")
        self.name: str = name


class Record:
    def __init__(self, ty: Kind, size: int, data: bytes) -> None:
        self.ty: Kind = ty
        self.size: int = size
        self.data: bytes = data


class RefDelta:
    ty: Kind = Kind.REF_DELTA

    def __init__(self, base_oid: str, size: int, delta_data: bytes) -> None:
        self.base_oid: str = base_oid
        self.size: int = size
        self.delta_data: bytes = delta_data


class OfsDelta:
    ty: Kind = Kind.OFS_DELTA

    def __init__(self, base_ofs: int, size: int, delta_data: bytes) -> None:
        self.base_ofs: int = base_ofs
        self.size: int = size
        self.delta_data: bytes = delta_data
