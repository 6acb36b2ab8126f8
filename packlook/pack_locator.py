from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Callable, Mapping, TypeAlias

from packlook.blob import Blob
from packlook.commit import Commit
from packlook.pack import MAX_DELTA_DEPTH, InvalidPack, ObjectNotFound
from packlook.pack_object import PackObject
from packlook.pack_verifier import verify_pack
from packlook.tree import Tree

log = logging.getLogger(__name__)

PACK_EXT: str = ".pack"
INDEX_EXT: str = ".idx"

VerifyPack: TypeAlias = Callable[[BinaryIO, BinaryIO], Mapping[str, PackObject]]


def pack_path(storage_dir: Path) -> Path:
    return storage_dir / "objects" / "pack"


def list_packfiles(storage_dir: Path) -> list[str]:
    """Base names of the packs in *storage_dir*, in lexical order."""
    try:
        files = list(pack_path(storage_dir).iterdir())
    except FileNotFoundError:
        return []

    return sorted(f.name[: -len(PACK_EXT)] for f in files if f.name.endswith(PACK_EXT))


class PackLocator:
    def __init__(
        self,
        storage_dir: Path,
        verify: VerifyPack = verify_pack,
        max_depth: int = MAX_DELTA_DEPTH,
    ) -> None:
        self.storage_dir: Path = storage_dir
        self.verify: VerifyPack = verify
        self.max_depth: int = max_depth

    @property
    def pack_path(self) -> Path:
        return pack_path(self.storage_dir)

    def find(self, name: str) -> PackObject:
        return self.locate(name)[0]

    def locate(self, name: str) -> tuple[PackObject, Mapping[str, PackObject]]:
        """
        Search every pack for an object whose id starts with *name*.
        Returns the object together with the objects of its pack, which is
        the dictionary its delta chain resolves against.
        """
        for archive in list_packfiles(self.storage_dir):
            log.debug("searching %s for %s", archive, name)
            objects = self.load_pack(archive)

            obj = self.match(objects, name)
            if obj is not None:
                log.debug("found %s in %s", obj.oid, archive)
                return obj, objects

        raise ObjectNotFound(name)

    def load_pack(self, archive: str) -> Mapping[str, PackObject]:
        pack = self.pack_path / (archive + PACK_EXT)
        index = self.pack_path / (archive + INDEX_EXT)

        try:
            with open(pack, "rb") as pack_file, open(index, "rb") as index_file:
                return self.verify(pack_file, index_file)
        except OSError as e:
            raise InvalidPack(f"cannot read pack: {e}", archive) from e
        except InvalidPack as e:
            if e.archive is not None:
                raise
            raise InvalidPack(str(e), archive) from e

    def match(self, objects: Mapping[str, PackObject], name: str) -> PackObject | None:
        for oid in sorted(objects):
            if oid.startswith(name):
                return objects[oid]
        return None

    def load(self, name: str) -> Commit | Tree | Blob | PackObject:
        obj, objects = self.locate(name)
        obj.resolve(objects, self.max_depth)
        return obj.normalize()


def find_object(name: str, storage_dir: Path) -> PackObject:
    return PackLocator(storage_dir).find(name)
