from __future__ import annotations

from typing import Callable, Mapping, Protocol, TypeAlias, runtime_checkable

from packlook.blob import Blob
from packlook.commit import Commit
from packlook.pack import (
    MAX_DELTA_DEPTH,
    ChainTooDeep,
    CyclicChain,
    DeltaApplicationError,
    InvalidDelta,
    Kind,
    KindMismatch,
    MissingData,
    PackError,
    ParseFailure,
    UnknownBase,
)
from packlook.pack_expander import Expander
from packlook.tree import Tree

ApplyDelta: TypeAlias = Callable[[bytes, bytes], bytes]


@runtime_checkable
class GitObject(Protocol):
    """Anything that can say what kind of git object it is."""

    def type(self) -> str: ...


class PackObject:
    """
    One object as found in a pack.

    ``data`` is what the pack stores: literal content for full-content
    kinds, a delta against ``base_oid`` for delta kinds. ``resolve()``
    fills ``resolved_data``, ``resolved_kind`` and ``depth`` exactly once.
    """

    def __init__(
        self,
        oid: str,
        offset: int,
        data: bytes | None,
        kind: Kind,
        size: int = 0,
        size_in_pack: int = 0,
        base_oid: str | None = None,
    ) -> None:
        self.oid: str = oid
        self.offset: int = offset
        self.data: bytes | None = data
        self.kind: Kind = kind
        self.size: int = size
        self.size_in_pack: int = size_in_pack
        self.base_oid: str | None = base_oid

        self.resolved_data: bytes | None = None
        self.resolved_kind: Kind | None = None
        self.depth: int = 0
        self.error: PackError | None = None

    def __repr__(self) -> str:
        return f"PackObject(oid={self.oid!r}, kind={self.kind}, offset={self.offset})"

    @property
    def is_resolved(self) -> bool:
        return self.resolved_data is not None

    def patched_kind(self) -> Kind:
        if self.resolved_kind is not None:
            return self.resolved_kind
        return self.kind

    def type(self) -> str:
        return str(self.patched_kind())

    def resolve(
        self,
        dictionary: Mapping[str, PackObject] | None = None,
        max_depth: int = MAX_DELTA_DEPTH,
        expand: ApplyDelta = Expander.expand,
    ) -> None:
        """
        Reconstruct this object's content, following its delta chain
        through *dictionary* (the objects of the same pack). Every object
        on the chain is resolved at most once; later calls are no-ops.
        A failure of the chain itself is remembered and raised again by
        later calls; exceeding *max_depth* is not, since it depends on the
        caller.
        """
        if self.resolved_data is not None:
            return
        if self.error is not None:
            raise self.error

        chain: list[PackObject] = []
        try:
            root = self.walk_chain(chain, dictionary or {}, max_depth)
            root.resolve_full()

            base = root
            for delta in reversed(chain):
                delta.apply_delta(base, expand)
                base = delta
        except ChainTooDeep:
            raise
        except PackError as e:
            for obj in chain:
                if obj.resolved_data is None:
                    obj.error = e
            raise

    def walk_chain(
        self,
        chain: list[PackObject],
        dictionary: Mapping[str, PackObject],
        max_depth: int,
    ) -> PackObject:
        seen: set[str] = set()
        obj = self

        while obj.resolved_data is None and obj.kind.is_delta:
            if obj.oid in seen:
                raise CyclicChain(self.oid, [o.oid for o in chain] + [obj.oid])
            if len(chain) >= max_depth:
                raise ChainTooDeep(self.oid, max_depth)
            if obj.error is not None:
                raise obj.error

            seen.add(obj.oid)
            chain.append(obj)

            assert obj.base_oid is not None
            base = dictionary.get(obj.base_oid)
            if base is None:
                raise UnknownBase(obj.oid, obj.base_oid)
            obj = base

        if obj.depth + len(chain) > max_depth:
            raise ChainTooDeep(self.oid, max_depth)

        return obj

    def resolve_full(self) -> None:
        if self.resolved_data is not None:
            return
        if self.error is not None:
            raise self.error

        if self.data is None:
            self.error = MissingData(self.oid)
            raise self.error

        self.resolved_data = self.data
        self.resolved_kind = self.kind
        self.depth = 0

    def apply_delta(self, base: PackObject, expand: ApplyDelta) -> None:
        assert base.resolved_data is not None and base.resolved_kind is not None

        if self.data is None:
            raise MissingData(self.oid)

        try:
            data = expand(base.resolved_data, self.data)
        except InvalidDelta as e:
            raise DeltaApplicationError(self.oid, base.oid, e) from e

        self.resolved_data = data
        self.resolved_kind = base.resolved_kind
        self.depth = base.depth + 1

    def normalize(self) -> Commit | Tree | Blob | PackObject:
        """
        Return the Commit, Tree or Blob this object holds, or the object
        itself for tags and deltas that have not been resolved.
        """
        if self.resolved_data is None and not self.kind.is_delta:
            self.resolve()

        kind = self.patched_kind()

        if kind == Kind.COMMIT:
            return self.commit()
        elif kind == Kind.TREE:
            return self.tree()
        elif kind == Kind.BLOB:
            return self.blob()
        else:
            return self

    def commit(self) -> Commit:
        data = self.content_for(Kind.COMMIT)
        try:
            return Commit.parse(data, self.oid)
        except ValueError as e:
            raise ParseFailure(self.oid, "commit", e) from e

    def tree(self) -> Tree:
        data = self.content_for(Kind.TREE)
        try:
            tree = Tree.parse(data)
        except ValueError as e:
            raise ParseFailure(self.oid, "tree", e) from e
        tree.oid = self.oid
        return tree

    def blob(self) -> Blob:
        return Blob.parse(self.content_for(Kind.BLOB), self.oid)

    def content_for(self, expected: Kind) -> bytes:
        actual = self.patched_kind()
        if actual != expected:
            raise KindMismatch(self.oid, str(expected), str(actual))

        if self.resolved_data is None:
            self.resolve()

        assert self.resolved_data is not None
        return self.resolved_data
