from datetime import timedelta

import pytest

from packlook.author import Author
from packlook.commit import Commit
from packlook.db_entry import DatabaseEntry
from packlook.tree import Tree
from tests.pack_helpers import make_tree

TREE = "a" * 40
PARENTS = ["b" * 40, "c" * 40]

SIGNED = (
    f"tree {TREE}\n"
    f"parent {PARENTS[0]}\n"
    f"parent {PARENTS[1]}\n"
    "author A. U. Thor <author@example.com> 1709294400 +0100\n"
    "committer C. O. Mitter <committer@example.com> 1709298000 -0230\n"
    "gpgsig -----BEGIN PGP SIGNATURE-----\n"
    " \n"
    " iQEzBAABCAAdFiEE\n"
    " -----END PGP SIGNATURE-----\n"
    "\n"
    "Merge branch 'topic'\n\nWith a body.\n"
).encode("utf-8")


class TestCommitParse:
    def test_it_reads_headers_and_message(self) -> None:
        commit = Commit.parse(SIGNED, "d" * 40)

        assert commit.oid == "d" * 40
        assert commit.tree == TREE
        assert commit.parents == PARENTS
        assert commit.message == "Merge branch 'topic'\n\nWith a body.\n"

    def test_it_reads_author_and_committer(self) -> None:
        commit = Commit.parse(SIGNED)

        assert commit.author is not None and commit.committer is not None
        assert str(commit.author) == "A. U. Thor <author@example.com> 1709294400 +0100"
        assert commit.committer.name == "C. O. Mitter"
        assert commit.committer.time.strftime("%z") == "-0230"

    @pytest.mark.parametrize(
        "data, message",
        [
            (b"tree " + TREE.encode() + b"\n", "unterminated"),
            (b"author x <y> 0 +0000\n\nmsg", "tree"),
            (b"tree " + TREE.encode() + b"\n\nmsg", "author"),
        ],
    )
    def test_it_rejects_malformed_commits(self, data: bytes, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            Commit.parse(data)


class TestTreeParse:
    def test_it_reads_entries_written_in_git_order(self) -> None:
        tree = make_tree(
            {
                "lib": ("1" * 40, 0o40000),
                "lib.py": ("2" * 40, 0o100755),
                "vendor": ("3" * 40, 0o160000),
            }
        )

        parsed = Tree.parse(tree.to_bytes())

        assert list(parsed.entries) == ["lib.py", "lib", "vendor"]
        assert parsed.entries["lib"] == DatabaseEntry("1" * 40, 0o40000)
        assert str(parsed) == (
            f"100755 blob {'2' * 40}\tlib.py\n"
            f"040000 tree {'1' * 40}\tlib\n"
            f"160000 commit {'3' * 40}\tvendor\n"
        )

    def test_it_rejects_a_truncated_entry(self) -> None:
        data = make_tree({"a.txt": ("1" * 40, 0o100644)}).to_bytes()

        with pytest.raises(ValueError, match="truncated"):
            Tree.parse(data[:-3])


class TestAuthorParse:
    @pytest.mark.parametrize(
        "line",
        ["nobody", "A. U. Thor <author@example.com>", "A. U. Thor <a@b> soon +0000"],
    )
    def test_it_rejects_malformed_identities(self, line: str) -> None:
        assert Author.parse(line) is None

    def test_it_keeps_the_utc_offset(self) -> None:
        author = Author.parse("A. U. Thor <author@example.com> 0 -0230")

        assert author is not None
        assert author.time.utcoffset() == -timedelta(hours=2, minutes=30)
        assert str(author) == "A. U. Thor <author@example.com> 0 -0230"
