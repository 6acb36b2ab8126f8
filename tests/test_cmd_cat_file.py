from __future__ import annotations

from io import BytesIO, StringIO
from pathlib import Path

import pytest

from packlook.command import Command
from packlook.pack import Kind
from tests.cmd_helpers import assert_status, assert_stderr, assert_stdout, output_of
from tests.pack_helpers import PackBuilder, make_tree

BLOB_TEXT = b"hello from a packed blob\n" * 4


@pytest.fixture
def objects(write_pack, make_commit) -> dict[str, str]:
    builder = PackBuilder()
    blob = builder.add(Kind.BLOB, BLOB_TEXT)
    delta = builder.add_ofs_delta(blob, BLOB_TEXT + b"and one more line\n")

    tree = make_tree({"world.txt": (delta, 0o100644), "hello.txt": (blob, 0o100644)})
    tree_oid = builder.add(Kind.TREE, tree.to_bytes())

    commit = make_commit("First commit.\n", tree_oid, [])
    commit_oid = builder.add(Kind.COMMIT, commit.to_bytes())

    write_pack(builder, "pack-test")
    return {"blob": blob, "delta": delta, "tree": tree_oid, "commit": commit_oid}


class TestTypeAndSize:
    @pytest.mark.parametrize("name", ["blob", "delta", "tree", "commit"])
    def test_it_prints_the_type(self, packlook_cmd, objects, name: str) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-t", objects[name])

        assert_status(cmd, 0)
        assert_stdout(stdout, ("blob" if name == "delta" else name) + "\n")

    def test_it_prints_the_size_of_a_blob(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-s", objects["blob"])

        assert_status(cmd, 0)
        assert_stdout(stdout, f"{len(BLOB_TEXT)}\n")

    def test_it_prints_the_size_of_a_delta_target(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-s", objects["delta"])

        assert_status(cmd, 0)
        assert_stdout(stdout, f"{len(BLOB_TEXT) + 18}\n")

    def test_it_accepts_an_abbreviated_name(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-t", objects["tree"][:8])

        assert_status(cmd, 0)
        assert_stdout(stdout, "tree\n")


class TestPrettyPrint:
    def test_it_prints_blob_contents(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-p", objects["delta"])

        assert_status(cmd, 0)
        assert_stdout(stdout, (BLOB_TEXT + b"and one more line\n").decode("utf-8"))

    def test_it_prints_tree_entries(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-p", objects["tree"])

        assert_status(cmd, 0)
        assert_stdout(
            stdout,
            f"100644 blob {objects['blob']}\thello.txt\n"
            f"100644 blob {objects['delta']}\tworld.txt\n",
        )

    def test_it_prints_commit_contents(self, packlook_cmd, objects) -> None:
        cmd, stdout, _ = packlook_cmd("cat-file", "-p", objects["commit"])

        assert_status(cmd, 0)
        lines = output_of(stdout).split("\n")
        assert lines[0] == f"tree {objects['tree']}"
        assert lines[1].startswith("author A. U. Thor <author@example.com> ")
        assert lines[-2:] == ["First commit.", ""]


class TestErrors:
    def test_it_fails_for_an_unknown_object(self, packlook_cmd, objects) -> None:
        cmd, stdout, stderr = packlook_cmd("cat-file", "-t", "0" * 40)

        assert_status(cmd, 128)
        assert_stdout(stdout, "")
        assert_stderr(stderr, f"fatal: Not a valid object name {'0' * 40}\n")

    def test_it_fails_without_a_mode(self, packlook_cmd) -> None:
        cmd, _, stderr = packlook_cmd("cat-file", "abc123")

        assert_status(cmd, 129)
        assert_stderr(stderr, "usage: packlook cat-file (-t | -s | -p) <object>\n")

    def test_it_fails_with_two_modes(self, packlook_cmd) -> None:
        cmd, _, _ = packlook_cmd("cat-file", "-t", "-s", "abc123")

        assert_status(cmd, 129)

    def test_it_reports_a_corrupt_pack(self, packlook_cmd, pack_dir: Path, objects) -> None:
        corrupt = pack_dir / "pack-test.pack"
        data = corrupt.read_bytes()
        corrupt.write_bytes(data[:-1] + bytes([data[-1] ^ 0xFF]))

        cmd, _, stderr = packlook_cmd("cat-file", "-t", objects["blob"])

        assert_status(cmd, 128)
        assert output_of(stderr).startswith("fatal: pack-test: ")

    def test_it_honours_the_configured_depth_limit(
        self, packlook_cmd, git_path: Path, objects
    ) -> None:
        (git_path / "config").write_text("[packlook]\n\tmaxDeltaDepth = 0\n")

        cmd, _, stderr = packlook_cmd("cat-file", "-s", objects["delta"])

        assert_status(cmd, 128)
        assert_stderr(stderr, f"fatal: delta chain of {objects['delta']} is deeper than 0\n")

    def test_it_rejects_an_unknown_log_level(
        self, packlook_cmd, git_path: Path, objects
    ) -> None:
        (git_path / "config").write_text("[packlook]\n\tlogLevel = verbose\n")

        cmd, stdout, stderr = packlook_cmd("cat-file", "-t", objects["blob"])

        assert_status(cmd, 128)
        assert_stdout(stdout, "")
        assert_stderr(stderr, "fatal: bad log level 'verbose' for packlook.logLevel\n")


def test_it_uses_git_dir_from_the_environment(
    packlook_cmd, tmp_path: Path
) -> None:
    other = tmp_path / "elsewhere.git"
    builder = PackBuilder()
    oid = builder.add(Kind.BLOB, b"stored elsewhere\n")
    builder.write(other / "objects" / "pack", "pack-other")

    cmd, stdout, _ = packlook_cmd("cat-file", "-p", oid, env={"GIT_DIR": str(other)})

    assert_status(cmd, 0)
    assert_stdout(stdout, "stored elsewhere\n")


def test_it_pretty_prints_a_tree_to_a_byte_stream(repo_path: Path, objects) -> None:
    stdout = BytesIO()

    cmd = Command.execute(
        repo_path,
        {},
        ["packlook", "cat-file", "-p", objects["tree"]],
        StringIO(),
        stdout,
        StringIO(),
    )

    assert_status(cmd, 0)
    assert stdout.getvalue() == (
        f"100644 blob {objects['blob']}\thello.txt\n"
        f"100644 blob {objects['delta']}\tworld.txt\n"
    ).encode("utf-8")
