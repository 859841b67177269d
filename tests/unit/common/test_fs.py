from pathlib import Path

import pytest

from pyprofile.common.fs import copy_file, create_exclusive, duplicate_file


def test_create_exclusive_makes_parents(tmp_path: Path):
    with create_exclusive(tmp_path / "a" / "b" / "out.py") as f:
        f.write(b"x = 1\n")

    assert (tmp_path / "a/b/out.py").read_bytes() == b"x = 1\n"


def test_create_exclusive_refuses_existing(tmp_path: Path):
    (tmp_path / "out.py").write_text("keep")

    with pytest.raises(FileExistsError):
        create_exclusive(tmp_path / "out.py")
    assert (tmp_path / "out.py").read_text() == "keep"


def test_copy_file(tmp_path: Path):
    (tmp_path / "src.bin").write_bytes(b"\x00\x01payload")

    copy_file(tmp_path / "src.bin", tmp_path / "copy" / "dst.bin")

    assert (tmp_path / "copy/dst.bin").read_bytes() == b"\x00\x01payload"


def test_duplicate_file_links_to_absolute_source(tmp_path: Path, monkeypatch):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "data.json").write_text("{}")
    monkeypatch.chdir(tmp_path)

    duplicate_file(Path("src/data.json"), tmp_path / "work" / "data.json")

    dest = tmp_path / "work" / "data.json"
    assert dest.read_text() == "{}"
    if dest.is_symlink():
        assert dest.readlink().is_absolute()


def test_duplicate_file_falls_back_to_copy(tmp_path: Path, monkeypatch):
    (tmp_path / "data.json").write_text("{}")

    def refuse(src, dst):
        raise PermissionError("symlinks disabled")

    monkeypatch.setattr("pyprofile.common.fs.os.symlink", refuse)
    duplicate_file(tmp_path / "data.json", tmp_path / "work" / "data.json")

    dest = tmp_path / "work" / "data.json"
    assert not dest.is_symlink()
    assert dest.read_text() == "{}"


def test_duplicate_file_refuses_existing(tmp_path: Path):
    (tmp_path / "data.json").write_text("{}")
    (tmp_path / "copy.json").write_text("old")

    with pytest.raises(FileExistsError):
        duplicate_file(tmp_path / "data.json", tmp_path / "copy.json")
    assert (tmp_path / "copy.json").read_text() == "old"
