import os
from pathlib import Path

import pytest

from homefs.core.exceptions import AccessDeniedError, ItemNotFoundError
from homefs.core.models import DirectoryEntry, FileEntry
from homefs.services import directory_lister
from homefs.services.directory_lister import file_type, list_directory


class TestFileType:
    @pytest.mark.parametrize("name, expected", [
        ("report.txt", "TXT"),
        ("photo.JpEg", "JPEG"),
        ("archive.tar.gz", "GZ"),
        ("Makefile", "File"),
        ("trailing.", "File"),
    ])
    def test_uppercase_extension_or_sentinel(self, name, expected):
        assert file_type(name) == expected


class TestListDirectory:
    def test_directories_come_before_files(self, home):
        directories, files = list_directory(home, home)
        assert {d.name for d in directories} == {"docs", "music"}
        assert [f.name for f in files] == ["readme"]
        assert all(isinstance(d, DirectoryEntry) for d in directories)
        assert all(isinstance(f, FileEntry) for f in files)

    def test_entries_carry_home_relative_paths(self, home):
        directories, files = list_directory(home, home / "docs")
        assert [d.path for d in directories] == ["/docs/sub"]
        assert {f.path for f in files} == {"/docs/report.txt", "/docs/notes.md"}

    def test_directory_entry_counts_immediate_children(self, home):
        directories, _ = list_directory(home, home)
        counts = {d.name: d.item_count for d in directories}
        assert counts == {"docs": 3, "music": 0}

    def test_file_entry_metadata(self, home):
        _, files = list_directory(home, home / "docs")
        report = next(f for f in files if f.name == "report.txt")
        assert report.size_in_bytes == len("quarterly numbers")
        assert report.type == "TXT"
        assert report.last_modified.timestamp() == pytest.approx(
            (home / "docs" / "report.txt").stat().st_mtime
        )

    def test_listing_a_file_returns_that_file(self, home):
        directories, files = list_directory(home, home / "readme")
        assert directories == []
        assert [f.path for f in files] == ["/readme"]
        assert files[0].type == "File"

    def test_missing_path_raises_not_found(self, home):
        with pytest.raises(ItemNotFoundError):
            list_directory(home, home / "nope")

    def test_unreadable_child_directory_is_skipped(self, home, monkeypatch):
        real_count = directory_lister.count_children

        def fake_count(path):
            if Path(path).name == "docs":
                raise PermissionError("denied")
            return real_count(path)

        monkeypatch.setattr(directory_lister, "count_children", fake_count)
        directories, files = list_directory(home, home)
        assert [d.name for d in directories] == ["music"]
        assert [f.name for f in files] == ["readme"]

    def test_unreadable_top_level_raises_access_denied(self, home, monkeypatch):
        real_scandir = os.scandir

        def fake_scandir(path="."):
            if Path(path) == home / "docs":
                raise PermissionError("denied")
            return real_scandir(path)

        monkeypatch.setattr(directory_lister.os, "scandir", fake_scandir)
        with pytest.raises(AccessDeniedError):
            list_directory(home, home / "docs")

    def test_entries_serialize_with_camel_case_keys(self, home):
        directories, files = list_directory(home, home)
        assert set(files[0].model_dump(by_alias=True)) == {
            "name", "path", "lastModified", "sizeInBytes", "type",
        }
        assert set(directories[0].model_dump(by_alias=True)) == {
            "name", "path", "lastModified", "itemCount",
        }
