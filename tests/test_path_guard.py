import os
from pathlib import Path

import pytest

from homefs.core.exceptions import AccessDeniedError
from homefs.services.path_guard import is_within_root, resolve, to_relative


class TestResolve:
    def test_joins_relative_path_onto_root(self, home):
        assert resolve(home, "docs/report.txt") == home / "docs" / "report.txt"

    def test_empty_and_none_mean_root(self, home):
        assert resolve(home, "") == home
        assert resolve(home, None) == home

    def test_trailing_slash_is_normalized(self, home):
        assert resolve(home, "docs/") == home / "docs"

    @pytest.mark.parametrize("user_path", [
        "..",
        "../etc/passwd",
        "docs/../../etc",
        "docs/../report.txt",
        "docs/sub/../../..",
        "..\\secrets",
    ])
    def test_parent_segments_are_rejected(self, home, user_path):
        with pytest.raises(AccessDeniedError):
            resolve(home, user_path)

    def test_absolute_path_replaces_root_and_is_rejected(self, home):
        with pytest.raises(AccessDeniedError):
            resolve(home, "/etc/passwd")

    def test_null_byte_is_rejected(self, home):
        with pytest.raises(AccessDeniedError):
            resolve(home, "docs/\0report.txt")

    def test_dots_inside_names_are_allowed(self, home):
        assert resolve(home, "docs/..hidden") == home / "docs" / "..hidden"
        assert resolve(home, "docs/report..txt") == home / "docs" / "report..txt"


class TestContainment:
    def test_sibling_with_common_prefix_is_outside(self):
        root = os.path.join(os.sep, "srv", "home")
        assert not is_within_root(root, os.path.join(os.sep, "srv", "home2", "x"))

    def test_root_itself_and_children_are_inside(self):
        root = os.path.join(os.sep, "srv", "home")
        assert is_within_root(root, root)
        assert is_within_root(root, os.path.join(root, "a", "b"))


class TestToRelative:
    def test_renders_leading_slash_and_forward_slashes(self, home):
        assert to_relative(home, home / "docs" / "sub" / "report2.txt") == "/docs/sub/report2.txt"

    def test_root_renders_as_slash(self, home):
        assert to_relative(home, home) == "/"

    def test_accepts_strings(self, home):
        assert to_relative(home, str(Path(home) / "readme")) == "/readme"
