"""Tests for arbor.tree.address — path classification and prefix matching."""

import pytest

from arbor.errors import MalformedPath, TreeError
from arbor.tree.address import PathAddress, PathKind, is_absolute_uri


class TestClassification:
    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            ("docs/", PathKind.DIRECTORY),
            ("a/b/", PathKind.DIRECTORY),
            ("#intro", PathKind.FRAGMENT),
            ("page.html", PathKind.FILE),
            ("dir/file#section", PathKind.FILE),
            ("http://example.com/", PathKind.ABSOLUTE),
            ("mailto:someone@example.com", PathKind.ABSOLUTE),
        ],
    )
    def test_kind(self, path: str, kind: PathKind) -> None:
        assert PathAddress.parse(path).kind is kind

    def test_absolute_wins_over_trailing_slash(self) -> None:
        address = PathAddress.parse("http://example.com/")
        assert address.is_absolute
        assert not address.is_directory

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(MalformedPath):
            PathAddress.parse("")

    def test_empty_path_allowed_for_root(self) -> None:
        assert PathAddress.parse("", allow_empty=True).path == ""

    @pytest.mark.parametrize("path", ["a#b#c", "#frag/ment", "dir#x/"])
    def test_ambiguous_paths_rejected(self, path: str) -> None:
        with pytest.raises(MalformedPath) as exc_info:
            PathAddress.parse(path)
        assert exc_info.value.path == path

    def test_malformed_path_is_tree_error(self) -> None:
        assert issubclass(MalformedPath, TreeError)
        assert issubclass(MalformedPath, ValueError)

    def test_frozen(self) -> None:
        address = PathAddress.parse("page.html")
        with pytest.raises(AttributeError):
            address.path = "other.html"  # type: ignore[misc]

    def test_is_absolute_uri(self) -> None:
        assert is_absolute_uri("https://x.org")
        assert not is_absolute_uri("page.html")
        assert not is_absolute_uri("/docs/")


class TestMatch:
    def test_directory_consumes_slash(self) -> None:
        assert PathAddress.parse("docs/").match("docs/page.html") == "docs/"

    def test_directory_matches_at_end(self) -> None:
        assert PathAddress.parse("docs/").match("docs") == "docs"

    def test_directory_requires_boundary(self) -> None:
        address = PathAddress.parse("docs/")
        assert address.match("docsx/page") is None
        assert address.match("doc") is None
        assert address.match("docs#intro") is None

    def test_compound_directory(self) -> None:
        assert PathAddress.parse("a/b/").match("a/b/c.html") == "a/b/"

    def test_file_terminated_by_fragment(self) -> None:
        address = PathAddress.parse("page.html")
        assert address.match("page.html") == "page.html"
        assert address.match("page.html#intro") == "page.html"

    def test_file_requires_boundary(self) -> None:
        address = PathAddress.parse("page.html")
        assert address.match("page.htmlx") is None
        assert address.match("page.html/more") is None

    def test_fragment_exact_only(self) -> None:
        address = PathAddress.parse("#intro")
        assert address.match("#intro") == "#intro"
        assert address.match("#intro2") is None

    def test_case_sensitive(self) -> None:
        assert PathAddress.parse("Docs/").match("docs/") is None

    def test_literal_not_regex(self) -> None:
        address = PathAddress.parse("a.b")
        assert address.match("axb") is None
        assert address.match("a.b") == "a.b"

    def test_absolute_never_matches(self) -> None:
        address = PathAddress.parse("http://example.com/")
        assert address.match("http://example.com/") is None
