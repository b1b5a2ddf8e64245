"""Tests for request-struct reflection."""

import os

from swagcomment.reflector import PathParam, RequestTypeReflector
from swagcomment.syntax import SyntaxCache


def make_reflector(*patterns):
    return RequestTypeReflector(patterns, SyntaxCache())


class TestFindRequestType:
    """Tests for locating request structs."""

    def test_kinds_and_required_flags(self, go_project):
        """uri-tagged fields map to swagger kinds with their required flag."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert reflector.find_request_type("types.GetUserReq") == {
            "id": PathParam(name="id", kind="integer", required=True)
        }
        assert reflector.find_request_type("types.GetMemberReq") == {
            "org_id": PathParam(name="org_id", kind="string", required=True),
            "member_id": PathParam(name="member_id", kind="integer", required=False),
        }

    def test_only_uri_fields_are_reported(self, go_project):
        """Body fields without a uri tag are ignored."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert set(reflector.find_request_type("types.UpdateUserReq")) == {"id"}

    def test_non_scalar_types_map_to_string(self, tmp_path):
        """Pointer, slice and unknown types are reported as strings."""
        (tmp_path / "t.go").write_text(
            "package types\n\n"
            "type ThingReq struct {\n"
            '\tA *bool `uri:"a"`\n'
            '\tB []int `uri:"b"`\n'
            '\tC uuid.UUID `uri:"c"`\n'
            '\tD float64 `uri:"d"`\n'
            '\tE bool `uri:"e"`\n'
            "}\n",
            encoding="utf-8",
        )
        info = make_reflector(str(tmp_path / "*.go")).find_request_type("types.ThingReq")
        assert {name: p.kind for name, p in info.items()} == {
            "a": "string",
            "b": "string",
            "c": "string",
            "d": "number",
            "e": "boolean",
        }

    def test_name_must_have_two_segments(self, go_project):
        """Unqualified or over-qualified names are never found."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert reflector.find_request_type("GetUserReq") == {}
        assert reflector.find_request_type("a.types.GetUserReq") == {}

    def test_unknown_type_is_empty(self, go_project):
        """Missing types yield an empty mapping."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert reflector.find_request_type("types.DeleteUserReq") == {}

    def test_non_struct_type_is_skipped(self, tmp_path):
        """A type alias with the right name is not a request struct."""
        (tmp_path / "a.go").write_text("package types\n\ntype ThingReq int\n", encoding="utf-8")
        (tmp_path / "b.go").write_text(
            'package types\n\ntype ThingReq struct {\n\tID int `uri:"id"`\n}\n',
            encoding="utf-8",
        )
        info = make_reflector(str(tmp_path / "*.go")).find_request_type("types.ThingReq")
        assert set(info) == {"id"}

    def test_first_match_across_globs_wins(self, tmp_path):
        """Earlier glob patterns take precedence over later ones."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "t.go").write_text(
            'package types\n\ntype ThingReq struct {\n\tID string `uri:"id"`\n}\n',
            encoding="utf-8",
        )
        (second / "t.go").write_text(
            'package types\n\ntype ThingReq struct {\n\tID int `uri:"id"`\n}\n',
            encoding="utf-8",
        )
        reflector = make_reflector(str(first / "*.go"), str(second / "*.go"))
        assert reflector.find_request_type("types.ThingReq")["id"].kind == "string"

    def test_unreadable_source_is_skipped(self, go_project):
        """A type source with syntax errors does not stop the search."""
        (go_project.types_dir / "aaa_broken.go").write_text(
            "package types\n\ntype Broken struct {\n", encoding="utf-8"
        )
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert "id" in reflector.find_request_type("types.GetUserReq")


class TestReflectorCache:
    """Tests for memoization of lookups."""

    def test_results_are_memoized(self, go_project):
        """Repeated lookups return the cached mapping."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        first = reflector.find_request_type("types.GetUserReq")
        assert reflector.find_request_type("types.GetUserReq") is first

    def test_negative_results_are_cached(self, go_project):
        """A missing type is not searched for again."""
        reflector = make_reflector(str(go_project.types_dir / "*.go"))
        assert reflector.find_request_type("types.NopeReq") == {}
        assert "types.NopeReq" in reflector.cached_names()

        (go_project.types_dir / "late.go").write_text(
            'package types\n\ntype NopeReq struct {\n\tID int `uri:"id"`\n}\n',
            encoding="utf-8",
        )
        assert reflector.find_request_type("types.NopeReq") == {}

    def test_type_sources_share_the_syntax_cache(self, go_project):
        """Parsed type files land in the shared syntax cache."""
        cache = SyntaxCache()
        reflector = RequestTypeReflector((str(go_project.types_dir / "*.go"),), cache)
        reflector.find_request_type("types.GetUserReq")
        assert os.path.join(str(go_project.types_dir), "user_types.go") in cache


class TestTypeSourceFiles:
    """Tests for glob expansion."""

    def test_duplicates_across_patterns_dropped(self, go_project):
        """A file matched by two patterns is listed once."""
        pattern = str(go_project.types_dir / "*.go")
        reflector = make_reflector(pattern, pattern)
        assert len(reflector.type_source_files()) == 1

    def test_recursive_patterns(self, go_project):
        """``**`` patterns descend into subdirectories."""
        nested = go_project.types_dir / "nested"
        nested.mkdir()
        (nested / "more.go").write_text("package nested\n", encoding="utf-8")
        reflector = make_reflector(str(go_project.root / "**" / "types" / "**" / "*.go"))
        names = {os.path.basename(p) for p in reflector.type_source_files()}
        assert names == {"user_types.go", "more.go"}
