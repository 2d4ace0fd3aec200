"""Tests for path encoding/decoding."""

import posixpath

import pytest
from claude_usage_stats.utils.path_codec import (
    LocalFileSystem,
    decode_path,
    encode_path,
    extract_project_name,
)


class FakeFileSystem:
    """In-memory directory tree; every ancestor of a listed dir exists too."""

    def __init__(self, *dirs: str):
        self.dirs = {"/"}
        for d in dirs:
            path = posixpath.normpath(d)
            while path not in self.dirs:
                self.dirs.add(path)
                path = posixpath.dirname(path)

    def is_dir(self, path: str) -> bool:
        return posixpath.normpath(path) in self.dirs

    def list_dir(self, path: str) -> list[str]:
        base = posixpath.normpath(path)
        return sorted(
            posixpath.basename(d) for d in self.dirs
            if d != "/" and posixpath.dirname(d) == base
        )


HOME = "/Users/alice"


class TestEncodePath:
    def test_absolute_path(self):
        assert encode_path("/home/wiz/AI/LLM") == "-home-wiz-AI-LLM"

    def test_dots_and_spaces(self):
        assert encode_path("/Users/alice/my.proj") == "-Users-alice-my-proj"
        assert encode_path("/Users/alice/My Project") == "-Users-alice-My-Project"

    def test_root_path(self):
        assert encode_path("/") == "-"

    def test_empty_path(self):
        assert encode_path("") == ""

    def test_windows_path(self):
        assert encode_path("C:\\Users\\wiz\\project") == "C:-Users-wiz-project"


class TestDecodeScenarios:
    def test_hyphenated_dir_exists(self):
        fs = FakeFileSystem("/Users/alice/my-proj")
        assert decode_path("Users-alice-my-proj", home=HOME, fs=fs) == "/Users/alice/my-proj"

    def test_dotted_dir_exists(self):
        fs = FakeFileSystem("/Users/alice/my.proj")
        assert decode_path("Users-alice-my-proj", home=HOME, fs=fs) == "/Users/alice/my.proj"

    def test_spaced_dir_exists(self):
        fs = FakeFileSystem("/Users/alice/my proj")
        assert decode_path("-Users-alice-my-proj", home=HOME, fs=fs) == "/Users/alice/my proj"

    def test_hyphen_preferred_over_dot(self):
        fs = FakeFileSystem("/Users/alice/my-proj", "/Users/alice/my.proj")
        assert decode_path("-Users-alice-my-proj", home=HOME, fs=fs) == "/Users/alice/my-proj"

    def test_longest_match_first(self):
        fs = FakeFileSystem("/Users/alice/a-b-c", "/Users/alice/a/b/c")
        assert decode_path("-Users-alice-a-b-c", home=HOME, fs=fs) == "/Users/alice/a-b-c"

    def test_backtracks_when_longer_match_dead_ends(self):
        fs = FakeFileSystem("/Users/alice/my-app", "/Users/alice/my/app/src")
        result = decode_path("-Users-alice-my-app-src", home=HOME, fs=fs)
        assert result == "/Users/alice/my/app/src"

    def test_mixed_separators_found_via_listing(self):
        fs = FakeFileSystem("/Users/alice/My.Cool-App")
        result = decode_path("-Users-alice-My-Cool-App", home=HOME, fs=fs)
        assert result == "/Users/alice/My.Cool-App"

    def test_listing_match_is_case_insensitive(self):
        fs = FakeFileSystem("/Users/alice/Data.Set-V2")
        result = decode_path("-Users-alice-data-set-v2", home=HOME, fs=fs)
        assert result == "/Users/alice/Data.Set-V2"

    def test_hidden_directory(self):
        fs = FakeFileSystem("/Users/alice/.config/nvim")
        result = decode_path("-Users-alice--config-nvim", home=HOME, fs=fs)
        assert result == "/Users/alice/.config/nvim"

    def test_home_itself(self):
        fs = FakeFileSystem(HOME)
        assert decode_path("-Users-alice", home=HOME, fs=fs) == "/Users/alice"


class TestDecodeHomeMatching:
    def test_home_with_underscore(self):
        fs = FakeFileSystem("/home/first_last/proj")
        result = decode_path("-home-first-last-proj", home="/home/first_last", fs=fs)
        assert result == "/home/first_last/proj"

    def test_home_with_hyphen(self):
        fs = FakeFileSystem("/home/jean-luc/site.io")
        result = decode_path("-home-jean-luc-site-io", home="/home/jean-luc", fs=fs)
        assert result == "/home/jean-luc/site.io"

    def test_outside_home_is_plain_join(self):
        fs = FakeFileSystem("/opt/my-data")
        # Not below home, so no filesystem disambiguation happens
        assert decode_path("-opt-my-data", home=HOME, fs=fs) == "/opt/my/data"

    def test_shorter_than_home(self):
        assert decode_path("-Users", home=HOME, fs=FakeFileSystem()) == "/Users"


class TestDecodeFallback:
    def test_no_matching_entries(self):
        result = decode_path("-Users-alice-ghost-proj-src", home=HOME, fs=FakeFileSystem())
        assert result == "/Users/alice/ghost/proj/src"

    def test_dead_end_falls_back_below_last_resolved_base(self):
        # work-stuff exists but nothing below it does, so that branch is
        # abandoned and the whole remainder is joined under home.
        fs = FakeFileSystem("/Users/alice/work-stuff")
        result = decode_path("-Users-alice-work-stuff-gone-dir", home=HOME, fs=fs)
        assert result == "/Users/alice/work/stuff/gone/dir"

    def test_fallback_below_resolved_parent(self):
        fs = FakeFileSystem("/Users/alice/code/app")
        result = decode_path("-Users-alice-code-app-gone", home=HOME, fs=fs)
        assert result == "/Users/alice/code/app/gone"

    def test_empty_token_run_never_climbs_out(self):
        fs = FakeFileSystem("/Users/x")
        result = decode_path("-Users-alice----x", home=HOME, fs=fs)
        assert result == "/Users/alice/x"

    def test_empty_token_run_never_becomes_current_dir(self):
        fs = FakeFileSystem("/Users/alice/Client/Website")
        result = decode_path("-Users-alice-Client---Website", home=HOME, fs=fs)
        assert result == "/Users/alice/Client/Website"

    def test_empty(self):
        assert decode_path("", home=HOME, fs=FakeFileSystem()) == ""

    def test_root(self):
        assert decode_path("-", home=HOME, fs=FakeFileSystem()) == "/"


class TestRoundTrip:
    @pytest.mark.parametrize("original", [
        "/Users/alice/code/app/src",
        "/Users/alice/projects/LLM",
        "/Users/alice",
    ])
    def test_unambiguous_path_roundtrips_when_present(self, original):
        fs = FakeFileSystem(original)
        assert decode_path(encode_path(original), home=HOME, fs=fs) == original

    def test_unambiguous_path_roundtrips_when_absent(self):
        original = "/Users/alice/code/app/src"
        assert decode_path(encode_path(original), home=HOME, fs=FakeFileSystem()) == original

    def test_real_filesystem(self, tmp_path):
        target = tmp_path / "my.proj" / "sub dir"
        target.mkdir(parents=True)
        encoded = encode_path(str(target))
        result = decode_path(encoded, home=str(tmp_path), fs=LocalFileSystem())
        assert result == str(target)


class TestLocalFileSystem:
    def test_list_missing_dir(self, tmp_path):
        assert LocalFileSystem().list_dir(str(tmp_path / "missing")) == []

    def test_list_sorted(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        assert LocalFileSystem().list_dir(str(tmp_path)) == ["a", "b"]


class TestExtractProjectName:
    def test_simple(self):
        assert extract_project_name("/home/wiz/AI/LLM") == "LLM"

    def test_trailing_slash(self):
        assert extract_project_name("/home/wiz/myapp/") == "myapp"

    def test_empty(self):
        assert extract_project_name("") == ""
