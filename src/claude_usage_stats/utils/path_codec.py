"""Encode and decode Claude Code project path ↔ directory name.

Claude Code names each project directory after the absolute path of the
project, with every ``/``, ``.`` and space replaced by ``-``. The encoding
is lossy: a literal hyphen cannot be told apart from a replaced separator,
so decoding consults the live filesystem and greedily prefers the longest
directory name that exists. Known failure modes, all accepted:

* the original directory no longer exists (falls back to ``/`` joins),
* two directories share the same encoded form (the first hit wins),
* one component mixes separators, e.g. ``my.project-name``, and no
  listing entry normalizes to it.
"""

import logging
import os
import posixpath
import re
from typing import Protocol

logger = logging.getLogger(__name__)

_SEPARATORS = ("-", ".", " ")
_COMPONENT_SPECIALS = re.compile(r"[-_. ]")


class FileSystem(Protocol):
    """Directory lookups the decoder needs."""

    def is_dir(self, path: str) -> bool: ...

    def list_dir(self, path: str) -> list[str]: ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_dir(self, path: str) -> list[str]:
        try:
            return sorted(os.listdir(path))
        except OSError:
            return []


def encode_path(path: str) -> str:
    """Encode a filesystem path to a Claude project directory name.

    /home/wiz/AI/my.app → -home-wiz-AI-my-app
    """
    if not path:
        return ""
    encoded = path.replace("/", "-")
    # On Windows-origin paths, also handle backslash
    encoded = encoded.replace("\\", "-")
    return encoded.replace(".", "-").replace(" ", "-")


def decode_path(
    encoded: str,
    home: str | None = None,
    fs: FileSystem | None = None,
) -> str:
    """Decode a Claude project directory name to a best-effort filesystem path.

    -home-wiz-AI-LLM → /home/wiz/AI/LLM (when home is /home/wiz)

    Paths outside ``home`` are never disambiguated; they come back with every
    hyphen turned into ``/``.
    """
    if not encoded:
        return ""
    if home is None:
        home = os.path.expanduser("~")
    if fs is None:
        fs = LocalFileSystem()

    parts = encoded.split("-")
    if parts and parts[0] == "":
        parts = parts[1:]

    consumed = _match_home(parts, home)
    if consumed is None:
        return "/" + "/".join(p for p in parts if p)

    base = posixpath.normpath(home) if home else "/"
    return _resolve(parts[consumed:], base, fs)


def extract_project_name(path: str) -> str:
    """Get the last path segment as the project display name.

    /home/wiz/AI/LLM → LLM
    """
    return path.rstrip("/").rsplit("/", 1)[-1] if path else ""


def _match_home(parts: list[str], home: str) -> int | None:
    """Return how many tokens the home directory prefix consumes, or None."""
    index = 0
    for comp in (c for c in home.split("/") if c):
        if index < len(parts) and parts[index] == comp:
            index += 1
            continue
        # A home component with its own hyphens/underscores spans several tokens
        pieces = _COMPONENT_SPECIALS.sub("-", comp).split("-")
        if parts[index:index + len(pieces)] == pieces:
            index += len(pieces)
            continue
        return None
    return index


def _resolve(parts: list[str], base: str, fs: FileSystem) -> str:
    """Greedily resolve encoded tokens below ``base``, longest run first."""
    if not parts:
        return base

    listing = None
    for count in range(len(parts), 0, -1):
        segment = parts[:count]
        rest = parts[count:]
        # A run of empty tokens would name "." or ".."
        if not any(segment):
            continue

        # dict.fromkeys keeps order and drops duplicate single-token joins
        for candidate in dict.fromkeys(sep.join(segment) for sep in _SEPARATORS):
            candidate_path = posixpath.join(base, candidate)
            if not fs.is_dir(candidate_path):
                continue
            if not rest:
                return candidate_path
            result = _resolve(rest, candidate_path, fs)
            if fs.is_dir(result):
                return result

        # Mixed separators inside one component: compare against the real entries
        if count > 1:
            if listing is None:
                listing = fs.list_dir(base)
            wanted = "-".join(segment).lower()
            for entry in listing:
                if _normalize_entry(entry) != wanted:
                    continue
                candidate_path = posixpath.join(base, entry)
                if not fs.is_dir(candidate_path):
                    continue
                if not rest:
                    return candidate_path
                result = _resolve(rest, candidate_path, fs)
                if fs.is_dir(result):
                    return result

    logger.debug("No directory match below %s for %s", base, "-".join(parts))
    remainder = "/".join(p for p in parts if p)
    return posixpath.join(base, remainder) if remainder else base


def _normalize_entry(name: str) -> str:
    return name.replace(".", "-").replace(" ", "-").lower()
