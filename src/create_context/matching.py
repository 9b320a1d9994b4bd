"""Path-level and extension-level filtering rules.

Exclusion patterns come in four shapes:

- ``*.log``: file name suffix glob, matched at any depth.
- ``build/``: directory name, matched against every directory segment at any depth.
- ``node_modules``: bare name, matched against every segment (file or directory).
- ``app/generated``: anchored at the walk root, exact path or directory prefix.

Exclusion is evaluated before inclusion and always wins.
"""

from __future__ import annotations

import fnmatch
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from create_context.config import FilterConfig

_GLOB_CHARS = frozenset("*?[")


def normalize_rel(path: str) -> str:
    """Normalize a relative path to POSIX separators without leading "./" or slashes.

    Args:
        path (str): the relative path to normalize

    Returns:
        str: the normalized path, e.g. "./src\\app.py" -> "src/app.py"
    """
    p = path.strip().replace("\\", "/")
    while p.startswith("./"):
        p = p[2:]
    return p.strip("/")


def _has_glob(pattern: str) -> bool:
    return any(c in _GLOB_CHARS for c in pattern)


def _segment_matches(segment: str, name: str) -> bool:
    if _has_glob(name):
        return fnmatch.fnmatchcase(segment, name)
    return segment == name


def match_pattern(path: str, pattern: str, *, is_dir: bool = False) -> bool:
    """Check whether a single exclusion pattern matches a relative path.

    Args:
        path (str): normalized relative path of a file or directory
        pattern (str): the exclusion pattern
        is_dir (bool): whether `path` names a directory; a file's last segment
            is never considered a directory segment.

    Returns:
        bool: True if the pattern matches the path
    """
    pat = pattern.strip().replace("\\", "/")
    if not pat or not path:
        return False
    parts = path.split("/")

    if pat.startswith("*."):
        return fnmatch.fnmatchcase(parts[-1], pat)

    name = normalize_rel(pat)
    if "/" in pat.rstrip("/"):
        if _has_glob(name):
            return fnmatch.fnmatchcase(path, name) or fnmatch.fnmatchcase(path, name + "/*")
        return path == name or path.startswith(name + "/")

    if pat.endswith("/"):
        dir_parts = parts if is_dir else parts[:-1]
        return any(_segment_matches(part, name) for part in dir_parts)

    return any(_segment_matches(part, name) for part in parts)


def is_excluded(path: str, config: FilterConfig, *, is_dir: bool = False) -> bool:
    """Check if a relative path is excluded by any of the configured patterns.

    Args:
        path (str): the relative path to check
        config (FilterConfig): the filtering rules
        is_dir (bool): whether `path` names a directory

    Returns:
        bool: True if any pattern in `config.exclude_paths` matches
    """
    rel = normalize_rel(path)
    return any(match_pattern(rel, pat, is_dir=is_dir) for pat in config.exclude_paths)


def is_included(path: str, config: FilterConfig, *, is_dir: bool = False) -> bool:
    """Check if a relative path falls inside the configured include paths.

    An empty `include_paths` means no restriction. A file is included when it
    equals or is nested under an entry. A directory is also kept when it is an
    ancestor of an entry, so the walk can reach it.

    Args:
        path (str): the relative path to check
        config (FilterConfig): the filtering rules
        is_dir (bool): whether `path` names a directory

    Returns:
        bool: True if the path should be kept
    """
    includes = [normalize_rel(p) for p in config.include_paths if normalize_rel(p)]
    if not includes:
        return True
    rel = normalize_rel(path)
    for inc in includes:
        if rel == inc or rel.startswith(inc + "/"):
            return True
        if is_dir and inc.startswith(rel + "/"):
            return True
    return False


def passes_path_filters(path: str, config: FilterConfig, *, is_dir: bool = False) -> bool:
    """Apply exclusion then inclusion; an excluded path is dropped even if included."""
    if is_excluded(path, config, is_dir=is_dir):
        return False
    return is_included(path, config, is_dir=is_dir)


def file_extension(path: str) -> str:
    """Return the lower-cased extension of a path, with its dot, or "" if none.

    Dotfiles such as ".bashrc" have no extension.
    """
    return PurePosixPath(normalize_rel(path)).suffix.lower()


def should_include_content(path: str, config: FilterConfig) -> bool:
    """Decide whether a path's content is embedded, based on its extension.

    An empty `include_extensions` allows every file. The "" member allows
    files without extension; it is not a wildcard.

    Args:
        path (str): the relative path to check
        config (FilterConfig): the filtering rules

    Returns:
        bool: True if the content should be embedded
    """
    if not config.include_extensions:
        return True
    return file_extension(path) in config.include_extensions


def filter_paths(paths: Sequence[str], config: FilterConfig) -> list[str]:
    """Keep the normalized paths passing the path-level rules, deduplicated and sorted."""
    rels = {normalize_rel(p) for p in paths if normalize_rel(p)}
    return sorted(r for r in rels if passes_path_filters(r, config))
