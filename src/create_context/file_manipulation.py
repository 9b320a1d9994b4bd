from __future__ import annotations

import os
import stat
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from create_context.exceptions import FileReadError, FileSizeExceededError, OutputWriteError, TraversalError
from create_context.logging import logger
from create_context.matching import normalize_rel, passes_path_filters

if TYPE_CHECKING:
    from collections.abc import Sequence

    from create_context.config import FilterConfig

EMPTY_TREE_PLACEHOLDER = "(no files matched)"

_FILES_KEY = "__files__"


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return str(path.relative_to(root)).replace("\\", "/")
    except ValueError:
        return str(path)


def is_regular_file(path: Path) -> bool:
    """Check if a file is regular.

    Args:
        path (Path): path to test.

    Returns:
        bool: True if the file is regular, False otherwise.
    """
    try:
        st = path.stat()
        return stat.S_ISREG(st.st_mode)
    except OSError:
        return False


def walk_files(root: Path, config: FilterConfig) -> list[str]:
    """Walk the directory tree rooted at `root` and return the candidate files.

    Directories failing the path rules are pruned before being descended into,
    so nothing under an excluded directory is ever listed. Files are not
    filtered here; that is the assembler's job.

    Args:
        root (Path): the root directory to walk
        config (FilterConfig): the rules used to prune directories

    Raises:
        TraversalError: if `root` is not a directory or a directory cannot be listed.

    Returns:
        list[str]: sorted relative paths (POSIX separators) of the regular files found
    """
    if not root.is_dir():
        raise TraversalError(root=root, reason="not a directory")

    def on_error(err: OSError) -> None:
        raise TraversalError(root=root, reason=str(err)) from err

    logger.debug("walk_started", root=str(root))
    results: list[str] = []
    for current, dirs, files in os.walk(root, onerror=on_error):
        base = Path(current)
        kept: list[str] = []
        for d in sorted(dirs):
            rel_dir = relpath(base / d, root)
            if passes_path_filters(rel_dir, config, is_dir=True):
                kept.append(d)
            else:
                logger.debug("directory_pruned", path=rel_dir)
        dirs[:] = kept
        for f in files:
            p = base / f
            if is_regular_file(p):
                results.append(relpath(p, root))
    return sorted(results)


def _build_tree(rel_paths: Sequence[str]) -> dict[str, Any]:
    tree: dict[str, Any] = {}
    for rp in {normalize_rel(p) for p in rel_paths if normalize_rel(p)}:
        cur = tree
        parts = rp.split("/")
        for i, part in enumerate(parts):
            if i == len(parts) - 1:
                cur.setdefault(_FILES_KEY, set()).add(part)
            else:
                cur = cur.setdefault(part, {})
    return tree


def _entries(node: dict[str, Any]) -> list[tuple[str, str, Any]]:
    dirs = sorted(k for k in node if k != _FILES_KEY)
    files = sorted(node.get(_FILES_KEY, set()))
    entries: list[tuple[str, str, Any]] = []
    entries.extend(("dir", d, node[d]) for d in dirs)
    entries.extend(("file", f, None) for f in files)
    return entries


def build_tree_lines(rel_paths: Sequence[str]) -> list[str]:
    """Build a visual tree representation of file paths.

    Directories come before files at each level, both sorted, and directories
    carry a trailing "/". The layout follows the Unix `tree` command, without
    the root line.

    Args:
        rel_paths (Sequence[str]): the list of file paths relative to the root, using POSIX separators (e.g. "src/main.py")

    Returns:
        list[str]: a list of strings representing the tree structure, suitable for printing
    """
    lines: list[str] = []

    def walk(node: dict[str, Any], prefix: str) -> None:
        entries = _entries(node)
        for idx, (kind, name, child) in enumerate(entries):
            last = idx == len(entries) - 1
            branch = "└── " if last else "├── "
            lines.append(prefix + branch + name + ("/" if kind == "dir" else ""))
            if kind == "dir":
                ext = "    " if last else "│   "
                walk(child, prefix + ext)

    walk(_build_tree(rel_paths), "")
    return lines


def render_tree(rel_paths: Sequence[str]) -> str:
    """Render the tree of `rel_paths` as a single string.

    Returns:
        str: the rendered tree, or EMPTY_TREE_PLACEHOLDER when there is nothing to show
    """
    lines = build_tree_lines(rel_paths)
    if not lines:
        return EMPTY_TREE_PLACEHOLDER
    return "\n".join(lines)


def tree_order(rel_paths: Sequence[str]) -> list[str]:
    """Return the files of `rel_paths` in the order the rendered tree displays them."""
    out: list[str] = []

    def walk(node: dict[str, Any], prefix: str) -> None:
        for kind, name, child in _entries(node):
            if kind == "dir":
                walk(child, f"{prefix}{name}/")
            else:
                out.append(prefix + name)

    walk(_build_tree(rel_paths), "")
    return out


def file_size_kb(path: Path) -> float:
    """Return the size of a file in KB (1 KB = 1024 bytes)."""
    return path.stat().st_size / 1024


def read_file_content(path: Path, max_file_size_kb: float) -> str:
    """Read a text file, enforcing the size ceiling first.

    Args:
        path (Path): the file to read
        max_file_size_kb (float): files strictly above this size are refused

    Raises:
        FileSizeExceededError: if the file is larger than `max_file_size_kb`
        FileReadError: if the file cannot be opened or decoded as UTF-8

    Returns:
        str: the file content
    """
    try:
        size_kb = file_size_kb(path)
    except OSError as e:
        raise FileReadError(path=path, reason=e.strerror or str(e)) from e
    if size_kb > max_file_size_kb:
        raise FileSizeExceededError(path=path, size_kb=size_kb, limit_kb=max_file_size_kb)
    try:
        with path.open(encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileReadError(path=path, reason=f"not valid UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise FileReadError(path=path, reason=e.strerror or str(e)) from e


def write_document(path: Path, content: str) -> None:
    """Write the context document, overwriting any previous version.

    Raises:
        OutputWriteError: if the file cannot be written
    """
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path=path, reason=e.strerror or str(e)) from e
    logger.info("output_written", path=str(path), chars=len(content))


def now_iso() -> str:
    """Return the current date and time in ISO 8601 format with timezone.

    Returns:
        str: the current date and time in ISO 8601 format with timezone
    """
    return datetime.now(UTC).astimezone().isoformat(timespec="seconds")
