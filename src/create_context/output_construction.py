from __future__ import annotations

import io
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from create_context.config import guess_language
from create_context.exceptions import FileReadError, FileSizeExceededError
from create_context.file_manipulation import now_iso, read_file_content, render_tree, tree_order
from create_context.logging import logger
from create_context.matching import file_extension, filter_paths, should_include_content
from create_context.statistics import RunStatistics, format_file_size

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from create_context.config import FilterConfig

EMPTY_FILE_MARKER = "[EMPTY FILE]"


class AssembledDocument(BaseModel):
    """The markdown document of a run and the statistics gathered while building it."""

    model_config = ConfigDict(frozen=True)

    document: str
    stats: RunStatistics


def size_skip_placeholder(size_kb: float, limit_kb: float) -> str:
    return f"File content skipped: size {format_file_size(size_kb)} exceeds {limit_kb:g} KB limit."


def read_error_placeholder(reason: str) -> str:
    return f"Error reading file: {reason}"


def file_section(rel: str, language: str, body: str) -> str:
    """Format the markdown section of one file."""
    return f"### `{rel}`\n\n```{language}\n{body}\n```\n\n"


def _content_body(root: Path, rel: str, config: FilterConfig, stats: RunStatistics) -> str:
    ext = file_extension(rel)
    path = root / rel
    try:
        stats.record_file(ext, path.stat().st_size / 1024)
    except OSError:
        stats.record_file(ext, 0.0)
    try:
        content = read_file_content(path, config.max_file_size_kb)
    except FileSizeExceededError as e:
        stats.record_size_skip()
        logger.warning("file_skipped_size", path=rel, size_kb=round(e.size_kb, 2), limit_kb=e.limit_kb)
        return size_skip_placeholder(e.size_kb, e.limit_kb)
    except FileReadError as e:
        stats.record_read_error()
        logger.warning("file_read_failed", path=rel, error=str(e))
        return read_error_placeholder(str(e))
    stats.record_content(ext, content)
    return content if content.strip() else EMPTY_FILE_MARKER


def assemble(
    root: Path,
    paths: Sequence[str],
    config: FilterConfig,
    *,
    project_name: str | None = None,
    generated_at: str | None = None,
) -> AssembledDocument:
    """Build the context document for the candidate `paths` found under `root`.

    Paths passing the path rules are listed in the directory tree. Only those
    that also pass the extension filter get a content section, in tree order.
    A file that is too big or unreadable gets a placeholder; the run goes on.

    Args:
        root (Path): the directory the relative paths are resolved against
        paths (Sequence[str]): candidate relative paths, as returned by `walk_files`
        config (FilterConfig): the filtering rules and the size ceiling
        project_name (str | None): title of the document, defaults to the name of `root`
        generated_at (str | None): timestamp to print, defaults to the current time

    Returns:
        AssembledDocument: the markdown document and the run statistics
    """
    survivors = filter_paths(paths, config)
    ordered = tree_order(survivors)
    with_content = [rel for rel in ordered if should_include_content(rel, config)]

    stats = RunStatistics(
        files_found=len(survivors),
        files_matching_extensions=len(with_content),
    )
    if not survivors:
        logger.warning("no_files_matched", root=str(root))

    name = project_name or root.resolve().name
    out = io.StringIO()
    out.write(f"# Project Context: {name}\n\n")
    out.write(f"Generated: {generated_at or now_iso()}\n\n")
    out.write("## Directory Structure\n\n")
    out.write(f"```\n{render_tree(survivors)}\n```\n\n")
    out.write("## File Contents\n\n")

    for rel in with_content:
        body = _content_body(root, rel, config, stats)
        out.write(file_section(rel, guess_language(rel), body))

    document = out.getvalue()
    stats.record_markdown(document)
    logger.debug("document_assembled", files=len(survivors), sections=len(with_content))
    return AssembledDocument(document=document, stats=stats)


def build_markdown(
    root: Path,
    paths: Sequence[str],
    config: FilterConfig,
    *,
    project_name: str | None = None,
    generated_at: str | None = None,
) -> str:
    """Build only the markdown string of the context document (see `assemble`)."""
    return assemble(root, paths, config, project_name=project_name, generated_at=generated_at).document
