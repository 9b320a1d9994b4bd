"""create_context: write a single markdown file describing a project for an LLM.

Overview
--------
The command walks the current directory (or `--root`), drops the paths matched
by the exclusion rules, renders the remaining files as a directory tree and
embeds the content of the files whose extension is allowed. Files above the
size ceiling, and files that cannot be read as UTF-8 text, get a placeholder
instead of their content.

With no arguments, the built-in rules of `create_context.config` are used and
`context.md` is written in the project root, overwriting any previous version.

Usage
-----
    - Default run from the project root:
        create-context

    - Custom rules from a YAML file:
        create-context --config context.yml

    - Log to a file:
        create-context --log-file context.log --debug
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from create_context import __version__
from create_context.exceptions import ConfigFileError, OutputWriteError, TraversalError
from create_context.file_manipulation import file_size_kb, relpath, walk_files, write_document
from create_context.logging import logger, setup_logging
from create_context.output_construction import assemble
from create_context.settings import Settings, load_filter_config
from create_context.statistics import format_report

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse the command line into Settings; every option is optional."""
    p = argparse.ArgumentParser(
        prog="create-context",
        description="Concatenate a project's tree and file contents into one markdown document.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--root", type=Path, default=Path.cwd(), help="Project root to walk.")
    p.add_argument("--output", type=Path, default=Path("context.md"), help="Output markdown file.")
    p.add_argument("--config", type=Path, default=None, help="YAML file overriding the filter rules.")
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    p.add_argument("--debug", action="store_true", help="Verbose logging.")
    args = p.parse_args(argv)
    return Settings(**vars(args))


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file or settings.debug:
        setup_logging(settings.log_file or None, debug=settings.debug, force=True)

    root = settings.root.resolve()
    out_path = settings.output_path().resolve()

    try:
        config = load_filter_config(settings.config)
    except ConfigFileError as e:
        logger.error("config_invalid", error=str(e))
        return 1
    if out_path.is_relative_to(root):
        config = config.with_excludes("./" + relpath(out_path, root))

    try:
        candidates = walk_files(root, config)
    except TraversalError as e:
        logger.error("traversal_failed", error=str(e))
        return 1
    logger.info("files_discovered", root=str(root), count=len(candidates))

    result = assemble(root, candidates, config)

    try:
        write_document(out_path, result.document)
    except OutputWriteError as e:
        logger.error("output_write_failed", error=str(e))
        return 1

    print(format_report(result.stats, relpath(out_path, root), file_size_kb(out_path)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
