"""Run statistics and the console report.

Token counts are a rough estimate (characters times a per-extension ratio);
they are informational only.
"""

from __future__ import annotations

import io
import math
import re

from pydantic import BaseModel, Field

TOKENS_PER_CHAR: dict[str, float] = {
    ".js": 0.25,
    ".jsx": 0.25,
    ".ts": 0.25,
    ".tsx": 0.25,
    ".php": 0.25,
    ".html": 0.25,
    ".css": 0.22,
    ".scss": 0.22,
    ".json": 0.3,
    ".md": 0.18,
    ".txt": 0.18,
    ".yml": 0.25,
    ".yaml": 0.25,
    ".py": 0.25,
    ".env": 0.25,
    ".java": 0.25,
    ".kt": 0.26,
    ".kts": 0.26,
    ".xml": 0.28,
    ".gradle": 0.25,
    ".pro": 0.22,
    ".c": 0.25,
    ".cpp": 0.25,
    ".h": 0.25,
    "": 0.20,
}
DEFAULT_TOKENS_PER_CHAR = 0.25

_FENCED_BLOCK = re.compile(r"```[^`]*?\n[\s\S]*?\n```")
_RULE = "=" * 60


def estimate_token_count(text: str, ext: str = "") -> int:
    """Estimate the number of tokens of `text` from its length and extension."""
    ratio = TOKENS_PER_CHAR.get(ext, DEFAULT_TOKENS_PER_CHAR)
    return math.ceil(len(text) * ratio)


def markdown_overhead_tokens(document: str) -> int:
    """Estimate the tokens spent on the document's markdown, fenced blocks removed."""
    return estimate_token_count(_FENCED_BLOCK.sub("", document), ".md")


def format_file_size(size_kb: float) -> str:
    """Format a size given in KB for humans.

    Examples:
        >>> format_file_size(0)
        '0 KB'
        >>> format_file_size(2048)
        '2.00 MB'
    """
    if size_kb == 0:
        return "0 KB"
    if 0 < size_kb < 0.01:  # noqa: PLR2004
        return "< 0.01 KB"
    if size_kb < 1024:  # noqa: PLR2004
        return f"{size_kb:.2f} KB"
    return f"{size_kb / 1024:.2f} MB"


def format_number(num: int) -> str:
    """Format an integer with comma thousands separators."""
    return f"{num:,}"


class RunStatistics(BaseModel):
    """Accumulator for one run, updated once per processed file."""

    files_found: int = Field(default=0, ge=0, description="Files passing the path rules.")
    files_matching_extensions: int = Field(default=0, ge=0, description="Files whose content is eligible.")
    included_contents: int = Field(default=0, ge=0)
    skipped_contents: int = Field(default=0, ge=0)
    skipped_due_to_size: int = Field(default=0, ge=0)
    read_errors: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    total_characters: int = Field(default=0, ge=0)
    total_size_kb: float = Field(default=0.0, ge=0)
    markdown_tokens: int = Field(default=0, ge=0)
    files_by_type: dict[str, int] = Field(default_factory=dict)
    tokens_per_file_type: dict[str, int] = Field(default_factory=dict)

    def record_file(self, ext: str, size_kb: float) -> None:
        self.total_size_kb += size_kb
        self.files_by_type[ext] = self.files_by_type.get(ext, 0) + 1
        self.tokens_per_file_type.setdefault(ext, 0)

    def record_content(self, ext: str, text: str) -> None:
        tokens = estimate_token_count(text, ext)
        self.included_contents += 1
        self.total_tokens += tokens
        self.total_characters += len(text)
        self.tokens_per_file_type[ext] = self.tokens_per_file_type.get(ext, 0) + tokens

    def record_size_skip(self) -> None:
        self.skipped_contents += 1
        self.skipped_due_to_size += 1

    def record_read_error(self) -> None:
        self.skipped_contents += 1
        self.read_errors += 1

    def record_markdown(self, document: str) -> None:
        self.markdown_tokens = markdown_overhead_tokens(document)
        self.total_tokens += self.markdown_tokens

    def top_extensions(self, top_n: int = 10) -> list[tuple[str, int]]:
        """Return the extensions with the most estimated tokens, largest first."""
        ranked = sorted(
            ((ext, tokens) for ext, tokens in self.tokens_per_file_type.items() if tokens > 0),
            key=lambda item: (-item[1], item[0]),
        )
        return ranked[:top_n]


def format_report(
    stats: RunStatistics,
    output: str,
    output_size_kb: float,
    top_n: int = 10,
) -> str:
    """Render the console report for a finished run.

    Args:
        stats (RunStatistics): the statistics collected by the assembler
        output (str): the name of the written document
        output_size_kb (float): size of the written document in KB
        top_n (int): number of extensions to list in the distribution

    Returns:
        str: the report, one line per fact
    """
    out = io.StringIO()
    out.write(f"{_RULE}\n")
    out.write("CONTEXT FILE STATISTICS\n")
    out.write(f"{_RULE}\n")
    out.write("Content summary:\n")
    out.write(f"  - Context file created: {output}\n")
    out.write(f"  - File size: {format_file_size(output_size_kb)}\n")
    out.write(f"  - Estimated total tokens: ~{format_number(stats.total_tokens)}\n")
    out.write(f"  - Characters (content only): {format_number(stats.total_characters)}\n")
    out.write(f"  - Markdown overhead (est.): ~{format_number(stats.markdown_tokens)} tokens\n")
    out.write("\nFile processing:\n")
    out.write(f"  - Files found by path search: {stats.files_found}\n")
    out.write(f"  - Files matching extensions: {stats.files_matching_extensions}\n")
    out.write(f"  - File content included: {stats.included_contents}\n")
    out.write(f"  - File content skipped (size limit): {stats.skipped_due_to_size}\n")
    out.write(f"  - File content skipped (read errors): {stats.read_errors}\n")
    out.write(f"  - Total original size of processed files: {format_file_size(stats.total_size_kb)}\n")
    out.write("\nFile types distribution (content included):\n")
    top = stats.top_extensions(top_n)
    for ext, tokens in top:
        count = stats.files_by_type.get(ext, 0)
        out.write(f"  - {ext or '(no ext)'}: ~{format_number(tokens)} tokens ({count} files processed)\n")
    if len(stats.tokens_per_file_type) > len(top):
        out.write("  - ... and more\n")
    out.write(f"{_RULE}\n")
    return out.getvalue()
