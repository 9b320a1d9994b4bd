from __future__ import annotations

from enum import StrEnum, auto
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_OUTPUT_FILE = "context.md"

DEFAULT_EXCLUDE_PATHS: tuple[str, ...] = (
    "./" + DEFAULT_OUTPUT_FILE,
    ".DS_Store",
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    "dist",
    "build",
    "vendor",
    ".gitignore",
    ".env",
    "*.log",
    "*.lock",
    ".idea",
    ".gradle",
    "local.properties",
    "*.apk",
    "*.aab",
    "*.iml",
    "build/",
    "captures/",
    "__pycache__",
    ".venv",
)

DEFAULT_INCLUDE_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".js",
        ".jsx",
        ".ts",
        ".tsx",
        ".php",
        ".html",
        ".css",
        ".scss",
        ".json",
        ".md",
        ".txt",
        ".yml",
        ".yaml",
        ".config",
        ".py",
        ".toml",
        ".java",
        ".kt",
        ".kts",
        ".xml",
        ".gradle",
        ".pro",
        ".c",
        ".cpp",
        ".h",
        ".hpp",
        "",
    },
)

DEFAULT_MAX_FILE_SIZE_KB = 500.0


class FileType(StrEnum):
    """Categorization of file types, used to pick a code fence language."""

    TEXT = auto()
    PLAINTEXT = auto()
    PYTHON = auto()
    TOML = auto()
    JSON = auto()
    MARKDOWN = auto()
    YAML = auto()
    HTML = auto()
    CSS = auto()
    SCSS = auto()
    JAVASCRIPT = auto()
    JSX = auto()
    TYPESCRIPT = auto()
    TSX = auto()
    BASH = auto()
    RUST = auto()
    GO = auto()
    PHP = auto()
    SQL = auto()
    JAVA = auto()
    KOTLIN = auto()
    GROOVY = auto()
    C = auto()
    CPP = auto()
    CSHARP = auto()
    RUBY = auto()
    SWIFT = auto()
    DART = auto()
    XML = auto()
    INI = auto()
    DOTENV = auto()
    PROPERTIES = auto()
    DOCKERFILE = auto()
    MAKEFILE = auto()


EXT2TYPE: dict[str, FileType] = {
    ".bash": FileType.BASH,
    ".c": FileType.C,
    ".cc": FileType.CPP,
    ".cfg": FileType.INI,
    ".config": FileType.PLAINTEXT,
    ".cpp": FileType.CPP,
    ".cs": FileType.CSHARP,
    ".css": FileType.CSS,
    ".dart": FileType.DART,
    ".env": FileType.DOTENV,
    ".go": FileType.GO,
    ".gradle": FileType.GROOVY,
    ".h": FileType.C,
    ".hpp": FileType.CPP,
    ".htm": FileType.HTML,
    ".html": FileType.HTML,
    ".ini": FileType.INI,
    ".java": FileType.JAVA,
    ".js": FileType.JAVASCRIPT,
    ".json": FileType.JSON,
    ".jsx": FileType.JSX,
    ".kt": FileType.KOTLIN,
    ".kts": FileType.KOTLIN,
    ".markdown": FileType.MARKDOWN,
    ".md": FileType.MARKDOWN,
    ".mjs": FileType.JAVASCRIPT,
    ".php": FileType.PHP,
    ".pro": FileType.PROPERTIES,
    ".py": FileType.PYTHON,
    ".rb": FileType.RUBY,
    ".rs": FileType.RUST,
    ".scss": FileType.SCSS,
    ".sh": FileType.BASH,
    ".sql": FileType.SQL,
    ".swift": FileType.SWIFT,
    ".toml": FileType.TOML,
    ".ts": FileType.TYPESCRIPT,
    ".tsx": FileType.TSX,
    ".txt": FileType.TEXT,
    ".xml": FileType.XML,
    ".yaml": FileType.YAML,
    ".yml": FileType.YAML,
    ".zsh": FileType.BASH,
}

NAME2TYPE: dict[str, FileType] = {
    "dockerfile": FileType.DOCKERFILE,
    "makefile": FileType.MAKEFILE,
    "gradlew": FileType.BASH,
    "proguard-rules.pro": FileType.PROPERTIES,
    "license": FileType.TEXT,
}

_FENCE_LANGUAGE: dict[FileType, str] = {
    FileType.PYTHON: "python",
    FileType.TOML: "toml",
    FileType.JSON: "json",
    FileType.MARKDOWN: "markdown",
    FileType.YAML: "yaml",
    FileType.HTML: "html",
    FileType.CSS: "css",
    FileType.SCSS: "scss",
    FileType.JAVASCRIPT: "javascript",
    FileType.JSX: "jsx",
    FileType.TYPESCRIPT: "typescript",
    FileType.TSX: "tsx",
    FileType.BASH: "bash",
    FileType.RUST: "rust",
    FileType.GO: "go",
    FileType.PHP: "php",
    FileType.SQL: "sql",
    FileType.JAVA: "java",
    FileType.KOTLIN: "kotlin",
    FileType.GROOVY: "groovy",
    FileType.C: "c",
    FileType.CPP: "cpp",
    FileType.CSHARP: "csharp",
    FileType.RUBY: "ruby",
    FileType.SWIFT: "swift",
    FileType.DART: "dart",
    FileType.XML: "xml",
    FileType.INI: "ini",
    FileType.DOTENV: "dotenv",
    FileType.PROPERTIES: "properties",
    FileType.DOCKERFILE: "dockerfile",
    FileType.MAKEFILE: "makefile",
    FileType.TEXT: "text",
    FileType.PLAINTEXT: "plaintext",
}


def guess_file_type(rel: str) -> FileType:
    """Heuristic guess of file type based on the file name, then its extension.

    Args:
        rel (str): the relative path of the file (POSIX separators).

    Returns:
        FileType: The guessed file type, or FileType.PLAINTEXT if unknown.
    """
    p = PurePosixPath(rel)
    name = p.name.lower()
    if name in NAME2TYPE:
        return NAME2TYPE[name]
    if name.startswith("readme"):
        return FileType.MARKDOWN
    return EXT2TYPE.get(p.suffix.lower(), FileType.PLAINTEXT)


def guess_language(rel: str) -> str:
    """Get the code fence language for a file, used for syntax highlighting only.

    Args:
        rel (str): the relative path of the file.

    Returns:
        str: The language tag, "plaintext" when nothing better is known.
    """
    return _FENCE_LANGUAGE.get(guess_file_type(rel), "plaintext")


class FilterConfig(BaseModel):
    """Rules deciding which files end up in the context document.

    Attributes:
        exclude_paths: Literal names, directory markers ending in "/", anchored
            paths containing "/", or "*.ext" suffix globs.
        include_paths: Path prefixes to restrict the export to; empty means no restriction.
        include_extensions: Extensions whose content is embedded. "" allows
            extensionless files; an empty set allows everything.
        max_file_size_kb: Files strictly larger than this are not embedded.
    """

    model_config = ConfigDict(frozen=True)

    exclude_paths: tuple[str, ...] = Field(
        default=DEFAULT_EXCLUDE_PATHS,
        description="Exclusion patterns.",
    )
    include_paths: tuple[str, ...] = Field(
        default=(),
        description="Include path prefixes.",
    )
    include_extensions: frozenset[str] = Field(
        default=DEFAULT_INCLUDE_EXTENSIONS,
        description="Extensions whose content is embedded.",
    )
    max_file_size_kb: float = Field(
        default=DEFAULT_MAX_FILE_SIZE_KB,
        gt=0,
        description="Size ceiling for embedded content, in KB.",
    )

    @field_validator("include_extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        out: set[str] = set()
        for ext in value:
            e = str(ext).strip().lower()
            if e and not e.startswith("."):
                e = "." + e
            out.add(e)
        return frozenset(out)

    def with_excludes(self, *patterns: str) -> FilterConfig:
        """Return a copy of the config with extra exclusion patterns appended."""
        extra = tuple(p for p in patterns if p and p not in self.exclude_paths)
        return self.model_copy(update={"exclude_paths": (*self.exclude_paths, *extra)})
