from __future__ import annotations

import pytest

from create_context.file_manipulation import (
    EMPTY_TREE_PLACEHOLDER,
    build_tree_lines,
    render_tree,
    tree_order,
)


@pytest.mark.unit
def test_render_tree_matches_unix_tree_layout() -> None:
    paths = [
        "src/app.py",
        "src/utils/helpers.py",
        "README.md",
        "tests/test_app.py",
        "src/__init__.py",
    ]

    assert render_tree(paths) == "\n".join(
        [
            "├── src/",
            "│   ├── utils/",
            "│   │   └── helpers.py",
            "│   ├── __init__.py",
            "│   └── app.py",
            "├── tests/",
            "│   └── test_app.py",
            "└── README.md",
        ],
    )


@pytest.mark.unit
def test_last_directory_uses_blank_padding() -> None:
    assert build_tree_lines(["a/b/c.txt", "a/d.txt"]) == [
        "└── a/",
        "    ├── b/",
        "    │   └── c.txt",
        "    └── d.txt",
    ]


@pytest.mark.unit
def test_directories_before_files_and_lexicographic_order() -> None:
    lines = build_tree_lines(["z.txt", "b/x.txt", "a.txt", "B/y.txt"])

    assert lines == [
        "├── B/",
        "│   └── y.txt",
        "├── b/",
        "│   └── x.txt",
        "├── a.txt",
        "└── z.txt",
    ]


@pytest.mark.unit
def test_empty_input_renders_placeholder() -> None:
    assert build_tree_lines([]) == []
    assert render_tree([]) == EMPTY_TREE_PLACEHOLDER


@pytest.mark.unit
def test_duplicate_and_dot_slash_paths_collapse() -> None:
    assert render_tree(["./a.txt", "a.txt", "a.txt"]) == "└── a.txt"


@pytest.mark.unit
def test_leaf_count_and_directory_nodes_match_input() -> None:
    paths = ["a/b/c.js", "a/d.js", "e/f/g/h.js", "i.js"]
    lines = build_tree_lines(paths)

    leaves = [ln for ln in lines if not ln.endswith("/")]
    dirs = [ln.split("── ", 1)[1].rstrip("/") for ln in lines if ln.endswith("/")]
    prefixes = {"/".join(p.split("/")[:i]) for p in paths for i in range(1, p.count("/") + 1)}

    assert len(leaves) == len(paths)
    assert sorted(dirs) == ["a", "b", "e", "f", "g"]
    assert len(prefixes) == len(dirs)


@pytest.mark.unit
def test_tree_order_follows_rendered_tree() -> None:
    paths = ["README.md", "src/utils/helpers.py", "src/app.py", "a.txt"]

    assert tree_order(paths) == [
        "src/utils/helpers.py",
        "src/app.py",
        "README.md",
        "a.txt",
    ]
