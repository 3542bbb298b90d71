"""Immutable directory tree with an explicit path stack for the file browser."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Union

logger = logging.getLogger(__name__)

PARENT_LABEL = ".."


class FileEntry(NamedTuple):
    path: Path


class Directory(NamedTuple):
    children: Mapping[str, "Entry"]


Entry = Union[Directory, FileEntry]


class TreeRow(NamedTuple):
    """One rendered line of the browser: kind is "back", "folder" or "file"."""

    label: str
    kind: str
    name: str


def _freeze(node: dict) -> Directory:
    children = {}
    for name, child in node.items():
        children[name] = _freeze(child) if isinstance(child, dict) else child
    return Directory(MappingProxyType(children))


def build_tree(root: Path) -> Directory:
    """Scan ``root`` recursively; directories first, then files, each by name."""
    root = Path(root)

    def scan(folder: Path) -> dict:
        node: dict = {}
        try:
            items = sorted(folder.iterdir(), key=lambda p: (not p.is_dir(), p.name.lower()))
        except OSError:
            logger.warning("Cannot list directory: %s", folder)
            return node
        for item in items:
            if item.is_dir():
                node[item.name] = scan(item)
            elif item.is_file():
                node[item.name] = FileEntry(item)
        return node

    tree = _freeze(scan(root))
    logger.info("Loaded directory tree: %s", root)
    return tree


def build_tree_from_paths(paths: Iterable[str], base: Path = Path(".")) -> Directory:
    """Tree from relative ``a/b/c.csv`` paths; the first occurrence of a name wins."""
    root: dict = {}
    for rel in paths:
        parts = PurePosixPath(rel).parts
        if not parts:
            continue
        current = root
        for i, part in enumerate(parts):
            last = i == len(parts) - 1
            if part not in current:
                current[part] = FileEntry(Path(base, *parts)) if last else {}
            current = current[part]
            if not isinstance(current, dict):
                break
    return _freeze(root)


def resolve(tree: Directory, path: tuple[str, ...]) -> Entry:
    node: Entry = tree
    for name in path:
        if not isinstance(node, Directory) or name not in node.children:
            raise KeyError(f"No such folder: {'/'.join(path)}")
        node = node.children[name]
    return node


def enter(path: tuple[str, ...], name: str) -> tuple[str, ...]:
    return path + (name,)


def leave(path: tuple[str, ...]) -> tuple[str, ...]:
    return path[:-1]


def render_rows(tree: Directory, path: tuple[str, ...]) -> list[TreeRow]:
    folder = resolve(tree, path)
    if not isinstance(folder, Directory):
        raise KeyError(f"Not a folder: {'/'.join(path)}")

    rows: list[TreeRow] = []
    if path:
        rows.append(TreeRow(PARENT_LABEL, "back", PARENT_LABEL))
    for name, child in folder.children.items():
        kind = "folder" if isinstance(child, Directory) else "file"
        rows.append(TreeRow(name, kind, name))
    return rows


def is_trace_file(entry: Entry) -> bool:
    return isinstance(entry, FileEntry) and entry.path.suffix.lower() == ".csv"
