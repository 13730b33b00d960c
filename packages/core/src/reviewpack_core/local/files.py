"""Local project access: reading files, listing directory trees and
concatenating selected sources into the blob embedded in the prompt.

Every path is checked against the configured allow-list of root
directories before it is touched.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

from reviewpack_core.errors import InputError
from reviewpack_core.models import FileNode
from reviewpack_core.runlog import RunLog

# Assets, media, archives and lock files carry no reviewable source.
BINARY_SUFFIXES = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".webp", ".bmp", ".pdf",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
        ".mp4", ".mp3", ".wav", ".ogg",
        ".zip", ".tar", ".gz", ".rar", ".7z",
        ".lock",
    }
)  # fmt: skip


def is_binary_path(path: str) -> bool:
    return PurePosixPath(path.lower()).suffix in BINARY_SUFFIXES


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """True when ``path`` matches an exclude pattern.

    A pattern may be a glob on the whole path ("src/generated/*.py"), a glob
    on the file name ("*.min.js") or a directory name ("node_modules/", "dist")
    that excludes everything beneath it.
    """
    name = PurePosixPath(path).name
    for pattern in patterns:
        if fnmatch.fnmatch(path, pattern) or fnmatch.fnmatch(name, pattern):
            return True
        if f"/{pattern.strip('/')}/" in f"/{path}":
            return True
    return False


def is_path_safe(base_path: str | os.PathLike, target_path: str | os.PathLike) -> bool:
    """True when ``target_path`` resolves inside ``base_path``."""
    base = Path(base_path).resolve()
    target = Path(target_path).resolve()
    return target == base or base in target.parents


def _check_allowed(path: Path, allowed_roots: Iterable[str]) -> None:
    if not any(is_path_safe(root, path) for root in allowed_roots):
        raise InputError(f"Path is outside the allowed directories: {path}")


def read_file(path: str, allowed_roots: Iterable[str]) -> str:
    target = Path(path)
    _check_allowed(target, allowed_roots)
    if not target.is_file():
        raise InputError(f"File not found: {path}")
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Failed to read file: {e}") from e


def read_tree(directory: str, allowed_roots: Iterable[str]) -> list[FileNode]:
    """Return the recursive tree below ``directory``, entries sorted by name."""
    root = Path(directory)
    _check_allowed(root, allowed_roots)
    if not root.exists():
        raise InputError(f"Failed to read directory: {directory} does not exist")
    if not root.is_dir():
        raise InputError("Path is not a directory")
    return _walk(root)


def _walk(directory: Path) -> list[FileNode]:
    nodes = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            nodes.append(FileNode(id=str(entry), name=entry.name, is_directory=True, children=_walk(entry)))
        else:
            nodes.append(FileNode(id=str(entry), name=entry.name, is_directory=False))
    return nodes


def expand_paths(paths: Iterable[str], exclude: list[str]) -> list[str]:
    """Turn a mix of files and directories into a sorted, de-duplicated file list."""
    files: set[str] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in path.rglob("*"):
                if child.is_file() and not is_excluded(child.as_posix(), exclude):
                    files.add(child.as_posix())
        elif not is_excluded(path.as_posix(), exclude):
            files.add(path.as_posix())
    return sorted(files)


def format_file_block(path: str, content: str) -> str:
    return f"=== {path} ===\n{content}\n=== End {path} ==="


def concatenate_files(
    paths: Iterable[str],
    reader: Callable[[str], str],
    log: RunLog,
    include_binary: bool = False,
) -> str:
    """Join the selected files into one blob, each wrapped in path markers.

    A file that cannot be read contributes an inline error line rather than
    aborting the whole concatenation.
    """
    blocks = []
    for path in paths:
        if not include_binary and is_binary_path(path):
            log.debug("Files", f"Skipping non-code file {path}")
            continue
        try:
            content = reader(path)
        except InputError as e:
            log.warn("Files", f"Could not read {path}", str(e))
            content = f"// Error loading content for {path}: {e}"
        blocks.append(format_file_block(path, content))

    if not blocks:
        raise InputError("Please select at least one file")

    log.info("Files", f"Concatenated {len(blocks)} file(s)", f"{sum(len(b) for b in blocks)} characters")
    return "\n\n".join(blocks)
