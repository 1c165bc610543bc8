"""
Filesystem helpers for dependency discovery.
"""
import os
from pathlib import Path
from typing import Iterable, List, Set, Union


def _check_pattern(pattern: str):
    """Reject character classes that are empty or never closed"""
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == '\\':
            i += 2
            continue
        if ch == '[':
            j = i + 1
            if j < len(pattern) and pattern[j] in '!^':
                j += 1
            if j >= len(pattern) or pattern[j] == ']':
                raise ValueError(f"syntax error in pattern: {pattern}")
            end = pattern.find(']', j)
            if end == -1:
                raise ValueError(f"syntax error in pattern: {pattern}")
            i = end
        i += 1


def _add_files(path: Path, files: Set[str]):
    if path.is_dir():
        for child in path.rglob('*'):
            if child.is_file():
                files.add(str(child))
    else:
        files.add(str(path))


def expand_paths_glob(root: Union[str, Path], patterns: Iterable[str]) -> List[str]:
    """
    Expand glob patterns relative to root into a sorted list of files.
    Matched directories contribute every file below them.

    Raises:
        ValueError: If a pattern is malformed or matches nothing
    """
    root = Path(root)
    files: Set[str] = set()

    for pattern in patterns:
        path = root / pattern
        if path.exists():
            _add_files(path, files)
            continue

        _check_pattern(pattern)
        matches = list(root.glob(pattern))
        if not matches:
            raise ValueError(f"file pattern must match at least one file: {pattern}")

        for match in matches:
            _add_files(match, files)

    return sorted(files)


def abs_file(root: Union[str, Path], filename: str) -> str:
    """
    Absolute path of a file below root.

    Raises:
        FileNotFoundError: If the file does not exist
        IsADirectoryError: If the path is a directory
    """
    path = os.path.abspath(os.path.join(str(root), filename))
    if not os.path.exists(path):
        raise FileNotFoundError(f"{path} does not exist")
    if os.path.isdir(path):
        raise IsADirectoryError(f"{path} is a directory")
    return path


def is_hidden_dir(name: str) -> bool:
    return name != "." and name.startswith(".")


def is_hidden_file(name: str) -> bool:
    return name.startswith(".")


def non_empty_lines(text: Union[str, bytes]) -> List[str]:
    """Lines of text with line endings stripped and blank lines dropped"""
    if isinstance(text, bytes):
        text = text.decode('utf-8')
    return [line for line in text.splitlines() if line]
