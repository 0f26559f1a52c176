import os
from collections import deque
from collections.abc import Callable, Iterator

import typer

from .models import EntryMetadata, Query
from .predicate import matches


class WalkError(Exception):
    """A directory or entry that could not be read during traversal."""

    def __init__(self, operation: str, path: str, error: OSError) -> None:
        super().__init__(f"{operation}: {path}: {error.strerror or error}")
        self.operation: str = operation
        self.path: str = path
        self.error: OSError = error


ErrorHandler = Callable[[WalkError], None]


def report_error(error: WalkError) -> None:
    typer.echo(str(error), err=True)


def ignore_error(error: WalkError) -> None:
    return


def scan_dir(path: str, on_error: ErrorHandler = report_error) -> tuple[list[str], list[EntryMetadata]]:
    """
    Return the immediate subdirectories and other entries of `path`.

    Children are stat'ed without following symlinks, so a symlink to a
    directory is listed as an entry and never descended into. Errors are
    handed to `on_error` and the offending directory or child is skipped.
    """
    subdirs: list[str] = []
    entries: list[EntryMetadata] = []

    try:
        it = os.scandir(path)
    except OSError as e:
        on_error(WalkError("opendir", path, e))
        return subdirs, entries

    with it:
        try:
            for entry in it:
                name: str = entry.name
                if name in (".", ".."):
                    continue

                full_path: str = path + "/" + name
                try:
                    st: os.stat_result = entry.stat(follow_symlinks=False)
                except OSError as e:
                    on_error(WalkError("lstat", full_path, e))
                    continue

                meta: EntryMetadata = EntryMetadata.from_stat(full_path, name, st)
                if meta.is_dir:
                    subdirs.append(full_path)
                else:
                    entries.append(meta)
        except OSError as e:
            on_error(WalkError("readdir", path, e))

    return subdirs, entries


def iter_matches(query: Query, on_error: ErrorHandler = report_error) -> Iterator[str]:
    """Breadth-first traversal yielding the paths of matching non-directory entries."""
    queue: deque[str] = deque([query.root_path])

    while queue:
        dir_path: str = queue.popleft()

        subdirs, entries = scan_dir(dir_path, on_error)
        queue.extend(subdirs)

        for meta in entries:
            if matches(query, meta):
                yield meta.path


def walk(query: Query, on_error: ErrorHandler = report_error) -> list[str]:
    return list(iter_matches(query, on_error))
