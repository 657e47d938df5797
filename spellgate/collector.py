import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .errors import DocumentEncodingError, FilesystemError, MissingDocumentError

logger = logging.getLogger(__name__)


def _check_root(root: Path) -> None:
    if not root.exists():
        raise FilesystemError("project root does not exist", root)
    if not root.is_dir():
        raise FilesystemError("project root is not a directory", root)
    if not os.access(root, os.R_OK | os.X_OK):
        raise FilesystemError("project root is not readable", root)


def _is_excluded(rel: str, exclude: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(rel, pat) for pat in exclude)


def iter_documents(root: Path, suffixes: Sequence[str] = (".md", ".qmd"), exclude: Sequence[str] = ()) -> Iterator[str]:
    """Yield document paths relative to ``root`` (POSIX form), sorted.

    Hidden files and directories are skipped. The filesystem is scanned on
    every call.
    """
    root = Path(root)
    _check_root(root)
    wanted = tuple(s.lower() for s in suffixes)

    def on_error(exc: OSError) -> None:
        # os.walk swallows listing errors by default
        if exc.filename is None or Path(exc.filename) == root:
            raise FilesystemError("cannot list project root", root) from exc
        raise FilesystemError("cannot list directory", exc.filename) from exc

    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for fn in filenames:
            if fn.startswith(".") or not fn.lower().endswith(wanted):
                continue
            path = Path(dirpath) / fn
            if not path.is_file():
                continue
            rel = path.relative_to(root).as_posix()
            if _is_excluded(rel, exclude):
                logger.debug("excluded %s", rel)
                continue
            found.append(rel)
    yield from sorted(found)


class DocumentSet:
    """Restartable view of the documents under a root; each iteration rescans."""

    def __init__(self, root: Path, suffixes: Sequence[str] = (".md", ".qmd"), exclude: Sequence[str] = ()):
        self.root = Path(root)
        self.suffixes = tuple(suffixes)
        self.exclude = tuple(exclude)

    def __iter__(self) -> Iterator[str]:
        return iter_documents(self.root, self.suffixes, self.exclude)

    def __repr__(self):
        return f"DocumentSet(root={str(self.root)!r}, suffixes={self.suffixes!r})"


def read_document(root: Path, rel: str) -> str:
    path = Path(root) / rel
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise MissingDocumentError(rel) from exc
    except IsADirectoryError as exc:
        raise MissingDocumentError(rel) from exc
    except OSError as exc:
        raise FilesystemError(f"cannot read document ({exc.strerror})", rel) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentEncodingError(rel, f"not valid UTF-8 at byte {exc.start}") from exc


def normalize_documents(documents: Iterable[str]) -> List[str]:
    return sorted({Path(d).as_posix() for d in documents})
