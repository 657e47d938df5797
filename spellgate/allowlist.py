import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator

from .errors import DocumentEncodingError, FilesystemError

logger = logging.getLogger(__name__)


def _clean(tokens: Iterable[str]) -> FrozenSet[str]:
    return frozenset(t.strip() for t in tokens if t and t.strip())


class AllowList:
    """Accepted tokens, one per line on disk. Case-sensitive set semantics."""

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = _clean(tokens)

    @classmethod
    def load(cls, path: Path) -> "AllowList":
        path = Path(path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.warning("allow-list %s not found, treating it as empty", path)
            return cls()
        except OSError as exc:
            raise FilesystemError(f"cannot read allow-list ({exc.strerror})", path) from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentEncodingError(path) from exc
        return cls(text.splitlines())

    def write(self, path: Path) -> Path:
        path = Path(path)
        body = "".join(f"{t}\n" for t in self)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(body)
        except OSError as exc:
            raise FilesystemError(f"cannot write allow-list ({exc.strerror})", path) from exc
        logger.info("wrote %d token(s) to %s", len(self), path)
        return path

    @property
    def tokens(self) -> FrozenSet[str]:
        return self._tokens

    def union(self, tokens: Iterable[str]) -> "AllowList":
        return AllowList(self._tokens | _clean(tokens))

    def difference(self, tokens: Iterable[str]) -> "AllowList":
        return AllowList(self._tokens - _clean(tokens))

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowList):
            return NotImplemented
        return self._tokens == other._tokens

    def __repr__(self):
        return f"AllowList({sorted(self._tokens)!r})"
