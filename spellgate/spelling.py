import logging
import re
import unicodedata
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from spellchecker import SpellChecker

from .errors import DictionaryNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
TOKEN_RE = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")
BUILTIN_CODE = re.compile(r"[A-Za-z]{2,3}")
AFF_SET = re.compile(r"^SET\s+(\S+)")


def tokenize(text: str, min_length: int = 2) -> List[str]:
    text = unicodedata.normalize("NFC", text or "")
    return [w for w in TOKEN_RE.findall(text) if len(w) >= min_length]


@dataclass(frozen=True)
class DictionarySource:
    kind: str  # builtin | frequency | hunspell
    name: str
    paths: Tuple[Path, ...] = ()

    def describe(self) -> str:
        if self.kind == "builtin":
            return f"builtin:{self.name}"
        return f"{self.kind}:{', '.join(str(p) for p in self.paths)}"


def builtin_languages() -> List[str]:
    res = files("spellchecker").joinpath("resources")
    return sorted(p.name[: -len(".json.gz")] for p in res.iterdir() if p.name.endswith(".json.gz"))


def _pair(base: Path) -> Tuple[Path, Path]:
    if base.suffix.lower() in (".dic", ".aff"):
        base = base.with_suffix("")
    return Path(f"{base}.dic"), Path(f"{base}.aff")


def resolve_dictionary(selector: Optional[str], root: Path, search_dirs: Sequence[Path] = ()) -> DictionarySource:
    """Turn a dictionary selector into a concrete source.

    Paths are tried first (absolute, then relative to ``root`` and each search
    directory), then bare language codes shipped with pyspellchecker. Nothing
    falls back to a different dictionary.
    """
    selector = (selector or DEFAULT_LANGUAGE).strip() or DEFAULT_LANGUAGE
    given = Path(selector).expanduser()
    bases = [given] if given.is_absolute() else [Path(root) / given, *(Path(d) / given for d in search_dirs)]

    for base in bases:
        if base.name.lower().endswith((".json", ".json.gz")):
            if base.is_file():
                return DictionarySource("frequency", selector, (base,))
            continue
        dic, aff = _pair(base)
        if dic.is_file() and aff.is_file():
            return DictionarySource("hunspell", selector, (dic, aff))

    if BUILTIN_CODE.fullmatch(selector) and selector.lower() in builtin_languages():
        return DictionarySource("builtin", selector.lower())
    raise DictionaryNotFoundError(selector)


def read_hunspell_words(dic: Path, aff: Path) -> List[str]:
    encoding = "utf-8"
    with open(aff, "r", encoding="latin-1") as f:
        for line in f:
            m = AFF_SET.match(line)
            if m:
                encoding = m.group(1)
                break
    try:
        lines = dic.read_text(encoding=encoding).splitlines()
    except (LookupError, UnicodeDecodeError) as exc:
        raise DictionaryNotFoundError(dic, f"cannot decode dictionary as {encoding}") from exc
    if lines and lines[0].strip().isdigit():
        lines = lines[1:]
    words = []
    for line in lines:
        parts = line.split()
        if not parts:
            continue
        word = parts[0].split("/", 1)[0]
        if word:
            words.append(word)
    return words


class DictionaryChecker:
    """Typed boundary around pyspellchecker.

    Lookups are case-insensitive inside the dictionary, tokens keep their case.
    """

    def __init__(self, speller: SpellChecker, name: str = "", min_length: int = 2):
        self._speller = speller
        self.name = name
        self.min_length = min_length

    @classmethod
    def from_words(cls, words: Iterable[str], name: str = "words", min_length: int = 2) -> "DictionaryChecker":
        sp = SpellChecker(language=None)
        sp.word_frequency.load_words(list(words))
        return cls(sp, name, min_length)

    @classmethod
    def load(cls, source: DictionarySource, min_length: int = 2) -> "DictionaryChecker":
        if source.kind == "builtin":
            try:
                sp = SpellChecker(language=source.name)
            except ValueError as exc:
                raise DictionaryNotFoundError(source.name) from exc
        elif source.kind == "frequency":
            sp = SpellChecker(language=None)
            try:
                sp.word_frequency.load_dictionary(str(source.paths[0]))
            except (OSError, ValueError) as exc:
                raise DictionaryNotFoundError(source.paths[0], f"cannot load dictionary ({exc})") from exc
        else:
            dic, aff = source.paths
            sp = SpellChecker(language=None)
            sp.word_frequency.load_words(read_hunspell_words(dic, aff))
        logger.info("loaded dictionary %s", source.describe())
        return cls(sp, source.describe(), min_length)

    def known(self, token: str) -> bool:
        word = token.replace("’", "'")
        if word in self._speller:
            return True
        # possessive of a known word
        return word.lower().endswith("'s") and word[:-2] in self._speller

    def unknown(self, tokens: Iterable[str]) -> Set[str]:
        return {t for t in set(tokens) if not self.known(t)}

    def check_text(self, text: str) -> Set[str]:
        return self.unknown(tokenize(text, self.min_length))

    def suggest(self, token: str) -> Optional[str]:
        fix = self._speller.correction(token.lower())
        if not fix or fix == token.lower():
            return None
        return fix
