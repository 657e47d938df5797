import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from tqdm import tqdm

from .allowlist import AllowList
from .collector import DocumentSet, normalize_documents, read_document
from .config import GateConfig
from .markup import extract_text
from .spelling import DictionaryChecker, resolve_dictionary

logger = logging.getLogger(__name__)

PASS = "PASS"
FAIL = "FAIL"


@dataclass(frozen=True, order=True)
class Violation:
    document: str
    token: str


@dataclass(frozen=True)
class CheckResult:
    violations: Tuple[Violation, ...] = ()
    documents_checked: int = 0
    dictionary: str = ""

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def status(self) -> str:
        return PASS if self.passed else FAIL

    @property
    def tokens(self) -> List[str]:
        return sorted({v.token for v in self.violations})

    def by_token(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for v in self.violations:
            out.setdefault(v.token, []).append(v.document)
        return out


@dataclass
class Flagged:
    tokens: Dict[str, Set[str]] = field(default_factory=dict)
    documents_checked: int = 0

    def add(self, document: str, tokens: Iterable[str]) -> None:
        for t in tokens:
            self.tokens.setdefault(t, set()).add(document)


class SpellGate:
    """Compares flagged tokens against the allow-list.

    The dictionary is resolved and loaded on construction so a bad selector
    aborts before any document is read.
    """

    def __init__(self, config: GateConfig, checker: Optional[DictionaryChecker] = None, progress: bool = False):
        self.config = config
        self.progress = progress
        if checker is None:
            source = resolve_dictionary(config.dictionary, config.root, config.dictionary_dirs)
            checker = DictionaryChecker.load(source, config.min_length)
        self.checker = checker

    def documents(self) -> DocumentSet:
        return DocumentSet(self.config.root, self.config.suffixes, self.config.exclude)

    def load_allowlist(self) -> AllowList:
        return AllowList.load(self.config.allowlist_path)

    def flagged(self, documents: Optional[Iterable[str]] = None) -> Flagged:
        docs = normalize_documents(self.documents() if documents is None else documents)
        out = Flagged()
        for rel in tqdm(docs, desc="Checking", unit="doc", disable=not self.progress):
            text = extract_text(rel, read_document(self.config.root, rel), self.config.strip_markup)
            found = self.checker.check_text(text)
            logger.debug("%s: %d flagged token(s)", rel, len(found))
            out.add(rel, found)
            out.documents_checked += 1
        return out

    def check(self, documents: Optional[Iterable[str]] = None) -> CheckResult:
        allow = self.load_allowlist()
        flagged = self.flagged(documents)
        violations = sorted(
            Violation(doc, token)
            for token, docs in flagged.tokens.items()
            if token not in allow
            for doc in docs
        )
        result = CheckResult(tuple(violations), flagged.documents_checked, self.checker.name)
        logger.info(
            "%s: %d document(s), %d violation(s), %d allow-listed token(s)",
            result.status, result.documents_checked, len(violations), len(allow),
        )
        return result

    def regenerate(self, documents: Optional[Iterable[str]] = None) -> AllowList:
        flagged = self.flagged(documents)
        allow = AllowList(flagged.tokens)
        allow.write(self.config.allowlist_path)
        return allow

    def approve(self, tokens: Iterable[str]) -> List[str]:
        current = self.load_allowlist()
        updated = current.union(tokens)
        added = sorted(updated.tokens - current.tokens)
        if added:
            updated.write(self.config.allowlist_path)
        return added

    def prune(self, documents: Optional[Iterable[str]] = None) -> List[str]:
        current = self.load_allowlist()
        flagged = self.flagged(documents)
        orphans = sorted(current.tokens - set(flagged.tokens))
        if orphans:
            current.difference(orphans).write(self.config.allowlist_path)
        return orphans
