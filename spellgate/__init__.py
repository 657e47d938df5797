"""Documentation spell-check gate for CI."""

__version__ = "0.3.0"

from .allowlist import AllowList
from .collector import DocumentSet, iter_documents, read_document
from .config import GateConfig, load_config
from .errors import (
    ConfigError,
    DictionaryNotFoundError,
    DocumentEncodingError,
    FilesystemError,
    MissingDocumentError,
    SpellGateError,
)
from .gate import CheckResult, SpellGate, Violation
from .spelling import DictionaryChecker, resolve_dictionary, tokenize

__all__ = [
    "AllowList",
    "CheckResult",
    "ConfigError",
    "DictionaryChecker",
    "DictionaryNotFoundError",
    "DocumentEncodingError",
    "DocumentSet",
    "FilesystemError",
    "GateConfig",
    "MissingDocumentError",
    "SpellGate",
    "SpellGateError",
    "Violation",
    "iter_documents",
    "load_config",
    "read_document",
    "resolve_dictionary",
    "tokenize",
]
