from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

EXIT_OK = 0
EXIT_FAIL = 1
ERR_CONFIG = 2
ERR_FILESYSTEM = 3
ERR_MISSING_DOCUMENT = 4
ERR_ENCODING = 5
ERR_DICTIONARY = 6


@dataclass(eq=False)
class SpellGateError(Exception):
    message: str
    path: Optional[Union[str, Path]] = None
    code: int = ERR_CONFIG

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class ConfigError(SpellGateError):
    pass


class FilesystemError(SpellGateError):
    def __init__(self, message, path=None):
        super().__init__(message, path, ERR_FILESYSTEM)


class MissingDocumentError(SpellGateError):
    def __init__(self, path):
        super().__init__("document disappeared before it could be read", path, ERR_MISSING_DOCUMENT)


class DocumentEncodingError(SpellGateError):
    def __init__(self, path, reason: str = "not valid UTF-8"):
        super().__init__(f"cannot decode document ({reason})", path, ERR_ENCODING)


class DictionaryNotFoundError(SpellGateError):
    def __init__(self, selector, message: str = "dictionary not found"):
        super().__init__(message, selector, ERR_DICTIONARY)
