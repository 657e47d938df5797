import pytest

from spellgate.allowlist import AllowList
from spellgate.config import GateConfig
from spellgate.gate import SpellGate
from spellgate.spelling import DictionaryChecker

WORDS = ["hello", "world", "the", "docs", "are", "fine", "spelling", "is", "checked", "here", "and"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    import os
    for key in list(os.environ):
        if key.startswith("SPELLGATE_"):
            monkeypatch.delenv(key)


def write_files(root, files):
    for rel, content in (files or {}).items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")
    return root


def write_pair(directory, name, words, encoding="utf-8"):
    directory.mkdir(parents=True, exist_ok=True)
    aff = directory / f"{name}.aff"
    dic = directory / f"{name}.dic"
    aff.write_text(f"SET {encoding.upper()}\nTRY esianrtolcdugmphbyfvkwz\n", encoding="ascii")
    body = f"{len(words)}\n" + "".join(f"{w}/S\n" for w in words)
    dic.write_bytes(body.encode(encoding))
    return dic, aff


@pytest.fixture
def checker():
    return DictionaryChecker.from_words(WORDS)


@pytest.fixture
def make_gate(tmp_path, checker):
    def make(files=None, allow=None, **kw):
        write_files(tmp_path, files)
        config = GateConfig(root=tmp_path, **kw)
        if allow is not None:
            AllowList(allow).write(config.allowlist_path)
        return SpellGate(config, checker=checker)

    return make


@pytest.fixture
def cli_project(tmp_path):
    """Project with a small hunspell pair named ``words`` at the root."""
    write_pair(tmp_path, "words", WORDS)

    def make(files=None, allow=None):
        write_files(tmp_path, files)
        if allow is not None:
            AllowList(allow).write(tmp_path / ".spelling-allowlist.txt")
        return tmp_path

    return make
