from pathlib import Path

import pytest

from spellgate.config import GateConfig, load_config
from spellgate.errors import ConfigError


def test_defaults(tmp_path):
    cfg = load_config(root=str(tmp_path), environ={})
    assert cfg.root == tmp_path.resolve()
    assert cfg.suffixes == (".md", ".qmd")
    assert cfg.exclude == ()
    assert cfg.dictionary == "en"
    assert cfg.allowlist_path == tmp_path.resolve() / ".spelling-allowlist.txt"
    assert cfg.min_length == 2
    assert cfg.strip_markup is True


def test_root_from_environment(tmp_path):
    cfg = load_config(environ={"SPELLGATE_ROOT": str(tmp_path)})
    assert cfg.root == tmp_path.resolve()


def test_yaml_file_in_root(tmp_path):
    (tmp_path / "spellgate.yaml").write_text(
        "suffixes: [md, .ipynb]\nexclude: ['_build/*']\ndictionary: dicts/de_DE\n"
        "allowlist: docs/wordlist.txt\nmin_length: 3\nstrip_markup: false\n",
        encoding="utf-8",
    )
    cfg = load_config(root=str(tmp_path), environ={})
    assert cfg.suffixes == (".md", ".ipynb")
    assert cfg.exclude == ("_build/*",)
    assert cfg.dictionary == "dicts/de_DE"
    assert cfg.allowlist_path == tmp_path.resolve() / "docs" / "wordlist.txt"
    assert cfg.min_length == 3
    assert cfg.strip_markup is False


def test_precedence(tmp_path):
    (tmp_path / "spellgate.yaml").write_text("dictionary: fr\nmin_length: 3\nsuffixes: [.rst]\n", encoding="utf-8")
    env = {"SPELLGATE_DICTIONARY": "de", "SPELLGATE_MIN_LENGTH": "4", "SPELLGATE_STRIP_MARKUP": "no"}
    cfg = load_config(root=str(tmp_path), overrides={"dictionary": "es", "suffixes": None}, environ=env)
    assert cfg.dictionary == "es"
    assert cfg.min_length == 4
    assert cfg.strip_markup is False
    assert cfg.suffixes == (".rst",)


def test_env_lists(tmp_path):
    env = {"SPELLGATE_SUFFIXES": ".md, .txt", "SPELLGATE_EXCLUDE": "a/*,b/*"}
    cfg = load_config(root=str(tmp_path), environ=env)
    assert cfg.suffixes == (".md", ".txt")
    assert cfg.exclude == ("a/*", "b/*")


def test_explicit_config_file(tmp_path):
    cfg_file = tmp_path / "ci" / "spell.yaml"
    cfg_file.parent.mkdir()
    cfg_file.write_text("dictionary: de\n", encoding="utf-8")
    assert load_config(root=str(tmp_path), config_file="ci/spell.yaml", environ={}).dictionary == "de"


def test_missing_explicit_config_file(tmp_path):
    with pytest.raises(ConfigError) as exc:
        load_config(root=str(tmp_path), config_file="nope.yaml", environ={})
    assert "nope.yaml" in str(exc.value)


def test_empty_yaml_file(tmp_path):
    (tmp_path / "spellgate.yaml").write_text("", encoding="utf-8")
    assert load_config(root=str(tmp_path), environ={}).dictionary == "en"


@pytest.mark.parametrize(
    "body",
    [
        "- a\n- b\n",
        "unknown_key: 1\n",
        "min_length: zero\n",
        "min_length: 0\n",
        "strip_markup: maybe\n",
        "suffixes: 3\n",
        "suffixes: []\n",
        "allowlist: 12\n",
        "dictionary: [en]\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_yaml(tmp_path, body):
    (tmp_path / "spellgate.yaml").write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(root=str(tmp_path), environ={})


def test_absolute_allowlist_kept(tmp_path):
    target = tmp_path / "elsewhere" / "words.txt"
    cfg = load_config(root=str(tmp_path), overrides={"allowlist": str(target)}, environ={})
    assert cfg.allowlist_path == target


def test_gate_config_relative_allowlist():
    cfg = GateConfig(root=Path("/proj"))
    assert cfg.allowlist_path == Path("/proj/.spelling-allowlist.txt")
