import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "spellgate.yaml"
ENV_PREFIX = "SPELLGATE_"

DEFAULTS: Dict[str, Any] = {
    "suffixes": [".md", ".qmd"],
    "exclude": [],
    "dictionary": "en",
    "dictionary_dirs": [],
    "allowlist": ".spelling-allowlist.txt",
    "min_length": 2,
    "strip_markup": True,
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class GateConfig:
    root: Path
    suffixes: Tuple[str, ...] = (".md", ".qmd")
    exclude: Tuple[str, ...] = ()
    dictionary: str = "en"
    dictionary_dirs: Tuple[Path, ...] = ()
    allowlist: Path = Path(".spelling-allowlist.txt")
    min_length: int = 2
    strip_markup: bool = True

    @property
    def allowlist_path(self) -> Path:
        return self.allowlist if self.allowlist.is_absolute() else self.root / self.allowlist


def load_yaml_config(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read config ({exc.strerror})", path) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML ({exc})", path) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping", path)
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown config key(s) {', '.join(map(str, unknown))}", path)
    return data


def _env_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in DEFAULTS:
        raw = environ.get(ENV_PREFIX + key.upper())
        if raw is None or raw == "":
            continue
        if key == "dictionary_dirs":
            out[key] = [p for p in raw.split(os.pathsep) if p]
        elif key in ("suffixes", "exclude"):
            out[key] = [p.strip() for p in raw.split(",") if p.strip()]
        else:
            out[key] = raw
    return out


def _str_list(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = [v.strip() for v in value.split(",") if v.strip()]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"`{key}` must be a list of strings")
    return tuple(value)


def _suffixes(value: Any) -> Tuple[str, ...]:
    out = []
    for s in _str_list("suffixes", value):
        s = s.lower()
        if not s.startswith("."):
            s = "." + s
        if s not in out:
            out.append(s)
    if not out:
        raise ConfigError("`suffixes` must name at least one suffix")
    return tuple(out)


def _bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    raise ConfigError(f"`{key}` must be a boolean, got {value!r}")


def _int(key: str, value: Any, minimum: int = 1) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"`{key}` must be an integer, got {value!r}")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"`{key}` must be an integer, got {value!r}") from None
    if n < minimum:
        raise ConfigError(f"`{key}` must be >= {minimum}, got {n}")
    return n


def _path(root: Path, value: Any) -> Path:
    if not isinstance(value, (str, os.PathLike)):
        raise ConfigError(f"expected a path, got {value!r}")
    p = Path(value).expanduser()
    return p if p.is_absolute() else root / p


def load_config(
    root: Optional[str] = None,
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GateConfig:
    """Merge defaults, ``spellgate.yaml``, ``SPELLGATE_*`` variables and explicit overrides.

    Later sources win. ``None`` values in ``overrides`` are ignored so argparse
    namespaces can be passed through unchanged.
    """
    environ = os.environ if environ is None else environ
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    root_value = root or environ.get(ENV_PREFIX + "ROOT") or "."
    root_path = Path(root_value).expanduser().resolve()

    values: Dict[str, Any] = dict(DEFAULTS)
    if config_file:
        cfg_path = Path(config_file).expanduser()
        if not cfg_path.is_absolute():
            cfg_path = root_path / cfg_path
        if not cfg_path.is_file():
            raise ConfigError("config file not found", cfg_path)
        values.update(load_yaml_config(cfg_path))
        logger.info("loaded config from %s", cfg_path)
    elif (root_path / CONFIG_FILENAME).is_file():
        values.update(load_yaml_config(root_path / CONFIG_FILENAME))
        logger.info("loaded config from %s", root_path / CONFIG_FILENAME)
    values.update(_env_values(environ))
    values.update(overrides)

    dictionary = values["dictionary"]
    if dictionary is not None and not isinstance(dictionary, str):
        raise ConfigError(f"`dictionary` must be a string, got {dictionary!r}")

    return GateConfig(
        root=root_path,
        suffixes=_suffixes(values["suffixes"]),
        exclude=_str_list("exclude", values["exclude"]),
        dictionary=(dictionary or "en").strip(),
        dictionary_dirs=tuple(_path(root_path, d) for d in _str_list("dictionary_dirs", values["dictionary_dirs"])),
        allowlist=_path(root_path, values["allowlist"]),
        min_length=_int("min_length", values["min_length"]),
        strip_markup=_bool("strip_markup", values["strip_markup"]),
    )
