import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from rapidfuzz import fuzz, process, utils

from .allowlist import AllowList
from .errors import ConfigError, FilesystemError
from .gate import CheckResult
from .spelling import DictionaryChecker

COLUMNS = ["document", "token", "suggestion", "similar_allowed"]
SIMILAR_CUTOFF = 85
REPORT_SUFFIXES = (".csv", ".xlsx")


def similar_allowed(token: str, allow: AllowList) -> Optional[str]:
    if not len(allow):
        return None
    hit = process.extractOne(
        token, list(allow), scorer=fuzz.ratio, processor=utils.default_process, score_cutoff=SIMILAR_CUTOFF
    )
    return hit[0] if hit else None


def suggestions(result: CheckResult, checker: DictionaryChecker, allow: AllowList) -> Dict[str, Dict[str, Optional[str]]]:
    out = {}
    for token in result.tokens:
        out[token] = {
            "suggestion": checker.suggest(token),
            "similar_allowed": similar_allowed(token, allow),
        }
    return out


def render_text(result: CheckResult, hints: Optional[Dict[str, Dict[str, Optional[str]]]] = None) -> str:
    lines = []
    for v in result.violations:
        line = f"{v.document}: {v.token}"
        h = (hints or {}).get(v.token) or {}
        extra = []
        if h.get("suggestion"):
            extra.append(f"did you mean '{h['suggestion']}'?")
        if h.get("similar_allowed"):
            extra.append(f"allow-list has '{h['similar_allowed']}'")
        if extra:
            line += "  (" + "; ".join(extra) + ")"
        lines.append(line)
    if result.passed:
        lines.append(f"{result.status}: {result.documents_checked} document(s) checked, no unknown words")
    else:
        lines.append(
            f"{result.status}: {len(result.violations)} violation(s), "
            f"{len(result.tokens)} unknown word(s) in {result.documents_checked} document(s)"
        )
    return "\n".join(lines)


def to_payload(result: CheckResult, hints: Optional[Dict[str, Dict[str, Optional[str]]]] = None) -> Dict[str, Any]:
    rows: List[Dict[str, Any]] = []
    for v in result.violations:
        row: Dict[str, Any] = {"document": v.document, "token": v.token}
        if hints is not None:
            row.update(hints.get(v.token, {}))
        rows.append(row)
    return {
        "status": result.status.lower(),
        "dictionary": result.dictionary,
        "documents_checked": result.documents_checked,
        "violation_count": len(rows),
        "violations": rows,
    }


def render_json(result: CheckResult, hints=None) -> str:
    return json.dumps(to_payload(result, hints), sort_keys=True, ensure_ascii=False)


def violations_frame(result: CheckResult, hints=None) -> pd.DataFrame:
    rows = []
    for v in result.violations:
        h = (hints or {}).get(v.token, {})
        rows.append({
            "document": v.document,
            "token": v.token,
            "suggestion": h.get("suggestion"),
            "similar_allowed": h.get("similar_allowed"),
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def check_report_path(path: Path) -> Path:
    path = Path(path)
    if path.suffix.lower() not in REPORT_SUFFIXES:
        raise ConfigError("report must end in .csv or .xlsx", path)
    return path


def write_report(result: CheckResult, path: Path, hints=None) -> Path:
    path = check_report_path(path)
    df = violations_frame(result, hints)
    suffix = path.suffix.lower()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".csv":
            df.to_csv(path, index=False)
        else:
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                df.to_excel(writer, index=False, sheet_name="Violations")
    except OSError as exc:
        raise FilesystemError(f"cannot write report ({exc.strerror})", path) from exc
    return path
