import json
import re
from typing import List

from .errors import DocumentEncodingError

FRONT_MATTER = re.compile(r"\A(?:---|\+\+\+)[ \t]*\r?\n.*?\r?\n(?:---|\+\+\+|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.S)
FENCE = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})")
HTML_COMMENT = re.compile(r"<!--.*?-->", re.S)
INLINE_CODE = re.compile(r"(`+)(?!`)(?:(?!\n[ \t]*\n).)*?(?<!`)\1(?!`)", re.S)
LINK_TARGET = re.compile(r"\]\([^)\s]*(?:\s+\"[^\"]*\")?\)")
URL = re.compile(r"\b(?:https?|ftp)://\S+|\bwww\.\S+|\bmailto:\S+", re.I)
HTML_TAG = re.compile(r"</?[A-Za-z][^>\n]*>")


def strip_fenced_code(text: str) -> str:
    out: List[str] = []
    fence = None
    for line in text.splitlines():
        m = FENCE.match(line)
        if fence is None:
            if m:
                fence = m.group(1)
                continue
            out.append(line)
        elif m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence) and not line.strip()[len(m.group(1)):].strip():
            fence = None
    return "\n".join(out)


def strip_markdown(text: str) -> str:
    """Drop the parts of a Markdown source that are not prose."""
    text = FRONT_MATTER.sub("", text, count=1)
    text = strip_fenced_code(text)
    text = HTML_COMMENT.sub(" ", text)
    text = INLINE_CODE.sub(" ", text)
    text = LINK_TARGET.sub("] ", text)
    text = URL.sub(" ", text)
    text = HTML_TAG.sub(" ", text)
    return text


def notebook_markdown(rel: str, text: str) -> str:
    try:
        nb = json.loads(text)
    except ValueError as exc:
        raise DocumentEncodingError(rel, "not a valid notebook") from exc
    if not isinstance(nb, dict) or not isinstance(nb.get("cells"), list):
        raise DocumentEncodingError(rel, "not a valid notebook")
    chunks = []
    for cell in nb["cells"]:
        if not isinstance(cell, dict) or cell.get("cell_type") != "markdown":
            continue
        src = cell.get("source", "")
        chunks.append("".join(src) if isinstance(src, list) else str(src))
    return "\n\n".join(chunks)


def extract_text(rel: str, text: str, strip_markup: bool = True) -> str:
    if rel.lower().endswith(".ipynb"):
        text = notebook_markdown(rel, text)
    return strip_markdown(text) if strip_markup else text
