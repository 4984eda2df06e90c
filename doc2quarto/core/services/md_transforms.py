"""
Markdown transforms — Docusaurus to Quarto content conversion.

Pure text-to-text functions, no I/O:
  - Frontmatter field rewriting (``sidebar_position`` becomes ``order``)
  - Admonition to callout conversion (``:::note Title`` becomes
    ``:::: {.callout-note}`` plus a ``## Title`` heading)
  - Full document conversion, which splits a document into its
    frontmatter block and body and routes each to the right transform

The transforms only substitute syntax line by line.  They never validate
admonition nesting or the YAML inside the frontmatter.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable

FRONTMATTER_DELIMITER = "---"


# ── Admonition Conversion ───────────────────────────────────────────

# Docusaurus admonitions:
#   :::tip Quick start
#   Content here
#   :::
#
# Quarto callouts:
#   :::: {.callout-tip}
#   ## Quick start
#   Content here
#   ::::

_ADMONITION_START_RE = re.compile(r":::(\w+)(.*)")
_ADMONITION_END_RE = re.compile(r":::")

CALLOUT_TYPES: dict[str, str] = {
    "note": "note",
    "tip": "tip",
    "info": "note",
    "caution": "caution",
    "warning": "warning",
    "danger": "important",
}


def convert_admonitions(line: str) -> str:
    """Convert one line of Docusaurus admonition syntax to a Quarto callout.

    :::danger Careful

    becomes:

    :::: {.callout-important}
    ## Careful

    An untitled opener (``:::info``) becomes ``:::: {note}`` and a bare
    ``:::`` closer becomes ``::::``.  Unknown admonition types keep their
    original spelling.  Any other line is returned unchanged.
    """
    m = _ADMONITION_START_RE.fullmatch(line)
    if m:
        kind = m.group(1)
        title = m.group(2).strip()
        callout = CALLOUT_TYPES.get(kind.lower(), kind)
        if not title:
            return f":::: {{{callout}}}"
        return f":::: {{.callout-{callout}}}\n## {title}"

    if _ADMONITION_END_RE.fullmatch(line):
        return "::::"

    return line


# ── Frontmatter Conversion ──────────────────────────────────────────


def convert_frontmatter(lines: Iterable[str]) -> str:
    """Convert Docusaurus frontmatter lines (without ``---`` delimiters).

    ``sidebar_position: 3`` is rewritten to ``order: 3``.  Every other line
    is kept byte for byte.  Each output line ends with a newline.
    """
    out = []
    for line in lines:
        if line.strip().startswith("sidebar_position"):
            _, _, value = line.partition(":")
            out.append(f"order: {value.strip()}\n")
        else:
            out.append(f"{line}\n")
    return "".join(out)


# ── Document Conversion ─────────────────────────────────────────────


class ScanState(enum.Enum):
    """Where the line scanner currently is inside a document."""

    IN_BODY = "body"
    IN_FRONTMATTER = "frontmatter"


def split_lines(content: str) -> list[str]:
    """Split text on ``\\n``, dropping a trailing ``\\r`` from each line.

    A final newline does not produce an empty last line.
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def convert_content(content: str) -> str:
    """Convert a full Docusaurus markdown document to Quarto markdown.

    A ``---`` line opens a frontmatter block and the next ``---`` line closes
    it.  On close, the opening ``---`` and the converted frontmatter are
    written; the closing delimiter itself is not.  A block that is never
    closed is dropped.  Body lines go through ``convert_admonitions`` and
    each ends with a single newline.
    """
    result: list[str] = []
    state = ScanState.IN_BODY
    frontmatter: list[str] = []

    for line in split_lines(content):
        if line == FRONTMATTER_DELIMITER:
            if state is ScanState.IN_BODY:
                state = ScanState.IN_FRONTMATTER
                frontmatter.clear()
            else:
                result.append(f"{FRONTMATTER_DELIMITER}\n")
                result.append(convert_frontmatter(frontmatter))
                # TODO: write the closing delimiter once Quarto output with
                # a terminated frontmatter block has been checked end to end.
                frontmatter.clear()
                state = ScanState.IN_BODY
            continue

        if state is ScanState.IN_FRONTMATTER:
            frontmatter.append(line)
        else:
            result.append(f"{convert_admonitions(line)}\n")

    return "".join(result)
