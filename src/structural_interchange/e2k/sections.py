"""E2K section names, ordering and splitting.

An E2K file is a sequence of sections, each starting with a ``$ NAME``
line. Readers expect them in a fixed order.
"""

from __future__ import annotations

import re

E2K_SECTION_ORDER: tuple[str, ...] = (
    "PROGRAM INFORMATION",
    "CONTROLS",
    "STORIES - IN SEQUENCE FROM TOP",
    "GRIDS",
    "DIAPHRAGM NAMES",
    "MATERIAL PROPERTIES",
    "REBAR DEFINITIONS",
    "FRAME SECTIONS",
    "CONCRETE SECTIONS",
    "TENDON SECTIONS",
    "SLAB PROPERTIES",
    "DECK PROPERTIES",
    "WALL PROPERTIES",
    "LINK PROPERTIES",
    "PANEL ZONE PROPERTIES",
    "PIER/SPANDREL NAMES",
    "POINT COORDINATES",
    "LINE CONNECTIVITIES",
    "AREA CONNECTIVITIES",
    "GROUPS",
    "POINT ASSIGNS",
    "LINE ASSIGNS",
    "AREA ASSIGNS",
    "LOAD PATTERNS",
    "LOAD COMBINATIONS",
    "ANALYSIS OPTIONS",
    "MASS SOURCE",
    "FUNCTIONS",
    "GENERALIZED DISPLACEMENTS",
    "LOAD CASES",
    "DESIGN PREFERENCES",
    "PROJECT INFORMATION",
    "LOG",
)

SECTION_RE = re.compile(r"^\$ ([A-Z][A-Z0-9 _/\-]+?)\s*$", re.MULTILINE)


def header(name: str) -> str:
    return f"$ {name}"


def render(name: str, body: str) -> str:
    """A section: header line, body lines, trailing newline."""
    body = body.rstrip("\n")
    return f"{header(name)}\n{body}\n" if body else f"{header(name)}\n"


def split_sections(text: str) -> dict[str, str]:
    """Split E2K text into {name: full section text}, in file order.

    Text before the first header is dropped. A repeated name keeps the
    last occurrence.
    """
    sections: dict[str, str] = {}
    matches = list(SECTION_RE.finditer(text))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        chunk = text[match.start():end].rstrip("\n") + "\n"
        sections[match.group(1).strip()] = chunk
    return sections


def order_sections(sections: dict[str, str]) -> list[str]:
    """Section names sorted by E2K_SECTION_ORDER; unknown names last, as given."""
    rank = {name: i for i, name in enumerate(E2K_SECTION_ORDER)}
    known = sorted((n for n in sections if n in rank), key=rank.__getitem__)
    unknown = [n for n in sections if n not in rank]
    return known + unknown


def join_sections(sections: dict[str, str]) -> str:
    return "\n".join(sections[name] for name in order_sections(sections))
