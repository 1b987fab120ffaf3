"""Story naming and level → story resolution for E2K export.

E2K identifies stories by display name. Levels are written top-down as
``Story<level name>``; the lowest level becomes ``Base``. Assignment
builders need to go back from a canonical level to one of those names,
which is what a StoryResolver does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from structural_interchange.models.layout import Level

STORIES_HEADER = "$ STORIES - IN SEQUENCE FROM TOP"
BASE_STORY = "Base"


@dataclass
class StoryCatalog:
    """Valid E2K story names, top-down, and which level each came from."""

    names: list[str] = field(default_factory=list)
    by_level_id: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_levels(cls, levels: list[Level]) -> StoryCatalog:
        ordered = sorted(levels, key=lambda lv: lv.elevation, reverse=True)
        catalog = cls()
        for i, level in enumerate(ordered):
            name = BASE_STORY if i == len(ordered) - 1 else f"Story{level.name}"
            catalog.names.append(name)
            catalog.by_level_id[level.id] = name
        return catalog

    @classmethod
    def from_names(cls, names: list[str]) -> StoryCatalog:
        return cls(names=list(names))

    @property
    def top(self) -> str | None:
        return self.names[0] if self.names else None


def stories_section(levels: list[Level]) -> str:
    """Render the STORIES section. Heights are differences between levels."""
    if not levels:
        return ""
    ordered = sorted(levels, key=lambda lv: lv.elevation, reverse=True)
    lines = [STORIES_HEADER]
    for current, below in zip(ordered, ordered[1:]):
        height = current.elevation - below.elevation
        lines.append(f'  STORY "Story{current.name}"  HEIGHT {height:g}')
    lines.append(f'  STORY "{BASE_STORY}"  ELEV {ordered[-1].elevation:g}')
    return "\n".join(lines) + "\n"


class StoryResolver(Protocol):
    """Maps a canonical level to a valid E2K story name, or None."""

    def resolve(self, level: Level) -> str | None: ...


class ContainmentStoryResolver:
    """First valid story name that contains the level name.

    Known ambiguity: a level named "4" also matches "Story14" if that story
    comes first in the list.
    """

    def __init__(self, catalog: StoryCatalog):
        self.catalog = catalog

    def resolve(self, level: Level) -> str | None:
        if not level.name:
            return None
        return next((n for n in self.catalog.names if level.name in n), None)


class ExactStoryResolver:
    """Story written for this level, or a name equal once "Story" is stripped."""

    def __init__(self, catalog: StoryCatalog):
        self.catalog = catalog

    def resolve(self, level: Level) -> str | None:
        found = self.catalog.by_level_id.get(level.id)
        if found is not None:
            return found
        wanted = strip_story_prefix(level.name).lower()
        return next(
            (n for n in self.catalog.names if strip_story_prefix(n).lower() == wanted),
            None,
        )


def strip_story_prefix(name: str) -> str:
    """'Story 3' / 'Story3' -> '3'."""
    name = name.strip()
    if name.lower().startswith("story"):
        return name[5:].strip()
    return name


def make_resolver(catalog: StoryCatalog, mode: str = "contains") -> StoryResolver:
    if mode == "exact":
        return ExactStoryResolver(catalog)
    return ContainmentStoryResolver(catalog)
