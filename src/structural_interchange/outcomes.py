"""Per-element outcome tags and the conversion summary built from them.

Every element a builder looks at yields exactly one outcome. Skips are
expected results, not errors; the summary makes them visible so that
silently dropped elements show up in the conversion message.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class Outcome(str, Enum):
    EXPORTED = "exported"
    SKIPPED_MISSING_MAPPING = "skipped-missing-mapping"
    SKIPPED_MISSING_LEVEL = "skipped-missing-level"
    SKIPPED_MISSING_STORY = "skipped-missing-story"
    SKIPPED_MISSING_PROPERTY = "skipped-missing-property"

    @classmethod
    def for_miss(cls, reason: str) -> Outcome:
        """Outcome for a ResolutionMiss reason."""
        return {
            "mapping": cls.SKIPPED_MISSING_MAPPING,
            "level": cls.SKIPPED_MISSING_LEVEL,
            "story": cls.SKIPPED_MISSING_STORY,
            "property": cls.SKIPPED_MISSING_PROPERTY,
        }[reason]

    @property
    def is_skip(self) -> bool:
        return self is not Outcome.EXPORTED


@dataclass
class ElementOutcome:
    """What happened to a single source element."""

    element_kind: str  # "wall", "floor", "opening", "beam", "column", "brace", ...
    element_id: str
    outcome: Outcome
    detail: str = ""


@dataclass
class ConversionSummary:
    """Aggregated record counts and element outcomes for one conversion."""

    record_counts: Counter = field(default_factory=Counter)
    outcomes: list[ElementOutcome] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_records(self, kind: str, count: int) -> None:
        self.record_counts[kind] += count

    def add_outcomes(self, outcomes: list[ElementOutcome]) -> None:
        self.outcomes.extend(outcomes)

    def add_warning(self, text: str) -> None:
        """Record a fallback that did not skip anything but degraded the result."""
        self.warnings.append(text)

    def outcome_counts(self) -> dict[tuple[str, Outcome], int]:
        """Number of elements per (kind, outcome)."""
        return dict(Counter((o.element_kind, o.outcome) for o in self.outcomes))

    def skipped(self) -> list[ElementOutcome]:
        return [o for o in self.outcomes if o.outcome.is_skip]

    def message(self) -> str:
        """One-line description with per-kind counts and any skips."""
        parts = [
            f"{count} {kind}" for kind, count in self.record_counts.items() if count
        ]
        text = "Exported " + (", ".join(parts) if parts else "nothing")
        skips = Counter(
            (o.element_kind, o.outcome) for o in self.outcomes if o.outcome.is_skip
        )
        if skips:
            detail = ", ".join(
                f"{n} {kind} {outcome.value.removeprefix('skipped-')}"
                for (kind, outcome), n in sorted(
                    skips.items(), key=lambda kv: (kv[0][0], kv[0][1].value)
                )
            )
            text += f" (skipped: {detail})"
        if self.warnings:
            text += f" [{len(self.warnings)} fallback(s)]"
        return text

    def to_dict(self) -> dict:
        return {
            "records": dict(self.record_counts),
            "skipped": [
                {
                    "kind": o.element_kind,
                    "id": o.element_id,
                    "outcome": o.outcome.value,
                    "detail": o.detail,
                }
                for o in self.skipped()
            ],
            "warnings": list(self.warnings),
        }


@dataclass
class ConversionResult:
    """Final result of a conversion call."""

    success: bool
    message: str
    summary: ConversionSummary = field(default_factory=ConversionSummary)
    text: str = ""
