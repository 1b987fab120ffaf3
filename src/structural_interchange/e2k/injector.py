"""Merge user-supplied E2K text into generated output.

Custom sections replace generated sections of the same name; new
sections are added. The merged file is put back into E2K section order.
Custom text without any ``$`` section header is appended verbatim.
"""

from __future__ import annotations

import logging

from structural_interchange.e2k.sections import join_sections, split_sections

logger = logging.getLogger(__name__)


class E2KInjector:
    """Merges custom E2K text into a generated E2K document."""

    def __init__(self, custom_text: str | None = None):
        self.custom_text = custom_text or ""

    def parse_custom(self) -> dict[str, str]:
        return split_sections(self.custom_text)

    def inject(self, base_text: str) -> str:
        if not self.custom_text.strip():
            return base_text
        custom = self.parse_custom()
        if not custom:
            logger.debug("Custom text has no section headers; appending as is")
            return base_text.rstrip("\n") + "\n\n" + self.custom_text.rstrip("\n") + "\n"

        merged = split_sections(base_text)
        for name, text in custom.items():
            if name in merged:
                logger.debug("Custom section replaces generated %r", name)
            merged[name] = text
        return join_sections(merged)
