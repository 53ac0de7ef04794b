"""Boilerplate detection for single extracted lines."""

from __future__ import annotations

from typing import Optional

from .rules import DEFAULT_RULES, NoiseRules


def is_noise(line: str, rules: Optional[NoiseRules] = None) -> bool:
    """Return True when a trimmed, non-empty line is print boilerplate.

    A line is noise when it carries a known typesetting stamp, looks like a
    running page head (``137 STAT. 136``), or is too short to be text.
    """
    rules = rules or DEFAULT_RULES.noise
    if len(line) < rules.min_length:
        return True
    if any(fragment in line for fragment in rules.substrings):
        return True
    footer_re = rules.footer_re
    return footer_re is not None and footer_re.match(line) is not None
