"""Rule tables for noise suppression and line reflow.

The defaults are tuned for slip-law prints from the Government Publishing
Office: typesetting stamps such as ``VerDate Sep 11 2014`` or ``Frm 00001``
and running heads such as ``137 STAT. 136``.  Other document families can
extend or replace any table, either in code via :meth:`NoiseRules.extended`
or from a JSON file passed to :func:`load_rules`::

    {
      "noise": {"extra_substrings": ["Draft copy"], "min_length": 2},
      "reflow": {"continuation_words": ["of", "the", "under"]}
    }

A plain key replaces the default list, an ``extra_`` key appends to it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Pattern, Tuple

DEFAULT_NOISE_SUBSTRINGS: Tuple[str, ...] = (
    "VerDate Sep",
    "Frm ",
    "Fmt ",
    "Sfmt ",
    "PO 00000",
    "Jkt ",
    "E:\\PUBLAW\\",
    "jmbennett on",
)

DEFAULT_FOOTER_PATTERNS: Tuple[str, ...] = (r"^\d+\s+STAT\.\s+\d+",)

DEFAULT_STRUCTURAL_MARKERS: Tuple[str, ...] = (
    r"SEC\.",
    r"Sec\.",
    r"SECTION",
    r"TITLE",
    r"\d+\.",
    r"[A-Z]\.",
    r"[IVX]+\.",
    r"•",
    r"–",
    r"-",
    r"\(\d+\)",
    r"[a-z]\)",
)

DEFAULT_SECTION_REFERENCES: Tuple[str, ...] = (r"Sec\.", r"SEC\.", r"Section")

DEFAULT_CONTINUATION_WORDS: Tuple[str, ...] = (
    "of",
    "the",
    "and",
    "or",
    "in",
    "to",
    "for",
    "with",
    "a",
    "an",
)


def _alternation(patterns: Iterable[str]) -> str:
    return "|".join(f"(?:{pattern})" for pattern in patterns)


@dataclass(frozen=True)
class NoiseRules:
    substrings: Tuple[str, ...] = DEFAULT_NOISE_SUBSTRINGS
    footer_patterns: Tuple[str, ...] = DEFAULT_FOOTER_PATTERNS
    min_length: int = 3
    _footer_re: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.min_length < 0:
            raise ValueError("min_length must not be negative")
        compiled = re.compile(_alternation(self.footer_patterns)) if self.footer_patterns else None
        object.__setattr__(self, "_footer_re", compiled)

    @property
    def footer_re(self) -> Optional[Pattern[str]]:
        return self._footer_re

    def extended(
        self,
        substrings: Iterable[str] = (),
        footer_patterns: Iterable[str] = (),
    ) -> "NoiseRules":
        return replace(
            self,
            substrings=self.substrings + tuple(substrings),
            footer_patterns=self.footer_patterns + tuple(footer_patterns),
        )


@dataclass(frozen=True)
class ReflowRules:
    # characters that close a sentence or clause; a line ending in one never merges
    terminators: str = ".!?;:"
    # a line ending in one of these never takes a lowercase continuation
    soft_punctuation: str = ".,:;!?"
    structural_markers: Tuple[str, ...] = DEFAULT_STRUCTURAL_MARKERS
    section_references: Tuple[str, ...] = DEFAULT_SECTION_REFERENCES
    continuation_words: Tuple[str, ...] = DEFAULT_CONTINUATION_WORDS
    heading_min_length: int = 6
    _structural_re: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)
    _section_ref_re: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)
    _continuation_re: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        structural = (
            re.compile(f"^(?:{_alternation(self.structural_markers)})")
            if self.structural_markers
            else None
        )
        section_ref = (
            re.compile(_alternation(self.section_references), re.IGNORECASE)
            if self.section_references
            else None
        )
        continuation = (
            re.compile(
                r"\b(?:" + "|".join(re.escape(word) for word in self.continuation_words) + r")$",
                re.IGNORECASE,
            )
            if self.continuation_words
            else None
        )
        object.__setattr__(self, "_structural_re", structural)
        object.__setattr__(self, "_section_ref_re", section_ref)
        object.__setattr__(self, "_continuation_re", continuation)

    @property
    def structural_re(self) -> Optional[Pattern[str]]:
        return self._structural_re

    @property
    def section_ref_re(self) -> Optional[Pattern[str]]:
        return self._section_ref_re

    @property
    def continuation_re(self) -> Optional[Pattern[str]]:
        return self._continuation_re


@dataclass(frozen=True)
class RuleSet:
    noise: NoiseRules = field(default_factory=NoiseRules)
    reflow: ReflowRules = field(default_factory=ReflowRules)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional["RuleSet"] = None) -> "RuleSet":
        base = base or DEFAULT_RULES
        noise = _apply_overrides(
            base.noise,
            data.get("noise") or {},
            list_fields=("substrings", "footer_patterns"),
            scalar_fields=("min_length",),
        )
        reflow = _apply_overrides(
            base.reflow,
            data.get("reflow") or {},
            list_fields=("structural_markers", "section_references", "continuation_words"),
            scalar_fields=("terminators", "soft_punctuation", "heading_min_length"),
        )
        return cls(noise=noise, reflow=reflow)


def _apply_overrides(rules, overrides: Mapping[str, Any], list_fields, scalar_fields):
    unknown = set(overrides) - set(list_fields) - set(scalar_fields) - {f"extra_{name}" for name in list_fields}
    if unknown:
        raise ValueError(f"Unknown rule keys: {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    for name in list_fields:
        values = tuple(overrides[name]) if name in overrides else getattr(rules, name)
        extra = overrides.get(f"extra_{name}")
        if extra:
            values = values + tuple(extra)
        changes[name] = values
    for name in scalar_fields:
        if name in overrides:
            changes[name] = overrides[name]
    return replace(rules, **changes)


DEFAULT_RULES = RuleSet()


def load_rules(path: Optional[Path] = None) -> RuleSet:
    """Return the default rule set, or the defaults overridden by ``path``."""
    if path is None:
        return DEFAULT_RULES
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Rule file {path} must contain a JSON object")
    return RuleSet.from_mapping(data)
