"""Rejoin lines that the source layout wrapped mid-sentence.

The merge decision is a flat list of guards checked in order.  Each guard
looks at the current line ``a`` and its successor ``b`` and returns ``False``
(never merge), ``True`` (merge) or ``None`` (no opinion, ask the next guard).
The first guard with an opinion wins; when every guard abstains the lines
stay apart.

The pass is greedy and pairwise: once ``a`` and ``b`` are joined the result is
emitted and the pass resumes after ``b``.  A sentence wrapped over three or
more physical lines therefore ends up as more than one logical line.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from .models import CandidateLine
from .rules import DEFAULT_RULES, ReflowRules

Guard = Callable[[str, str, ReflowRules], Optional[bool]]


def ends_with_terminator(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if a and a[-1] in rules.terminators:
        return False
    return None


def starts_structural_unit(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if rules.structural_re is not None and rules.structural_re.match(b):
        return False
    return None


def is_heading(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if b == b.upper() and len(b) >= rules.heading_min_length and not b[:1].isdigit():
        return False
    return None


def is_complete_section_reference(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if a.endswith(".") and rules.section_ref_re is not None and rules.section_ref_re.search(a):
        return False
    return None


def ends_with_hyphen(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if a.endswith("-"):
        return True
    return None


def continues_lowercase(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if a and a[-1] not in rules.soft_punctuation and b[:1].isascii() and b[:1].islower():
        return True
    return None


def ends_with_continuation_word(a: str, b: str, rules: ReflowRules) -> Optional[bool]:
    if rules.continuation_re is not None and rules.continuation_re.search(a):
        return True
    return None


MERGE_GUARDS: Tuple[Guard, ...] = (
    ends_with_terminator,
    starts_structural_unit,
    is_heading,
    is_complete_section_reference,
    ends_with_hyphen,
    continues_lowercase,
    ends_with_continuation_word,
)


def should_merge(
    a: str,
    b: str,
    rules: Optional[ReflowRules] = None,
    guards: Sequence[Guard] = MERGE_GUARDS,
) -> bool:
    rules = rules or DEFAULT_RULES.reflow
    for guard in guards:
        verdict = guard(a, b, rules)
        if verdict is not None:
            return verdict
    return False


def join_text(a: str, b: str) -> str:
    if a.endswith("-"):
        return a[:-1] + b
    return f"{a} {b}"


def merge_wrapped_lines(
    lines: Sequence[CandidateLine],
    rules: Optional[ReflowRules] = None,
    guards: Sequence[Guard] = MERGE_GUARDS,
) -> List[CandidateLine]:
    merged: List[CandidateLine] = []
    i = 0
    while i < len(lines):
        current = lines[i]
        if i + 1 < len(lines):
            following = lines[i + 1]
            if current.page_number == following.page_number and should_merge(
                current.text, following.text, rules, guards
            ):
                merged.append(replace(current, text=join_text(current.text, following.text)))
                i += 2
                continue
        merged.append(current)
        i += 1
    return merged
