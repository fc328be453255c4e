"""Pattern detection over raw Cadence source.

    from cadence_code_generator.pattern_detector import detect

`detect` is pure and deterministic: the same source always yields the same
list of PatternMatch objects, ordered by catalog position and then by
position in the source. The remaining helpers turn matches into a fix plan
(grouping, prioritisation, effort estimate, risk level).
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .categories import CodeLocation, Pattern, PatternCategory, PatternMatch, Severity
from .pattern_catalog import PATTERN_CATALOG


_SEVERITY_PRIORITY = {Severity.CRITICAL: 10, Severity.WARNING: 5, Severity.INFO: 1}
_SEVERITY_IMPACT = {Severity.CRITICAL: "high", Severity.WARNING: "medium", Severity.INFO: "low"}
_IMPACT_ORDER = {"high": 3, "medium": 2, "low": 1}
_EFFORT_ORDER = {"easy": 1, "moderate": 2, "complex": 3}
_EFFORT_MINUTES = {"easy": 2, "moderate": 5, "complex": 15}


@dataclass
class CategorizedMatches:
    category: PatternCategory
    matches: List[PatternMatch]
    priority: int

    def to_dict(self):
        return {
            "category": self.category.value,
            "count": len(self.matches),
            "priority": self.priority,
        }


@dataclass
class PrioritizedFix:
    match: PatternMatch
    impact: str
    effort: str

    def to_dict(self):
        return {
            "pattern_id": self.match.pattern_id,
            "line": self.match.location.line,
            "impact": self.impact,
            "effort": self.effort,
            "fix": self.match.fix_text,
        }


@dataclass
class FixPlan:
    matches: List[PatternMatch] = field(default_factory=list)
    prioritized_fixes: List[PrioritizedFix] = field(default_factory=list)
    estimated_minutes: int = 0
    risk_level: str = "low"

    def to_dict(self):
        return {
            "total_matches": len(self.matches),
            "prioritized_fixes": [f.to_dict() for f in self.prioritized_fixes],
            "estimated_minutes": self.estimated_minutes,
            "risk_level": self.risk_level,
        }


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for i, char in enumerate(source):
        if char == "\n":
            starts.append(i + 1)
    return starts


def _locate(line_starts: Sequence[int], start: int, end: int) -> CodeLocation:
    line_idx = bisect_right(line_starts, start) - 1
    return CodeLocation(
        line=line_idx + 1,
        column=start - line_starts[line_idx] + 1,
        start_index=start,
        end_index=end,
    )


def detect(source: str, catalog: Iterable[Pattern] = PATTERN_CATALOG) -> List[PatternMatch]:
    """Scan source against every catalog pattern.

    Returns one PatternMatch per non-overlapping occurrence, with 1-based
    line and column numbers.
    """
    if not source:
        return []

    line_starts = _line_starts(source)
    matches: List[PatternMatch] = []

    for pattern in catalog:
        for m in pattern.regex.finditer(source):
            matches.append(
                PatternMatch(
                    pattern_id=pattern.id,
                    location=_locate(line_starts, m.start(), m.end()),
                    message=pattern.message,
                    severity=pattern.severity,
                    category=pattern.category,
                    matched_text=m.group(0),
                    fix_text=pattern.fix_text,
                )
            )

    return matches


def filter_by_severity(matches: Iterable[PatternMatch], severity: Severity) -> List[PatternMatch]:
    return [m for m in matches if m.severity == severity]


def categorize_matches(matches: Iterable[PatternMatch]) -> List[CategorizedMatches]:
    """Group matches by category, highest priority first."""
    grouped: Dict[PatternCategory, List[PatternMatch]] = {}
    for match in matches:
        grouped.setdefault(match.category, []).append(match)

    categorized = [
        CategorizedMatches(
            category=category,
            matches=items,
            priority=sum(_SEVERITY_PRIORITY[m.severity] for m in items),
        )
        for category, items in grouped.items()
    ]
    categorized.sort(key=lambda c: c.priority, reverse=True)
    return categorized


def prioritize_fixes(
    matches: Iterable[PatternMatch],
    catalog: Iterable[Pattern] = PATTERN_CATALOG,
) -> List[PrioritizedFix]:
    """Order fixes by impact (high first), then by effort (easy first)."""
    effort_by_id = {p.id: p.effort for p in catalog}
    fixes = [
        PrioritizedFix(
            match=m,
            impact=_SEVERITY_IMPACT[m.severity],
            effort=effort_by_id.get(m.pattern_id, "moderate"),
        )
        for m in matches
    ]
    fixes.sort(key=lambda f: (-_IMPACT_ORDER[f.impact], _EFFORT_ORDER[f.effort]))
    return fixes


def _risk_level(matches: Sequence[PatternMatch]) -> str:
    critical = len(filter_by_severity(matches, Severity.CRITICAL))
    storage = sum(1 for m in matches if m.category == PatternCategory.STORAGE_API)
    if critical > 10 or storage > 5:
        return "high"
    if critical > 5 or storage > 2:
        return "medium"
    return "low"


def generate_fix_plan(source: str) -> FixPlan:
    matches = detect(source)
    fixes = prioritize_fixes(matches)
    return FixPlan(
        matches=matches,
        prioritized_fixes=fixes,
        estimated_minutes=sum(_EFFORT_MINUTES[f.effort] for f in fixes),
        risk_level=_risk_level(matches),
    )
