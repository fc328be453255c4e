"""Static catalog of legacy / forbidden Cadence patterns.

Every entry pairs a regular expression with a severity and the fix text
that is shown to the user (and fed back to the model on retries).

Detection is purely textual: matches inside comments and string literals
are reported like any other match.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

from .categories import Pattern, PatternCategory, Severity


def _p(pattern_id, regex, severity, category, message, fix_text, effort="easy", flags=0):
    return Pattern(
        id=pattern_id,
        regex=re.compile(regex, flags),
        severity=severity,
        category=category,
        message=message,
        fix_text=fix_text,
        effort=effort,
    )


# ---------------------------------------------------------------------------
# Catalog (order matters: detection output is ordered by catalog position)
# ---------------------------------------------------------------------------

PATTERN_CATALOG: Tuple[Pattern, ...] = (
    # Critical: legacy access control
    _p(
        "legacy-pub",
        r"\bpub\s+",
        Severity.CRITICAL,
        PatternCategory.SYNTAX,
        'Legacy "pub" access modifier found',
        'Replace "pub" with "access(all)"',
    ),
    _p(
        "legacy-pub-set",
        r"\bpub\(set\)",
        Severity.CRITICAL,
        PatternCategory.SYNTAX,
        'Legacy "pub(set)" access modifier found',
        'Replace "pub(set)" with "access(all)" and expose a setter function',
        effort="moderate",
    ),
    _p(
        "legacy-auth-account",
        r"\bAuthAccount\b",
        Severity.CRITICAL,
        PatternCategory.SYNTAX,
        'Legacy "AuthAccount" type found',
        'Use "auth(Storage) &Account" with the required entitlements',
        effort="moderate",
    ),
    # Critical: legacy storage API
    _p(
        "legacy-account-save",
        r"\baccount\.save\(",
        Severity.CRITICAL,
        PatternCategory.STORAGE_API,
        'Legacy storage API "account.save" found',
        'Use "account.storage.save"',
    ),
    _p(
        "legacy-account-load",
        r"\baccount\.load\b",
        Severity.CRITICAL,
        PatternCategory.STORAGE_API,
        'Legacy storage API "account.load" found',
        'Use "account.storage.load"',
    ),
    _p(
        "legacy-account-link",
        r"\baccount\.link\b",
        Severity.CRITICAL,
        PatternCategory.STORAGE_API,
        'Legacy capability API "account.link" found',
        'Use "account.capabilities.storage.issue" followed by "account.capabilities.publish"',
        effort="complex",
    ),
    _p(
        "legacy-account-borrow",
        r"\baccount\.borrow\b",
        Severity.CRITICAL,
        PatternCategory.STORAGE_API,
        'Legacy storage API "account.borrow" found',
        'Use "account.storage.borrow"',
    ),
    _p(
        "legacy-get-capability",
        r"\baccount\.getCapability\b",
        Severity.CRITICAL,
        PatternCategory.STORAGE_API,
        'Legacy capability API "account.getCapability" found',
        'Use "account.capabilities.get" or "account.capabilities.borrow"',
        effort="moderate",
    ),
    # Critical: placeholder values
    _p(
        "undefined-value",
        r"\bundefined\b",
        Severity.CRITICAL,
        PatternCategory.COMPLETENESS,
        'Undefined value found (the literal "undefined" is not valid Cadence)',
        'Use a concrete default value (String: "", UInt64: 0, Bool: false)',
    ),
    # Warnings
    _p(
        "legacy-public-account",
        r"\bPublicAccount\b",
        Severity.WARNING,
        PatternCategory.SYNTAX,
        'Legacy "PublicAccount" type found',
        'Use "&Account"',
    ),
    _p(
        "legacy-interface-conformance",
        r"\b(?:resource|struct|contract)\s+\w+\s*:\s*[\w.]+(?:\s*,\s*[\w.]+)+\s*\{",
        Severity.WARNING,
        PatternCategory.SYNTAX,
        "Comma-separated interface conformance found",
        'Separate conformances with "&" instead of ","',
    ),
    _p(
        "hardcoded-import-address",
        r"import\s+\w+\s+from\s+0x[a-fA-F0-9]+",
        Severity.WARNING,
        PatternCategory.SYNTAX,
        "Import from a hard-coded address found",
        'Use named imports such as import "NonFungibleToken"',
    ),
    _p(
        "placeholder-comment",
        r"\b(?:TODO|FIXME)\b",
        Severity.WARNING,
        PatternCategory.COMPLETENESS,
        "Placeholder comment indicates incomplete implementation",
        "Implement the missing logic instead of leaving a placeholder",
        effort="complex",
    ),
    _p(
        "empty-function-body",
        r"\bfun\s+\w+\s*\([^)]*\)\s*(?::\s*[^{]+)?\{\s*\}",
        Severity.WARNING,
        PatternCategory.COMPLETENESS,
        "Function has an empty body (incomplete logic)",
        "Implement the function body or remove the function",
        effort="complex",
    ),
    # Info
    _p(
        "generic-panic",
        r'panic\(\s*"(?:[^"]{0,12})"\s*\)',
        Severity.INFO,
        PatternCategory.COMPLETENESS,
        "panic() with a generic message",
        "Use a descriptive panic message or a pre-condition",
    ),
    _p(
        "copy-call",
        r"\.copy\(\)",
        Severity.INFO,
        PatternCategory.SYNTAX,
        ".copy() on a reference is usually unnecessary in Cadence 1.0",
        "Dereference the value directly",
    ),
    _p(
        "public-mutable-field",
        r"\baccess\(all\)\s+var\b",
        Severity.INFO,
        PatternCategory.SECURITY,
        "Publicly readable mutable field",
        "Restrict writes through access(contract) or access(self) setters",
    ),
)

PATTERNS_BY_ID: Dict[str, Pattern] = {p.id: p for p in PATTERN_CATALOG}


# ---------------------------------------------------------------------------
# Hard-reject rules
# ---------------------------------------------------------------------------

# (catalog pattern id, rejection reason). First hit wins. Every id here is a
# critical pattern, so a rejected candidate can never validate.
REJECTION_RULES: Tuple[Tuple[str, str], ...] = (
    ("legacy-pub", 'Contains legacy "pub" keyword'),
    ("legacy-pub-set", 'Contains legacy "pub(set)" keyword'),
    ("legacy-auth-account", 'Contains legacy "AuthAccount" type'),
    ("legacy-account-save", 'Uses legacy storage API "account.save"'),
    ("legacy-account-link", 'Uses legacy capability API "account.link"'),
    ("legacy-account-borrow", 'Uses legacy storage API "account.borrow"'),
)
