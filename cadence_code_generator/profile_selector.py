"""Contract type detection from natural language (or from source text).

This module looks at a prompt and decides:
- which ContractCategory applies (nft, fungible-token, dao, ...)
- how complex the request is
- which well-known features the user asked for
- how experienced the user appears to be

It is keyword-based on purpose: the first matching group wins, in a fixed
precedence order, so the same text always classifies the same way.
"""

from __future__ import annotations

from typing import List

from .categories import Complexity, ContractCategory, ContractType, UserExperience


# ---------------------------------------------------------------------------
# Keyword groups, in precedence order
# ---------------------------------------------------------------------------

_DETECTION_KEYWORDS = [
    (
        ContractCategory.NFT,
        {
            "primary": ["nft", "non-fungible", "collectible"],
            "secondary": ["marketplace", "royalty"],
            "features": ["metadata", "royalty", "collection", "minting"],
        },
    ),
    (
        ContractCategory.FUNGIBLE_TOKEN,
        {
            "primary": ["token", "fungible", "currency"],
            "secondary": ["staking", "reward"],
            "features": ["minting", "burning", "transfer", "vault"],
        },
    ),
    (
        ContractCategory.DAO,
        {
            "primary": ["dao", "governance", "voting"],
            # governance contracts are always treated as advanced
            "secondary": [],
            "features": ["voting", "proposal", "member", "treasury"],
        },
    ),
    (
        ContractCategory.MARKETPLACE,
        {
            "primary": ["marketplace", "trading", "exchange"],
            "secondary": [],
            "features": ["listing", "bidding", "escrow", "commission"],
        },
    ),
]

_ALWAYS_ADVANCED = {ContractCategory.DAO, ContractCategory.MARKETPLACE}

_EXPERT_KEYWORDS = [
    "optimization", "gas efficiency", "advanced patterns", "custom interfaces",
    "complex logic", "sophisticated", "enterprise", "production scale",
    "performance", "security audit", "formal verification",
]

_BEGINNER_KEYWORDS = [
    "simple", "basic", "tutorial", "learning", "first time", "beginner",
    "how to", "getting started", "introduction", "easy", "step by step",
]


def _extract_features(text: str, vocabulary: List[str]) -> frozenset:
    return frozenset(feature for feature in vocabulary if feature in text)


def classify(text: str) -> ContractType:
    """Infer a ContractType from a prompt or a piece of contract source.

    Pure function of its input: re-classifying identical text yields an
    identical ContractType.
    """
    lowered = (text or "").lower()

    for category, kw in _DETECTION_KEYWORDS:
        if not any(word in lowered for word in kw["primary"]):
            continue

        if category in _ALWAYS_ADVANCED or any(word in lowered for word in kw["secondary"]):
            complexity = Complexity.ADVANCED
        else:
            complexity = Complexity.INTERMEDIATE

        return ContractType(
            category=category,
            complexity=complexity,
            requested_features=_extract_features(lowered, kw["features"]),
        )

    return ContractType(category=ContractCategory.GENERIC, complexity=Complexity.SIMPLE)


def infer_user_experience(prompt: str, context: str = "") -> UserExperience:
    combined = f"{prompt} {context or ''}".lower()

    expert_score = sum(1 for keyword in _EXPERT_KEYWORDS if keyword in combined)
    beginner_score = sum(1 for keyword in _BEGINNER_KEYWORDS if keyword in combined)

    if expert_score > beginner_score and expert_score >= 2:
        return UserExperience.EXPERT
    if beginner_score > expert_score and beginner_score >= 2:
        return UserExperience.BEGINNER
    return UserExperience.INTERMEDIATE
