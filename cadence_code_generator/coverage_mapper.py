"""Feature compliance per contract archetype.

This module answers "does the generated contract contain what an
NFT / fungible token / DAO / marketplace is expected to contain?":

- FEATURE_CATALOG holds the RequiredFeature table for each archetype
- archetype-specific logic checks raise additional ComplianceIssues
- ComplianceMapper.check_compliance() turns it all into a ComplianceReport
  with a 0-100 compliance score and human-readable recommendations.

The catalog is static; presence is computed fresh for every candidate.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Tuple

from .categories import (
    ComplianceIssue,
    ComplianceLevel,
    ComplianceReport,
    ContractCategory,
    ContractType,
    FeatureCategory,
    FeatureCheck,
    RequiredFeature,
    Severity,
)
from .pattern_detector import detect


def _f(name, description, regex, category, level=ComplianceLevel.REQUIRED):
    return RequiredFeature(
        name=name,
        description=description,
        regex=re.compile(regex),
        category=category,
        compliance_level=level,
    )


_REQ = ComplianceLevel.REQUIRED
_REC = ComplianceLevel.RECOMMENDED


# ---------------------------------------------------------------------------
# Feature catalog
# ---------------------------------------------------------------------------

_NFT_FEATURES = (
    _f("NonFungibleToken Interface", "Contract must implement NonFungibleToken interface",
       r"import\s+NonFungibleToken\s+from|NonFungibleToken\.", FeatureCategory.INTERFACE),
    _f("MetadataViews Support", "Contract should implement MetadataViews for metadata standards",
       r"import\s+MetadataViews\s+from|MetadataViews\.", FeatureCategory.INTERFACE, _REC),
    _f("Collection Resource", "Contract must have a Collection resource",
       r"resource\s+Collection\s*[:{]", FeatureCategory.RESOURCE),
    _f("NFT Resource", "Contract must have an NFT resource",
       r"resource\s+NFT\s*[:{]", FeatureCategory.RESOURCE),
    _f("Minting Function", "Contract should have a minting function",
       r"fun\s+mint\w*\s*\(", FeatureCategory.FUNCTION),
    _f("Metadata Fields", "NFT resource should have metadata fields",
       r"metadata\s*:|name\s*:|description\s*:|image\s*:", FeatureCategory.STRUCTURE, _REC),
    _f("View Resolver", "Contract should implement view resolver for metadata",
       r"resolveView\s*\(|getViews\s*\(", FeatureCategory.FUNCTION, _REC),
    _f("Collection Public Interface", "Collection should have public interface for deposits",
       r"CollectionPublic|deposit\s*\(", FeatureCategory.INTERFACE),
)

_FUNGIBLE_TOKEN_FEATURES = (
    _f("FungibleToken Interface", "Contract must implement FungibleToken interface",
       r"import\s+FungibleToken\s+from|FungibleToken\.", FeatureCategory.INTERFACE),
    _f("Vault Resource", "Contract must have a Vault resource",
       r"resource\s+Vault\s*[:{]", FeatureCategory.RESOURCE),
    _f("Minter Resource", "Contract should have a Minter resource for token creation",
       r"resource\s+Minter\s*[:{]|resource\s+Administrator\s*[:{]", FeatureCategory.RESOURCE),
    _f("Supply Management", "Contract should track total supply",
       r"totalSupply\s*:|supply\s*:", FeatureCategory.STRUCTURE),
    _f("Transfer Functions", "Vault must have withdraw and deposit functions",
       r"fun\s+withdraw\s*\(|fun\s+deposit\s*\(", FeatureCategory.FUNCTION),
    _f("Balance Tracking", "Vault should track balance",
       r"balance\s*:|getBalance\s*\(", FeatureCategory.STRUCTURE),
    _f("Vault Public Interface", "Vault should have public interface for balance queries",
       r"VaultPublic|Balance\s*\{", FeatureCategory.INTERFACE),
    _f("Admin Resource", "Contract should have admin resource for minting control",
       r"resource\s+Administrator\s*[:{]|resource\s+Admin\s*[:{]", FeatureCategory.RESOURCE, _REC),
)

_DAO_FEATURES = (
    _f("Proposal Resource", "Contract must have a Proposal resource",
       r"resource\s+Proposal\s*[:{]", FeatureCategory.RESOURCE),
    _f("Voting Mechanism", "Contract must have voting functions",
       r"fun\s+vote\s*\(|fun\s+castVote\s*\(", FeatureCategory.FUNCTION),
    _f("Governance Token", "Contract should reference governance token for voting power",
       r"governanceToken|votingPower|tokenBalance", FeatureCategory.STRUCTURE, _REC),
    _f("Proposal Creation", "Contract must have proposal creation function",
       r"fun\s+createProposal\s*\(|fun\s+propose\s*\(", FeatureCategory.FUNCTION),
    _f("Voting Period", "Proposals should have time-based voting periods",
       r"votingPeriod|endTime|deadline|duration", FeatureCategory.STRUCTURE),
    _f("Execution Logic", "Contract should have proposal execution mechanism",
       r"fun\s+execute\s*\(|fun\s+executeProposal\s*\(", FeatureCategory.FUNCTION),
    _f("Quorum Requirement", "Contract should enforce quorum requirements",
       r"quorum|minimumVotes|threshold", FeatureCategory.STRUCTURE, _REC),
    _f("Membership Management", "Contract should manage DAO membership",
       r"member|Member|membership|isMember", FeatureCategory.FUNCTION, _REC),
)

_MARKETPLACE_FEATURES = (
    _f("Listing Resource", "Contract must have a Listing resource",
       r"resource\s+Listing\s*[:{]|resource\s+SaleListing\s*[:{]", FeatureCategory.RESOURCE),
    _f("Purchase Function", "Contract must have purchase/buy function",
       r"fun\s+purchase\s*\(|fun\s+buy\s*\(", FeatureCategory.FUNCTION),
    _f("Payment Handling", "Contract must handle payment processing",
       r"payment|Payment|price|cost|amount", FeatureCategory.FUNCTION),
    _f("Commission Logic", "Contract should handle marketplace commissions",
       r"commission|fee|royalty|cut", FeatureCategory.FUNCTION, _REC),
    _f("Listing Management", "Contract must have listing creation and removal",
       r"fun\s+createListing\s*\(|fun\s+removeListing\s*\(", FeatureCategory.FUNCTION),
    _f("Escrow Mechanism", "Contract should handle escrow for secure transactions",
       r"escrow|Escrow|custody|hold", FeatureCategory.STRUCTURE, _REC),
    _f("Event Emission", "Contract should emit events for marketplace activities",
       r"event\s+\w*List|event\s+\w*Purchase|event\s+\w*Sale", FeatureCategory.EVENT, _REC),
    _f("Access Control", "Contract should have proper access control for admin functions",
       r"access\(contract\)|access\(account\)|onlyOwner|admin", FeatureCategory.STRUCTURE),
)

_GENERIC_FEATURES = (
    _f("Contract Declaration", "Contract must have proper contract declaration",
       r"access\(all\)\s+contract\s+\w+", FeatureCategory.STRUCTURE),
    _f("Init Function", "Contract must have init function",
       r"init\s*\(\s*\)\s*\{", FeatureCategory.FUNCTION),
)

FEATURE_CATALOG: Dict[ContractCategory, Tuple[RequiredFeature, ...]] = {
    ContractCategory.NFT: _NFT_FEATURES,
    ContractCategory.FUNGIBLE_TOKEN: _FUNGIBLE_TOKEN_FEATURES,
    ContractCategory.DAO: _DAO_FEATURES,
    ContractCategory.MARKETPLACE: _MARKETPLACE_FEATURES,
}


def features_for(category: ContractCategory) -> Tuple[RequiredFeature, ...]:
    return FEATURE_CATALOG.get(category, _GENERIC_FEATURES)


# ---------------------------------------------------------------------------
# Archetype logic checks
# ---------------------------------------------------------------------------


def _issue(issue_type, severity, message, fix, feature_category, level):
    return ComplianceIssue(
        issue_type=issue_type,
        severity=severity,
        message=message,
        suggested_fix=fix,
        feature_category=feature_category,
        compliance_level=level,
    )


def _check_nft(code: str) -> List[ComplianceIssue]:
    issues = []
    if "id:" not in code and "uuid" not in code:
        issues.append(_issue(
            "missing-nft-id", Severity.WARNING,
            "NFT resource should have unique identifier (id or uuid)",
            "Add id: UInt64 field to NFT resource",
            FeatureCategory.STRUCTURE, _REC,
        ))
    if "ownedNFTs" not in code and "length" not in code:
        issues.append(_issue(
            "missing-collection-size", Severity.INFO,
            "Collection should track owned NFTs for size queries",
            "Add ownedNFTs dictionary or length tracking",
            FeatureCategory.STRUCTURE, ComplianceLevel.OPTIONAL,
        ))
    return issues


def _check_fungible_token(code: str) -> List[ComplianceIssue]:
    issues = []
    if "balance >" not in code:
        issues.append(_issue(
            "missing-balance-validation", Severity.WARNING,
            "Withdraw function should validate sufficient balance",
            "Add balance validation: pre { self.balance >= amount }",
            FeatureCategory.FUNCTION, _REC,
        ))
    if "amount > 0" not in code and "amount >= 0" not in code:
        issues.append(_issue(
            "missing-amount-validation", Severity.WARNING,
            "Functions should validate positive amounts",
            "Add amount validation: pre { amount > 0.0 }",
            FeatureCategory.FUNCTION, _REC,
        ))
    if "mint" in code and "totalSupply" not in code:
        issues.append(_issue(
            "missing-supply-tracking", Severity.CRITICAL,
            "Minting function should update total supply",
            "Update totalSupply when minting tokens",
            FeatureCategory.FUNCTION, _REQ,
        ))
    return issues


def _check_dao(code: str) -> List[ComplianceIssue]:
    issues = []
    if "ProposalState" not in code and "status" not in code:
        issues.append(_issue(
            "missing-proposal-state", Severity.WARNING,
            "Proposals should have state management (pending, active, executed, etc.)",
            "Add proposal state enum and tracking",
            FeatureCategory.STRUCTURE, _REC,
        ))
    if "vote" in code and "yesVotes" not in code and "noVotes" not in code:
        issues.append(_issue(
            "missing-vote-counting", Severity.CRITICAL,
            "Voting mechanism should count yes/no votes",
            "Add vote counting fields to Proposal resource",
            FeatureCategory.STRUCTURE, _REQ,
        ))
    if "vote" in code and "hasVoted" not in code and "voters" not in code:
        issues.append(_issue(
            "missing-double-vote-prevention", Severity.CRITICAL,
            "Voting should prevent double voting by same address",
            "Add voter tracking to prevent double voting",
            FeatureCategory.FUNCTION, _REQ,
        ))
    return issues


def _check_marketplace(code: str) -> List[ComplianceIssue]:
    issues = []
    if "price" in code and "price >" not in code:
        issues.append(_issue(
            "missing-price-validation", Severity.WARNING,
            "Listing should validate positive prices",
            "Add price validation: pre { price > 0.0 }",
            FeatureCategory.FUNCTION, _REC,
        ))
    if "createListing" in code and "owner" not in code and "seller" not in code:
        issues.append(_issue(
            "missing-ownership-verification", Severity.CRITICAL,
            "Listing creation should verify item ownership",
            "Add ownership verification before creating listing",
            FeatureCategory.FUNCTION, _REQ,
        ))
    if "purchase" in code and "seller" not in code and "recipient" not in code:
        issues.append(_issue(
            "missing-payment-distribution", Severity.CRITICAL,
            "Purchase function should distribute payment to seller",
            "Add payment distribution logic to seller",
            FeatureCategory.FUNCTION, _REQ,
        ))
    return issues


_ARCHETYPE_CHECKS: Dict[ContractCategory, Callable[[str], List[ComplianceIssue]]] = {
    ContractCategory.NFT: _check_nft,
    ContractCategory.FUNGIBLE_TOKEN: _check_fungible_token,
    ContractCategory.DAO: _check_dao,
    ContractCategory.MARKETPLACE: _check_marketplace,
}


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

# (missing feature name or raised issue type, recommendation)
_RECOMMENDATIONS: Dict[ContractCategory, List[Tuple[str, str]]] = {
    ContractCategory.NFT: [
        ("NonFungibleToken Interface", "Import and implement NonFungibleToken interface for standard compliance"),
        ("MetadataViews Support", "Add MetadataViews support for better marketplace compatibility"),
        ("Collection Resource", "Implement Collection resource for NFT storage and management"),
        ("missing-nft-id", "Add unique identifier (id or uuid) to NFT resource"),
    ],
    ContractCategory.FUNGIBLE_TOKEN: [
        ("FungibleToken Interface", "Import and implement FungibleToken interface for standard compliance"),
        ("Supply Management", "Add total supply tracking for token economics"),
        ("missing-balance-validation", "Add balance validation to prevent overdrafts"),
        ("missing-amount-validation", "Validate positive amounts in transfer functions"),
        ("missing-supply-tracking", "Update totalSupply inside every minting path"),
    ],
    ContractCategory.DAO: [
        ("Voting Mechanism", "Implement voting functions for governance participation"),
        ("Quorum Requirement", "Add quorum requirements for proposal validity"),
        ("missing-double-vote-prevention", "Implement double voting prevention mechanism"),
        ("missing-vote-counting", "Add proper vote counting and tallying"),
        ("missing-proposal-state", "Track proposal status (pending, active, executed)"),
    ],
    ContractCategory.MARKETPLACE: [
        ("Purchase Function", "Implement purchase/buy function for marketplace transactions"),
        ("Commission Logic", "Add commission/fee handling for marketplace sustainability"),
        ("missing-ownership-verification", "Verify item ownership before allowing listing creation"),
        ("missing-payment-distribution", "Implement proper payment distribution to sellers"),
        ("missing-price-validation", "Reject listings with a zero or negative price"),
    ],
}

_GENERIC_RECOMMENDATIONS = [
    ("Contract Declaration", "Add proper contract declaration with access modifier"),
    ("Init Function", "Add init() function for contract initialization"),
]


def _build_recommendations(
    category: ContractCategory,
    missing: List[RequiredFeature],
    issues: List[ComplianceIssue],
) -> List[str]:
    triggers = {f.name for f in missing} | {i.issue_type for i in issues}
    table = _RECOMMENDATIONS.get(category, _GENERIC_RECOMMENDATIONS)

    recommendations = [text for key, text in table if key in triggers]
    for feature in missing:
        line = f"Implement {feature.name}: {feature.description}"
        if line not in recommendations:
            recommendations.append(line)
    return recommendations


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def compliance_score(features: List[FeatureCheck], issues: List[ComplianceIssue]) -> int:
    """70% required features, 20% recommended features, 10% issue penalty."""
    required = [c for c in features if c.feature.compliance_level == _REQ]
    recommended = [c for c in features if c.feature.compliance_level == _REC]

    required_ratio = sum(1 for c in required if c.present) / len(required) if required else 1.0
    recommended_ratio = sum(1 for c in recommended if c.present) / len(recommended) if recommended else 1.0

    critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    warnings = sum(1 for i in issues if i.severity == Severity.WARNING)
    penalty = min(10, critical * 5 + warnings * 2)

    score = round(70 * required_ratio + 20 * recommended_ratio + (10 - penalty))
    return max(0, min(100, score))


class ComplianceMapper:
    """Checks a candidate against the feature table of its archetype."""

    @staticmethod
    def check_compliance(code: str, contract_type: ContractType) -> ComplianceReport:
        code = code or ""
        category = contract_type.category
        label = "Contract" if category not in FEATURE_CATALOG else f"{category.value} contract"

        features = [FeatureCheck(feature=f, present=bool(f.regex.search(code))) for f in features_for(category)]

        issues: List[ComplianceIssue] = []
        missing: List[RequiredFeature] = []
        for check in features:
            if check.present:
                continue
            feature = check.feature
            missing.append(feature)
            if feature.compliance_level == _REQ:
                severity, kind = Severity.CRITICAL, "required"
            elif feature.compliance_level == _REC:
                severity, kind = Severity.WARNING, "recommended"
            else:
                severity, kind = Severity.INFO, "optional"
            issues.append(_issue(
                f"missing-{kind}-feature", severity,
                f"{label} is missing {kind} feature: {feature.name}",
                feature.description,
                feature.category, feature.compliance_level,
            ))

        archetype_check = _ARCHETYPE_CHECKS.get(category)
        if archetype_check:
            issues.extend(archetype_check(code))

        has_critical_pattern = any(m.severity == Severity.CRITICAL for m in detect(code))
        is_valid = (
            not any(f.compliance_level == _REQ for f in missing)
            and not any(i.severity == Severity.CRITICAL for i in issues)
            and not has_critical_pattern
        )

        return ComplianceReport(
            contract_type=contract_type,
            is_valid=is_valid,
            compliance_score=compliance_score(features, issues),
            features=features,
            missing_features=[f.name for f in missing],
            issues=issues,
            recommendations=_build_recommendations(category, missing, issues),
        )


def check_compliance(code: str, contract_type: ContractType) -> ComplianceReport:
    return ComplianceMapper.check_compliance(code, contract_type)
