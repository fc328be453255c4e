"""Prompt construction for Cadence generation attempts.

Takes:
- the user's request
- the ContractType selected for it
- the attempt number and the accumulated failure history

and returns an EnhancedPrompt with:
- system_prompt
- user_prompt
- temperature
- enhancement_level

`enhance` is a pure function: identical inputs give identical prompts,
which keeps the retry loop reproducible.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .categories import (
    Complexity,
    ContractCategory,
    ContractType,
    EnhancedPrompt,
    EnhancementLevel,
    FailurePattern,
    FailureType,
    UserExperience,
)
from .config import EnhancerConfig
from .failure_analyzer import distinct_types


CADENCE_1_RULES = """
CADENCE 1.0 CRITICAL RULES:
1. NEVER use "undefined" values
   - Always provide concrete defaults: String "", UInt64 0, UFix64 0.0, Bool false, [] and {}
   - Initialize ALL contract, resource and struct fields in init()

2. Modern access control only
   - Use access(all), access(self), access(contract), access(account)
   - The "pub" and "pub(set)" keywords are FORBIDDEN
   - Use entitlements (e.g. access(NonFungibleToken.Withdraw)) for privileged functions

3. Modern account and storage API only
   - "AuthAccount" and "PublicAccount" are FORBIDDEN, use auth(Storage) &Account and &Account
   - Store with self.account.storage.save(<-resource, to: path)
   - Borrow with self.account.storage.borrow<&T>(from: path)
   - Issue and publish capabilities with self.account.capabilities.storage.issue<&T>(path)
     and self.account.capabilities.publish(cap, at: publicPath)
   - "account.link", "account.getCapability" and "account.borrow" are FORBIDDEN

4. Conformances use "&", not ","
   - resource Collection: NonFungibleToken.Collection & ViewResolver.ResolverCollection

5. Imports use names, not addresses
   - import "NonFungibleToken", import "FungibleToken", import "MetadataViews"
"""

_LEVEL_RULES: Dict[EnhancementLevel, List[str]] = {
    EnhancementLevel.BASIC: [
        "Focus on complete, working implementations",
        "Ensure all variables have concrete values",
        "Use modern Cadence 1.0 syntax throughout",
    ],
    EnhancementLevel.MODERATE: [
        "Double-check all variable initializations for concrete values",
        "Verify all function signatures are complete with proper implementations",
        "Ensure comprehensive error handling in all functions",
        'Validate that no "undefined" values exist anywhere',
        "Confirm all brackets and parentheses are properly matched",
    ],
    EnhancementLevel.STRICT: [
        "TRIPLE-CHECK: No undefined values anywhere in the code",
        "VALIDATE: All brackets, parentheses, and braces match perfectly",
        "VERIFY: All functions have complete, working implementations",
        "CONFIRM: All variables are properly initialized with concrete values",
        "ENSURE: All resources have proper lifecycle management",
        "REVIEW: All access control patterns are correctly implemented",
    ],
    EnhancementLevel.MAXIMUM: [
        "EXTREME VALIDATION: Every single line must be syntactically perfect",
        "ZERO TOLERANCE: Any undefined value will cause immediate rejection",
        "COMPLETE IMPLEMENTATION: No partial, incomplete, or placeholder code allowed",
        "PERFECT SYNTAX: Every bracket, parenthesis, and brace must be perfectly matched",
        "MODERN PATTERNS: Only Cadence 1.0 syntax and patterns are acceptable",
    ],
}


# ---------------------------------------------------------------------------
# Category-specific high-level generation rules
# ---------------------------------------------------------------------------

_CATEGORY_RULES = {
    ContractCategory.NFT: """
NFT CONTRACT REQUIREMENTS:
- Conform to NonFungibleToken (import "NonFungibleToken") and implement the NFT and Collection resources
- NFT resource: access(all) let id: UInt64 plus name, description and thumbnail metadata fields
- Collection resource: ownedNFTs dictionary, deposit, withdraw (entitled), getIDs and borrowNFT
- Support MetadataViews: getViews() and resolveView() returning at least Display
- Provide a minting function (e.g. mintNFT) on an NFTMinter resource kept in contract storage
- Increment totalSupply on every mint and emit a Minted event
""",
    ContractCategory.FUNGIBLE_TOKEN: """
FUNGIBLE TOKEN REQUIREMENTS:
- Conform to FungibleToken (import "FungibleToken") and implement a Vault resource
- Vault: access(all) var balance: UFix64, withdraw (entitled) and deposit functions
- Validate amounts (amount > 0.0) and sufficient balance (self.balance >= amount) in pre-conditions
- Track access(all) var totalSupply: UFix64 and update it on every mint and burn
- Expose a VaultPublic interface for balance queries
- Keep minting on a Minter or Administrator resource stored in the deployer account
""",
    ContractCategory.DAO: """
DAO CONTRACT REQUIREMENTS:
- Proposal resource with title, description, proposer, status and votingPeriod / endTime
- Count votes explicitly with yesVotes and noVotes fields
- Prevent double voting with a hasVoted / voters dictionary keyed by address
- Provide createProposal, vote and execute functions
- Enforce a quorum before a proposal can be executed
- Weigh votes by votingPower and track members with isMember
""",
    ContractCategory.MARKETPLACE: """
MARKETPLACE REQUIREMENTS:
- Listing resource holding item id, seller address and price
- Validate prices with pre-conditions (price > 0.0) and verify seller ownership when listing
- Provide createListing, removeListing and purchase functions
- Route payment to the seller and split a marketplace commission / fee
- Hold listed items in escrow until purchase or removal
- Emit ListingCreated, ListingRemoved and Purchase events
- Restrict admin functions with access(contract) or access(account)
""",
    ContractCategory.GENERIC: """
GENERAL CONTRACT REQUIREMENTS:
- Declare the contract as access(all) contract Name
- Provide an init() function that initializes every field
- Emit events for every state change
- Validate all inputs with pre-conditions and descriptive messages
""",
}

_COMPLEXITY_NOTES = {
    Complexity.SIMPLE: "Keep the implementation straightforward but complete.",
    Complexity.INTERMEDIATE: "Use established Cadence patterns consistently.",
    Complexity.ADVANCED: "Handle edge cases and access control carefully; advanced features must still be complete.",
}

_EXPERIENCE_NOTES = {
    UserExperience.BEGINNER: "Add comments explaining each section and the Cadence concepts it uses.",
    UserExperience.INTERMEDIATE: "Comment non-obvious logic only.",
    UserExperience.EXPERT: "Use advanced Cadence features (entitlements, view functions) where they fit.",
}

_ATTEMPT_INSTRUCTIONS = {
    1: (
        "FIRST ATTEMPT - HIGH QUALITY FOCUS:\n"
        "- Generate complete, production-ready code immediately\n"
        "- Use concrete values for all variables\n"
        "- Follow modern Cadence 1.0 patterns exclusively"
    ),
    2: (
        "SECOND ATTEMPT - ENHANCED QUALITY CONTROL:\n"
        "- The previous attempt had quality issues\n"
        "- DOUBLE-CHECK: No undefined values anywhere in the code\n"
        "- VERIFY: All functions have complete implementations\n"
        "- ENSURE: All brackets are matched"
    ),
    3: (
        "THIRD ATTEMPT - MAXIMUM QUALITY ENFORCEMENT:\n"
        "- TRIPLE-CHECK: Every line must be syntactically valid Cadence 1.0\n"
        "- ZERO TOLERANCE: Any legacy syntax or undefined value will cause rejection"
    ),
}

_FINAL_ATTEMPT_INSTRUCTIONS = (
    "FINAL ATTEMPT - EXTREME QUALITY MEASURES:\n"
    "- This is the last attempt, output must be complete and valid\n"
    "- NO COMPROMISES: Complete implementation only"
)

_FAILURE_CORRECTIONS = {
    FailureType.UNDEFINED_VALUES: "Previous attempts had undefined values - use concrete defaults only",
    FailureType.LEGACY_SYNTAX: "Previous attempts used legacy syntax - use only Cadence 1.0 patterns",
    FailureType.INCOMPLETE_LOGIC: "Previous attempts had incomplete logic - implement all functions and init() fully",
    FailureType.SYNTAX_ERRORS: "Previous attempts had syntax errors - verify all brackets and parentheses match",
    FailureType.TYPE_ERRORS: "Previous attempts had type errors - use correct types and implement every interface member",
}


def enhancement_level_for(attempt_number: int) -> EnhancementLevel:
    if attempt_number <= 1:
        return EnhancementLevel.BASIC
    if attempt_number == 2:
        return EnhancementLevel.MODERATE
    if attempt_number == 3:
        return EnhancementLevel.STRICT
    return EnhancementLevel.MAXIMUM


def calculate_temperature(
    attempt_number: int,
    base_temperature: float,
    strict_mode: bool = False,
    config: Optional[EnhancerConfig] = None,
) -> float:
    """Non-increasing in attempt_number; strict mode caps it further."""
    config = config or EnhancerConfig()
    floor = config.temperature_floor

    if attempt_number >= 4:
        temperature = floor
    else:
        temperature = max(floor, base_temperature * config.decay_factor ** (attempt_number - 1))

    if strict_mode:
        temperature = min(temperature, max(floor, base_temperature * config.strict_factor))

    return round(temperature, 4)


def _failure_prevention_block(history: Sequence[FailurePattern]) -> str:
    lines = ["CRITICAL FAILURE PREVENTION:", "Previous attempts failed due to the following issues. Avoid them completely."]
    for failure_type in distinct_types(list(history)):
        occurrences = sum(p.frequency for p in history if p.type == failure_type)
        fixes = next(p.suggested_solutions for p in history if p.type == failure_type)
        lines.append(f"\n{failure_type.value.upper()} ({occurrences} previous occurrence(s)):")
        lines.extend(f"- {fix}" for fix in fixes)
    return "\n".join(lines)


def build_system_prompt(
    contract_type: ContractType,
    attempt_number: int,
    failure_history: Sequence[FailurePattern],
) -> str:
    level = enhancement_level_for(attempt_number)
    level_rules = "\n".join(f"- {rule}" for rule in _LEVEL_RULES[level])

    system_prompt = f"""You are an expert Flow blockchain developer specializing in Cadence 1.0 smart contracts.

Your PRIMARY objective is to output a single Cadence 1.0 contract that uses
no legacy (Cadence 0.x) syntax and contains no placeholders.
{CADENCE_1_RULES}
ENHANCEMENT LEVEL: {level.value.upper()} (Attempt {attempt_number})
{level_rules}
"""

    system_prompt += _CATEGORY_RULES.get(contract_type.category, _CATEGORY_RULES[ContractCategory.GENERIC])

    if attempt_number >= 2 and failure_history:
        system_prompt += "\n" + _failure_prevention_block(failure_history) + "\n"

    return system_prompt


def build_user_prompt(
    user_prompt: str,
    contract_type: ContractType,
    attempt_number: int,
    failure_history: Sequence[FailurePattern],
    strict_mode: bool = False,
    context: str = "",
    user_experience: UserExperience = UserExperience.INTERMEDIATE,
    max_attempts: Optional[int] = None,
) -> str:
    prompt = f"""Create a complete Cadence 1.0 smart contract for: {user_prompt}

Return only the Cadence source. Do not include Markdown code fences or explanations.

{_ATTEMPT_INSTRUCTIONS.get(attempt_number, _FINAL_ATTEMPT_INSTRUCTIONS)}
"""

    if failure_history:
        prompt += "\nFAILURE-SPECIFIC CORRECTIONS:\n"
        prompt += "\n".join(f"- CRITICAL: {_FAILURE_CORRECTIONS[t]}" for t in distinct_types(list(failure_history)))
        prompt += "\n"

    prompt += f"\nCONTRACT PROFILE:\n{contract_type.describe()}"
    prompt += f"- {_COMPLEXITY_NOTES[contract_type.complexity]}\n"
    prompt += f"- {_EXPERIENCE_NOTES[user_experience]}\n"

    if context:
        prompt += f"\nADDITIONAL CONTEXT:\n{context}\n"

    if attempt_number > 1:
        total = f"/{max_attempts}" if max_attempts else ""
        prompt += f"\nRETRY ATTEMPT {attempt_number}{total}: previous attempts failed validation.\n"

    if strict_mode:
        prompt += "\nSTRICT MODE ACTIVATED: code is rejected for ANY quality issue.\n"

    return prompt


def enhance(
    user_prompt: str,
    contract_type: ContractType,
    attempt_number: int,
    failure_history: Sequence[FailurePattern] = (),
    strict_mode: bool = False,
    base_temperature: Optional[float] = None,
    context: str = "",
    user_experience: UserExperience = UserExperience.INTERMEDIATE,
    config: Optional[EnhancerConfig] = None,
    max_attempts: Optional[int] = None,
    debug: bool = False,
) -> EnhancedPrompt:
    """Build the prompts and sampling temperature for one attempt."""
    if attempt_number < 1:
        raise ValueError("attempt_number must be >= 1")

    config = config or EnhancerConfig()
    if base_temperature is None:
        base_temperature = config.base_temperature

    if debug:
        print(f"[PromptEnhancer] attempt={attempt_number} history={len(failure_history)} strict={strict_mode}")

    return EnhancedPrompt(
        system_prompt=build_system_prompt(contract_type, attempt_number, failure_history),
        user_prompt=build_user_prompt(
            user_prompt,
            contract_type,
            attempt_number,
            failure_history,
            strict_mode=strict_mode,
            context=context,
            user_experience=user_experience,
            max_attempts=max_attempts,
        ),
        temperature=calculate_temperature(attempt_number, base_temperature, strict_mode, config),
        enhancement_level=enhancement_level_for(attempt_number),
    )
