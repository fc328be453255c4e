from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cadence_code_generator.categories import ContractCategory
from cadence_code_generator.fallback_templates import load_fallback


LEGACY_CONTRACT = """
pub contract Legacy {
    pub var total: UInt64

    init() {
        self.total = 0
        self.account.save(<-create Thing(), to: /storage/thing)
    }
}
"""

UNDEFINED_CONTRACT = """
access(all) contract Profile {
    access(all) let name: String

    init() {
        self.name = undefined
    }
}
"""

SIMPLE_VALID_CONTRACT = """
access(all) contract Counter {
    access(self) var count: UInt64

    access(all) event Incremented(count: UInt64)

    access(all) fun increment() {
        self.count = self.count + 1
        emit Incremented(count: self.count)
    }

    init() {
        self.count = 0
    }
}
"""


class FakeGenerator:
    """Returns scripted outputs and records every call."""

    def __init__(self, outputs: Sequence[object]):
        self.outputs = list(outputs)
        self.calls: List[Tuple[str, str, float]] = []

    def generate(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        self.calls.append((system_prompt, user_prompt, temperature))
        output = self.outputs[min(len(self.calls), len(self.outputs)) - 1]
        if isinstance(output, Exception):
            raise output
        return output


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def legacy_contract() -> str:
    return LEGACY_CONTRACT


@pytest.fixture
def undefined_contract() -> str:
    return UNDEFINED_CONTRACT


@pytest.fixture
def simple_valid_contract() -> str:
    return SIMPLE_VALID_CONTRACT


@pytest.fixture
def nft_template() -> str:
    return load_fallback(ContractCategory.NFT)


@pytest.fixture
def fake_generator_factory():
    return FakeGenerator


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
