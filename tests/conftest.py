"""
FILE: tests/conftest.py
Shared fixtures for ledger tests.
"""

from pathlib import Path

import pytest

from src.core.authorization import AuthorizationGate
from src.infrastructure.treasury import InMemoryTreasuryRepository
from src.runtime.config import TreasuryLedger, build_treasury_ledger
from tests.factories import ADMIN, MANAGER


def _has_marker(item: pytest.Item, name: str) -> bool:
    return item.get_closest_marker(name) is not None


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if _has_marker(item, "unit") or _has_marker(item, "integration"):
            continue

        path = Path(str(item.fspath)).as_posix().lower()
        if "/tests/integration/" in path:
            item.add_marker(pytest.mark.integration)
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate(administrators={ADMIN}, managers={MANAGER})


@pytest.fixture
def repository() -> InMemoryTreasuryRepository:
    return InMemoryTreasuryRepository()


@pytest.fixture
def treasury(gate, repository, monkeypatch: pytest.MonkeyPatch) -> TreasuryLedger:
    monkeypatch.delenv("TREASURY_VAR_CONFIDENCE_BP", raising=False)
    monkeypatch.delenv("TREASURY_STORE_BACKEND", raising=False)
    return build_treasury_ledger(gate=gate, repository=repository)


@pytest.fixture
def initialized_treasury(treasury: TreasuryLedger) -> TreasuryLedger:
    treasury.ledger.initialize(actor_id=ADMIN, max_single_exposure_bp=5000)
    return treasury
