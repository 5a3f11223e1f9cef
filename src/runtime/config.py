import os
from dataclasses import dataclass
from typing import Optional

from src.core.authorization import AuthorizationGate
from src.core.ledger import PortfolioLedgerService, TreasuryRepository
from src.core.models import DEFAULT_VAR_CONFIDENCE_BP
from src.core.proposals import ProposalWorkflowService
from src.core.risk import BASIS_POINTS
from src.core.vehicles import VehicleRegistryService
from src.infrastructure.treasury import InMemoryTreasuryRepository
from src.runtime.observability import setup_logging

SUPPORTED_STORE_BACKENDS = frozenset({"IN_MEMORY"})


def env_int(name: str, default: int, *, minimum: int = 1, maximum: Optional[int] = None) -> int:
    """Parse an integer setting; unparseable or too-small values fall back, large ones clamp."""
    try:
        parsed = int(os.environ[name])
    except (KeyError, ValueError):
        return default
    if parsed < minimum:
        return default
    if maximum is not None:
        return min(parsed, maximum)
    return parsed


def env_csv_set(name: str, default: set[str]) -> set[str]:
    raw = os.getenv(name, "")
    identities = {item.strip() for item in raw.split(",")} - {""}
    return identities or set(default)


def treasury_store_backend_name() -> str:
    backend = os.getenv("TREASURY_STORE_BACKEND", "IN_MEMORY").strip().upper()
    if backend not in SUPPORTED_STORE_BACKENDS:
        raise RuntimeError("TREASURY_STORE_BACKEND_UNSUPPORTED")
    return backend


def var_confidence_bp() -> int:
    return env_int(
        "TREASURY_VAR_CONFIDENCE_BP", DEFAULT_VAR_CONFIDENCE_BP, maximum=BASIS_POINTS
    )


def build_authorization_gate() -> AuthorizationGate:
    return AuthorizationGate(
        administrators=env_csv_set("TREASURY_ADMINISTRATORS", {"admin"}),
        managers=env_csv_set("TREASURY_MANAGERS", set()),
    )


def build_repository() -> TreasuryRepository:
    treasury_store_backend_name()
    return InMemoryTreasuryRepository()


@dataclass
class TreasuryLedger:
    gate: AuthorizationGate
    repository: TreasuryRepository
    vehicles: VehicleRegistryService
    ledger: PortfolioLedgerService
    proposals: ProposalWorkflowService


def build_treasury_ledger(
    *,
    gate: Optional[AuthorizationGate] = None,
    repository: Optional[TreasuryRepository] = None,
    configure_logging: bool = False,
) -> TreasuryLedger:
    """
    Wire gate, repository and services from the environment.

    Hosts embedding the ledger as a process entry point pass configure_logging=True
    to install the JSON log handler; library callers keep their own logging setup.
    """
    if configure_logging:
        setup_logging()
    resolved_gate = gate or build_authorization_gate()
    resolved_repository = repository or build_repository()
    ledger = PortfolioLedgerService(
        repository=resolved_repository,
        gate=resolved_gate,
        var_confidence_bp=var_confidence_bp(),
    )
    return TreasuryLedger(
        gate=resolved_gate,
        repository=resolved_repository,
        vehicles=VehicleRegistryService(repository=resolved_repository, gate=resolved_gate),
        ledger=ledger,
        proposals=ProposalWorkflowService(
            repository=resolved_repository, gate=resolved_gate, ledger=ledger
        ),
    )
