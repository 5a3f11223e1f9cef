from contextlib import contextmanager
from copy import deepcopy
from threading import RLock
from typing import Iterator, Optional

from src.core.ledger.repository import TreasuryRepository
from src.core.models import (
    AllocationCommit,
    InvestmentProposal,
    InvestmentVehicle,
    PortfolioLedgerState,
    ProposalStatus,
    VehicleStatus,
)


class InMemoryTreasuryRepository(TreasuryRepository):
    def __init__(self, *, ledger: Optional[PortfolioLedgerState] = None) -> None:
        self._lock = RLock()
        self._vehicles: dict[int, InvestmentVehicle] = {}
        self._proposals: dict[int, InvestmentProposal] = {}
        self._ledger = deepcopy(ledger) if ledger is not None else PortfolioLedgerState()
        self._vehicle_seq = 0
        self._proposal_seq = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def next_vehicle_id(self) -> int:
        with self._lock:
            self._vehicle_seq += 1
            return self._vehicle_seq

    def next_proposal_id(self) -> int:
        with self._lock:
            self._proposal_seq += 1
            return self._proposal_seq

    def create_vehicle(self, vehicle: InvestmentVehicle) -> None:
        with self._lock:
            self._vehicles[vehicle.vehicle_id] = deepcopy(vehicle)

    def update_vehicle(self, vehicle: InvestmentVehicle) -> None:
        with self._lock:
            self._vehicles[vehicle.vehicle_id] = deepcopy(vehicle)

    def get_vehicle(self, *, vehicle_id: int) -> Optional[InvestmentVehicle]:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            return deepcopy(vehicle) if vehicle is not None else None

    def list_vehicles(
        self, *, status: Optional[VehicleStatus], category: Optional[str]
    ) -> list[InvestmentVehicle]:
        with self._lock:
            rows = list(self._vehicles.values())

        rows = sorted(rows, key=lambda x: x.vehicle_id)
        if status is not None:
            rows = [row for row in rows if row.status == status]
        if category is not None:
            rows = [row for row in rows if row.category == category]
        return [deepcopy(row) for row in rows]

    def create_proposal(self, proposal: InvestmentProposal) -> None:
        with self._lock:
            self._proposals[proposal.proposal_id] = deepcopy(proposal)

    def update_proposal(self, proposal: InvestmentProposal) -> None:
        with self._lock:
            self._proposals[proposal.proposal_id] = deepcopy(proposal)

    def get_proposal(self, *, proposal_id: int) -> Optional[InvestmentProposal]:
        with self._lock:
            proposal = self._proposals.get(proposal_id)
            return deepcopy(proposal) if proposal is not None else None

    def list_proposals(
        self,
        *,
        status: Optional[ProposalStatus],
        vehicle_id: Optional[int],
        proposer_id: Optional[str],
    ) -> list[InvestmentProposal]:
        with self._lock:
            rows = list(self._proposals.values())

        rows = sorted(rows, key=lambda x: x.proposal_id)
        if status is not None:
            rows = [row for row in rows if row.status == status]
        if vehicle_id is not None:
            rows = [row for row in rows if row.vehicle_id == vehicle_id]
        if proposer_id is not None:
            rows = [row for row in rows if row.proposer_id == proposer_id]
        return [deepcopy(row) for row in rows]

    def get_ledger(self) -> PortfolioLedgerState:
        with self._lock:
            return deepcopy(self._ledger)

    def save_ledger(self, ledger: PortfolioLedgerState) -> None:
        with self._lock:
            self._ledger = deepcopy(ledger)

    def commit_allocation(self, commit: AllocationCommit) -> AllocationCommit:
        with self._lock:
            self._vehicles[commit.vehicle.vehicle_id] = deepcopy(commit.vehicle)
            self._ledger = deepcopy(commit.ledger)
            if commit.proposal is not None:
                self._proposals[commit.proposal.proposal_id] = deepcopy(commit.proposal)

        return deepcopy(commit)
