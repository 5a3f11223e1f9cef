from contextlib import AbstractContextManager
from typing import Optional, Protocol

from src.core.models import (
    AllocationCommit,
    InvestmentProposal,
    InvestmentVehicle,
    PortfolioLedgerState,
    ProposalStatus,
    VehicleStatus,
)


class TreasuryRepository(Protocol):
    def transaction(self) -> AbstractContextManager[None]: ...

    def next_vehicle_id(self) -> int: ...

    def next_proposal_id(self) -> int: ...

    def create_vehicle(self, vehicle: InvestmentVehicle) -> None: ...

    def update_vehicle(self, vehicle: InvestmentVehicle) -> None: ...

    def get_vehicle(self, *, vehicle_id: int) -> Optional[InvestmentVehicle]: ...

    def list_vehicles(
        self, *, status: Optional[VehicleStatus], category: Optional[str]
    ) -> list[InvestmentVehicle]: ...

    def create_proposal(self, proposal: InvestmentProposal) -> None: ...

    def update_proposal(self, proposal: InvestmentProposal) -> None: ...

    def get_proposal(self, *, proposal_id: int) -> Optional[InvestmentProposal]: ...

    def list_proposals(
        self,
        *,
        status: Optional[ProposalStatus],
        vehicle_id: Optional[int],
        proposer_id: Optional[str],
    ) -> list[InvestmentProposal]: ...

    def get_ledger(self) -> PortfolioLedgerState: ...

    def save_ledger(self, ledger: PortfolioLedgerState) -> None: ...

    def commit_allocation(self, commit: AllocationCommit) -> AllocationCommit: ...
