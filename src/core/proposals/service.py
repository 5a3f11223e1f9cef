import logging
from datetime import datetime, timezone
from typing import Optional

from src.core.authorization import AuthorizationGate
from src.core.common.errors import (
    InvalidAllocationError,
    InvalidAmountError,
    InvalidStateTransitionError,
    ProposalNotFoundError,
    VehicleNotFoundError,
)
from src.core.ledger.repository import TreasuryRepository
from src.core.ledger.service import PortfolioLedgerService
from src.core.models import InvestmentProposal, ProposalStatus, ProposalSubmitRequest

logger = logging.getLogger(__name__)

TRANSITION_MAP: dict[tuple[ProposalStatus, str], ProposalStatus] = {
    ("PENDING", "APPROVE"): "APPROVED",
    ("PENDING", "REJECT"): "REJECTED",
}


def resolve_transition(*, current_status: ProposalStatus, action: str) -> ProposalStatus:
    next_status = TRANSITION_MAP.get((current_status, action))
    if next_status is None:
        raise InvalidStateTransitionError(
            f"INVALID_STATE_TRANSITION: cannot {action} a {current_status} proposal"
        )
    return next_status


class ProposalWorkflowService:
    def __init__(
        self,
        *,
        repository: TreasuryRepository,
        gate: AuthorizationGate,
        ledger: PortfolioLedgerService,
    ) -> None:
        self._repository = repository
        self._gate = gate
        self._ledger = ledger

    def submit_proposal(
        self, *, proposer_id: str, payload: ProposalSubmitRequest
    ) -> InvestmentProposal:
        if payload.amount <= 0:
            raise InvalidAmountError("INVALID_AMOUNT: proposed amount must be positive")

        with self._repository.transaction():
            vehicle = self._repository.get_vehicle(vehicle_id=payload.vehicle_id)
            if vehicle is None:
                raise VehicleNotFoundError("VEHICLE_NOT_FOUND")
            if vehicle.status != "ACTIVE":
                raise InvalidAllocationError("VEHICLE_NOT_ACTIVE")

            proposal = InvestmentProposal(
                proposal_id=self._repository.next_proposal_id(),
                proposer_id=proposer_id,
                vehicle_id=vehicle.vehicle_id,
                proposed_amount=payload.amount,
                rationale=payload.rationale,
                risk_assessment=vehicle.risk_score,
                expected_roi_bp=payload.expected_roi_bp,
                created_at=_utc_now(),
            )
            self._repository.create_proposal(proposal)
        logger.info(
            "Proposal submitted. proposal_id=%s proposer=%s vehicle_id=%s amount=%s",
            proposal.proposal_id,
            proposer_id,
            proposal.vehicle_id,
            proposal.proposed_amount,
        )
        return proposal

    def approve_proposal(self, *, actor_id: str, proposal_id: int, approved_amount: int) -> int:
        self._gate.require_manager(actor_id)
        with self._repository.transaction():
            proposal = self._get(proposal_id)
            to_status = resolve_transition(current_status=proposal.status, action="APPROVE")
            if approved_amount <= 0 or approved_amount > proposal.proposed_amount:
                raise InvalidAmountError(
                    "INVALID_AMOUNT: approved amount must be within 1..proposed amount"
                )

            vehicle = self._repository.get_vehicle(vehicle_id=proposal.vehicle_id)
            if vehicle is None:
                raise VehicleNotFoundError("VEHICLE_NOT_FOUND")
            if vehicle.status != "ACTIVE":
                raise InvalidAllocationError("VEHICLE_NOT_ACTIVE")

            approved = proposal.model_copy(
                update={
                    "status": to_status,
                    "approved_amount": approved_amount,
                    "processed_at": _utc_now(),
                    "processed_by": actor_id,
                }
            )
            commit = self._ledger.apply_allocation_change(
                vehicle=vehicle,
                ledger=self._repository.get_ledger(),
                new_allocation=vehicle.current_allocation + approved_amount,
                proposal=approved,
            )
        logger.info(
            "Proposal approved. proposal_id=%s actor=%s amount=%s vehicle_allocation=%s total=%s",
            proposal_id,
            actor_id,
            approved_amount,
            commit.vehicle.current_allocation,
            commit.ledger.total_portfolio_value,
        )
        return approved_amount

    def reject_proposal(
        self, *, actor_id: str, proposal_id: int, reason: str = ""
    ) -> InvestmentProposal:
        self._gate.require_manager(actor_id)
        with self._repository.transaction():
            proposal = self._get(proposal_id)
            proposal.status = resolve_transition(current_status=proposal.status, action="REJECT")
            proposal.processed_at = _utc_now()
            proposal.processed_by = actor_id
            proposal.rejection_reason = reason or None
            self._repository.update_proposal(proposal)
        logger.info(
            "Proposal rejected. proposal_id=%s actor=%s reason=%s", proposal_id, actor_id, reason
        )
        return proposal

    def get_proposal(self, *, proposal_id: int) -> InvestmentProposal:
        return self._get(proposal_id)

    def list_proposals(
        self,
        *,
        status: Optional[ProposalStatus] = None,
        vehicle_id: Optional[int] = None,
        proposer_id: Optional[str] = None,
    ) -> list[InvestmentProposal]:
        return self._repository.list_proposals(
            status=status, vehicle_id=vehicle_id, proposer_id=proposer_id
        )

    def _get(self, proposal_id: int) -> InvestmentProposal:
        proposal = self._repository.get_proposal(proposal_id=proposal_id)
        if proposal is None:
            raise ProposalNotFoundError("PROPOSAL_NOT_FOUND")
        return proposal


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
