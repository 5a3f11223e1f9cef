from datetime import datetime, timezone

from src.core.models import (
    InvestmentProposal,
    InvestmentVehicle,
    ProposalSubmitRequest,
    VehicleRegistrationRequest,
)

ADMIN = "admin_1"
MANAGER = "manager_1"
PROPOSER = "analyst_1"
OUTSIDER = "intruder_1"


def registration(
    *,
    name: str = "T-Bill 3M",
    category: str = "GOVERNMENT_BOND",
    risk_score: int = 20,
    expected_return_bp: int = 425,
    liquidity_rating: int = 90,
    allocation_ceiling: int = 1000,
) -> VehicleRegistrationRequest:
    return VehicleRegistrationRequest(
        name=name,
        category=category,
        risk_score=risk_score,
        expected_return_bp=expected_return_bp,
        liquidity_rating=liquidity_rating,
        allocation_ceiling=allocation_ceiling,
    )


def submission(
    vehicle_id: int,
    amount: int,
    *,
    rationale: str = "Deploy idle operating cash",
    expected_roi_bp: int = 400,
) -> ProposalSubmitRequest:
    return ProposalSubmitRequest(
        vehicle_id=vehicle_id,
        amount=amount,
        rationale=rationale,
        expected_roi_bp=expected_roi_bp,
    )


def vehicle(
    vehicle_id: int = 1,
    *,
    risk_score: int = 50,
    current_allocation: int = 0,
    allocation_ceiling: int = 1000,
    status: str = "ACTIVE",
    category: str = "GOVERNMENT_BOND",
) -> InvestmentVehicle:
    now = datetime.now(timezone.utc)
    return InvestmentVehicle(
        vehicle_id=vehicle_id,
        name=f"vehicle-{vehicle_id}",
        category=category,
        risk_score=risk_score,
        expected_return_bp=300,
        liquidity_rating=80,
        current_allocation=current_allocation,
        allocation_ceiling=allocation_ceiling,
        status=status,
        created_at=now,
        updated_at=now,
    )


def proposal(
    proposal_id: int = 1,
    *,
    vehicle_id: int = 1,
    proposed_amount: int = 100,
    status: str = "PENDING",
    proposer_id: str = PROPOSER,
) -> InvestmentProposal:
    return InvestmentProposal(
        proposal_id=proposal_id,
        proposer_id=proposer_id,
        vehicle_id=vehicle_id,
        proposed_amount=proposed_amount,
        risk_assessment=50,
        status=status,
        created_at=datetime.now(timezone.utc),
    )
