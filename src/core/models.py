from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

VehicleStatus = Literal["ACTIVE", "SUSPENDED"]
ProposalStatus = Literal["PENDING", "APPROVED", "REJECTED"]

TERMINAL_PROPOSAL_STATUSES: frozenset[str] = frozenset({"APPROVED", "REJECTED"})
MAX_CONFIGURABLE_EXPOSURE_BP = 5000
DEFAULT_VAR_CONFIDENCE_BP = 9500


# --- Vehicle registry ---


class VehicleRegistrationRequest(BaseModel):
    name: str = Field(description="Display name of the investment vehicle.", examples=["T-Bill 3M"])
    category: str = Field(
        description="Free-form category tag used for grouping and filtering.",
        examples=["GOVERNMENT_BOND"],
    )
    risk_score: int = Field(
        description="Risk score between 0 (riskless) and 100 (maximum risk).",
        examples=[15],
    )
    expected_return_bp: int = Field(
        description="Expected annual return in basis points.",
        examples=[425],
    )
    liquidity_rating: int = Field(
        description="Liquidity rating between 0 (illiquid) and 100 (cash-like).",
        examples=[95],
    )
    allocation_ceiling: int = Field(
        description="Maximum allocation permitted to this vehicle in currency units.",
        examples=[1000000],
    )


class InvestmentVehicle(BaseModel):
    vehicle_id: int = Field(description="Sequential vehicle identifier.", examples=[1])
    name: str = Field(description="Display name of the vehicle.", examples=["T-Bill 3M"])
    category: str = Field(description="Category tag.", examples=["GOVERNMENT_BOND"])
    risk_score: int = Field(ge=0, le=100, description="Risk score (0-100).", examples=[15])
    expected_return_bp: int = Field(
        description="Expected annual return in basis points.", examples=[425]
    )
    liquidity_rating: int = Field(
        ge=0, le=100, description="Liquidity rating (0-100).", examples=[95]
    )
    current_allocation: int = Field(
        default=0,
        ge=0,
        description="Currency units currently allocated to the vehicle.",
        examples=[250000],
    )
    allocation_ceiling: int = Field(
        gt=0, description="Allocation ceiling in currency units.", examples=[1000000]
    )
    performance_rating: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Latest performance rating (0-100).",
        examples=[72],
    )
    last_actual_return_bp: Optional[int] = Field(
        default=None,
        description="Latest realized return in basis points, absent until first update.",
        examples=[410],
    )
    status: VehicleStatus = Field(
        default="ACTIVE", description="Vehicle lifecycle status.", examples=["ACTIVE"]
    )
    created_at: datetime = Field(
        description="UTC registration timestamp.", examples=["2026-02-19T12:00:00+00:00"]
    )
    updated_at: datetime = Field(
        description="UTC timestamp of the latest mutation.",
        examples=["2026-02-19T12:05:00+00:00"],
    )


# --- Proposal workflow ---


class ProposalSubmitRequest(BaseModel):
    vehicle_id: int = Field(description="Target investment vehicle identifier.", examples=[1])
    amount: int = Field(description="Requested allocation in currency units.", examples=[800])
    rationale: str = Field(
        default="",
        description="Free-text investment rationale captured for review.",
        examples=["Park excess operating cash in short-dated bills."],
    )
    expected_roi_bp: int = Field(
        default=0,
        description="Proposer's expected return on investment in basis points.",
        examples=[410],
    )


class InvestmentProposal(BaseModel):
    proposal_id: int = Field(description="Sequential proposal identifier.", examples=[1])
    proposer_id: str = Field(
        description="Identity that submitted the proposal.", examples=["ops_1"]
    )
    vehicle_id: int = Field(description="Referenced vehicle identifier.", examples=[1])
    proposed_amount: int = Field(
        gt=0, description="Requested allocation in currency units.", examples=[800]
    )
    rationale: str = Field(
        default="", description="Free-text investment rationale.", examples=["Cash parking"]
    )
    risk_assessment: int = Field(
        ge=0,
        le=100,
        description="Vehicle risk score captured at submission time.",
        examples=[15],
    )
    expected_roi_bp: int = Field(
        default=0, description="Expected return on investment in bp.", examples=[410]
    )
    status: ProposalStatus = Field(
        default="PENDING", description="Workflow status.", examples=["PENDING"]
    )
    approved_amount: int = Field(
        default=0,
        ge=0,
        description="Approved allocation, 0 until the proposal is approved.",
        examples=[0],
    )
    created_at: datetime = Field(
        description="UTC submission timestamp.", examples=["2026-02-19T12:00:00+00:00"]
    )
    processed_at: Optional[datetime] = Field(
        default=None,
        description="UTC timestamp of approval or rejection.",
        examples=["2026-02-19T12:10:00+00:00"],
    )
    processed_by: Optional[str] = Field(
        default=None,
        description="Manager identity that approved or rejected the proposal.",
        examples=["manager_1"],
    )
    rejection_reason: Optional[str] = Field(
        default=None,
        description="Reason captured on rejection.",
        examples=["Concentration too high for current quarter."],
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_PROPOSAL_STATUSES


# --- Portfolio ledger ---


class PortfolioLedgerState(BaseModel):
    initialized: bool = Field(
        default=False,
        description="Whether the administrator has configured the exposure limit.",
        examples=[True],
    )
    total_portfolio_value: int = Field(
        default=0,
        ge=0,
        description="Sum of current allocations across all vehicles.",
        examples=[800],
    )
    max_single_exposure_bp: int = Field(
        default=0,
        ge=0,
        le=10000,
        description="Maximum single allocation increment relative to the total, in bp.",
        examples=[2500],
    )
    current_var_bp: int = Field(
        default=0,
        ge=0,
        description="Portfolio value-at-risk estimate in basis points of the total.",
        examples=[1425],
    )
    risk_weighted_exposure: int = Field(
        default=0,
        ge=0,
        description="Running sum of current_allocation * risk_score over all vehicles.",
        examples=[12000],
    )
    var_confidence_bp: int = Field(
        default=DEFAULT_VAR_CONFIDENCE_BP,
        gt=0,
        le=10000,
        description="Confidence level used for value-at-risk estimates, in bp.",
        examples=[9500],
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description="UTC timestamp of the latest ledger mutation.",
        examples=["2026-02-19T12:05:00+00:00"],
    )


class PortfolioSummary(BaseModel):
    total_portfolio_value: int = Field(description="Total portfolio value.", examples=[800])
    current_var_bp: int = Field(description="Current VaR estimate in bp.", examples=[1425])
    max_single_exposure_bp: int = Field(
        description="Configured maximum single exposure in bp.", examples=[2500]
    )


class AllocationAssessment(BaseModel):
    vehicle_id: int = Field(description="Assessed vehicle identifier.", examples=[1])
    amount: int = Field(description="Prospective allocation increment.", examples=[200])
    new_allocation: int = Field(
        description="Vehicle allocation after the increment.", examples=[1000]
    )
    portfolio_total: int = Field(
        description="Portfolio total before the increment.", examples=[800]
    )
    exposure_bp: int = Field(
        description="Increment relative to the current total, in bp (0 at zero base).",
        examples=[2500],
    )
    within_ceiling: bool = Field(
        description="Whether the new allocation stays within the ceiling.", examples=[True]
    )
    within_exposure_limit: bool = Field(
        description="Whether the increment respects the single exposure limit.",
        examples=[True],
    )
    diversification_compliant: bool = Field(
        description="Whether the new allocation meets the minimum diversification share.",
        examples=[True],
    )
    risk_contribution: int = Field(
        description="Risk contribution of the increment against the current total.",
        examples=[25],
    )
    value_at_risk: int = Field(
        description="Value-at-risk of the increment in currency units.", examples=[28]
    )
    vehicle_active: bool = Field(
        description="Whether the vehicle currently accepts new allocations.", examples=[True]
    )
    ledger_initialized: bool = Field(
        description="Whether the portfolio ledger has been initialized.", examples=[True]
    )

    @property
    def approvable(self) -> bool:
        return (
            self.amount > 0
            and self.vehicle_active
            and self.ledger_initialized
            and self.within_ceiling
            and self.within_exposure_limit
        )


class AllocationCommit(BaseModel):
    vehicle: InvestmentVehicle = Field(description="Vehicle snapshot after the change.")
    ledger: PortfolioLedgerState = Field(description="Ledger snapshot after the change.")
    proposal: Optional[InvestmentProposal] = Field(
        default=None,
        description="Proposal snapshot after the change, when the change is an approval.",
    )
