import logging
from datetime import datetime, timezone
from typing import Optional

from src.core.authorization import AuthorizationGate
from src.core.common.errors import (
    ExposureLimitExceededError,
    InvalidAllocationError,
    InvalidAmountError,
    InvalidRiskParametersError,
    InvalidStateTransitionError,
    VehicleNotFoundError,
)
from src.core.ledger.repository import TreasuryRepository
from src.core.models import (
    DEFAULT_VAR_CONFIDENCE_BP,
    MAX_CONFIGURABLE_EXPOSURE_BP,
    AllocationAssessment,
    AllocationCommit,
    InvestmentProposal,
    InvestmentVehicle,
    PortfolioLedgerState,
    PortfolioSummary,
)
from src.core.risk import (
    BASIS_POINTS,
    assess_allocation,
    exceeds_single_exposure,
    portfolio_var_bp,
)

logger = logging.getLogger(__name__)


class PortfolioLedgerService:
    """
    Owns the portfolio aggregate. Every allocation mutation, whether it comes
    from a proposal approval or a manual rebalance, goes through
    apply_allocation_change so vehicle, ledger and proposal are committed
    together and the total only ever moves by the allocation delta.
    """

    def __init__(
        self,
        *,
        repository: TreasuryRepository,
        gate: AuthorizationGate,
        var_confidence_bp: int = DEFAULT_VAR_CONFIDENCE_BP,
    ) -> None:
        if var_confidence_bp < 1 or var_confidence_bp > BASIS_POINTS:
            raise InvalidRiskParametersError(
                f"INVALID_RISK_PARAMETERS: var_confidence_bp must be 1..{BASIS_POINTS}"
            )
        self._repository = repository
        self._gate = gate
        self._var_confidence_bp = var_confidence_bp

    def initialize(self, *, actor_id: str, max_single_exposure_bp: int) -> PortfolioSummary:
        self._gate.require_administrator(actor_id)
        _validate_exposure_limit(max_single_exposure_bp)
        with self._repository.transaction():
            ledger = self._repository.get_ledger()
            if ledger.initialized:
                raise InvalidStateTransitionError("LEDGER_ALREADY_INITIALIZED")
            ledger.initialized = True
            ledger.max_single_exposure_bp = max_single_exposure_bp
            ledger.var_confidence_bp = self._var_confidence_bp
            ledger.current_var_bp = portfolio_var_bp(
                ledger.risk_weighted_exposure,
                ledger.total_portfolio_value,
                ledger.var_confidence_bp,
            )
            ledger.updated_at = _utc_now()
            self._repository.save_ledger(ledger)
        logger.info(
            "Portfolio ledger initialized. actor=%s max_single_exposure_bp=%s",
            actor_id,
            max_single_exposure_bp,
        )
        return _to_summary(ledger)

    def update_max_single_exposure(
        self, *, actor_id: str, max_single_exposure_bp: int
    ) -> PortfolioSummary:
        self._gate.require_administrator(actor_id)
        _validate_exposure_limit(max_single_exposure_bp)
        with self._repository.transaction():
            ledger = self._require_initialized()
            ledger.max_single_exposure_bp = max_single_exposure_bp
            ledger.updated_at = _utc_now()
            self._repository.save_ledger(ledger)
        logger.info(
            "Single exposure limit updated. actor=%s max_single_exposure_bp=%s",
            actor_id,
            max_single_exposure_bp,
        )
        return _to_summary(ledger)

    def rebalance(
        self, *, actor_id: str, vehicle_id: int, new_allocation: int
    ) -> InvestmentVehicle:
        self._gate.require_manager(actor_id)
        if new_allocation < 0:
            raise InvalidAmountError("INVALID_AMOUNT: allocation must be non-negative")
        with self._repository.transaction():
            ledger = self._require_initialized()
            vehicle = self._repository.get_vehicle(vehicle_id=vehicle_id)
            if vehicle is None:
                raise VehicleNotFoundError("VEHICLE_NOT_FOUND")
            if vehicle.status != "ACTIVE" and new_allocation > vehicle.current_allocation:
                raise InvalidAllocationError("VEHICLE_NOT_ACTIVE: only decreases allowed")
            commit = self.apply_allocation_change(
                vehicle=vehicle,
                ledger=ledger,
                new_allocation=new_allocation,
            )
        logger.info(
            "Vehicle rebalanced. actor=%s vehicle_id=%s allocation=%s total=%s",
            actor_id,
            vehicle_id,
            commit.vehicle.current_allocation,
            commit.ledger.total_portfolio_value,
        )
        return commit.vehicle

    def summary(self) -> PortfolioSummary:
        return _to_summary(self._repository.get_ledger())

    def ledger_state(self) -> PortfolioLedgerState:
        return self._repository.get_ledger()

    def assess(self, *, vehicle_id: int, amount: int) -> AllocationAssessment:
        with self._repository.transaction():
            vehicle = self._repository.get_vehicle(vehicle_id=vehicle_id)
            if vehicle is None:
                raise VehicleNotFoundError("VEHICLE_NOT_FOUND")
            ledger = self._repository.get_ledger()
        return assess_allocation(
            vehicle=vehicle,
            amount=amount,
            portfolio_total=ledger.total_portfolio_value,
            max_exposure_bp=ledger.max_single_exposure_bp,
            confidence_bp=ledger.var_confidence_bp,
            ledger_initialized=ledger.initialized,
        )

    def apply_allocation_change(
        self,
        *,
        vehicle: InvestmentVehicle,
        ledger: PortfolioLedgerState,
        new_allocation: int,
        proposal: Optional[InvestmentProposal] = None,
    ) -> AllocationCommit:
        """
        Validate and commit a new allocation for one vehicle.

        Callers must hold repository.transaction() across the reads that produced
        `vehicle` and `ledger` and this call. Nothing is written unless every
        check passes.
        """
        if not ledger.initialized:
            raise InvalidStateTransitionError("LEDGER_NOT_INITIALIZED")
        if new_allocation < 0:
            raise InvalidAmountError("INVALID_AMOUNT: allocation must be non-negative")
        if new_allocation > vehicle.allocation_ceiling:
            raise ExposureLimitExceededError("EXPOSURE_LIMIT_EXCEEDED: allocation ceiling")

        delta = new_allocation - vehicle.current_allocation
        if delta > 0 and exceeds_single_exposure(
            delta, ledger.total_portfolio_value, ledger.max_single_exposure_bp
        ):
            raise ExposureLimitExceededError("EXPOSURE_LIMIT_EXCEEDED: single exposure ratio")

        now = _utc_now()
        total = ledger.total_portfolio_value + delta
        risk_weighted_exposure = ledger.risk_weighted_exposure + delta * vehicle.risk_score
        updated_ledger = ledger.model_copy(
            update={
                "total_portfolio_value": total,
                "risk_weighted_exposure": risk_weighted_exposure,
                "current_var_bp": portfolio_var_bp(
                    risk_weighted_exposure, total, ledger.var_confidence_bp
                ),
                "updated_at": now,
            }
        )
        updated_vehicle = vehicle.model_copy(
            update={"current_allocation": new_allocation, "updated_at": now}
        )
        return self._repository.commit_allocation(
            AllocationCommit(vehicle=updated_vehicle, ledger=updated_ledger, proposal=proposal)
        )

    def _require_initialized(self) -> PortfolioLedgerState:
        ledger = self._repository.get_ledger()
        if not ledger.initialized:
            raise InvalidStateTransitionError("LEDGER_NOT_INITIALIZED")
        return ledger


def _validate_exposure_limit(max_single_exposure_bp: int) -> None:
    if max_single_exposure_bp < 0 or max_single_exposure_bp > MAX_CONFIGURABLE_EXPOSURE_BP:
        raise InvalidRiskParametersError(
            "INVALID_RISK_PARAMETERS: max_single_exposure_bp must be "
            f"0..{MAX_CONFIGURABLE_EXPOSURE_BP}"
        )


def _to_summary(ledger: PortfolioLedgerState) -> PortfolioSummary:
    return PortfolioSummary(
        total_portfolio_value=ledger.total_portfolio_value,
        current_var_bp=ledger.current_var_bp,
        max_single_exposure_bp=ledger.max_single_exposure_bp,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
