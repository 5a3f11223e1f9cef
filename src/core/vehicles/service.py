import logging
from datetime import datetime, timezone
from typing import Optional

from src.core.authorization import AuthorizationGate
from src.core.common.errors import (
    InvalidAmountError,
    InvalidRiskParametersError,
    InvalidStateTransitionError,
    VehicleNotFoundError,
)
from src.core.ledger.repository import TreasuryRepository
from src.core.models import InvestmentVehicle, VehicleRegistrationRequest, VehicleStatus

logger = logging.getLogger(__name__)


class VehicleRegistryService:
    def __init__(self, *, repository: TreasuryRepository, gate: AuthorizationGate) -> None:
        self._repository = repository
        self._gate = gate

    def register_vehicle(
        self, *, actor_id: str, payload: VehicleRegistrationRequest
    ) -> InvestmentVehicle:
        self._gate.require_manager(actor_id)
        if payload.risk_score < 0 or payload.risk_score > 100:
            raise InvalidRiskParametersError("INVALID_RISK_PARAMETERS: risk_score must be 0..100")
        if payload.allocation_ceiling <= 0:
            raise InvalidRiskParametersError(
                "INVALID_RISK_PARAMETERS: allocation_ceiling must be positive"
            )
        if payload.liquidity_rating < 0 or payload.liquidity_rating > 100:
            raise InvalidAmountError("INVALID_AMOUNT: liquidity_rating must be 0..100")

        with self._repository.transaction():
            now = _utc_now()
            vehicle = InvestmentVehicle(
                vehicle_id=self._repository.next_vehicle_id(),
                name=payload.name,
                category=payload.category,
                risk_score=payload.risk_score,
                expected_return_bp=payload.expected_return_bp,
                liquidity_rating=payload.liquidity_rating,
                allocation_ceiling=payload.allocation_ceiling,
                created_at=now,
                updated_at=now,
            )
            self._repository.create_vehicle(vehicle)
        logger.info(
            "Vehicle registered. actor=%s vehicle_id=%s category=%s ceiling=%s",
            actor_id,
            vehicle.vehicle_id,
            vehicle.category,
            vehicle.allocation_ceiling,
        )
        return vehicle

    def update_performance(
        self,
        *,
        actor_id: str,
        vehicle_id: int,
        rating: int,
        actual_return_bp: int,
    ) -> InvestmentVehicle:
        self._gate.require_manager(actor_id)
        with self._repository.transaction():
            vehicle = self._get(vehicle_id)
            if rating < 0 or rating > 100:
                raise InvalidAmountError("INVALID_AMOUNT: performance rating must be 0..100")
            vehicle.performance_rating = rating
            vehicle.last_actual_return_bp = actual_return_bp
            vehicle.updated_at = _utc_now()
            self._repository.update_vehicle(vehicle)
        logger.info(
            "Vehicle performance updated. vehicle_id=%s rating=%s actual_return_bp=%s",
            vehicle_id,
            rating,
            actual_return_bp,
        )
        return vehicle

    def suspend_vehicle(self, *, actor_id: str, vehicle_id: int) -> InvestmentVehicle:
        return self._set_status(actor_id=actor_id, vehicle_id=vehicle_id, status="SUSPENDED")

    def activate_vehicle(self, *, actor_id: str, vehicle_id: int) -> InvestmentVehicle:
        return self._set_status(actor_id=actor_id, vehicle_id=vehicle_id, status="ACTIVE")

    def get_vehicle(self, *, vehicle_id: int) -> InvestmentVehicle:
        return self._get(vehicle_id)

    def list_vehicles(
        self,
        *,
        status: Optional[VehicleStatus] = None,
        category: Optional[str] = None,
    ) -> list[InvestmentVehicle]:
        return self._repository.list_vehicles(status=status, category=category)

    def _set_status(
        self, *, actor_id: str, vehicle_id: int, status: VehicleStatus
    ) -> InvestmentVehicle:
        self._gate.require_manager(actor_id)
        with self._repository.transaction():
            vehicle = self._get(vehicle_id)
            if vehicle.status == status:
                raise InvalidStateTransitionError(f"VEHICLE_ALREADY_{status}")
            vehicle.status = status
            vehicle.updated_at = _utc_now()
            self._repository.update_vehicle(vehicle)
        logger.info("Vehicle status changed. vehicle_id=%s status=%s", vehicle_id, status)
        return vehicle

    def _get(self, vehicle_id: int) -> InvestmentVehicle:
        vehicle = self._repository.get_vehicle(vehicle_id=vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError("VEHICLE_NOT_FOUND")
        return vehicle


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
