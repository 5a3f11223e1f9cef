import pytest

from src.core.common.errors import (
    InvalidAmountError,
    InvalidRiskParametersError,
    InvalidStateTransitionError,
    UnauthorizedError,
    VehicleNotFoundError,
)
from tests.factories import MANAGER, OUTSIDER, registration


def test_register_assigns_sequential_ids_with_empty_allocation(treasury):
    first = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())
    second = treasury.vehicles.register_vehicle(
        actor_id=MANAGER, payload=registration(name="Money Market", category="MMF")
    )

    assert (first.vehicle_id, second.vehicle_id) == (1, 2)
    assert first.current_allocation == 0
    assert first.status == "ACTIVE"
    assert first.performance_rating == 0
    assert first.last_actual_return_bp is None


def test_register_rejects_invalid_risk_parameters_without_consuming_ids(treasury):
    with pytest.raises(InvalidRiskParametersError):
        treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration(risk_score=101))
    with pytest.raises(InvalidRiskParametersError):
        treasury.vehicles.register_vehicle(
            actor_id=MANAGER, payload=registration(allocation_ceiling=0)
        )
    with pytest.raises(InvalidAmountError):
        treasury.vehicles.register_vehicle(
            actor_id=MANAGER, payload=registration(liquidity_rating=150)
        )

    created = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())
    assert created.vehicle_id == 1
    assert treasury.vehicles.list_vehicles() == [created]


def test_register_requires_manager(treasury):
    with pytest.raises(UnauthorizedError):
        treasury.vehicles.register_vehicle(actor_id=OUTSIDER, payload=registration())
    assert treasury.vehicles.list_vehicles() == []


def test_update_performance_records_rating_and_actual_return(treasury):
    created = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())

    updated = treasury.vehicles.update_performance(
        actor_id=MANAGER, vehicle_id=created.vehicle_id, rating=72, actual_return_bp=-35
    )

    assert updated.performance_rating == 72
    assert updated.last_actual_return_bp == -35
    assert treasury.vehicles.get_vehicle(vehicle_id=created.vehicle_id) == updated


def test_update_performance_failures(treasury):
    created = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())

    with pytest.raises(VehicleNotFoundError):
        treasury.vehicles.update_performance(
            actor_id=MANAGER, vehicle_id=99, rating=50, actual_return_bp=0
        )
    with pytest.raises(InvalidAmountError):
        treasury.vehicles.update_performance(
            actor_id=MANAGER, vehicle_id=created.vehicle_id, rating=101, actual_return_bp=0
        )
    with pytest.raises(UnauthorizedError):
        treasury.vehicles.update_performance(
            actor_id=OUTSIDER, vehicle_id=created.vehicle_id, rating=50, actual_return_bp=0
        )

    assert treasury.vehicles.get_vehicle(vehicle_id=created.vehicle_id) == created


def test_get_vehicle_unknown_id_raises_not_found(treasury):
    try:
        treasury.vehicles.get_vehicle(vehicle_id=7)
    except VehicleNotFoundError as exc:
        assert str(exc) == "VEHICLE_NOT_FOUND"
    else:
        raise AssertionError("Expected VEHICLE_NOT_FOUND")


def test_suspend_and_activate_are_status_transitions(treasury):
    created = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())

    suspended = treasury.vehicles.suspend_vehicle(actor_id=MANAGER, vehicle_id=created.vehicle_id)
    assert suspended.status == "SUSPENDED"
    with pytest.raises(InvalidStateTransitionError):
        treasury.vehicles.suspend_vehicle(actor_id=MANAGER, vehicle_id=created.vehicle_id)

    assert treasury.vehicles.list_vehicles(status="ACTIVE") == []
    activated = treasury.vehicles.activate_vehicle(actor_id=MANAGER, vehicle_id=created.vehicle_id)
    assert activated.status == "ACTIVE"


def test_list_vehicles_filters_by_category(treasury):
    treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration(category="MMF"))
    bond = treasury.vehicles.register_vehicle(actor_id=MANAGER, payload=registration())

    rows = treasury.vehicles.list_vehicles(category="GOVERNMENT_BOND")

    assert [row.vehicle_id for row in rows] == [bond.vehicle_id]
