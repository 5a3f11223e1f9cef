from src.core.models import InvestmentVehicle, VehicleRegistrationRequest, VehicleStatus
from src.core.vehicles.service import VehicleRegistryService

__all__ = [
    "InvestmentVehicle",
    "VehicleRegistrationRequest",
    "VehicleRegistryService",
    "VehicleStatus",
]
