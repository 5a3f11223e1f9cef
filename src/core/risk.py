"""
FILE: src/core/risk.py
Pure risk arithmetic for allocation decisions.

All values are integers in currency units or basis points. Every division
truncates; operands are non-negative so floor division equals truncation.
A zero portfolio total is treated as having no prior exposure: ratio checks
pass and contributions are 0.
"""

from src.core.models import AllocationAssessment, InvestmentVehicle

BASIS_POINTS = 10000
MIN_DIVERSIFICATION_BP = 1000


def risk_contribution(vehicle_risk: int, amount: int, portfolio_total: int) -> int:
    if portfolio_total == 0:
        return 0
    return amount * vehicle_risk // portfolio_total


def value_at_risk(amount: int, risk_score: int, confidence_bp: int) -> int:
    adjusted_risk = risk_score * confidence_bp // BASIS_POINTS
    return amount * adjusted_risk // 100


def exposure_bp(amount: int, portfolio_total: int) -> int:
    if portfolio_total == 0:
        return 0
    return amount * BASIS_POINTS // portfolio_total


def diversification_ok(new_allocation: int, portfolio_total: int) -> bool:
    if portfolio_total == 0:
        return True
    return exposure_bp(new_allocation, portfolio_total) >= MIN_DIVERSIFICATION_BP


def exceeds_single_exposure(amount: int, portfolio_total: int, max_exposure_bp: int) -> bool:
    if portfolio_total == 0:
        return False
    return exposure_bp(amount, portfolio_total) > max_exposure_bp


def portfolio_var_bp(risk_weighted_exposure: int, portfolio_total: int, confidence_bp: int) -> int:
    """
    VaR of the whole portfolio in basis points of its total.
    risk_weighted_exposure is sum(allocation * risk_score), so dividing by the
    total yields the allocation-weighted mean risk score (a percentage).
    """
    if portfolio_total == 0:
        return 0
    adjusted = risk_weighted_exposure * confidence_bp // BASIS_POINTS
    return adjusted * 100 // portfolio_total


def assess_allocation(
    *,
    vehicle: InvestmentVehicle,
    amount: int,
    portfolio_total: int,
    max_exposure_bp: int,
    confidence_bp: int,
    ledger_initialized: bool,
) -> AllocationAssessment:
    increment = max(amount, 0)
    new_allocation = vehicle.current_allocation + amount
    return AllocationAssessment(
        vehicle_id=vehicle.vehicle_id,
        amount=amount,
        new_allocation=new_allocation,
        portfolio_total=portfolio_total,
        exposure_bp=exposure_bp(increment, portfolio_total),
        within_ceiling=new_allocation <= vehicle.allocation_ceiling,
        within_exposure_limit=not exceeds_single_exposure(
            increment, portfolio_total, max_exposure_bp
        ),
        diversification_compliant=diversification_ok(max(new_allocation, 0), portfolio_total),
        risk_contribution=risk_contribution(vehicle.risk_score, increment, portfolio_total),
        value_at_risk=value_at_risk(increment, vehicle.risk_score, confidence_bp),
        vehicle_active=vehicle.status == "ACTIVE",
        ledger_initialized=ledger_initialized,
    )
