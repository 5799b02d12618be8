"""Countertop pricing.

``compute`` is the single source of truth for an estimate's cost. It is a
plain function of its eight parameters so the page preview, the saved
snapshot and the CLI all agree on the same number.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

DEFAULT_LABOR_COST = 50.0
DEFAULT_TAX_RATE = 10.0


def compute(
    length: float,
    width: float,
    thickness: float,
    material_cost: float,
    edge_finish_cost: float,
    labor_cost: float,
    tax_rate: float,
    discount: float,
) -> Optional[float]:
    """Return the total price, or ``None`` when the inputs are out of range.

    Dimensions must be strictly positive and every cost, the tax rate and the
    discount must be non-negative. The total is not clamped, so a discount
    larger than ``subtotal + tax`` yields a negative price.
    """
    if length <= 0 or width <= 0 or thickness <= 0:
        return None
    if (
        material_cost < 0
        or edge_finish_cost < 0
        or labor_cost < 0
        or tax_rate < 0
        or discount < 0
    ):
        return None

    volume = length * width * thickness
    subtotal = volume * material_cost + labor_cost + edge_finish_cost
    tax = subtotal * tax_rate / 100
    return subtotal + tax - discount


@dataclass(frozen=True)
class PricingInput:
    length: float = 0.0
    width: float = 0.0
    thickness: float = 0.0
    material_cost: float = 0.0
    edge_finish_cost: float = 0.0
    labor_cost: float = DEFAULT_LABOR_COST
    tax_rate: float = DEFAULT_TAX_RATE
    discount: float = 0.0

    def as_args(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))


def compute_for(params: PricingInput) -> Optional[float]:
    return compute(*params.as_args())


def format_price(value: Optional[float]) -> str:
    # Two decimals, no locale handling; negatives render as $-12.50
    if value is None:
        return 'Invalid'
    return f'${value:.2f}'
