import os
import random
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from stoneworks.pricing import PricingInput, compute, compute_for, format_price


def test_scenario_countertop():
    # volume 100, subtotal 100*2 + 50 + 20 = 270, tax 27
    assert compute(10, 5, 2, 2, 20, 50, 10, 5) == 292


def test_discount_can_go_negative():
    assert compute(1, 1, 1, 0, 0, 0, 0, 100) == -100


def test_zero_or_negative_dimensions_are_invalid():
    assert compute(0, 5, 2, 2, 20, 50, 10, 5) is None
    assert compute(10, -1, 2, 2, 20, 50, 10, 5) is None
    assert compute(10, 5, 0, 2, 20, 50, 10, 5) is None


def test_negative_costs_are_invalid_not_zero():
    base = [10, 5, 2, 2, 20, 50, 10, 5]
    for idx in range(3, 8):
        args = list(base)
        args[idx] = -0.01
        assert compute(*args) is None, idx


def test_zero_costs_are_valid():
    assert compute(1, 1, 1, 0, 0, 0, 0, 0) == 0


def test_matches_formula_and_is_repeatable():
    rng = random.Random(1234)
    for _ in range(200):
        length, width, thickness = (rng.uniform(0.1, 400) for _ in range(3))
        material, edge, labor, tax, discount = (rng.uniform(0, 500) for _ in range(5))
        subtotal = length * width * thickness * material + labor + edge
        expected = subtotal + subtotal * tax / 100 - discount
        first = compute(length, width, thickness, material, edge, labor, tax, discount)
        second = compute(length, width, thickness, material, edge, labor, tax, discount)
        assert first == expected
        assert first == second


def test_pricing_input_defaults():
    params = PricingInput(length=10, width=5, thickness=2, material_cost=2,
                          edge_finish_cost=20, discount=5)
    assert params.labor_cost == 50
    assert params.tax_rate == 10
    assert compute_for(params) == 292
    # all-zero dimensions from a fresh form never price
    assert compute_for(PricingInput()) is None


def test_format_price():
    assert format_price(292) == '$292.00'
    assert format_price(12.5) == '$12.50'
    assert format_price(-100) == '$-100.00'
    assert format_price(None) == 'Invalid'
