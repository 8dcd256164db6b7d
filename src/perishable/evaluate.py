"""Weighted scoring of simulation outcomes."""

import numpy as np
from scipy.special import expit

from perishable.models import (
    EvalConfig,
    EvaluationResult,
    InventoryPolicy,
    ItemSpec,
    RawRates,
    RunTotals,
    ScoreBreakdown,
    SimulationConfig,
    SimulationResult,
)
from perishable.simulator import simulate_inventory

# Steepness of the logistic curve around the target
SLOPE = 3.0
MIN_WEIGHT_SUM = 1e-9


def _clamp01(x: float) -> float:
    return float(np.clip(x, 0.0, 1.0))


def safe_div(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when either is non-finite or the denominator is 0."""
    if not (np.isfinite(numerator) and np.isfinite(denominator)) or denominator == 0:
        return 0.0
    return numerator / denominator


def normalize_higher_is_better(value: float, target: float) -> float:
    """
    Map a raw value to [0, 1] with value == target -> 0.5.

    y = 1 / (1 + exp(-3 (x - 1))), x = value / target. With a non-positive
    target any positive value scores 1 and anything else 0.
    """
    if target <= 0:
        return 1.0 if value > 0 else 0.0
    x = value / target
    return _clamp01(expit(SLOPE * (x - 1)))


def normalize_lower_is_better(value: float, target: float) -> float:
    """Mirror of ``normalize_higher_is_better``: y = 1 / (1 + exp(3 (x - 1)))."""
    if target <= 0:
        return 1.0 if value <= 0 else 0.0
    x = value / target
    return _clamp01(expit(-SLOPE * (x - 1)))


def compute_raw_rates(totals: RunTotals, days: int) -> RawRates:
    handled = totals.sold + totals.wasted + totals.donated

    return RawRates(
        profit_per_day=safe_div(totals.profit, max(1, days)),
        waste_rate=safe_div(totals.wasted, max(1, handled)),
        fill_rate=_clamp01(1 - safe_div(totals.stockout, max(1, totals.demand))),
        donation_rate=safe_div(totals.donated, max(1, handled)),
    )


def evaluate_totals(totals: RunTotals, days: int, config: EvalConfig) -> EvaluationResult:
    """
    Score run totals against the configured targets.

    Pure function of its inputs; never returns NaN, including for all-zero
    totals.
    """
    raw = compute_raw_rates(totals, days)

    breakdown = ScoreBreakdown(
        profit_score=normalize_higher_is_better(
            raw.profit_per_day, config.profit_per_day_target
        ),
        waste_reduction_score=normalize_lower_is_better(
            raw.waste_rate, config.waste_rate_target
        ),
        satisfaction_score=normalize_higher_is_better(
            raw.fill_rate, config.satisfaction_target
        ),
        humanitarian_score=normalize_higher_is_better(
            raw.donation_rate, config.donation_rate_target
        ),
    )

    w = config.weights
    weights = np.array([w.profit, w.waste_reduction, w.satisfaction, w.humanitarian])
    scores = np.array(
        [
            breakdown.profit_score,
            breakdown.waste_reduction_score,
            breakdown.satisfaction_score,
            breakdown.humanitarian_score,
        ]
    )
    score = float(np.dot(weights, scores)) / max(MIN_WEIGHT_SUM, float(weights.sum()))

    return EvaluationResult(score=_clamp01(score), breakdown=breakdown, raw=raw)


def evaluate_simulation(result: SimulationResult, config: EvalConfig) -> EvaluationResult:
    return evaluate_totals(result.totals, result.config.days, config)


def score_policies(
    items: list[ItemSpec],
    policies: list[InventoryPolicy],
    sim_config: SimulationConfig,
    eval_config: EvalConfig,
) -> list[tuple[InventoryPolicy, EvaluationResult]]:
    """
    Evaluate several candidate policies under matched randomness.

    Every run gets its own generator built from ``sim_config.seed``, so the
    candidates see identical noise draws. Results are in input order.
    """
    results = []
    for policy in policies:
        sim = simulate_inventory(items, policy, sim_config)
        results.append((policy, evaluate_simulation(sim, eval_config)))
    return results
