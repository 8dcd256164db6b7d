"""Perishable store inventory simulation and policy scoring."""

from perishable.datasets import baseline_policy, load_preset
from perishable.evaluate import evaluate_simulation, evaluate_totals, score_policies
from perishable.models import (
    ConfigurationError,
    EvalConfig,
    EvaluationResult,
    InventoryPolicy,
    ItemPolicy,
    ItemSpec,
    MarkdownRule,
    ScoreWeights,
    SimulationConfig,
    SimulationResult,
)
from perishable.rng import Rng
from perishable.simulator import InventorySimulator, simulate_inventory
from perishable.state import BatchLedger, InventoryBatch, StoreState, initial_state

__all__ = [
    "ItemSpec",
    "ItemPolicy",
    "MarkdownRule",
    "InventoryPolicy",
    "SimulationConfig",
    "EvalConfig",
    "ScoreWeights",
    "SimulationResult",
    "EvaluationResult",
    "ConfigurationError",
    "Rng",
    "BatchLedger",
    "InventoryBatch",
    "StoreState",
    "initial_state",
    "InventorySimulator",
    "simulate_inventory",
    "evaluate_simulation",
    "evaluate_totals",
    "score_policies",
    "load_preset",
    "baseline_policy",
]
