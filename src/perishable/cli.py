"""Command-line interface for the store simulator."""

import argparse
import dataclasses
import json
import logging
import sys
import time

from perishable.datasets import DEFAULT_PRESET, PRESETS, baseline_policy, load_preset
from perishable.evaluate import evaluate_simulation
from perishable.models import ConfigurationError, InventoryPolicy
from perishable.simulator import simulate_inventory


def _configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(name)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S"
        )
    )
    root = logging.getLogger("perishable")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_policy(path: str) -> InventoryPolicy:
    with open(path) as f:
        return InventoryPolicy.from_dict(json.load(f))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Perishable inventory policy scoring")
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=DEFAULT_PRESET,
        help=f"Built-in store dataset (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--policy",
        default=None,
        help="JSON policy file (default: heuristic baseline policy)",
    )
    parser.add_argument(
        "--days", type=int, default=None, help="Days to simulate (default: preset)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Demand noise seed (default: preset)"
    )
    parser.add_argument(
        "--noise",
        type=float,
        default=None,
        help="Demand noise standard deviation (default: preset)",
    )
    parser.add_argument(
        "--per-sku", action="store_true", help="Print totals for each SKU"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log each simulated day"
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    dataset = load_preset(args.preset)
    overrides = {
        "days": args.days,
        "seed": args.seed,
        "demand_noise_std_dev": args.noise,
    }
    sim_config = dataclasses.replace(
        dataset.sim_config, **{k: v for k, v in overrides.items() if v is not None}
    )

    start_time = time.time()

    try:
        if args.policy is not None:
            policy = load_policy(args.policy)
        else:
            policy = baseline_policy(dataset.items, hint=dataset.baseline_hint)
        result = simulate_inventory(dataset.items, policy, sim_config)
    except (ConfigurationError, OSError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    evaluation = evaluate_simulation(result, dataset.eval_config)
    summary = evaluation.summary()

    print(f"\n{dataset.store.name} ({dataset.store.region}), policy '{policy.id}'")
    print(f"  Days simulated:     {sim_config.days} (seed {sim_config.seed})")
    print(f"  Score:              {summary['score']:.4f}")
    print(f"  Profit score:       {summary['profit_score']:.3f}")
    print(f"  Waste score:        {summary['waste_reduction_score']:.3f}")
    print(f"  Satisfaction score: {summary['satisfaction_score']:.3f}")
    print(f"  Humanitarian score: {summary['humanitarian_score']:.3f}")
    print(f"  Profit/day:         {summary['profit_per_day']:.2f}")
    print(f"  Waste rate:         {summary['waste_rate']:.4f}")
    print(f"  Fill rate:          {summary['fill_rate']:.4f}")
    print(f"  Donation rate:      {summary['donation_rate']:.4f}")

    if args.per_sku:
        print(f"\n  {'SKU':<16}{'sold':>8}{'stockout':>10}{'wasted':>8}{'donated':>9}")
        for row in result.per_sku_totals():
            print(
                f"  {row.sku:<16}{row.sold:>8}{row.stockout:>10}"
                f"{row.wasted:>8}{row.donated:>9}"
            )

    elapsed = time.time() - start_time
    print(f"\nCompleted in {elapsed:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
