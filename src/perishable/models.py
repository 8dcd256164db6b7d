"""Catalog, policy, configuration and result records."""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

Sku = str
BatchState = Literal["fresh", "frozen"]

FRESH: BatchState = "fresh"
FROZEN: BatchState = "frozen"

CATEGORIES = ("produce", "meat", "dairy", "bakery", "prepared", "frozen", "other")


class ConfigurationError(ValueError):
    """Inputs that make a run impossible; raised before any day is simulated."""


@dataclass(frozen=True)
class ItemSpec:
    """
    Per-SKU economics.

    Attributes:
        unit_cost: Cost to the store per unit sold (COGS)
        base_price: Undiscounted shelf price per unit
        shelf_life_days: Fresh shelf life at receipt
        lead_time_days: Supplier lead time
        base_daily_demand: Expected units/day at base price
        price_elasticity: Negative values mean a lower price raises demand
        shrink_rate: Fraction of on-hand lost per day (theft/damage), 0..1
        frozen_price_multiplier: Price factor vs base price when sold frozen
    """

    sku: Sku
    unit_cost: float
    base_price: float
    shelf_life_days: int
    lead_time_days: int
    base_daily_demand: float
    price_elasticity: float = 0.0
    shrink_rate: float = 0.0
    can_freeze: bool = False
    freeze_cost_per_unit: float = 0.0
    frozen_shelf_life_days: int = 1
    frozen_price_multiplier: float = 1.0
    name: str = ""
    category: str = "other"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemSpec":
        sku = data.get("sku", "?")
        try:
            item = cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid item spec for sku '{sku}': {e}") from e
        if item.category not in CATEGORIES:
            raise ConfigurationError(
                f"Unknown category {item.category!r} for sku '{sku}' "
                f"(expected one of: {', '.join(CATEGORIES)})"
            )
        return item


@dataclass(frozen=True)
class MarkdownRule:
    """Apply ``price_multiplier`` when fresh stock has at most this many days left."""

    days_to_expire_at_most: int
    price_multiplier: float


@dataclass(frozen=True)
class ItemPolicy:
    """Per-SKU control parameters."""

    sku: Sku
    reorder_point: int  # order when fresh on-hand <= reorder_point
    order_up_to: int  # order enough to bring fresh on-hand up to this level
    pricing: tuple[MarkdownRule, ...] = ()

    donate_days_to_expire_at_most: int = 0
    donate_max_fraction_per_day: float = 0.0  # of eligible units, 0..1

    freeze_days_to_expire_at_most: int = 0
    freeze_max_units_per_day: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemPolicy":
        values = dict(data)
        try:
            values["pricing"] = tuple(
                rule if isinstance(rule, MarkdownRule) else MarkdownRule(**rule)
                for rule in values.get("pricing", ())
            )
            return cls(**values)
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid policy entry for sku '{values.get('sku', '?')}': {e}"
            ) from e


@dataclass(frozen=True)
class InventoryPolicy:
    """One ItemPolicy per catalog SKU."""

    id: str
    name: str
    per_sku: dict[Sku, ItemPolicy]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InventoryPolicy":
        if not isinstance(data, dict):
            raise ConfigurationError("Policy must be a JSON object")
        if "per_sku" not in data:
            raise ConfigurationError(
                f"Policy '{data.get('id', 'policy')}' has no 'per_sku' field"
            )
        if not isinstance(data["per_sku"], dict):
            raise ConfigurationError("'per_sku' must map each sku to its policy entry")
        per_sku = {}
        for sku, entry in data["per_sku"].items():
            if isinstance(entry, ItemPolicy):
                per_sku[sku] = entry
            elif isinstance(entry, dict):
                per_sku[sku] = ItemPolicy.from_dict({"sku": sku, **entry})
            else:
                raise ConfigurationError(f"Policy entry for sku '{sku}' must be an object")
        return cls(id=data.get("id", "policy"), name=data.get("name", ""), per_sku=per_sku)


def ensure_policy_complete(items: list[ItemSpec], policy: InventoryPolicy) -> None:
    """Raise ConfigurationError naming the first catalog SKU without a policy entry."""
    for item in items:
        if item.sku not in policy.per_sku:
            raise ConfigurationError(
                f"Policy '{policy.id}' is missing a per_sku entry for sku '{item.sku}'"
            )


@dataclass(frozen=True)
class SimulationConfig:
    days: int = 28
    seed: int = 42
    holding_cost_per_unit_per_day: float = 0.01
    waste_disposal_cost_per_unit: float = 0.05
    demand_noise_std_dev: float = 0.18  # multiplicative, around 1.0
    count_stockouts: bool = True  # record unmet demand as stockout

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        return cls(**data)


@dataclass(frozen=True)
class ScoreWeights:
    profit: float = 0.45
    waste_reduction: float = 0.25
    satisfaction: float = 0.2
    humanitarian: float = 0.1


@dataclass(frozen=True)
class EvalConfig:
    """Weights and the raw values that map to a sub-score of 0.5."""

    weights: ScoreWeights = field(default_factory=ScoreWeights)
    profit_per_day_target: float = 180.0
    waste_rate_target: float = 0.08
    satisfaction_target: float = 0.97  # fill rate
    donation_rate_target: float = 0.02  # of handled units

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvalConfig":
        values = dict(data)
        weights = values.pop("weights", {})
        if not isinstance(weights, ScoreWeights):
            weights = ScoreWeights(**weights)
        return cls(weights=weights, **values)


@dataclass(frozen=True)
class DaySkuMetrics:
    """Outcome of one SKU's pipeline on one day."""

    sku: Sku

    # Fresh on-hand before the day's receipt, and units received
    starting_fresh: int
    starting_frozen: int
    arrivals: int

    price: float
    price_multiplier: float
    frozen_price: float

    demand: int
    sold_fresh: int
    sold_frozen: int
    unmet: int
    stockout: int  # unmet, or 0 when stockouts are not counted

    donated: int
    frozen_moved: int
    shrink_lost_fresh: int
    shrink_lost_frozen: int
    wasted_fresh: int
    wasted_frozen: int
    ordered: int

    ending_fresh: int
    ending_frozen: int

    revenue: float
    cogs: float
    holding_cost: float
    waste_cost: float
    freeze_cost: float

    @property
    def sold(self) -> int:
        return self.sold_fresh + self.sold_frozen

    @property
    def shrink_lost(self) -> int:
        return self.shrink_lost_fresh + self.shrink_lost_frozen

    @property
    def wasted(self) -> int:
        return self.wasted_fresh + self.wasted_frozen

    @property
    def profit(self) -> float:
        return (
            self.revenue
            - self.cogs
            - self.holding_cost
            - self.waste_cost
            - self.freeze_cost
        )


@dataclass(frozen=True)
class DayMetrics:
    day: int
    per_sku: tuple[DaySkuMetrics, ...]


@dataclass
class RunTotals:
    """Running totals over all days and SKUs."""

    revenue: float = 0.0
    cogs: float = 0.0
    holding_cost: float = 0.0
    waste_cost: float = 0.0
    freeze_cost: float = 0.0
    profit: float = 0.0

    demand: int = 0
    sold: int = 0
    stockout: int = 0
    wasted: int = 0
    donated: int = 0

    def add(self, metrics: DaySkuMetrics) -> None:
        self.revenue += metrics.revenue
        self.cogs += metrics.cogs
        self.holding_cost += metrics.holding_cost
        self.waste_cost += metrics.waste_cost
        self.freeze_cost += metrics.freeze_cost

        self.demand += metrics.demand
        self.sold += metrics.sold
        self.stockout += metrics.stockout
        self.wasted += metrics.wasted
        self.donated += metrics.donated

    def close(self) -> None:
        """Fix profit from the accumulated revenue and costs."""
        self.profit = (
            self.revenue
            - self.cogs
            - self.holding_cost
            - self.waste_cost
            - self.freeze_cost
        )


@dataclass(frozen=True)
class SkuTotals:
    sku: Sku
    sold: int
    stockout: int
    wasted: int
    donated: int


@dataclass
class SimulationResult:
    config: SimulationConfig
    policy: InventoryPolicy
    items: list[ItemSpec]
    days: list[DayMetrics]
    totals: RunTotals

    def per_sku_totals(self) -> list[SkuTotals]:
        """Sold/stockout/wasted/donated summed over the run, in catalog order."""
        rows = {item.sku: [0, 0, 0, 0] for item in self.items}
        for day in self.days:
            for m in day.per_sku:
                row = rows.setdefault(m.sku, [0, 0, 0, 0])
                row[0] += m.sold
                row[1] += m.stockout
                row[2] += m.wasted
                row[3] += m.donated
        return [SkuTotals(sku, *row) for sku, row in rows.items()]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreBreakdown:
    profit_score: float
    waste_reduction_score: float
    satisfaction_score: float
    humanitarian_score: float


@dataclass(frozen=True)
class RawRates:
    profit_per_day: float
    waste_rate: float
    fill_rate: float
    donation_rate: float


@dataclass(frozen=True)
class EvaluationResult:
    score: float  # 0..1
    breakdown: ScoreBreakdown
    raw: RawRates

    def summary(self) -> dict[str, float]:
        """Rounded flat view for reporting."""
        return {
            "score": round(self.score, 4),
            "profit_score": round(self.breakdown.profit_score, 3),
            "waste_reduction_score": round(self.breakdown.waste_reduction_score, 3),
            "satisfaction_score": round(self.breakdown.satisfaction_score, 3),
            "humanitarian_score": round(self.breakdown.humanitarian_score, 3),
            "profit_per_day": round(self.raw.profit_per_day, 2),
            "waste_rate": round(self.raw.waste_rate, 4),
            "fill_rate": round(self.raw.fill_rate, 4),
            "donation_rate": round(self.raw.donation_rate, 4),
        }
