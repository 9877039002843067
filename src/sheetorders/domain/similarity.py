"""Weighted similarity between a sheet row and a persisted order."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from sheetorders.config.errors import ConfigurationError
from sheetorders.domain.normalization import coerce_price, normalize_text, phone_digits

if TYPE_CHECKING:
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.ports import OrderSnapshot

CONFLICT_THRESHOLD: Final = 0.7
_CENT: Final = Decimal("0.01")


def levenshtein_distance(first: str, second: str) -> int:
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def calculate_string_similarity(first: str, second: str) -> float:
    """Normalized Levenshtein similarity in [0, 1]."""

    if first == second:
        return 1.0
    if not first or not second:
        return 0.0
    distance = levenshtein_distance(first, second)
    return 1.0 - distance / max(len(first), len(second))


def price_similarity(first: Decimal, second: Decimal) -> float:
    if first == second:
        return 1.0
    largest = max(abs(first), abs(second))
    if largest == 0:
        return 1.0
    return max(0.0, 1.0 - float(abs(first - second) / largest))


def row_total(row: RawOrderRow) -> Decimal:
    unit_price = coerce_price(row.unit_price) or Decimal(0)
    quantity = row.quantity if row.quantity is not None else 1
    return unit_price * quantity


@dataclass(frozen=True, slots=True)
class SimilarityWeights:
    phone: float = 0.30
    customer_name: float = 0.20
    product: float = 0.20
    price: float = 0.15
    address: float = 0.15

    def __post_init__(self) -> None:
        weights = (self.phone, self.customer_name, self.product, self.price, self.address)
        if any(weight < 0 for weight in weights):
            raise ConfigurationError("Similarity weights must be non-negative")
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-9):
            raise ConfigurationError(f"Similarity weights must sum to 1, got {sum(weights)}")
        if any(weight >= self.phone for weight in weights[1:]):
            raise ConfigurationError("Phone must carry the largest similarity weight")


@dataclass(frozen=True, slots=True)
class FieldScores:
    customer_name: float
    phone: float
    product: float
    price: float
    address: float

    def weighted(self, weights: SimilarityWeights) -> float:
        return (
            self.phone * weights.phone
            + self.customer_name * weights.customer_name
            + self.product * weights.product
            + self.price * weights.price
            + self.address * weights.address
        )


class SimilarityScorer:
    """Pure scorer; safe to share between threads."""

    def __init__(self, weights: SimilarityWeights | None = None) -> None:
        self.weights = weights or SimilarityWeights()

    def breakdown(self, row: RawOrderRow, snapshot: OrderSnapshot) -> FieldScores:
        return FieldScores(
            customer_name=calculate_string_similarity(
                normalize_text(row.customer_name), normalize_text(snapshot.customer_full_name)
            ),
            phone=calculate_string_similarity(
                phone_digits(row.phone), phone_digits(snapshot.customer_phone)
            ),
            product=self._product_similarity(row, snapshot),
            price=price_similarity(row_total(row), snapshot.total),
            address=calculate_string_similarity(
                normalize_text(row.address), normalize_text(snapshot.shipping_address)
            ),
        )

    def score(self, row: RawOrderRow, snapshot: OrderSnapshot) -> float:
        return self.breakdown(row, snapshot).weighted(self.weights)

    def identify_conflicting_fields(
        self, row: RawOrderRow, snapshot: OrderSnapshot
    ) -> tuple[str, ...]:
        scores = self.breakdown(row, snapshot)
        conflicts: list[str] = []
        if scores.customer_name < CONFLICT_THRESHOLD:
            conflicts.append("customerName")
        if phone_digits(row.phone) != phone_digits(snapshot.customer_phone):
            conflicts.append("phone")
        if scores.product < CONFLICT_THRESHOLD:
            conflicts.append("product")
        if row_total(row).quantize(_CENT) != snapshot.total.quantize(_CENT):
            conflicts.append("price")
        if scores.address < CONFLICT_THRESHOLD:
            conflicts.append("address")
        return tuple(conflicts)

    @staticmethod
    def _product_similarity(row: RawOrderRow, snapshot: OrderSnapshot) -> float:
        sku = (row.product_sku or "").strip()
        if sku and sku in snapshot.product_skus:
            return 1.0
        name = normalize_text(row.product_name)
        return max(
            (
                calculate_string_similarity(name, normalize_text(candidate))
                for candidate in snapshot.product_names
            ),
            default=0.0,
        )


__all__ = [
    "FieldScores",
    "SimilarityScorer",
    "SimilarityWeights",
    "calculate_string_similarity",
    "levenshtein_distance",
    "price_similarity",
    "row_total",
]
