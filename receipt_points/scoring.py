"""Reward-point rules.

Each rule takes a validated :class:`Receipt` and returns the points it
contributes. ``score`` is the sum of all rules; ``score_breakdown`` keeps
them apart for logging and debugging.

Totals are decided on their digits: the cents for the whole-dollar and
quarter checks, the significant dollar digits for the size check, so an
arbitrarily long total is never converted whole. Item prices go through
floating point, and the per-item multiplier is biased down by ``EPSILON`` before
rounding up so that ``15.00 * 0.2`` yields 3 rather than 4.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Callable

from .schemas import Item, Receipt

EPSILON = 1e-9
PRICE_MULTIPLIER = 0.2

Rule = Callable[[Receipt], int]


def _split_total(total: str) -> tuple[str, str]:
	"""Split a validated ``digits.dd`` total into dollar and cent digits."""
	dollars, cents = total.split(".")
	return dollars.lstrip("0"), cents


def _parse_price(value: str) -> float:
	"""Parse an item price; anything unparseable scores as 0.0."""
	try:
		price = float(value)
	except ValueError:
		return 0.0
	return price if math.isfinite(price) else 0.0


def retailer_characters(receipt: Receipt) -> int:
	return sum(1 for ch in receipt.retailer if ch.isascii() and ch.isalnum())


def whole_dollar_total(receipt: Receipt) -> int:
	_, cents = _split_total(receipt.total)
	return 50 if cents == "00" else 0


def quarter_multiple_total(receipt: Receipt) -> int:
	# 100 is a multiple of 25, so the dollars never matter
	_, cents = _split_total(receipt.total)
	return 25 if int(cents) % 25 == 0 else 0


def item_pairs(receipt: Receipt) -> int:
	return len(receipt.items) // 2 * 5


def _description_points(item: Item) -> int:
	if len(item.short_description.strip()) % 3 != 0:
		return 0
	# negative prices contribute nothing
	return max(0, math.ceil(_parse_price(item.price) * PRICE_MULTIPLIER - EPSILON))


def description_length(receipt: Receipt) -> int:
	return sum(_description_points(item) for item in receipt.items)


def large_total(receipt: Receipt) -> int:
	dollars, cents = _split_total(receipt.total)
	if len(dollars) > 2:
		return 5
	return 5 if int(dollars or "0") * 100 + int(cents) > 1000 else 0


def odd_purchase_day(receipt: Receipt) -> int:
	return 6 if date.fromisoformat(receipt.purchase_date).day % 2 == 1 else 0


def afternoon_purchase(receipt: Receipt) -> int:
	hour = int(receipt.purchase_time.split(":")[0])
	return 10 if 14 <= hour < 16 else 0


RULES: tuple[tuple[str, Rule], ...] = (
	("retailer_characters", retailer_characters),
	("whole_dollar_total", whole_dollar_total),
	("quarter_multiple_total", quarter_multiple_total),
	("item_pairs", item_pairs),
	("description_length", description_length),
	("large_total", large_total),
	("odd_purchase_day", odd_purchase_day),
	("afternoon_purchase", afternoon_purchase),
)


def score_breakdown(receipt: Receipt) -> list[tuple[str, int]]:
	return [(name, rule(receipt)) for name, rule in RULES]


def score(receipt: Receipt) -> int:
	return sum(points for _, points in score_breakdown(receipt))
