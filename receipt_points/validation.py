"""Structural and format checks for submitted receipts.

``parse_receipt`` turns decoded JSON into a :class:`Receipt` and only
fails when the payload has the wrong shape. ``validate`` then runs the
format checks in a fixed order and raises :class:`InvalidReceipt` with
the first failing reason.
"""

from __future__ import annotations

import math
import re
from datetime import date, time
from typing import Any

from pydantic import ValidationError

from .errors import InvalidReceipt, MalformedReceipt
from .schemas import Receipt

RETAILER_RE = re.compile(r"^[\w\s\-&]+$")
DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
TIME_RE = re.compile(r"^[0-9]{2}:[0-9]{2}$")
TOTAL_RE = re.compile(r"^[0-9]+\.[0-9]{2}$")

REQUIRED_FIELDS = (
	("retailer", "retailer"),
	("purchase_date", "purchaseDate"),
	("purchase_time", "purchaseTime"),
	("total", "total"),
	("items", "items"),
)


def parse_receipt(payload: Any) -> Receipt:
	if not isinstance(payload, dict):
		raise MalformedReceipt("receipt must be a JSON object")
	try:
		return Receipt.model_validate(payload)
	except ValidationError as e:
		fields = sorted(
			{".".join(str(p) for p in err["loc"]) for err in e.errors()}
		)
		raise MalformedReceipt(f"wrong type for {', '.join(fields)}") from e


def _is_date(value: str) -> bool:
	if not DATE_RE.fullmatch(value):
		return False
	try:
		date.fromisoformat(value)
	except ValueError:
		return False
	return True


def _is_time(value: str) -> bool:
	if not TIME_RE.fullmatch(value):
		return False
	try:
		time.fromisoformat(value)
	except ValueError:
		return False
	return True


def _is_price(value: str) -> bool:
	try:
		return math.isfinite(float(value))
	except ValueError:
		return False


def validate(receipt: Receipt, *, strict_prices: bool = False) -> None:
	for attr, name in REQUIRED_FIELDS:
		if not getattr(receipt, attr):
			raise InvalidReceipt(f"{name} is required")

	if not RETAILER_RE.fullmatch(receipt.retailer):
		raise InvalidReceipt("retailer contains unsupported characters")
	if not _is_date(receipt.purchase_date):
		raise InvalidReceipt("purchaseDate must be a YYYY-MM-DD date")
	if not _is_time(receipt.purchase_time):
		raise InvalidReceipt("purchaseTime must be a 24-hour HH:MM time")
	if not TOTAL_RE.fullmatch(receipt.total):
		raise InvalidReceipt("total must have exactly two decimal places")

	if strict_prices:
		for idx, item in enumerate(receipt.items):
			if not _is_price(item.price):
				raise InvalidReceipt(f"items[{idx}].price is not a number")
