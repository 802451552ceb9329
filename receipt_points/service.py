from __future__ import annotations

import logging
import time
from typing import Any

from opentelemetry import trace

from .config import Settings
from .errors import InvalidReceipt
from .scoring import score_breakdown
from .store import ReceiptStore
from .validation import parse_receipt, validate

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ReceiptService:
	def __init__(self, settings: Settings, store: ReceiptStore | None = None) -> None:
		self.settings = settings
		self.store = store if store is not None else ReceiptStore()

	def process(self, payload: Any) -> str:
		"""Validate and score a decoded receipt body, returning its new id."""
		with tracer.start_as_current_span("service.process") as span:
			t0 = time.perf_counter()

			receipt = parse_receipt(payload)
			try:
				validate(receipt, strict_prices=self.settings.strict_prices)
			except InvalidReceipt as e:
				log.info("receipt rejected", extra={"reason": e.reason})
				span.set_attribute("receipt.rejected", e.reason)
				raise

			breakdown = score_breakdown(receipt)
			points = sum(p for _, p in breakdown)
			receipt_id = self.store.create(points)

			span.set_attribute("items.count", len(receipt.items))
			span.set_attribute("receipt.id", receipt_id)
			span.set_attribute("receipt.points", points)
			span.set_attribute("elapsed_secs", round(time.perf_counter() - t0, 3))

		log.debug("score breakdown", extra={"receipt_id": receipt_id, **dict(breakdown)})
		log.info(
			"receipt processed",
			extra={
				"receipt_id": receipt_id,
				"points": points,
				"items": len(receipt.items),
			},
		)
		return receipt_id

	def points(self, receipt_id: str) -> int:
		with tracer.start_as_current_span("service.points") as span:
			span.set_attribute("receipt.id", receipt_id)
			return self.store.lookup(receipt_id)

	def receipt_count(self) -> int:
		return len(self.store)
