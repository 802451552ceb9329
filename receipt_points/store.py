from __future__ import annotations

import threading
import uuid
from typing import Dict

from .errors import ReceiptNotFound


class ReceiptStore:
	"""In-memory map of receipt id to points.

	Entries are written once and never updated or removed. Handlers run on
	a thread pool, so every access goes through the lock.
	"""

	def __init__(self) -> None:
		self._points: Dict[str, int] = {}
		self._lock = threading.Lock()

	def create(self, points: int) -> str:
		with self._lock:
			receipt_id = str(uuid.uuid4())
			while receipt_id in self._points:
				receipt_id = str(uuid.uuid4())
			self._points[receipt_id] = points
		return receipt_id

	def lookup(self, receipt_id: str) -> int:
		with self._lock:
			if receipt_id not in self._points:
				raise ReceiptNotFound(receipt_id)
			return self._points[receipt_id]

	def __len__(self) -> int:
		with self._lock:
			return len(self._points)
