from __future__ import annotations


class ReceiptError(Exception):
	"""Base class for failures surfaced to API callers."""

	code = "RECEIPT_ERROR"


class MalformedReceipt(ReceiptError):
	"""The body is not JSON, or not shaped like a receipt."""

	code = "MALFORMED_RECEIPT"


class InvalidReceipt(ReceiptError):
	"""The receipt parsed but failed a validation check."""

	code = "INVALID_RECEIPT"

	def __init__(self, reason: str) -> None:
		super().__init__(reason)
		self.reason = reason


class ReceiptNotFound(ReceiptError):
	code = "RECEIPT_NOT_FOUND"

	def __init__(self, receipt_id: str) -> None:
		super().__init__(f"no receipt with id {receipt_id!r}")
		self.receipt_id = receipt_id
