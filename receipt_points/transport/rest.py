from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from ..config import Settings
from ..errors import InvalidReceipt, MalformedReceipt, ReceiptNotFound
from ..schemas import (
	ErrorBody,
	ErrorResponse,
	Health,
	PointsResponse,
	ProcessResponse,
)
from ..service import ReceiptService

log = logging.getLogger(__name__)

INVALID_MESSAGE = "The receipt is invalid."
NOT_FOUND_MESSAGE = "No receipt found for that ID."


def http_error(
	code: str, message: str, status: int, details: dict | None = None
) -> JSONResponse:
	return JSONResponse(
		status_code=status,
		content=ErrorResponse(
			error=ErrorBody(code=code, message=message, details=details or {})
		).model_dump(),
	)


def build_router(settings: Settings, svc: ReceiptService) -> APIRouter:
	router = APIRouter()

	@router.get("/health", response_model=Health)
	def health() -> Health:
		return Health(receipts=svc.receipt_count())

	@router.post(
		"/receipts/process",
		response_model=ProcessResponse,
		responses={400: {"model": ErrorResponse}},
	)
	async def process(request: Request):
		try:
			payload = await request.json()
		except ValueError:
			return http_error(
				MalformedReceipt.code, INVALID_MESSAGE, 400, {"reason": "body is not valid JSON"}
			)

		try:
			# scoring and the store lock stay off the event loop
			receipt_id = await run_in_threadpool(svc.process, payload)
		except (MalformedReceipt, InvalidReceipt) as e:
			return http_error(e.code, INVALID_MESSAGE, 400, {"reason": str(e)})
		except Exception as e:
			log.exception("process failed")
			return http_error(
				"INTERNAL", "failed to process receipt", 500, {"reason": str(e)}
			)
		return ProcessResponse(id=receipt_id)

	@router.get(
		"/receipts/{receipt_id}/points",
		response_model=PointsResponse,
		responses={404: {"model": ErrorResponse}},
	)
	def points(receipt_id: str):
		try:
			return PointsResponse(points=svc.points(receipt_id))
		except ReceiptNotFound as e:
			log.debug("points lookup miss", extra={"receipt_id": receipt_id})
			return http_error(e.code, NOT_FOUND_MESSAGE, 404)

	return router
