from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
	model_config = ConfigDict(frozen=True)

	short_description: str = Field(default="", alias="shortDescription")
	price: str = ""


class Receipt(BaseModel):
	# required fields default to None so the validator can report them as missing
	model_config = ConfigDict(frozen=True)

	retailer: Optional[str] = None
	purchase_date: Optional[str] = Field(default=None, alias="purchaseDate")
	purchase_time: Optional[str] = Field(default=None, alias="purchaseTime")
	total: Optional[str] = None
	items: Optional[list[Item]] = None


class ProcessResponse(BaseModel):
	id: str


class PointsResponse(BaseModel):
	points: int


class Health(BaseModel):
	status: str = "ok"
	receipts: int = 0


class ErrorBody(BaseModel):
	code: str
	message: str
	details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
	error: ErrorBody
