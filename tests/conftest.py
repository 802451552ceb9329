from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from receipt_points.app import create_app
from receipt_points.config import Settings


@pytest.fixture
def settings() -> Settings:
	return Settings()


@pytest.fixture
def client(settings):
	with TestClient(create_app(settings)) as c:
		yield c


@pytest.fixture
def walgreens_receipt() -> dict:
	return {
		"retailer": "Walgreens",
		"purchaseDate": "2022-01-02",
		"purchaseTime": "08:13",
		"total": "2.65",
		"items": [
			{"shortDescription": "Pepsi - 12-oz", "price": "1.25"},
			{"shortDescription": "Dasani", "price": "1.40"},
		],
	}
