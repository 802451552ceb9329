import asyncio

import pytest

from receipt_points.config import Settings


def test_health(client):
	resp = client.get("/health")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok", "receipts": 0}


def test_process_then_points(client, walgreens_receipt):
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 200
	receipt_id = resp.json()["id"]

	resp = client.get(f"/receipts/{receipt_id}/points")
	assert resp.status_code == 200
	assert resp.json() == {"points": 15}


def test_each_submission_gets_a_new_id(client, walgreens_receipt):
	first = client.post("/receipts/process", json=walgreens_receipt).json()["id"]
	second = client.post("/receipts/process", json=walgreens_receipt).json()["id"]
	assert first != second
	assert client.get("/health").json()["receipts"] == 2


def test_invalid_receipt_is_not_stored(client, walgreens_receipt):
	walgreens_receipt["total"] = "35.3"
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 400
	body = resp.json()["error"]
	assert body["code"] == "INVALID_RECEIPT"
	assert body["message"] == "The receipt is invalid."
	assert "total" in body["details"]["reason"]
	assert client.get("/health").json()["receipts"] == 0


def test_missing_items(client, walgreens_receipt):
	del walgreens_receipt["items"]
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 400
	assert resp.json()["error"]["code"] == "INVALID_RECEIPT"


@pytest.mark.parametrize("body", ["{not json", "[1, 2]", '"receipt"'])
def test_malformed_body(client, body):
	resp = client.post(
		"/receipts/process",
		content=body,
		headers={"content-type": "application/json"},
	)
	assert resp.status_code == 400
	assert resp.json()["error"]["code"] == "MALFORMED_RECEIPT"


def test_unknown_id(client):
	resp = client.get("/receipts/does-not-exist/points")
	assert resp.status_code == 404
	body = resp.json()["error"]
	assert body["code"] == "RECEIPT_NOT_FOUND"
	assert body["message"] == "No receipt found for that ID."


@pytest.mark.parametrize("settings", [Settings(strict_prices=True)])
def test_strict_prices(settings, client, walgreens_receipt):
	walgreens_receipt["items"][1]["price"] = "one forty"
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 400
	assert "price" in resp.json()["error"]["details"]["reason"]


@pytest.mark.parametrize(
	"camel,snake",
	[
		("purchaseDate", "purchase_date"),
		("purchaseTime", "purchase_time"),
	],
)
def test_snake_case_keys_do_not_count(client, walgreens_receipt, camel, snake):
	walgreens_receipt[snake] = walgreens_receipt.pop(camel)
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 400
	assert resp.json()["error"]["details"]["reason"] == f"{camel} is required"


def test_snake_case_description_is_ignored(client, walgreens_receipt):
	# only "shortDescription" is read; a blank one still earns the multiplier
	walgreens_receipt["items"] = [{"short_description": "Dasani", "price": "4.00"}]
	receipt_id = client.post("/receipts/process", json=walgreens_receipt).json()["id"]
	# 9 retailer + 1 blank-description multiplier
	assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": 10}


def test_very_long_total_is_scored(client, walgreens_receipt):
	walgreens_receipt["total"] = "1" * 5000 + ".00"
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 200
	receipt_id = resp.json()["id"]
	# 9 retailer + 50 round + 25 quarter + 5 pair + 1 Dasani + 5 large
	assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": 95}


def test_process_runs_off_the_event_loop(client, walgreens_receipt, monkeypatch):
	svc = client.app.state.service
	original = svc.process
	seen = []

	def recording_process(payload):
		try:
			asyncio.get_running_loop()
			seen.append("event loop")
		except RuntimeError:
			seen.append("worker thread")
		return original(payload)

	monkeypatch.setattr(svc, "process", recording_process)
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 200
	assert seen == ["worker thread"]


def test_unexpected_failure_is_internal_error(client, walgreens_receipt, monkeypatch):
	def broken_process(payload):
		raise RuntimeError("store unavailable")

	monkeypatch.setattr(client.app.state.service, "process", broken_process)
	resp = client.post("/receipts/process", json=walgreens_receipt)
	assert resp.status_code == 500
	assert resp.json() == {
		"error": {
			"code": "INTERNAL",
			"message": "failed to process receipt",
			"details": {"reason": "store unavailable"},
		}
	}
