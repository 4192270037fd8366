"""
Tests for the HTTP API (`api/main.py`, `api/routers/spins.py`).

The spin service and repository are swapped for test instances through
FastAPI dependency overrides, backed by a temporary store file.
"""

from __future__ import annotations

import csv
from io import StringIO

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_spin_repository, get_spin_service
from api.main import app
from config.settings import Settings
from services.email_service import EmailService
from services.notification_service import NotificationDispatcher
from services.sms_service import SmsService
from services.spin_service import SpinService

ASHA = {
    "name": "Asha",
    "email": "asha@example.com",
    "phone": "+91 98765 43210",
    "domain": "Websites",
    "discount": 10,
    "couponCode": "ZTX-WEB10",
}


@pytest.fixture
def client(repository, dispatcher):
    service = SpinService(repository, dispatcher)
    app.dependency_overrides[get_spin_repository] = lambda: repository
    app.dependency_overrides[get_spin_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}


def test_asha_scenario(client, repository) -> None:
    first = client.post("/api/spin", json=ASHA)

    assert first.status_code == 200
    assert first.json() == {
        "allowed": True,
        "success": True,
        "message": "Coupon sent successfully!",
        "couponCode": "ZTX-WEB10",
    }
    stored = repository.load_all()
    assert len(stored) == 1
    assert stored[0].phone == "+91 98765 43210"

    second = client.post("/api/spin", json=ASHA)

    assert second.status_code == 200
    assert second.json() == {
        "allowed": False,
        "success": False,
        "message": "You have already spun the wheel.",
    }
    assert len(repository.load_all()) == 1


def test_missing_field_is_400(client, repository) -> None:
    body = {k: v for k, v in ASHA.items() if k != "phone"}

    response = client.post("/api/spin", json=body)

    assert response.status_code == 400
    assert response.json()["allowed"] is False
    assert response.json()["message"] == "Missing required fields"
    assert repository.load_all() == []


def test_unparseable_discount_is_400(client, repository) -> None:
    response = client.post("/api/spin", json={**ASHA, "discount": "ten"})

    assert response.status_code == 400
    assert response.json()["allowed"] is False
    assert repository.load_all() == []


def test_internal_error_is_500(repository) -> None:
    class ExplodingDispatcher:
        def notify(self, record):
            raise RuntimeError("boom")

    app.dependency_overrides[get_spin_service] = lambda: SpinService(repository, ExplodingDispatcher())
    try:
        with TestClient(app) as test_client:
            response = test_client.post("/api/spin", json=ASHA)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"allowed": False, "success": False, "message": "Internal server error"}


def test_failing_notifications_still_accept(repository, make_sms_provider) -> None:
    dispatcher = NotificationDispatcher(
        EmailService(Settings()),
        SmsService([make_sms_provider("fast2sms", fail=True), make_sms_provider("twilio", fail=True)]),
    )
    app.dependency_overrides[get_spin_service] = lambda: SpinService(repository, dispatcher)
    try:
        with TestClient(app) as test_client:
            response = test_client.post("/api/spin", json=ASHA)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["allowed"] is True
    assert response.json()["success"] is True


def test_listing_round_trips_records_newest_first(client, repository) -> None:
    client.post("/api/spin", json=ASHA)
    client.post("/api/spin", json={**ASHA, "email": "ravi@example.com", "name": "Ravi", "couponCode": "ZTX-WEB15", "discount": 15})

    response = client.get("/api/spins")

    assert response.status_code == 200
    listed = response.json()
    stored = {record.id: record.to_dict() for record in repository.load_all()}
    assert sorted(item["id"] for item in listed) == [1, 2]
    for item in listed:
        assert item == stored[item["id"]]
    assert [item["createdAt"] for item in listed] == sorted((item["createdAt"] for item in listed), reverse=True)


def test_export_csv(client, repository) -> None:
    client.post("/api/spin", json=ASHA)

    response = client.get("/api/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=spins.csv"

    record = repository.load_all()[0]
    lines = response.text.splitlines()
    assert lines[0] == "ID,Name,Email,Phone,Domain,Discount,CouponCode,CreatedAt"
    assert lines[1] == (
        f'1,"Asha","asha@example.com","+91 98765 43210","Websites",10,"ZTX-WEB10","{record.created_at.isoformat()}"'
    )
    rows = list(csv.DictReader(StringIO(response.text)))
    assert rows[0]["Email"] == "asha@example.com"


def test_export_keeps_every_field_recoverable(client, repository) -> None:
    client.post(
        "/api/spin",
        json={**ASHA, "name": "-Asha", "email": "@asha@example.com", "phone": '+HYPERLINK("http://evil","x")'},
    )

    rows = list(csv.DictReader(StringIO(client.get("/api/export").text)))
    record = repository.load_all()[0]

    def stored(text: str) -> str:
        return text[1:] if text.startswith("'") else text

    assert rows[0]["Name"] == "'-Asha"
    assert rows[0]["Phone"].startswith("'+HYPERLINK")
    assert [stored(rows[0][column]) for column in ("Name", "Email", "Phone", "Domain", "CouponCode")] == [
        record.name,
        record.email,
        record.phone,
        record.domain,
        record.coupon_code,
    ]
    assert int(rows[0]["ID"]) == record.id
    assert int(rows[0]["Discount"]) == record.discount
    assert rows[0]["CreatedAt"] == record.created_at.isoformat()


def test_empty_store_listing(client) -> None:
    assert client.get("/api/spins").json() == []
