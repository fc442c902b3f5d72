from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from fastapi.testclient import TestClient

from budget_core.db.models.obligation import Obligation
from budget_core.domain.periods import Cadence


def test_create_obligation_returns_created(client: TestClient) -> None:
    response = client.post(
        "/v1/obligations",
        json={
            "owner_id": "ana",
            "kind": "subscription",
            "name": "  Spotify ",
            "category": "Streaming",
            "amount_minor": 599,
            "currency": "USD",
            "cadence": "MONTHLY",
            "due_day": 12,
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Spotify"
    assert body["display_amount"] == "$5.99"
    assert body["active"] is True

    listed = client.get("/v1/obligations", params={"owner_id": "ana"})
    assert listed.status_code == 200
    assert listed.json()["total"] == 1


def test_create_obligation_rejects_unknown_cadence(client: TestClient) -> None:
    response = client.post(
        "/v1/obligations",
        json={
            "owner_id": "ana",
            "name": "Agua",
            "category": "Servicios",
            "amount_minor": 1000,
            "currency": "CRC",
            "cadence": "DAILY",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_mark_current_payment_is_idempotent_per_period(
    client: TestClient,
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory()
    url = f"/v1/obligations/{obligation.id}/payments/current"

    first = client.post(url)
    second = client.post(url)

    assert first.status_code == 201
    assert first.json()["amount_minor"] == 5_000_000
    assert second.status_code == 409
    assert second.json()["code"] == "ALREADY_PAID"

    status_response = client.get(url)
    assert status_response.status_code == 200
    assert status_response.json()["paid"] is True


def test_unmark_current_payment_allows_marking_again(
    client: TestClient,
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory(cadence=Cadence.BIWEEKLY)
    url = f"/v1/obligations/{obligation.id}/payments/current"
    client.post(url)

    deleted = client.delete(url)
    deleted_again = client.delete(url)

    assert deleted.status_code == 204
    assert deleted_again.status_code == 204
    assert client.get(url).json()["paid"] is False
    assert client.post(url).status_code == 201


def test_toggle_flips_paid_state(
    client: TestClient,
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory(cadence=Cadence.WEEKLY)
    url = f"/v1/obligations/{obligation.id}/payments/current/toggle"

    assert client.post(url).json()["paid"] is True
    assert client.post(url).json()["paid"] is False


def test_paid_status_map_covers_owner_obligations(
    client: TestClient,
    obligation_factory: Callable[..., Obligation],
) -> None:
    paid = obligation_factory(name="Alquiler")
    unpaid = obligation_factory(name="Internet", amount_minor=2_500_000)
    obligation_factory(owner_id="bia")
    client.post(f"/v1/obligations/{paid.id}/payments/current")

    response = client.get("/v1/obligations/paid-status", params={"owner_id": "ana"})

    assert response.status_code == 200
    assert response.json()["items"] == {str(paid.id): True, str(unpaid.id): False}


def test_payment_for_unknown_obligation_returns_not_found(client: TestClient) -> None:
    response = client.post(f"/v1/obligations/{uuid4()}/payments/current")

    assert response.status_code == 404
    assert response.json()["code"] == "OBLIGATION_NOT_FOUND"
