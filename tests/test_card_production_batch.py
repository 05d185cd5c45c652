import datetime
from unittest.mock import patch

import pytest
from cardhub.app import app
from cardhub.config import get_config
from cardhub.db import DatabaseConnection
from cardhub.errors.card_production_batch import CardAlreadyInBatch
from cardhub.models.card_production_batch import BatchStatus, CardProductionBatch
from cardhub.uow import UnitOfWork
from fastapi.testclient import TestClient


@pytest.fixture(scope="class")
def member_id(company_factory, member_factory):
    return member_factory(company_factory("Batch Works"))


def _batch(test_app: TestClient, token, batch_id) -> dict:
    response = test_app.get(f"/batches/{batch_id}", headers={"x-token": token})
    assert response.status_code == 200
    return response.json()["data"]


def _batch_cards(test_app: TestClient, token, batch_id) -> list[dict]:
    response = test_app.get(f"/batches/{batch_id}/cards", headers={"x-token": token})
    assert response.status_code == 200
    return response.json()["data"]


def _advance(test_app: TestClient, token, batch_id, status, **fields):
    return test_app.put(
        f"/batches/{batch_id}/status",
        json={"status": status, **fields},
        headers={"x-token": token},
    )


class TestBatchAssignment:
    def test_physical_cards_share_open_batch(
        self, test_app: TestClient, token, member_id, card_factory
    ):
        cards = [card_factory(member_id, "physical")[0] for _ in range(3)]
        batch_ids = {c["production_batch_id"] for c in cards}
        assert len(batch_ids) == 1

        batch = _batch(test_app, token, batch_ids.pop())
        assert batch["production_quantity"] == 3
        assert batch["batch_status"] == "pending"
        assert batch["batch_type"] == "physical"
        assert batch["batch_number"] == f"CPB-{datetime.date.today():%Y%m%d}-001"
        assert sorted(c["id"] for c in _batch_cards(test_app, token, batch["id"])) == [
            c["id"] for c in cards
        ]

    def test_digital_cards_are_not_batched(
        self, test_app: TestClient, token, member_id, card_factory
    ):
        cards = card_factory(member_id, "both")
        digital = next(c for c in cards if c["card_type"] == "digital")
        physical = next(c for c in cards if c["card_type"] == "physical")
        assert digital["production_batch_id"] is None
        assert _batch(test_app, token, physical["production_batch_id"])[
            "production_quantity"
        ] == len(_batch_cards(test_app, token, physical["production_batch_id"]))

    def test_card_cannot_join_two_batches(
        self, test_app: TestClient, member_id, card_factory, uow_runner
    ):
        card = card_factory(member_id, "physical")[0]

        def reassign(c):
            service = c.card_production_batch_service
            with pytest.raises(CardAlreadyInBatch):
                service.assign(c.member_card_service.get(card["id"]))
            return service.get(card["production_batch_id"]).production_quantity

        quantity = uow_runner(reassign)
        assert quantity == len(
            uow_runner(
                lambda c: c.card_production_batch_service.get_cards(
                    card["production_batch_id"]
                )
            )
        )

    def test_batch_not_found(self, test_app: TestClient, token):
        assert test_app.get("/batches/9999", headers={"x-token": token}).status_code == 404
        assert _advance(test_app, token, 9999, "cancelled").status_code == 404


class TestBatchLifecycle:
    def test_full_lifecycle(self, test_app: TestClient, token, member_id, card_factory):
        cards = [card_factory(member_id, "physical")[0] for _ in range(2)]
        batch_id = cards[0]["production_batch_id"]

        response = _advance(test_app, token, batch_id, "shipped", tracking_number="X")
        assert response.status_code == 409
        assert response.json()["error_code"] == 6001
        assert "pending -> shipped" in response.json()["error"]

        response = _advance(test_app, token, batch_id, "in_production")
        assert response.status_code == 200
        assert response.json()["data"]["batch_status"] == "in_production"

        # the batch is closed, new cards open the next one
        late = card_factory(member_id, "physical")[0]
        assert late["production_batch_id"] != batch_id
        next_batch = _batch(test_app, token, late["production_batch_id"])
        assert next_batch["production_quantity"] == 1
        assert next_batch["batch_number"].endswith("-002")

        response = _advance(test_app, token, batch_id, "shipped")
        assert response.status_code == 400
        assert response.json()["error_code"] == 6003

        response = _advance(
            test_app, token, batch_id, "shipped", tracking_number="1Z999AA10123456784"
        )
        assert response.status_code == 200
        batch = response.json()["data"]
        assert batch["tracking_number"] == "1Z999AA10123456784"
        assert batch["shipped_at"] is not None
        for card in _batch_cards(test_app, token, batch_id):
            assert card["tracking_number"] == "1Z999AA10123456784"
            assert card["shipped_at"] is not None
            assert card["card_status"] == "pending"

        response = _advance(test_app, token, batch_id, "delivered")
        assert response.status_code == 200
        assert response.json()["data"]["delivered_at"] is not None
        for card in _batch_cards(test_app, token, batch_id):
            assert card["tracking_number"] == "1Z999AA10123456784"
            assert card["card_status"] == "active"
            assert card["activated_at"] is not None
            assert card["status_notes"].startswith("Delivered with batch")

        assert _advance(test_app, token, batch_id, "cancelled").status_code == 409

    def test_delivery_keeps_lost_cards_lost(
        self, test_app: TestClient, token, member_id, card_factory
    ):
        kept = card_factory(member_id, "physical")[0]
        lost = card_factory(member_id, "physical")[0]
        batch_id = kept["production_batch_id"]
        test_app.put(
            f"/cards/{lost['id']}/status",
            json={"status": "lost"},
            headers={"x-token": token},
        )

        _advance(test_app, token, batch_id, "in_production")
        _advance(test_app, token, batch_id, "shipped", tracking_number="TRK-2")
        response = _advance(test_app, token, batch_id, "delivered")
        assert response.status_code == 200

        statuses = {
            c["id"]: c["card_status"] for c in _batch_cards(test_app, token, batch_id)
        }
        assert statuses[kept["id"]] == "active"
        assert statuses[lost["id"]] == "lost"

    def test_filter_batches_by_status(self, test_app: TestClient, token):
        response = test_app.get(
            "/batches", params={"status": "delivered"}, headers={"x-token": token}
        )
        assert response.status_code == 200
        page = response.json()["data"]
        assert page["total"] >= 1
        assert {b["batch_status"] for b in page["items"]} == {"delivered"}


class TestBatchCancellation:
    def test_cancel_requeues_pending_cards(
        self, test_app: TestClient, token, member_id, card_factory
    ):
        cards = [card_factory(member_id, "physical")[0] for _ in range(2)]
        cancelled_id = cards[0]["production_batch_id"]

        response = _advance(test_app, token, cancelled_id, "cancelled")
        assert response.status_code == 200
        cancelled = response.json()["data"]
        assert cancelled["batch_status"] == "cancelled"
        assert cancelled["production_quantity"] == 0
        assert _batch_cards(test_app, token, cancelled_id) == []

        moved = [
            test_app.get(f"/cards/{c['id']}", headers={"x-token": token}).json()["data"]
            for c in cards
        ]
        new_batch_ids = {c["production_batch_id"] for c in moved}
        assert len(new_batch_ids) == 1
        new_batch_id = new_batch_ids.pop()
        assert new_batch_id != cancelled_id
        assert _batch(test_app, token, new_batch_id)["production_quantity"] == 2

        # new issues join the batch holding the requeued cards
        extra = card_factory(member_id, "physical")[0]
        assert extra["production_batch_id"] == new_batch_id

    def test_quantities_match_pending_physical_cards(
        self, test_app: TestClient, token, member_id
    ):
        batches = test_app.get("/batches", headers={"x-token": token}).json()["data"]
        total_quantity = sum(
            b["production_quantity"]
            for b in batches["items"]
            if b["batch_status"] == "pending"
        )
        cards = test_app.get(f"/cards/member/{member_id}", headers={"x-token": token})
        physical_pending = [
            c
            for c in cards.json()["data"]
            if c["card_type"] == "physical" and c["card_status"] == "pending"
        ]
        assert total_quantity == len(physical_pending)


class TestConcurrentBatchOpening:
    def test_loser_joins_competing_open_batch(
        self, test_app: TestClient, token, member_id, card_factory, uow_runner
    ):
        def commit_competitor():
            # a second unit of work opens its batch between our read and insert
            db_conn = DatabaseConnection(config=app.dependency_overrides[get_config]())
            try:
                with UnitOfWork(db_conn.get_session()) as other:
                    other.add(
                        CardProductionBatch(
                            batch_number="CPB-RACE-001",
                            batch_name="Competing batch",
                            batch_type="physical",
                            batch_status=BatchStatus.PENDING,
                            production_quantity=0,
                            is_open=True,
                        )
                    )
            finally:
                db_conn.engine.dispose()
            return "CPB-RACE-002"

        def race(c):
            service = c.card_production_batch_service
            with patch.object(
                service, "_next_batch_number", side_effect=commit_competitor
            ):
                batch = service._claim_open_batch("physical")
            return batch.batch_number

        assert uow_runner(race) == "CPB-RACE-001"

        batches = test_app.get("/batches", headers={"x-token": token}).json()["data"]
        assert batches["total"] == 1
        race_batch = batches["items"][0]
        assert race_batch["batch_number"] == "CPB-RACE-001"

        first = card_factory(member_id, "physical")[0]
        second = card_factory(member_id, "physical")[0]
        assert first["production_batch_id"] == race_batch["id"]
        assert second["production_batch_id"] == race_batch["id"]
        assert _batch(test_app, token, race_batch["id"])["production_quantity"] == 2

        batches = test_app.get("/batches", headers={"x-token": token}).json()["data"]
        total_quantity = sum(
            b["production_quantity"]
            for b in batches["items"]
            if b["batch_status"] == "pending"
        )
        cards = test_app.get(f"/cards/member/{member_id}", headers={"x-token": token})
        physical_pending = [
            c
            for c in cards.json()["data"]
            if c["card_type"] == "physical" and c["card_status"] == "pending"
        ]
        assert total_quantity == len(physical_pending) == 2
