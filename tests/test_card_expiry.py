import datetime

from cardhub.app import app
from cardhub.config import get_config
from cardhub.tasks.card_expiry import _seconds_until_next_run, run_card_expiry
from fastapi.testclient import TestClient


class TestCardExpiry:
    def test_overdue_cards_are_expired(
        self,
        test_app: TestClient,
        token,
        company_factory,
        member_factory,
        card_factory,
        uow_runner,
    ):
        member_id = member_factory(company_factory("Expiry Co"))
        overdue = card_factory(member_id, "digital")[0]
        current = card_factory(member_id, "digital")[0]
        lost = card_factory(member_id, "physical")[0]
        test_app.put(
            f"/cards/{lost['id']}/status",
            json={"status": "lost"},
            headers={"x-token": token},
        )

        def backdate(c):
            past = datetime.datetime.now() - datetime.timedelta(days=1)
            for card_id in (overdue["id"], lost["id"]):
                c.member_card_service.get(card_id).expires_at = past

        uow_runner(backdate)

        assert run_card_expiry(app.dependency_overrides[get_config]()) == 1

        def read(card_id):
            return test_app.get(f"/cards/{card_id}", headers={"x-token": token}).json()[
                "data"
            ]

        assert read(overdue["id"])["card_status"] == "expired"
        assert read(overdue["id"])["deactivated_at"] is not None
        assert read(lost["id"])["card_status"] == "lost"
        assert read(lost["id"])["deactivation_reason"] == "Card reported lost"
        assert read(current["id"])["card_status"] == "active"

        # nothing left to do on the next run
        assert run_card_expiry(app.dependency_overrides[get_config]()) == 0

    def test_expire_with_explicit_clock(
        self, company_factory, member_factory, card_factory, uow_runner
    ):
        member_id = member_factory(company_factory("Far Future Co"))
        card_factory(member_id, "both")
        far_future = datetime.datetime.now() + datetime.timedelta(days=3650)
        expired = uow_runner(
            lambda c: c.member_card_service.expire_overdue_cards(now=far_future)
        )
        assert expired >= 2
        assert (
            uow_runner(lambda c: c.member_card_service.expire_overdue_cards(far_future))
            == 0
        )


class TestExpiryKeepsTerminalMarkers:
    def test_stolen_card_still_escalates_after_sweep(
        self,
        test_app: TestClient,
        token,
        company_factory,
        member_factory,
        card_factory,
        uow_runner,
    ):
        member_id = member_factory(company_factory("Stolen Co"))
        card = card_factory(member_id, "digital")[0]
        response = test_app.put(
            f"/cards/{card['id']}/status",
            json={"status": "stolen", "reason": "reported by member"},
            headers={"x-token": token},
        )
        assert response.status_code == 200

        far_future = datetime.datetime.now() + datetime.timedelta(days=3650)
        assert (
            uow_runner(lambda c: c.member_card_service.expire_overdue_cards(far_future))
            == 0
        )

        qr_code_data = uow_runner(
            lambda c: c.member_card_service.get(card["id"]).verification_token
        )
        response = test_app.post(
            "/cards/verify",
            json={
                "qr_code_data": qr_code_data,
                "provider_id": "clinic-7",
                "verification_type": "qr_scan",
            },
            headers={"x-token": token},
        )
        assert response.status_code == 200
        result = response.json()["data"]
        assert result["valid"] is False
        assert result["failure_code"] == "card_stolen"
        assert result["action"] == "escalate"
        assert result["card"]["card_status"] == "stolen"
        assert result["card"]["deactivation_reason"] == "reported by member"


class TestExpirySchedule:
    def test_runs_at_three_in_the_morning(self):
        now = datetime.datetime(2024, 5, 1, 1, 0)
        assert _seconds_until_next_run(now) == 2 * 3600

    def test_after_three_waits_for_tomorrow(self):
        now = datetime.datetime(2024, 5, 1, 4, 0)
        assert _seconds_until_next_run(now) == 23 * 3600
