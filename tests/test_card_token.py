from unittest.mock import Mock, patch

import pytest
from cardhub.errors.card import CardTokenCollision
from cardhub.models.member_card import MemberCard
from cardhub.services.card_token import CardTokenCodec


class TestCardTokenCodec:
    def test_issued_token_shape(self):
        codec = CardTokenCodec(db=Mock())
        card = MemberCard()
        with patch.object(codec, "_exists", return_value=False):
            token = codec.issue(card)
        assert card.verification_token == token
        assert token.startswith("cct_")
        assert len(token) == 47
        assert codec.is_well_formed(token)

    def test_tokens_do_not_repeat(self):
        codec = CardTokenCodec(db=Mock())
        with patch.object(codec, "_exists", return_value=False):
            tokens = {codec.issue(MemberCard()) for _ in range(50)}
        assert len(tokens) == 50

    def test_collision_is_retried(self):
        codec = CardTokenCodec(db=Mock())
        with patch.object(codec, "_exists", side_effect=[True, True, False]):
            assert codec.issue(MemberCard()).startswith("cct_")

    def test_persistent_collision_fails(self):
        codec = CardTokenCodec(db=Mock())
        card = MemberCard()
        with patch.object(codec, "_exists", return_value=True):
            with pytest.raises(CardTokenCollision):
                codec.issue(card)
        assert card.verification_token is None

    @pytest.mark.parametrize(
        "value",
        [
            None,
            42,
            "",
            "garbage",
            "cct_" + "A" * 42,
            "cct_" + "A" * 44,
            "xyz_" + "A" * 43,
            "cct_" + "A" * 42 + "=",
            "cct_" + "A" * 42 + "/",
        ],
    )
    def test_malformed_tokens_skip_the_database(self, value):
        db = Mock()
        codec = CardTokenCodec(db=db)
        assert not codec.is_well_formed(value)
        assert codec.resolve(value) is None
        db.query.assert_not_called()


class TestCardTokenRoundTrip:
    def test_resolve_returns_the_issued_card(
        self, test_app, company_factory, member_factory, card_factory, uow_runner
    ):
        member_id = member_factory(company_factory("Roundtrip Co"))
        card_id = card_factory(member_id, "digital")[0]["id"]

        def round_trip(c):
            card = c.member_card_service.get(card_id)
            return c.card_token_codec.resolve(card.verification_token).id

        assert uow_runner(round_trip) == card_id
        assert uow_runner(lambda c: c.card_token_codec.resolve("cct_" + "B" * 43)) is None
