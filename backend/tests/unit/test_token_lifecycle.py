"""Unit tests for TokenLifecycleManager."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import RevokedToken
from app.services.errors import UnauthorizedError
from app.services.revocation import RevocationStore, hash_token_id
from app.services.token_codec import AccessClaims, RefreshClaims
from app.services.token_lifecycle import LOGOUT_MESSAGE, TokenLifecycleManager

pytestmark = pytest.mark.asyncio


@dataclass
class Identity:
    id: int
    email: str


ALICE = Identity(id=1, email="alice@example.com")


class TestIssuePair:
    """Tests for TokenLifecycleManager.issue_pair()."""

    async def test_pair_has_both_kinds(self, lifecycle, token_codec):
        pair = lifecycle.issue_pair(ALICE)

        assert isinstance(token_codec.verify(pair.access_token), AccessClaims)
        assert isinstance(token_codec.verify(pair.refresh_token), RefreshClaims)

    async def test_pair_tokens_have_distinct_ids(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        assert pair.access_claims.token_id != pair.refresh_claims.token_id

    async def test_default_lifetimes(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        assert pair.expires_in == 15 * 60
        refresh = pair.refresh_claims
        assert refresh.expires_at - refresh.issued_at == timedelta(days=7)
        assert pair.token_type == "bearer"

    async def test_claims_carry_identity(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        assert pair.access_claims.subject == ALICE.id
        assert pair.access_claims.email == ALICE.email


class TestAuthenticate:
    """Tests for TokenLifecycleManager.authenticate()."""

    async def test_valid_access_token(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        claims = await lifecycle.authenticate(pair.access_token)

        assert claims.subject == ALICE.id
        assert claims.token_id == pair.access_claims.token_id

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, lifecycle, token):
        with pytest.raises(UnauthorizedError):
            await lifecycle.authenticate(token)

    async def test_garbage_token(self, lifecycle):
        with pytest.raises(UnauthorizedError):
            await lifecycle.authenticate("not-a-token")

    async def test_refresh_token_rejected(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        with pytest.raises(UnauthorizedError):
            await lifecycle.authenticate(pair.refresh_token)

    async def test_revoked_access_token_rejected(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)
        await revocation_store.revoke(pair.access_claims.token_id, 60)

        with pytest.raises(UnauthorizedError):
            await lifecycle.authenticate(pair.access_token)

    async def test_expired_access_token_rejected(self, token_codec, revocation_store):
        past = datetime.now(UTC) - timedelta(hours=1)
        manager = TokenLifecycleManager(token_codec, revocation_store, clock=lambda: past)
        pair = manager.issue_pair(ALICE)

        with pytest.raises(UnauthorizedError):
            await manager.authenticate(pair.access_token)

    async def test_failures_are_indistinguishable(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)
        await revocation_store.revoke(pair.access_claims.token_id, 60)

        messages = set()
        for token in (None, "garbage", pair.refresh_token, pair.access_token):
            with pytest.raises(UnauthorizedError) as exc_info:
                await lifecycle.authenticate(token)
            messages.add(exc_info.value.message)

        assert len(messages) == 1


class TestRefresh:
    """Tests for TokenLifecycleManager.refresh()."""

    async def test_refresh_issues_new_pair(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        new_pair = await lifecycle.refresh(pair.refresh_token)

        assert new_pair.refresh_claims.token_id != pair.refresh_claims.token_id
        assert new_pair.access_claims.token_id != pair.access_claims.token_id
        assert new_pair.access_claims.subject == ALICE.id
        assert new_pair.access_claims.email == ALICE.email

    async def test_refresh_token_is_single_use(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)
        await lifecycle.refresh(pair.refresh_token)

        with pytest.raises(UnauthorizedError):
            await lifecycle.refresh(pair.refresh_token)

    async def test_rotated_token_is_revoked(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)
        await lifecycle.refresh(pair.refresh_token)

        assert await revocation_store.is_revoked(pair.refresh_claims.token_id) is True

    async def test_new_refresh_token_works(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)
        second = await lifecycle.refresh(pair.refresh_token)

        third = await lifecycle.refresh(second.refresh_token)

        assert third.access_claims.subject == ALICE.id

    async def test_access_token_rejected(self, lifecycle):
        pair = lifecycle.issue_pair(ALICE)

        with pytest.raises(UnauthorizedError):
            await lifecycle.refresh(pair.access_token)

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, lifecycle, token):
        with pytest.raises(UnauthorizedError):
            await lifecycle.refresh(token)

    async def test_expired_token_rejected_before_revocation_lookup(self, token_codec):
        store = AsyncMock(spec=RevocationStore)
        past = datetime.now(UTC) - timedelta(days=8)
        issuer = TokenLifecycleManager(token_codec, store, clock=lambda: past)
        expired = issuer.issue_pair(ALICE).refresh_token
        manager = TokenLifecycleManager(token_codec, store)

        with pytest.raises(UnauthorizedError):
            await manager.refresh(expired)

        store.is_revoked.assert_not_awaited()
        store.revoke.assert_not_awaited()

    async def test_concurrent_replay_is_unauthorized(self, token_codec):
        store = AsyncMock(spec=RevocationStore)
        store.is_revoked.return_value = False
        store.revoke.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        manager = TokenLifecycleManager(token_codec, store)
        pair = manager.issue_pair(ALICE)

        with pytest.raises(UnauthorizedError):
            await manager.refresh(pair.refresh_token)

    async def test_revokes_for_remaining_lifetime(self, token_codec):
        store = AsyncMock(spec=RevocationStore)
        store.is_revoked.return_value = False
        now = datetime.now(UTC).replace(microsecond=0)
        manager = TokenLifecycleManager(token_codec, store, clock=lambda: now)
        pair = manager.issue_pair(ALICE)

        await manager.refresh(pair.refresh_token)

        store.revoke.assert_awaited_once_with(
            pair.refresh_claims.token_id, int(timedelta(days=7).total_seconds())
        )


class TestLogout:
    """Tests for TokenLifecycleManager.logout()."""

    async def test_logout_revokes_access_token(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)

        message = await lifecycle.logout(pair.access_claims)

        assert message == LOGOUT_MESSAGE
        assert await revocation_store.is_revoked(pair.access_claims.token_id) is True
        assert await revocation_store.is_revoked(pair.refresh_claims.token_id) is False

    async def test_logout_with_refresh_token_revokes_both(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)

        await lifecycle.logout(pair.access_claims, pair.refresh_token)

        assert await revocation_store.is_revoked(pair.access_claims.token_id) is True
        assert await revocation_store.is_revoked(pair.refresh_claims.token_id) is True
        with pytest.raises(UnauthorizedError):
            await lifecycle.refresh(pair.refresh_token)

    async def test_logout_ignores_bad_refresh_token(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)

        message = await lifecycle.logout(pair.access_claims, "garbage")

        assert message == LOGOUT_MESSAGE
        assert await revocation_store.is_revoked(pair.access_claims.token_id) is True

    async def test_logout_does_not_revoke_access_token_passed_as_refresh(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)
        other = lifecycle.issue_pair(ALICE)

        await lifecycle.logout(pair.access_claims, other.access_token)

        assert await revocation_store.is_revoked(other.access_claims.token_id) is False

    async def test_logout_without_claims(self, lifecycle):
        with pytest.raises(UnauthorizedError):
            await lifecycle.logout(None)

    async def test_logout_rejects_refresh_claims(self, lifecycle, revocation_store):
        pair = lifecycle.issue_pair(ALICE)

        with pytest.raises(UnauthorizedError):
            await lifecycle.logout(pair.refresh_claims)

        assert await revocation_store.is_revoked(pair.refresh_claims.token_id) is False

    async def test_logout_just_before_expiry_still_records_revocation(self, token_codec, db_session):
        issued_at = datetime.now(UTC).replace(microsecond=0)
        pair = TokenLifecycleManager(token_codec, RevocationStore(db_session), clock=lambda: issued_at).issue_pair(
            ALICE
        )
        almost_expired = pair.access_claims.expires_at - timedelta(milliseconds=500)
        store = RevocationStore(db_session, clock=lambda: almost_expired)
        manager = TokenLifecycleManager(token_codec, store, clock=lambda: almost_expired)

        await manager.logout(pair.access_claims)

        record = await db_session.get(RevokedToken, hash_token_id(pair.access_claims.token_id))
        assert record is not None
        assert record.expires_at.replace(tzinfo=UTC) >= pair.access_claims.expires_at
        assert await store.is_revoked(pair.access_claims.token_id) is True

    async def test_logout_with_explicit_claims(self, lifecycle, revocation_store):
        now = datetime.now(UTC)
        claims = AccessClaims(
            subject=1,
            email="a@x.com",
            token_id="j1",
            issued_at=now,
            expires_at=now + timedelta(minutes=5),
        )

        await lifecycle.logout(claims)

        assert await revocation_store.is_revoked("j1") is True

    async def test_logout_of_expired_claims_records_nothing(self, lifecycle, revocation_store):
        now = datetime.now(UTC)
        claims = AccessClaims(
            subject=1,
            email="a@x.com",
            token_id="j1",
            issued_at=now - timedelta(hours=1),
            expires_at=now - timedelta(minutes=1),
        )

        await lifecycle.logout(claims)

        assert await revocation_store.is_revoked("j1") is False
