import json
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from nexo.controllers import api_key_controller as controller_module
from nexo.controllers.api_key_controller import ApiKeyController
from nexo.database import utcnow
from nexo.errors import (
    ConflictError,
    InvalidFormat,
    KeyDisabled,
    KeyExpired,
    KeyNotFound,
    ValidationError,
)
from nexo.models.api_key import ApiKey
from nexo.schemas.api_key import ApiKeyCreate, ApiKeyRecord
from nexo.services.keys import hash_api_key


async def _count_keys(db) -> int:
    return await db.scalar(select(func.count(ApiKey.id)))


# ---------------------------------------------------------------------------
# Emissão
# ---------------------------------------------------------------------------

class TestIssue:
    async def test_issue_then_validate_returns_same_identity(self, db):
        record, plain = await ApiKeyController.issue(
            db, user_id="user_a", name="  Atalho  ", org_id="org_1", scopes=["shopping:read"]
        )
        identity = await ApiKeyController.validate(db, plain)

        assert identity.user_id == "user_a"
        assert identity.org_id == "org_1"
        assert identity.scopes == ["shopping:read"]
        assert identity.key_id == record.id
        assert record.name == "Atalho"

    async def test_only_hash_and_prefix_are_stored(self, db):
        record, plain = await ApiKeyController.issue(db, user_id="user_a", name="k")
        row = await db.get(ApiKey, record.id)

        assert row.key_hash == hash_api_key(plain)
        assert row.key_prefix == plain[:12]
        assert plain not in (row.key_hash, row.key_prefix, row.name, row.scopes)

    async def test_default_scopes_are_wildcard(self, db):
        record, _ = await ApiKeyController.issue(db, user_id="user_a", name="k")
        assert record.scopes == ["*"]
        assert record.is_active is True
        assert record.expires_at is None

    async def test_blank_label_rejected(self, db):
        with pytest.raises(ValidationError, match="Name is required"):
            await ApiKeyController.issue(db, user_id="user_a", name="   ")
        assert await _count_keys(db) == 0

    async def test_unknown_scope_rejected_before_persisting(self, db):
        with pytest.raises(ValidationError, match="Invalid scope: pantry:read"):
            await ApiKeyController.issue(
                db, user_id="user_a", name="k", scopes=["shopping:read", "pantry:read"]
            )
        assert await _count_keys(db) == 0

    async def test_hash_collision_surfaces_as_conflict(self, db, monkeypatch):
        fixed = ("nxk_fixed", hash_api_key("nxk_fixed"), "nxk_fixed")
        monkeypatch.setattr(controller_module, "generate_api_key", lambda: fixed)

        await ApiKeyController.issue(db, user_id="user_a", name="first")
        with pytest.raises(ConflictError):
            await ApiKeyController.issue(db, user_id="user_b", name="second")
        assert await _count_keys(db) == 1


class TestIssueRequested:
    async def test_requires_explicit_scopes(self, db):
        with pytest.raises(ValidationError, match="At least one scope is required"):
            await ApiKeyController.issue_requested(db, "user_a", None, ApiKeyCreate(name="k"))
        with pytest.raises(ValidationError, match="At least one scope is required"):
            await ApiKeyController.issue_requested(db, "user_a", None, ApiKeyCreate(name="k", scopes=[]))

    async def test_rejects_wildcard_on_public_path(self, db):
        with pytest.raises(ValidationError, match=r"Invalid scope: \*"):
            await ApiKeyController.issue_requested(
                db, "user_a", None, ApiKeyCreate(name="k", scopes=["*"])
            )

    async def test_name_checked_before_scopes(self, db):
        with pytest.raises(ValidationError, match="Name is required"):
            await ApiKeyController.issue_requested(db, "user_a", None, ApiKeyCreate(scopes=["nope"]))

    async def test_default_scopes_for_trusted_caller(self, db):
        record, _ = await ApiKeyController.issue_requested(
            db, "admin_1", None, ApiKeyCreate(name="k"), default_scopes=["shopping:read", "shopping:write"]
        )
        assert record.scopes == ["shopping:read", "shopping:write"]

    async def test_expires_in_days(self, db):
        record, _ = await ApiKeyController.issue_requested(
            db, "user_a", None, ApiKeyCreate(name="k", scopes=["events:read"], expires_in_days=30)
        )
        delta = record.expires_at - utcnow()
        assert timedelta(days=29, hours=23) < delta <= timedelta(days=30)

    @pytest.mark.parametrize("days", [1e9, 5_000_000, float("inf"), float("nan")])
    async def test_unrepresentable_expiry_is_a_validation_error(self, db, days):
        with pytest.raises(ValidationError, match="Invalid expires_in_days"):
            await ApiKeyController.issue_requested(
                db, "user_a", None, ApiKeyCreate(name="k", scopes=["events:read"], expires_in_days=days)
            )
        assert await _count_keys(db) == 0

    @pytest.mark.parametrize("days", [0, -5, None])
    async def test_non_positive_days_never_expire(self, db, days):
        record, _ = await ApiKeyController.issue_requested(
            db, "user_a", None, ApiKeyCreate(name="k", scopes=["events:read"], expires_in_days=days)
        )
        assert record.expires_at is None


# ---------------------------------------------------------------------------
# Validação
# ---------------------------------------------------------------------------

class TestValidate:
    async def test_bad_format_never_touches_database(self):
        fake_db = MagicMock()
        fake_db.execute = AsyncMock()

        for presented in ("", None, "sk_live_123", "Bearer nxk_abc"):
            with pytest.raises(InvalidFormat):
                await ApiKeyController.validate(fake_db, presented)
        fake_db.execute.assert_not_called()

    async def test_unknown_key(self, db):
        with pytest.raises(KeyNotFound):
            await ApiKeyController.validate(db, "nxk_does_not_exist")

    async def test_revoked_key_is_disabled(self, db):
        record, plain = await ApiKeyController.issue(db, user_id="user_a", name="k")
        assert await ApiKeyController.revoke(db, record.id, "user_a") is True

        with pytest.raises(KeyDisabled):
            await ApiKeyController.validate(db, plain)

    async def test_disabled_wins_over_expired(self, db):
        record, plain = await ApiKeyController.issue(
            db, user_id="user_a", name="k", expires_at=utcnow() - timedelta(days=1)
        )
        await ApiKeyController.revoke(db, record.id, "user_a")

        with pytest.raises(KeyDisabled):
            await ApiKeyController.validate(db, plain)

    async def test_expired_one_second_ago(self, db):
        _, plain = await ApiKeyController.issue(
            db, user_id="user_a", name="k", expires_at=utcnow() - timedelta(seconds=1)
        )
        with pytest.raises(KeyExpired):
            await ApiKeyController.validate(db, plain)

    async def test_valid_for_another_hour(self, db):
        _, plain = await ApiKeyController.issue(
            db, user_id="user_a", name="k", expires_at=utcnow() + timedelta(hours=1)
        )
        identity = await ApiKeyController.validate(db, plain)
        assert identity.user_id == "user_a"

    async def test_success_records_last_used(self, db):
        record, plain = await ApiKeyController.issue(db, user_id="user_a", name="k")
        assert record.last_used_at is None

        before = utcnow()
        await ApiKeyController.validate(db, plain)

        stored = await ApiKeyController.get_for_user(db, record.id, "user_a")
        assert stored.last_used_at is not None
        assert stored.last_used_at >= before.replace(microsecond=0)

    async def test_usage_write_failure_does_not_block(self, db, monkeypatch):
        _, plain = await ApiKeyController.issue(db, user_id="user_a", name="k")

        monkeypatch.setattr(
            db, "commit", AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("locked")))
        )
        identity = await ApiKeyController.validate(db, plain)
        assert identity.user_id == "user_a"

    async def test_prefix_alone_does_not_authenticate(self, db):
        record, _ = await ApiKeyController.issue(db, user_id="user_a", name="k")
        with pytest.raises(KeyNotFound):
            await ApiKeyController.validate(db, record.key_prefix)


# ---------------------------------------------------------------------------
# Revogação
# ---------------------------------------------------------------------------

class TestRevoke:
    async def test_revoke_is_idempotent(self, db):
        record, _ = await ApiKeyController.issue(db, user_id="user_a", name="k")

        assert await ApiKeyController.revoke(db, record.id, "user_a") is True
        assert await ApiKeyController.revoke(db, record.id, "user_a") is True

        stored = await ApiKeyController.get_for_user(db, record.id, "user_a")
        assert stored.is_active is False

    async def test_cross_owner_revoke_fails_and_changes_nothing(self, db):
        record, plain = await ApiKeyController.issue(db, user_id="owner_a", name="k")

        assert await ApiKeyController.revoke(db, record.id, "owner_b") is False

        stored = await ApiKeyController.get_for_user(db, record.id, "owner_a")
        assert stored.is_active is True
        assert (await ApiKeyController.validate(db, plain)).user_id == "owner_a"

    async def test_revoke_missing_key(self, db):
        assert await ApiKeyController.revoke(db, 999, "user_a") is False

    async def test_revoke_keeps_row_and_refreshes_updated_at(self, db):
        record, _ = await ApiKeyController.issue(db, user_id="user_a", name="k")
        await ApiKeyController.revoke(db, record.id, "user_a")

        stored = await ApiKeyController.get_for_user(db, record.id, "user_a")
        assert stored is not None
        assert stored.updated_at >= record.updated_at
        assert stored.key_hash == record.key_hash
        assert stored.name == record.name

    async def test_hard_delete_is_owner_scoped(self, db):
        record, _ = await ApiKeyController.issue(db, user_id="user_a", name="k")
        assert await ApiKeyController.delete(db, record.id, "user_b") is False
        assert await ApiKeyController.delete(db, record.id, "user_a") is True
        assert await _count_keys(db) == 0


# ---------------------------------------------------------------------------
# Listagem / decodificação das linhas
# ---------------------------------------------------------------------------

async def test_list_is_owner_scoped_newest_first(db):
    first, _ = await ApiKeyController.issue(db, user_id="user_a", name="one")
    second, _ = await ApiKeyController.issue(db, user_id="user_a", name="two")
    await ApiKeyController.issue(db, user_id="user_b", name="other")

    records = await ApiKeyController.list_for_user(db, "user_a")
    assert [r.id for r in records] == [second.id, first.id]


@pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}', "[1, 2]"])
def test_malformed_scopes_fall_back_to_storage_default(raw):
    now = utcnow()
    row = SimpleNamespace(
        id=1, key_hash="h", key_prefix="nxk_12345678", user_id="u", org_id=None,
        name="n", scopes=raw, is_active=1, last_used_at=None, expires_at=None,
        created_at=now, updated_at=now,
    )
    record = ApiKeyRecord.from_row(row)
    assert record.scopes == ["*"]
    assert record.is_active is True


def test_scopes_json_decoded_once():
    now = utcnow()
    row = SimpleNamespace(
        id=1, key_hash="h", key_prefix="p", user_id="u", org_id="o", name="n",
        scopes=json.dumps(["events:read"]), is_active=0, last_used_at=None,
        expires_at=None, created_at=now, updated_at=now,
    )
    record = ApiKeyRecord.from_row(row)
    assert record.scopes == ["events:read"]
    assert record.is_active is False
