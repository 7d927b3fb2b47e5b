"""Tests for AccountService and password hashing."""

import pytest

from x402_exchange.accounts.service import AccountService, hash_password, verify_password
from x402_exchange.common.exceptions import (
    ConfigurationValidationError,
    DuplicateAccountError,
    UnauthorizedError,
)


class TestPasswordHashing:
    def test_roundtrip(self):
        stored = hash_password("s3cret!")
        assert verify_password("s3cret!", stored)
        assert not verify_password("wrong", stored)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_bcrypt_format(self):
        assert hash_password("s3cret!").startswith("$2b$")

    def test_malformed_hash(self):
        assert not verify_password("anything", "")
        assert not verify_password("anything", "salt$deadbeef")


class TestAccountService:
    async def test_create_account(self, session):
        svc = AccountService()
        profile = await svc.create_account(session, "Bob@Example.com", "hunter22", display_name="Bob")
        assert profile.id
        assert profile.email == "bob@example.com"
        assert profile.display_name == "Bob"
        assert profile.password_hash.startswith("$2b$")

    async def test_short_password(self, session):
        with pytest.raises(ConfigurationValidationError):
            await AccountService().create_account(session, "bob@example.com", "12345")

    async def test_duplicate_email(self, session):
        svc = AccountService()
        await svc.create_account(session, "bob@example.com", "hunter22")
        with pytest.raises(DuplicateAccountError):
            await svc.create_account(session, "BOB@example.com", "hunter23")

    async def test_authenticate(self, session):
        svc = AccountService()
        created = await svc.create_account(session, "bob@example.com", "hunter22")
        profile = await svc.authenticate(session, "bob@example.com", "hunter22")
        assert profile.id == created.id

    async def test_authenticate_wrong_password(self, session):
        svc = AccountService()
        await svc.create_account(session, "bob@example.com", "hunter22")
        with pytest.raises(UnauthorizedError):
            await svc.authenticate(session, "bob@example.com", "nope-nope")

    async def test_authenticate_unknown_email(self, session):
        with pytest.raises(UnauthorizedError):
            await AccountService().authenticate(session, "ghost@example.com", "whatever")

    async def test_get_by_id(self, session, user_id):
        profile = await AccountService().get_by_id(session, user_id)
        assert profile is not None
        assert await AccountService().get_by_id(session, "missing") is None
