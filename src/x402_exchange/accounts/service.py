"""Account service: sign-up, password login and profile lookup."""

from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.accounts.models import ProfileModel
from x402_exchange.common.exceptions import (
    ConfigurationValidationError,
    DuplicateAccountError,
    UnauthorizedError,
)

MIN_PASSWORD_LENGTH = 6

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, stored: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return pwd_context.verify(password, stored)
    except ValueError:
        return False


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Profile management operations."""

    async def create_account(
        self,
        session: AsyncSession,
        email: str,
        password: str,
        display_name: str = "",
    ) -> ProfileModel:
        email = _normalize_email(email)
        if not email or "@" not in email:
            raise ConfigurationValidationError("A valid email is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ConfigurationValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if await self.get_by_email(session, email) is not None:
            raise DuplicateAccountError()

        profile = ProfileModel(
            email=email,
            password_hash=hash_password(password),
            display_name=display_name,
        )
        session.add(profile)
        await session.flush()
        return profile

    async def authenticate(
        self, session: AsyncSession, email: str, password: str
    ) -> ProfileModel:
        profile = await self.get_by_email(session, email)
        if profile is None or not verify_password(password, profile.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return profile

    async def get_by_id(
        self, session: AsyncSession, user_id: str
    ) -> ProfileModel | None:
        return await session.get(ProfileModel, user_id)

    async def get_by_email(
        self, session: AsyncSession, email: str
    ) -> ProfileModel | None:
        result = await session.execute(
            select(ProfileModel).where(
                func.lower(ProfileModel.email) == _normalize_email(email)
            )
        )
        return result.scalar_one_or_none()
