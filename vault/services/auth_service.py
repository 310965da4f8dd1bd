"""
Authentication and registration use cases.

Passwords are kept and compared as typed (no hashing) and there is no rate
limiting or lockout; both are known gaps of this app, not oversights here.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from vault.core.utils import normalize_amount, parse_amount
from vault.domain.accounts import CREDIT, MIN_INITIAL_BALANCE, Transaction, User
from vault.repositories.user_repository import UserRepository
from vault.services.session_service import delete_session, issue_session

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(RegistrationError):
    def __init__(self, message: str = "Email is already registered."):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    pass


@dataclass
class RegisterResult:
    user: User
    session_token: str


@dataclass
class LoginSuccess:
    user: User
    session_token: str

    @property
    def low_balance(self) -> bool:
        return self.user.low_balance


@dataclass
class AuthService:
    """Handles sign-up, login and logout flows."""

    repository: Optional[UserRepository] = None

    def __post_init__(self):
        self.repository = self.repository or UserRepository()

    # -------------------------------------- sign up --------------------------------------
    def register(self, name: str, email: str, password: str, initial_balance) -> RegisterResult:
        amount = parse_amount(initial_balance)
        if amount is None or amount < MIN_INITIAL_BALANCE:
            raise RegistrationError("Initial balance must be at least Rs. 5,000.")
        raw_email = (email or "").strip()
        if not raw_email:
            raise RegistrationError("Email is required.")
        users = self.repository.list_users()
        if self.repository.find_by_email(users, raw_email):
            raise AccountExistsError()
        balance = normalize_amount(amount)
        user = User(
            name=(name or "").strip(),
            email=raw_email,
            password=password or "",
            balance=balance,
            items=[],
            transactions=[Transaction.now(CREDIT, balance)],
        )
        users.append(user)
        self.repository.persist(users)
        logger.info("Registered %s with opening balance %s", raw_email, balance)
        return RegisterResult(user=user, session_token=issue_session(raw_email))

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginSuccess:
        raw_email = (email or "").strip()
        if not raw_email or not password:
            raise InvalidCredentialsError("Invalid email or password.")
        user = self.repository.find_by_email(self.repository.list_users(), raw_email)
        if not user or user.password != password:
            logger.info("Failed login for %s", raw_email)
            raise InvalidCredentialsError("Invalid email or password.")
        token = issue_session(raw_email)
        logger.info("Login for %s", raw_email)
        return LoginSuccess(user=user, session_token=token)

    def logout(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        delete_session(session_token)
