"""Wallet use cases: purchases from the catalog and adding funds."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from vault.core.utils import normalize_amount, parse_amount, plain_amount
from vault.domain.accounts import User
from vault.domain.catalog import Product, find_product
from vault.repositories.user_repository import UserNotFoundError, UserRepository

logger = logging.getLogger(__name__)

LOW_BALANCE_MESSAGE = "Your wallet balance is below Rs. 5,000. Please add more funds."


class WalletError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientFundsError(WalletError):
    def __init__(self, message: str = "Insufficient balance. Please add more funds."):
        super().__init__(message)


class InvalidAmountError(WalletError):
    def __init__(self, message: str = "Please enter a valid amount."):
        super().__init__(message)


class UnknownProductError(WalletError):
    def __init__(self, message: str = "Unknown product."):
        super().__init__(message)


@dataclass
class PurchaseResult:
    user: User
    product: Product

    @property
    def message(self) -> str:
        return f"Purchase successful! Rs. {plain_amount(self.product.price)} deducted from your wallet."

    @property
    def low_balance(self) -> bool:
        return self.user.low_balance


@dataclass
class FundsResult:
    user: User
    amount: float

    @property
    def message(self) -> str:
        return f"Successfully added Rs. {plain_amount(self.amount)} to your wallet."


@dataclass
class WalletService:
    repository: Optional[UserRepository] = None

    def __post_init__(self):
        self.repository = self.repository or UserRepository()

    def _load(self, email: str) -> tuple[list[User], User]:
        users = self.repository.list_users()
        user = self.repository.find_by_email(users, email)
        if not user:
            raise UserNotFoundError(email)
        return users, user

    def purchase(self, email: str, product_name: str) -> PurchaseResult:
        product = find_product(product_name)
        if not product:
            raise UnknownProductError()
        users, user = self._load(email)
        if user.balance < product.price:
            raise InsufficientFundsError()
        user.debit(product.price)
        self.repository.persist(self.repository.replace(users, email, user))
        logger.info("%s bought %s for %s", email, product.name, product.price)
        return PurchaseResult(user=user, product=product)

    def add_funds(self, email: str, raw_amount) -> FundsResult:
        amount = parse_amount(raw_amount)
        if amount is None or amount <= 0:
            raise InvalidAmountError()
        amount = normalize_amount(amount)
        users, user = self._load(email)
        user.credit(amount)
        self.repository.persist(self.repository.replace(users, email, user))
        logger.info("%s added %s to the wallet", email, amount)
        return FundsResult(user=user, amount=amount)
