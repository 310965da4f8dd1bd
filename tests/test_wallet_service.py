from __future__ import annotations

import pytest

from vault.repositories.user_repository import UserNotFoundError, UserRepository
from vault.services.auth_service import AuthService
from vault.services.wallet_service import (
    InsufficientFundsError,
    InvalidAmountError,
    UnknownProductError,
    WalletService,
)

EMAIL = "ana@example.com"


@pytest.fixture()
def wallet():
    AuthService().register("Ana", EMAIL, "pw", 5000)
    return WalletService()


def _user():
    return UserRepository().get_user(EMAIL)


def test_purchase_debits_and_logs(wallet):
    result = wallet.purchase(EMAIL, "Pizza")

    assert result.message == "Purchase successful! Rs. 500 deducted from your wallet."
    assert result.low_balance is True
    user = _user()
    assert user.balance == 4500
    assert (user.transactions[-1].type, user.transactions[-1].amount) == ("Debit", 500)


def test_purchase_with_insufficient_funds_changes_nothing(wallet):
    for _ in range(6):
        wallet.purchase(EMAIL, "Steak")  # 5000 - 4800 = 200
    before = _user()
    with pytest.raises(InsufficientFundsError):
        wallet.purchase(EMAIL, "Burger")
    assert _user() == before


def test_exact_balance_can_be_spent(wallet):
    for _ in range(6):
        wallet.purchase(EMAIL, "Steak")
    wallet.purchase(EMAIL, "Fries")
    assert _user().balance == 0


def test_unknown_product(wallet):
    with pytest.raises(UnknownProductError):
        wallet.purchase(EMAIL, "Caviar")


@pytest.mark.parametrize("amount", ["", "abc", "0", "-5", "inf", "nan"])
def test_add_funds_rejects_invalid_amounts(wallet, amount):
    with pytest.raises(InvalidAmountError):
        wallet.add_funds(EMAIL, amount)
    assert len(_user().transactions) == 1


def test_add_funds_credits_and_logs(wallet):
    result = wallet.add_funds(EMAIL, "1000")
    assert result.message == "Successfully added Rs. 1000 to your wallet."
    user = _user()
    assert user.balance == 6000
    assert [t.type for t in user.transactions_newest_first()] == ["Credit", "Credit"]


def test_scenario_from_signup_to_top_up(wallet):
    wallet.purchase(EMAIL, "Pizza")
    wallet.purchase(EMAIL, "Soda")
    wallet.add_funds(EMAIL, 600)
    user = _user()
    assert user.balance == 5000
    assert [(t.type, t.amount) for t in user.transactions] == [
        ("Credit", 5000),
        ("Debit", 500),
        ("Debit", 100),
        ("Credit", 600),
    ]
    assert user.low_balance is False


def test_missing_user():
    with pytest.raises(UserNotFoundError):
        WalletService().add_funds("ghost@example.com", 10)


def test_signup_login_buy_burger():
    auth = AuthService()
    auth.register("A", "a@x.com", "p", 5000)
    outcome = auth.login("a@x.com", "p")
    assert outcome.low_balance is False

    result = WalletService().purchase("a@x.com", "Burger")
    assert result.user.balance == 4700
    assert result.low_balance is True
    assert [(t.type, t.amount) for t in result.user.transactions] == [("Credit", 5000), ("Debit", 300)]
