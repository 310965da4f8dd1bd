"""
Users and their wallet ledger, in the exact shape kept under the "users" key.

A user record is
  {"name", "email", "password", "balance", "items": [...], "transactions": [...]}
Email is the only lookup key (case-sensitive). Passwords are stored as typed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from vault.core.utils import locale_timestamp, normalize_amount, parse_amount
from vault.domain.items import Item

MIN_INITIAL_BALANCE = 5000
LOW_BALANCE_THRESHOLD = 5000

CREDIT = "Credit"
DEBIT = "Debit"


def _number(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return parse_amount(value) or 0


@dataclass
class Transaction:
    type: str
    amount: float
    date: str

    @classmethod
    def now(cls, type_: str, amount: float) -> "Transaction":
        return cls(type=type_, amount=normalize_amount(amount), date=locale_timestamp())

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "amount": self.amount, "date": self.date}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Transaction":
        return Transaction(
            type=str(d.get("type", "")),
            amount=_number(d.get("amount")),
            date=str(d.get("date", "") or ""),
        )


@dataclass
class User:
    name: str
    email: str
    password: str
    balance: float = 0
    items: List[Item] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)

    @property
    def low_balance(self) -> bool:
        return self.balance < LOW_BALANCE_THRESHOLD

    def credit(self, amount: float) -> Transaction:
        self.balance = normalize_amount(self.balance + amount)
        tx = Transaction.now(CREDIT, amount)
        self.transactions.append(tx)
        return tx

    def debit(self, amount: float) -> Transaction:
        # callers check funds first; the balance is never clamped
        self.balance = normalize_amount(self.balance - amount)
        tx = Transaction.now(DEBIT, amount)
        self.transactions.append(tx)
        return tx

    def transactions_newest_first(self) -> List[Transaction]:
        return list(reversed(self.transactions))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "balance": self.balance,
            "items": [item.to_dict() for item in self.items],
            "transactions": [tx.to_dict() for tx in self.transactions],
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "User":
        """Tolerates missing keys so older or hand-edited records still load."""
        items = d.get("items") or []
        transactions = d.get("transactions") or []
        return User(
            name=str(d.get("name", "") or ""),
            email=str(d.get("email", "") or ""),
            password=str(d.get("password", "") or ""),
            balance=_number(d.get("balance")),
            items=[Item.from_dict(i) for i in items if isinstance(i, dict)],
            transactions=[Transaction.from_dict(t) for t in transactions if isinstance(t, dict)],
        )
