"""Pydantic models for splitledger groups, expenses and balances."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from .config import get_default_currency

MemberId = str

CATEGORIES = [
    "General",
    "Food",
    "Transportation",
    "Housing",
    "Entertainment",
    "Shopping",
    "Utilities",
    "Other",
]


def to_decimal(v: Any) -> Decimal:
    """Coerce a float, int or string amount to Decimal (floats go through str)."""
    if isinstance(v, Decimal):
        return v
    if isinstance(v, float):
        return Decimal(str(v))
    try:
        return Decimal(v)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {v!r}") from e


class SplitShare(BaseModel):
    """The portion of one expense attributed to one member."""

    model_config = {"frozen": True}

    member_id: MemberId
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class Expense(BaseModel):
    """A single expense paid by one member on behalf of others."""

    id: UUID = Field(default_factory=uuid4)
    group_id: str | None = None
    description: str = ""
    amount: Decimal
    currency: str = Field(default_factory=get_default_currency)
    payer_id: MemberId
    shares: list[SplitShare] = Field(min_length=1)
    category: str = "General"
    date: datetime = Field(default_factory=datetime.now)
    notes: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)

    @property
    def shares_total(self) -> Decimal:
        """Sum of all share amounts."""
        return sum((s.amount for s in self.shares), Decimal("0"))


class Balance(BaseModel):
    """Net position of one member. Positive = owed money, negative = owes money."""

    model_config = {"frozen": True}

    member_id: MemberId
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class SettlementInstruction(BaseModel):
    """A recommended payment from a debtor to a creditor."""

    model_config = {"frozen": True}

    from_member: MemberId
    to_member: MemberId
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @model_validator(mode="after")
    def check_distinct_members(self) -> "SettlementInstruction":
        if self.from_member == self.to_member:
            raise ValueError(f"Settlement instruction cannot pay {self.from_member} to themselves")
        return self

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class SettlementStatus(str, Enum):
    """Lifecycle state of a recorded settlement."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Settlement(BaseModel):
    """A recorded payment from one member to another."""

    id: UUID = Field(default_factory=uuid4)
    group_id: str | None = None
    from_member: MemberId
    to_member: MemberId
    amount: Decimal
    currency: str = Field(default_factory=get_default_currency)
    status: SettlementStatus = SettlementStatus.PENDING
    date: datetime = Field(default_factory=datetime.now)
    notes: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @field_serializer("amount")
    def serialize_amount(self, v: Decimal) -> str:
        return str(v)


class SplitType(str, Enum):
    """How an expense is split."""

    EQUAL = "equal"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"  # Specific amounts per member


class Group(BaseModel):
    """A group snapshot: roster, expenses and recorded settlements."""

    id: str | None = None
    name: str
    members: list[MemberId] = Field(default_factory=list)
    currency: str = Field(default_factory=get_default_currency)
    expenses: list[Expense] = Field(default_factory=list)
    settlements: list[Settlement] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()
