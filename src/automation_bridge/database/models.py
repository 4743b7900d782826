"""SQLAlchemy database models."""

import enum
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Enum, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class RuleType(str, enum.Enum):
    """Transform applied when an automation rule executes."""

    TO_UPPERCASE = "TO_UPPERCASE"


class Account(Base):
    """A connected installation, identified by the platform's account id."""

    __tablename__ = "accounts"

    account_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        # Never print the token
        return f"<Account(account_id={self.account_id})>"


class AutomationRule(Base):
    """A registered automation subscription for a board."""

    __tablename__ = "automation_rules"

    webhook_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    board_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Not a foreign key: the account row may be written after the subscription
    account_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    rule_type: Mapped[RuleType] = mapped_column(
        Enum(RuleType, name="rule_type", native_enum=False, length=32),
        default=RuleType.TO_UPPERCASE,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<AutomationRule(webhook_id={self.webhook_id}, board_id={self.board_id}, "
            f"account_id={self.account_id}, rule_type={self.rule_type.value})>"
        )
