"""
Cash Card Service - CashCard SQLAlchemy Model
===============================================

What:  ORM model representing the `cash_card` table.
Who:   Used by SqlAlchemyCashCardStore and by Alembic for schema management.

Table Design:
    - id: BIGINT identity assigned by the database. Concurrent inserts
      never share an id because the sequence is the database's own.
      SQLite gets a plain INTEGER so the column aliases the rowid.
    - amount: unconstrained NUMERIC, which keeps every digit and the
      scale exactly as written (123.456 stays 123.456, 1.00 stays 1.00).
      SQLite has no exact decimal type, so there the amount is kept as
      its decimal text.
"""

from decimal import Decimal

from sqlalchemy import BigInteger, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from cashcard.database import Base

# Enough for a 38-digit amount with sign, point and exponent
AMOUNT_TEXT_LENGTH = 64

# Largest value a BIGINT id column can hold
MAX_CASH_CARD_ID = 2**63 - 1


class ExactDecimal(TypeDecorator):
    """
    Decimal column that round-trips values without rounding.

    PostgreSQL:  NUMERIC with no precision/scale (asyncpg returns Decimal)
    SQLite:      VARCHAR holding str(Decimal); SQLite's NUMERIC affinity
                 would go through a binary float and drop trailing zeros
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(AMOUNT_TEXT_LENGTH))
        return dialect.type_descriptor(Numeric(asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, Decimal):
            return value
        return Decimal(str(value))


class CashCard(Base):
    """
    A persisted cash card.

    Lifecycle:
        Created by POST /cashcards; never updated or deleted through the API.

    Query Patterns:
        - Point lookup: SELECT ... WHERE id = :id (primary key)
        - Listing: SELECT ... ORDER BY <field> <dir>, id ASC LIMIT :size OFFSET :offset
    """

    __tablename__ = "cash_card"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned identifier",
    )

    amount: Mapped[Decimal] = mapped_column(
        ExactDecimal(),
        nullable=False,
        comment="Card balance",
    )

    def __repr__(self) -> str:
        return f"<CashCard(id={self.id}, amount={self.amount})>"
