"""Business-key counters (SO-0001, ORD-1001, JC-5001)."""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute


def max_sequence_value(values: Iterable[str], prefix: str, base: int = 0) -> int:
    """Highest numeric suffix among values carrying the prefix.

    Values with a non-numeric suffix are ignored.

    Args:
        values: Existing business keys
        prefix: Key prefix, e.g. "ORD-"
        base: Value returned when nothing matches

    Returns:
        Largest suffix found, or base
    """
    highest = base
    for value in values:
        if not value or not value.startswith(prefix):
            continue
        suffix = value[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


async def next_sequence_value(
    session: AsyncSession,
    column: InstrumentedAttribute,
    prefix: str,
    base: int = 0,
) -> int:
    """Next free counter value for a business-key column.

    Args:
        session: SQLAlchemy async session
        column: Mapped column holding the keys
        prefix: Key prefix
        base: Counter start; the first key issued is base + 1

    Returns:
        Next counter value
    """
    result = await session.execute(select(column).where(column.like(f"{prefix}%")))
    return max_sequence_value(result.scalars().all(), prefix, base) + 1
