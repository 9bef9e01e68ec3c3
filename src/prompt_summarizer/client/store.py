"""Local SQLite history of summaries, via SQLAlchemy."""
from __future__ import annotations
from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from prompt_summarizer.common.schema import SummaryRecord


class Base(DeclarativeBase):
    pass


class SummaryModel(Base):
    """SQLAlchemy model for the summaries table."""

    __tablename__ = "summaries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    # ISO-8601 UTC; sorts chronologically as a string.
    timestamp: Mapped[str] = mapped_column(String(40), index=True, nullable=False)

    def to_record(self) -> SummaryRecord:
        return SummaryRecord(id=self.id, text=self.text, summary=self.summary, timestamp=self.timestamp)


def _iso_utc(ts: datetime) -> str:
    # Fixed width in UTC so string order is time order.
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SummaryStore:
    """
    Append-only store of summary records.

    Records are never updated or deleted; clearing the store means removing
    the database file.
    """

    def __init__(self, url: str = "sqlite:///summaries.db") -> None:
        self.engine = create_engine(url)
        Base.metadata.create_all(self.engine)

    def add(self, text: str, summary: str, timestamp: datetime | None = None) -> SummaryRecord:
        """
        Store a record stamped with ``timestamp`` (default: now).

        Raises:
            ValueError: ``timestamp`` is naive.
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        elif timestamp.tzinfo is None or timestamp.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")
        ts = _iso_utc(timestamp)
        with Session(self.engine) as session:
            row = SummaryModel(text=text, summary=summary, timestamp=ts)
            session.add(row)
            session.commit()
            return row.to_record()

    def all(self) -> list[SummaryRecord]:
        """All records, oldest first by timestamp."""
        stmt = select(SummaryModel).order_by(SummaryModel.timestamp, SummaryModel.id)
        with Session(self.engine) as session:
            return [row.to_record() for row in session.scalars(stmt)]

    def newest_first(self) -> list[SummaryRecord]:
        return list(reversed(self.all()))

    def close(self) -> None:
        self.engine.dispose()
