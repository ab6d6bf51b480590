from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredRecord(SQLModel, table=True):
    __tablename__ = "stored_record"

    key: str = Field(primary_key=True, max_length=64)
    # JSON text of the record
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)
