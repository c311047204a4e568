from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class JournalModel(Base):
    """Append-only audit of every committed change; the row id is the sequence number."""

    __tablename__ = 'journal'
    __table_args__ = {'sqlite_autoincrement': True}  # ids are never reused

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    timestamp: Mapped[str] = mapped_column(String, nullable=False)
    change: Mapped[str] = mapped_column(Text, nullable=False)
