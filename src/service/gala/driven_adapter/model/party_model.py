from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class PartyModel(Base):
    __tablename__ = 'party'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gtable: Mapped[int] = mapped_column(Integer, ForeignKey('gtable.id'), nullable=False, index=True)
    place: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
