from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class TableModel(Base):
    __tablename__ = 'gtable'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 0 = placeholder; nonzero numbers are unique, enforced by the lifecycle service
    num: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
