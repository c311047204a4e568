from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class PurchaseModel(Base):
    __tablename__ = 'purchase'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guest: Mapped[int] = mapped_column(Integer, ForeignKey('guest.id'), nullable=False, index=True)
    payer: Mapped[int] = mapped_column(Integer, ForeignKey('guest.id'), nullable=False, index=True)
    item: Mapped[int] = mapped_column(Integer, ForeignKey('item.id'), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_timestamp: Mapped[str] = mapped_column(
        'paymentTimestamp', String, nullable=False, default=''
    )
    payment_description: Mapped[str] = mapped_column(
        'paymentDescription', String, nullable=False, default=''
    )
    schola_order: Mapped[int] = mapped_column('scholaOrder', Integer, nullable=False, default=0)
    picked_up: Mapped[bool] = mapped_column('pickedUp', Boolean, nullable=False, default=False)
