from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class GuestModel(Base):
    __tablename__ = 'guest'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    sortname: Mapped[str] = mapped_column(String, nullable=False, default='')
    email: Mapped[str] = mapped_column(String, nullable=False, default='')
    address: Mapped[str] = mapped_column(String, nullable=False, default='')
    city: Mapped[str] = mapped_column(String, nullable=False, default='')
    state: Mapped[str] = mapped_column(String, nullable=False, default='')
    zip: Mapped[str] = mapped_column(String, nullable=False, default='')
    phone: Mapped[str] = mapped_column(String, nullable=False, default='')
    requests: Mapped[str] = mapped_column(String, nullable=False, default='')
    party: Mapped[int] = mapped_column(Integer, ForeignKey('party.id'), nullable=False, index=True)
    bidder: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    stripe_customer: Mapped[str] = mapped_column('stripeCustomer', String, nullable=False, default='')
    stripe_source: Mapped[str] = mapped_column('stripeSource', String, nullable=False, default='')
    stripe_description: Mapped[str] = mapped_column(
        'stripeDescription', String, nullable=False, default=''
    )
    use_card: Mapped[bool] = mapped_column('useCard', Boolean, nullable=False, default=False)
    # NULL = pays own way
    payer: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('guest.id'), nullable=True, index=True
    )
