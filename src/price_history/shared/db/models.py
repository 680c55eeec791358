from sqlalchemy import TIMESTAMP, Column, Float, Index, Integer, String

from .base import Base


class PriceEntry(Base):
    __tablename__ = "price_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp_utc = Column(TIMESTAMP, nullable=False)
    minute_of_day = Column(Integer, nullable=False)
    asset = Column(String(16), nullable=False)
    currency = Column(String(16), nullable=False)
    price = Column(Float, nullable=False)

    __table_args__ = (
        Index("idx_price_entries_time", "timestamp_utc"),
        Index("idx_price_entries_minute", "minute_of_day"),
    )
