"""
Stock ledger model - one row per posting against a stock code
"""
import enum
import uuid

from sqlalchemy import Column, String, Float, BigInteger, Enum

from stockflow.database.base import Base
from stockflow.utils.dates import now_ms


class TransactionType(str, enum.Enum):
    """Ledger posting types"""
    IN = "IN"              # stock entry, increases balance
    OUT = "OUT"            # confirmed usage, decreases balance
    TEMP_USE = "TEMP_USE"  # pending order, decreases physical balance only


class AccountStatus(str, enum.Enum):
    """Derived status of a stock code"""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class StockItem(Base):
    """Ledger transaction"""
    __tablename__ = "stock_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = Column(String(20), nullable=False)  # 30-Nov-2025
    code = Column(String(50), nullable=False, index=True)
    provider = Column(String(100), nullable=False, default="")
    phone_number = Column(String(50), nullable=False, default="")
    amount = Column(Float, nullable=False, default=0)
    type = Column(Enum(TransactionType), nullable=False)
    order_number = Column(String(100), nullable=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)
    created_by = Column(String(100), nullable=True)

    def __repr__(self):
        return f"<StockItem {self.code}: {self.type} {self.amount}>"

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "code": self.code,
            "provider": self.provider,
            "phone_number": self.phone_number,
            "amount": self.amount,
            "type": TransactionType(self.type).value,
            "order_number": self.order_number,
            "created_at": self.created_at,
            "created_by": self.created_by,
        }
