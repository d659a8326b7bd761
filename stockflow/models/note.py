"""
Team note model
"""
import uuid

from sqlalchemy import Column, String, Text, BigInteger

from stockflow.database.base import Base
from stockflow.utils.dates import now_ms


class Note(Base):
    """Free-text team memo"""
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    content = Column(Text, nullable=False)
    author = Column(String(100), nullable=False)
    color = Column(String(100), nullable=False, default="yellow")
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)
    image_url = Column(Text, nullable=True)  # data URL

    def __repr__(self):
        return f"<Note {self.id} by {self.author}>"

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author,
            "color": self.color,
            "created_at": self.created_at,
            "image_url": self.image_url,
        }
