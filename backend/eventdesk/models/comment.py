"""Discussion comment ORM model."""
import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventdesk.database import Base


class Comment(Base):
    __tablename__ = "comments"

    # Autoincrement key doubles as the insertion-order tiebreaker.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(String(36), nullable=False, unique=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="comments")
    author = relationship("User")
