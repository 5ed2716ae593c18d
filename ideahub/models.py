"""SQLAlchemy models backing the local remote store."""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, event, update
from sqlalchemy.orm import relationship

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class IdeaStatus(str, enum.Enum):
    """Enum for idea status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IMPLEMENTED = "implemented"


class IdeaCategory(str, enum.Enum):
    """Enum for the categories offered by the submission form."""
    PROCESS_IMPROVEMENT = "process-improvement"
    PRODUCT_FEATURE = "product-feature"
    EMPLOYEE_EXPERIENCE = "employee-experience"
    CUSTOMER_EXPERIENCE = "customer-experience"
    OTHER = "other"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class VoteType(str, enum.Enum):
    """Enum for vote directions."""
    UP = "up"
    DOWN = "down"


class User(Base):
    """Employee profile, owned by the identity subsystem."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(100), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    department = Column(String(100), nullable=False, default="")
    role = Column(String(20), nullable=False, default=UserRole.USER.value)

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"


class Idea(Base):
    """Idea model representing user-submitted ideas."""
    __tablename__ = "ideas"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=IdeaStatus.PENDING.value, index=True)

    # Maintained from inserted vote rows, see _apply_vote below
    votes = Column(Integer, nullable=False, default=0)

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    # Relationships
    user = relationship("User")
    comments = relationship("Comment", back_populates="idea", order_by="Comment.created_at")
    attachments = relationship("Attachment", back_populates="idea", order_by="Attachment.created_at")

    def __repr__(self):
        return f"<Idea(id='{self.id}', title='{self.title}', status={self.status})>"


class Comment(Base):
    """Comment model for idea discussions."""
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=_uuid)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    idea_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)

    # Relationships
    idea = relationship("Idea", back_populates="comments")
    user = relationship("User")

    def __repr__(self):
        return f"<Comment(id='{self.id}', idea_id='{self.idea_id}', user_id='{self.user_id}')>"


class Attachment(Base):
    """Metadata of a file uploaded alongside an idea."""
    __tablename__ = "attachments"

    id = Column(String(36), primary_key=True, default=_uuid)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1000), nullable=False)
    file_type = Column(String(255), nullable=False, default="application/octet-stream")
    idea_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    idea = relationship("Idea", back_populates="attachments")

    def __repr__(self):
        return f"<Attachment(id='{self.id}', file_name='{self.file_name}')>"


class Vote(Base):
    """Vote model. Repeat votes by the same user are allowed."""
    __tablename__ = "votes"

    id = Column(String(36), primary_key=True, default=_uuid)
    idea_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False, default=VoteType.UP.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    def __repr__(self):
        return f"<Vote(id='{self.id}', idea_id='{self.idea_id}', user_id='{self.user_id}', type={self.type})>"


VOTE_WEIGHTS = {VoteType.UP.value: 1, VoteType.DOWN.value: -1}


@event.listens_for(Vote, "after_insert")
def _apply_vote(mapper, connection, target):
    """Keep ideas.votes equal to the signed sum of the idea's vote rows."""
    weight = VOTE_WEIGHTS.get(getattr(target.type, "value", target.type), 0)
    connection.execute(
        update(Idea.__table__)
        .where(Idea.__table__.c.id == target.idea_id)
        .values(votes=Idea.__table__.c.votes + weight)
    )


# Table name -> mapped class, used by the local store for generic select/insert
TABLES = {
    "users": User,
    "ideas": Idea,
    "comments": Comment,
    "attachments": Attachment,
    "votes": Vote,
}
