"""Pydantic schemas shared by the store, command and view layers."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import IdeaCategory, IdeaStatus, UserRole, VoteType


class User(BaseModel):
    """Employee profile as exposed by the identity subsystem."""
    id: str
    email: EmailStr
    full_name: str
    avatar_url: Optional[str] = None
    department: str = ""
    role: UserRole = UserRole.USER

    model_config = ConfigDict(from_attributes=True)


class Attachment(BaseModel):
    """File metadata tied to one idea."""
    id: str
    file_name: str
    file_url: str
    file_type: str
    idea_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Comment(BaseModel):
    """Schema for comment response."""
    id: str
    content: str
    created_at: datetime
    user_id: str
    idea_id: str
    user: Optional[User] = None

    model_config = ConfigDict(from_attributes=True)


class Vote(BaseModel):
    id: str
    idea_id: str
    user_id: str
    type: VoteType
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Idea(BaseModel):
    """
    Idea as returned by the list query, with its embedded relations.

    ``status`` stays a plain string so a status value introduced by the
    moderation process later still reads and renders with the fallback badge.
    """
    id: str
    title: str
    description: str
    category: str
    status: str = IdeaStatus.PENDING.value
    votes: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    user_id: str
    user: Optional[User] = None
    comments: List[Comment] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def comments_count(self) -> int:
        return len(self.comments)


class FileUpload(BaseModel):
    """A file picked in the submission form, before it reaches file storage."""
    filename: str = Field(..., min_length=1)
    content: bytes = b""
    content_type: str = "application/octet-stream"


class IdeaFormData(BaseModel):
    """Schema for the new idea form."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: IdeaCategory
    attachments: List[FileUpload] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True)


class IdeaCreate(BaseModel):
    """Row written to the ideas table."""
    title: str
    description: str
    category: IdeaCategory
    user_id: str

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class AttachmentCreate(BaseModel):
    """Row written to the attachments table."""
    idea_id: str
    file_name: str
    file_url: str
    file_type: str

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class VoteCreate(BaseModel):
    """Row written to the votes table."""
    idea_id: str = Field(..., min_length=1)
    user_id: str
    type: VoteType = VoteType.UP

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class CommentCreate(BaseModel):
    """Row written to the comments table."""
    idea_id: str = Field(..., min_length=1)
    user_id: str
    content: str = Field(..., min_length=1, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class UserAuth(BaseModel):
    """Identity extracted from the caller's access token."""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    access_token: Optional[str] = None
