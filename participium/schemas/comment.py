from datetime import datetime
from typing import Optional

from pydantic import Field

from participium.schemas.base import CamelModel


class AuthorResponse(CamelModel):
    id: int
    username: str
    first_name: str
    last_name: str
    role: str


class CreateCommentRequest(CamelModel):
    content: str = Field(..., description="Comment text, 1-2000 characters after trimming")


class CreateMessageRequest(CamelModel):
    content: str = Field(..., description="Message text, 1-2000 characters after trimming")


class CommentResponse(CamelModel):
    id: int
    report_id: int
    author: AuthorResponse
    content: str
    created_at: Optional[datetime] = None


class MessageResponse(CamelModel):
    id: int
    report_id: int
    author: AuthorResponse
    content: str
    created_at: Optional[datetime] = None
