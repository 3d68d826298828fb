from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ContentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class PostOut(BaseModel):
    id: int
    user_id: int
    content: str
    likes_count: int = 0
    reposts_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_post_id: Optional[int] = None
    original_post: Optional["PostOut"] = None

    class Config:
        from_attributes = True


PostOut.model_rebuild()
