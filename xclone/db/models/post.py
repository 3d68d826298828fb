from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from xclone.db.base import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(String(1000), nullable=False)
    likes_count = Column(Integer, nullable=False, default=0, server_default="0")
    reposts_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    # set when this post quotes another one
    original_post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=True)

    original_post = relationship("Post", remote_side=[id])
