from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.sql import func
from xclone.db.base import Base


class Repost(Base):
    __tablename__ = "reposts"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    reposted_post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
