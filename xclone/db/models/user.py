from sqlalchemy import Column, Integer, String, DateTime, Date
from sqlalchemy.sql import func
from xclone.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(20), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    first_name = Column(String(32), nullable=False)
    last_name = Column(String(32), nullable=False)
    birthday = Column(Date, nullable=True)
    bio = Column(String(300), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # cached aggregates of the followers table
    followers_count = Column(Integer, nullable=False, default=0, server_default="0")
    following_count = Column(Integer, nullable=False, default=0, server_default="0")
