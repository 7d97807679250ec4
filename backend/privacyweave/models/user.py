from sqlalchemy import Column, DateTime, Integer, Text

from privacyweave.database import Base
from privacyweave.models.timestamps import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    password_hash = Column("password", Text, nullable=False)
    role = Column(Text, nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
