from sqlalchemy import Column, DateTime, Integer, Text

from privacyweave.database import Base
from privacyweave.models.timestamps import utcnow


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    industry = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
