from sqlalchemy import Boolean, Column, DateTime, Integer, Text

from privacyweave.database import Base
from privacyweave.models.timestamps import utcnow


class JobListing(Base):
    __tablename__ = "job_listings"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    employment_type = Column("type", Text, nullable=False)
    location = Column(Text, nullable=False)
    experience = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    listing_category = Column(Text, default="job")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
