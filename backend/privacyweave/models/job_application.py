from sqlalchemy import Column, DateTime, Integer, Text

from privacyweave.database import Base
from privacyweave.models.timestamps import utcnow


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True)
    full_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    position = Column(Text, nullable=False)
    experience = Column(Text, nullable=False)
    message = Column(Text)
    resume_path = Column(Text)
    resume_kind = Column(Text)  # 'file' | 'link'
    application_type = Column(Text, nullable=False, default="job")
    # Internship-only, advisory
    education = Column(Text)
    university = Column(Text)
    graduation_year = Column(Text)
    availability_date = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
