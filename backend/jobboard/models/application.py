from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from jobboard.database import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Text, primary_key=True)
    job_id = Column(Text, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_name = Column(Text, nullable=False)
    # Not unique: one application per (job, email) is checked before insert only
    applicant_email = Column(Text, nullable=False, index=True)
    applicant_phone = Column(Text)
    resume_url = Column(Text)
    linked_in = Column(Text)
    cover_message = Column(Text)
    status = Column(Text, nullable=False, default="new")
    rating = Column(Integer)
    applied_date = Column(Text, nullable=False)
    employer_notes = Column(Text)
    interview_date = Column(Text)

    job = relationship("Job", back_populates="applications")
