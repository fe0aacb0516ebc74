from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, JSON, Text
from sqlalchemy.orm import relationship
from jobboard.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    company_id = Column(Text, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Text, ForeignKey("categories.id", ondelete="SET NULL"), index=True)
    description = Column(Text)
    requirements = Column(Text)
    responsibilities = Column(Text)

    salary_type = Column(Text)
    salary_min = Column(Float)
    salary_max = Column(Float)
    show_salary = Column(Boolean, nullable=False, default=True)

    city = Column(Text)
    county = Column(Text)
    zip_code = Column(Text)
    lat = Column(Float)
    lng = Column(Float)

    remote_options = Column(Text, default="onsite")
    job_type = Column(Text)
    experience_level = Column(Text)
    benefits = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    application_deadline = Column(Text)
    start_date = Column(Text)
    is_urgent = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)
    status = Column(Text, nullable=False, default="draft", index=True)

    view_count = Column(Integer, nullable=False, default=0)
    application_count = Column(Integer, nullable=False, default=0)
    published_at = Column(Text)
    expires_at = Column(Text)
    created_at = Column(Text, nullable=False)

    company = relationship("Company", back_populates="jobs")
    category = relationship("Category", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
