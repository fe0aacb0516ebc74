from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, JSON, Text
from sqlalchemy.orm import relationship
from jobboard.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    logo_url = Column(Text)
    description = Column(Text)
    website = Column(Text)
    email = Column(Text)
    phone = Column(Text)
    size = Column(Text)
    benefits_offered = Column(JSON, nullable=False, default=list)
    verified = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Text, index=True)
    created_at = Column(Text, nullable=False)

    locations = relationship(
        "CompanyLocation",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="CompanyLocation.id",
    )
    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan")


class CompanyLocation(Base):
    __tablename__ = "company_locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Text, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    city = Column(Text, nullable=False)
    county = Column(Text)
    zip_code = Column(Text)
    lat = Column(Float)
    lng = Column(Float)

    company = relationship("Company", back_populates="locations")
