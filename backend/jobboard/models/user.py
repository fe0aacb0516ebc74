from sqlalchemy import Column, ForeignKey, Text
from jobboard.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text)
    image = Column(Text)
    role = Column(Text, nullable=False, default="jobseeker")
    company_id = Column(Text, ForeignKey("companies.id", ondelete="SET NULL"))
    created_at = Column(Text, nullable=False)


class Follow(Base):
    __tablename__ = "follows"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Text, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(Text, nullable=False)
