from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship
from jobboard.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    order_rank = Column(Integer)

    jobs = relationship("Job", back_populates="category")
