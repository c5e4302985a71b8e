from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from car_api.core.db import Base


class Colour(Base):
    __tablename__ = "colours"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    cars = relationship("Car", back_populates="colour")
