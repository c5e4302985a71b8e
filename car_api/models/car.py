from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from car_api.core.db import Base


class Car(Base):
    __tablename__ = "cars"
    # AUTOINCREMENT keeps SQLite from handing out ids of deleted rows again
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    make = Column(String, nullable=False)
    model = Column(String, nullable=False)
    build_date = Column("builddate", String, nullable=False)  # 'YYYY-MM-DD'
    colour_id = Column("colourid", Integer, ForeignKey("colours.id"), nullable=False)

    colour = relationship("Colour", back_populates="cars")
