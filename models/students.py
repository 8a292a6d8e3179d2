from sqlalchemy import Column, Integer, String, Enum, DateTime, func
from database.db import Base
from config.academic import CLASS_LEVELS

class Student(Base):
    __tablename__ = "students"  # student master records

    id = Column(Integer, primary_key=True, index=True)                        # student ID (Primary Key)
    admission_no = Column(String(20), nullable=False, unique=True)            # admission number (globally unique)
    name = Column(String(100), nullable=False)                                # full name
    class_level = Column(Enum(*CLASS_LEVELS, name="class_level"),
                         nullable=False, index=True)                          # "7" / "8" / "9"
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
