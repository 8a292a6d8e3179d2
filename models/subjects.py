from sqlalchemy import Column, Integer, String, Enum, DateTime, UniqueConstraint, func
from database.db import Base
from config.academic import CLASS_LEVELS

class Subject(Base):
    __tablename__ = "subjects"  # subjects offered per class level
    __table_args__ = (
        # the same subject name may exist once per class level
        UniqueConstraint("name", "class_level", name="uq_subject_name_class"),
    )

    id = Column(Integer, primary_key=True, index=True)          # subject ID (Primary Key)
    name = Column(String(100), nullable=False)                  # subject name (e.g. Mathematics)
    class_level = Column(Enum(*CLASS_LEVELS, name="class_level"),
                         nullable=False, index=True)            # "7" / "8" / "9"
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
