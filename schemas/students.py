from pydantic import BaseModel, Field, field_validator
from typing import Literal

ClassLevel = Literal["7", "8", "9"]

# ✅ input (POST / PUT)
class StudentCreate(BaseModel):
    admission_no: str = Field(..., min_length=1, max_length=20)   # admission number (unique)
    name: str = Field(..., min_length=1, max_length=100)          # full name
    class_level: ClassLevel                                       # "7" / "8" / "9"

    @field_validator("admission_no", "name", mode="before")
    @classmethod
    def _strip(cls, v):
        # surrounding whitespace is trimmed before the length checks
        return v.strip() if isinstance(v, str) else v

# ✅ output (GET, detail)
class Student(StudentCreate):
    id: int

    class Config:
        from_attributes = True
