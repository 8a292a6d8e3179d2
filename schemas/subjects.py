from pydantic import BaseModel, Field, field_validator
from schemas.students import ClassLevel

# ✅ input: POST / PUT body
class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)    # subject name
    class_level: ClassLevel                                 # class level offering the subject

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

# ✅ output
class Subject(SubjectCreate):
    id: int                                                 # subject ID

    class Config:
        from_attributes = True
