from pydantic import BaseModel, Field


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    primary_muscle: str | None = Field(None, max_length=255)
    secondary_muscles: list[str] | None = Field(None, description="Ordered, most involved first")

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    primary_muscle: str | None = Field(None, max_length=255)
    secondary_muscles: list[str] | None = None

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class ExerciseResponse(BaseModel):
    id: int
    name: str
    primary_muscle: str | None = None
    secondary_muscles: list[str] = Field(default_factory=list)
    is_custom: bool = Field(False, description="True for entries created by the requesting user")
