from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ColourOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CarCreate(BaseModel):
    """A candidate car as submitted; presence of each field is checked by the validator."""
    model_config = ConfigDict(populate_by_name=True)

    make: Optional[str] = None
    model: Optional[str] = None
    build_date: Optional[str] = Field(None, alias="buildDate", description="YYYY-MM-DD")
    colour_id: Optional[int] = Field(None, alias="colourId")


class CarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    make: str
    model: str
    build_date: str = Field(..., serialization_alias="buildDate")
    colour: ColourOut
