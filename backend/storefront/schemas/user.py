from typing import Optional

from pydantic import BaseModel, Field


class ProfileOut(BaseModel):
    """Saved checkout details for the signed-in customer."""
    full_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = Field(None, min_length=10)
    address: Optional[str] = Field(None, min_length=5)
    city: Optional[str] = Field(None, min_length=2)
    state: Optional[str] = Field(None, min_length=2)
    postal_code: Optional[str] = Field(None, min_length=6)
