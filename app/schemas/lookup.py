"""
Pydantic schemas for reference data (locations, categories, salary types,
employment contract types, application statuses).
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class LookupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class LookupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError('name must not be null')
        return v


class LookupResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobCategoryResponse(LookupResponse):
    description: Optional[str] = None
