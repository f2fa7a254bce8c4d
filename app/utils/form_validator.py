from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class _StrippedModel(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class LostReportCreate(_StrippedModel):
    itemName: str = Field(min_length=2, max_length=60)
    itemType: str = Field(min_length=2, max_length=40)
    itemColor: Optional[str] = Field(default=None, max_length=30)
    brand: Optional[str] = Field(default=None, max_length=40)
    description: str = Field(min_length=10, max_length=280)
    lastSeenDate: datetime
    lastSeenLocation: str = Field(min_length=3, max_length=60)


class FoundItemCreate(_StrippedModel):
    itemName: str = Field(min_length=2, max_length=60)
    itemColor: str = Field(min_length=2, max_length=30)
    description: str = Field(min_length=10, max_length=280)
    foundDate: datetime
    foundLocation: str = Field(min_length=3, max_length=60)
    # admins log on behalf of an office; staff default to their own
    officeId: Optional[str] = None


class MatchRequest(BaseModel):
    caseNumber: str = Field(min_length=1)


class NotifyRequest(_StrippedModel):
    message: str = Field(min_length=1, max_length=500)
    recipientId: Optional[str] = None


class ArchiveFoundRequest(_StrippedModel):
    disposition: Optional[str] = Field(default=None, max_length=40)
