"""Caption enhancement request and response models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CaptionRequest(BaseModel):
    caption: Optional[str] = None


class CaptionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enhanced_caption: str = Field(alias="enhancedCaption")
