from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..ai.types import CategoryProfile, ClassificationResult, WasteCategory


class ClassificationResponse(BaseModel):
    name: str = Field(..., description="Raw label reported by the detection model")
    category: str = Field(..., description="Display name of the coarse waste category")
    confidence: int = Field(..., ge=0, le=100, description="Confidence percentage")
    info: str
    tips: List[str] = Field(default_factory=list)
    impact: str

    @classmethod
    def from_result(cls, result: ClassificationResult) -> "ClassificationResponse":
        return cls(**result.to_payload())


class CategoryProfileModel(BaseModel):
    key: str
    category: str
    tips: List[str]
    impact: str

    @classmethod
    def from_profile(
        cls, key: WasteCategory, profile: CategoryProfile
    ) -> "CategoryProfileModel":
        return cls(
            key=key.value,
            category=profile.display_category,
            tips=list(profile.tips),
            impact=profile.impact,
        )


__all__ = ["CategoryProfileModel", "ClassificationResponse"]
