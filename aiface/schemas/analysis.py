"""
Pydantic schemas for analysis endpoints.
"""
from typing import List
from datetime import datetime
from pydantic import Field

from aiface.schemas.base import CamelModel
from aiface.schemas.usage import UsageStatus


class FacialFeature(CamelModel):
    feature: str = ""
    interpretation: str = ""


class MianXiang(CamelModel):
    elements: List[str] = Field(default_factory=list)
    interpretation: str = ""


class Physiognomy(CamelModel):
    traits: List[str] = Field(default_factory=list)
    interpretation: str = ""


class PersonalityAnalysis(CamelModel):
    facial_features: List[FacialFeature] = Field(default_factory=list)
    mian_xiang: MianXiang = Field(default_factory=MianXiang)
    physiognomy: Physiognomy = Field(default_factory=Physiognomy)


class HealthIndicator(CamelModel):
    indicator: str = ""
    status: str = ""


class Level(CamelModel):
    value: float = Field(0, description="Raw provider value, expected in [0, 1]")
    interpretation: str = ""


class AgeHealthAnalysis(CamelModel):
    estimated_age: float = 0
    biological_age: float = 0
    health_indicators: List[HealthIndicator] = Field(default_factory=list)
    stress_level: Level = Field(default_factory=Level)
    fatigue_level: Level = Field(default_factory=Level)
    hydration_level: Level = Field(default_factory=Level)


class AestheticBalance(CamelModel):
    score: float = Field(0, description="Raw provider score, expected in [0, 1]")
    interpretation: str = ""


class CelebrityMatch(CamelModel):
    name: str = ""
    similarity: float = Field(0, description="Raw provider similarity, expected in [0, 1]")
    features: List[str] = Field(default_factory=list)


class BeautyAnalysis(CamelModel):
    symmetry_score: float = 0
    golden_ratio_score: float = 0
    aesthetic_balance: AestheticBalance = Field(default_factory=AestheticBalance)
    celebrity_matches: List[CelebrityMatch] = Field(default_factory=list)


class AnalysisResponse(CamelModel):
    """Stored analysis of one image."""
    id: int = Field(..., description="Analysis ID")
    image_id: int = Field(..., description="Analyzed image ID")
    user_id: int = Field(..., description="Owner user ID")
    message: str = Field(..., description="Narrative analysis")
    positive_traits: List[str] = Field(default_factory=list)
    negative_traits: List[str] = Field(default_factory=list)
    personality_analysis: PersonalityAnalysis = Field(default_factory=PersonalityAnalysis)
    age_health_analysis: AgeHealthAnalysis = Field(default_factory=AgeHealthAnalysis)
    beauty_analysis: BeautyAnalysis = Field(default_factory=BeautyAnalysis)
    confidence: float = 0.95
    created_at: datetime = Field(..., description="When this analysis was computed")


class AnalyzeResponse(AnalysisResponse):
    """Fresh analysis plus today's updated usage."""
    usage: UsageStatus
