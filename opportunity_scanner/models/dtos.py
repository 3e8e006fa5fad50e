"""
Pydantic Data Transfer Objects (DTOs) for the Opportunity Scanner service.

These models validate the language model's JSON output, carry score records
between pipeline stages and shape the API responses. Wire names are camelCase
(``painPoint``, ``overallScore``, ``createdAt``); Python code uses the
snake_case field names.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AnalysisVariant = Literal["simple", "extended"]


class SimpleAnalysisPayload(BaseModel):
    """
    JSON object the model must return in the simple variant:
    ``{"businessIdea": str, "gapProbability": int}``.
    """
    business_idea: str = Field(..., alias="businessIdea", min_length=1)
    gap_probability: int = Field(..., alias="gapProbability", ge=0, le=100, strict=True)

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class ExtendedAnalysisPayload(BaseModel):
    """
    JSON object the model must return in the extended variant.
    """
    business_idea: str = Field(..., alias="businessIdea", min_length=1)
    pain_point: int = Field(..., alias="painPoint", ge=0, le=100, strict=True)
    audience_scale: int = Field(..., alias="audienceScale", ge=0, le=100, strict=True)
    monetization_potential: int = Field(..., alias="monetizationPotential", ge=0, le=100, strict=True)
    feasibility: int = Field(..., ge=0, le=100, strict=True)

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class ScoreRecordDTO(BaseModel):
    """
    DTO for one score record.

    Mirrors ScoreRecordORM. ``id`` and ``created_at`` stay ``None`` until the
    record has been persisted.
    """
    id: Optional[int] = None
    subreddit: str
    idea: str
    probability: Optional[int] = Field(None, ge=0, le=100)
    pain_point: Optional[int] = Field(None, alias="painPoint", ge=0, le=100)
    audience_scale: Optional[int] = Field(None, alias="audienceScale", ge=0, le=100)
    monetization_potential: Optional[int] = Field(None, alias="monetizationPotential", ge=0, le=100)
    feasibility: Optional[int] = Field(None, ge=0, le=100)
    overall_score: Optional[float] = Field(None, alias="overallScore")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    variant: AnalysisVariant = Field("extended", exclude=True)

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @property
    def is_persistable(self) -> bool:
        """A record is stored only with a real idea (and a truthy probability in the simple variant)."""
        if not (self.idea and self.idea.strip()):
            return False
        if self.variant == "simple":
            return bool(self.probability)
        return True


class OpportunityResultDTO(ScoreRecordDTO):
    """
    One entry of the ``/search`` response: a score record plus its source link.

    Placeholder results use the same shape with an error message as ``idea``
    and every score field set to 0.
    """
    link: str


class ErrorResponse(BaseModel):
    """Body of the 500 responses returned by the API."""
    error: str
    details: Optional[str] = None
