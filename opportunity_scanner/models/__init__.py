"""
Models package for the Opportunity Scanner service.

This package contains the SQLAlchemy ORM model and Pydantic DTOs.
"""

# Ensure the ORM model is registered with the Base metadata when this package is imported.
from . import base
from . import score_record_orm

from .base import Base
from .score_record_orm import ScoreRecordORM

from .dtos import (
    AnalysisVariant,
    ErrorResponse,
    ExtendedAnalysisPayload,
    OpportunityResultDTO,
    ScoreRecordDTO,
    SimpleAnalysisPayload,
)

__all__ = [
    # Base
    "Base",
    # ORMs
    "ScoreRecordORM",
    # DTOs
    "AnalysisVariant",
    "ErrorResponse",
    "ExtendedAnalysisPayload",
    "OpportunityResultDTO",
    "ScoreRecordDTO",
    "SimpleAnalysisPayload",
]
