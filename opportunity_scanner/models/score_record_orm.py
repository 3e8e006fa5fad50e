"""
SQLAlchemy ORM model for the 'score_records' table.
"""

from sqlalchemy import Column, Float, Index, Integer, Text
from sqlalchemy import TIMESTAMP
from sqlalchemy.sql import func

from .base import Base


class ScoreRecordORM(Base):
    """
    SQLAlchemy ORM model representing one persisted opportunity analysis.

    Rows are append-only: nothing updates or deletes them once inserted.

    Attributes:
        id (int): Primary key, auto-incrementing and never reused.
        subreddit (str): The subreddit the analyzed content came from.
        idea (str): The business idea proposed by the model.
        probability (int, optional): Gap probability (0-100), simple variant only.
        pain_point (int, optional): Pain point sub-score (0-100), extended variant only.
        audience_scale (int, optional): Audience scale sub-score (0-100), extended variant only.
        monetization_potential (int, optional): Monetization sub-score (0-100), extended variant only.
        feasibility (int, optional): Feasibility sub-score (0-100), extended variant only.
        overall_score (float, optional): Mean of the four sub-scores, extended variant only.
        created_at (datetime): Insert timestamp assigned by the database (defaults to NOW()).
    """
    __tablename__ = "score_records"

    id = Column(Integer, primary_key=True, autoincrement=True, comment="Unique, monotonically increasing identifier.")
    subreddit = Column(Text, nullable=False, comment="Source subreddit of the analyzed content.")
    idea = Column(Text, nullable=False, comment="Business idea proposed by the model.")
    probability = Column(Integer, nullable=True, comment="Gap probability (simple variant).")
    pain_point = Column(Integer, nullable=True, comment="Pain point sub-score (extended variant).")
    audience_scale = Column(Integer, nullable=True, comment="Audience scale sub-score (extended variant).")
    monetization_potential = Column(Integer, nullable=True, comment="Monetization potential sub-score (extended variant).")
    feasibility = Column(Integer, nullable=True, comment="Feasibility sub-score (extended variant).")
    overall_score = Column(Float, nullable=True, comment="Mean of the four sub-scores (extended variant).")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), comment="Insert timestamp.")

    __table_args__ = (
        Index("idx_score_records_created_at_id", "created_at", "id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<ScoreRecordORM(id={self.id}, subreddit='{self.subreddit}', "
            f"created_at='{self.created_at}', idea='{(self.idea or '')[:50]}...')>"
        )
