"""
Result Store component for the Opportunity Scanner service.

Appends analyzed score records to the ``score_records`` table and serves them
back most-recent-first. The store is constructed explicitly with an async
engine and must be initialized before the API accepts requests.
"""
import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from opportunity_scanner.core.exceptions import StorageError
from opportunity_scanner.models import Base, ScoreRecordORM
from opportunity_scanner.models.dtos import ScoreRecordDTO
from opportunity_scanner.utils.db_session import build_session_factory

logger = logging.getLogger(__name__)


def to_dto(row: ScoreRecordORM) -> ScoreRecordDTO:
    """Convert a stored row into a ScoreRecordDTO."""
    return ScoreRecordDTO(
        id=row.id,
        subreddit=row.subreddit,
        idea=row.idea,
        probability=row.probability,
        pain_point=row.pain_point,
        audience_scale=row.audience_scale,
        monetization_potential=row.monetization_potential,
        feasibility=row.feasibility,
        overall_score=row.overall_score,
        created_at=row.created_at,
        variant="simple" if row.probability is not None else "extended",
    )


class ResultStore:
    """
    Append-only store of score records.

    Each operation runs in its own short-lived session; inserts are single
    committed statements.
    """

    def __init__(self, engine: AsyncEngine, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    async def initialize(self) -> None:
        """
        Create the ``score_records`` table if it does not exist yet.

        Raises:
            StorageError: If the schema cannot be created.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.critical(f"Failed to initialize result store: {e}", exc_info=True)
            raise StorageError(f"Failed to initialize result store: {e}", original_error=e) from e
        logger.info("Result store initialized")

    async def insert(self, record: ScoreRecordDTO) -> Optional[ScoreRecordDTO]:
        """
        Append ``record`` as a new row.

        Records without a real idea (or, in the simple variant, without a
        truthy probability) are not stored.

        Returns:
            The stored record with ``id`` and ``created_at`` assigned, or
            ``None`` if the record was refused.

        Raises:
            StorageError: If the insert fails.
        """
        if not record.is_persistable:
            logger.warning(f"Refusing to persist incomplete record for r/{record.subreddit}")
            return None

        row = ScoreRecordORM(
            subreddit=record.subreddit,
            idea=record.idea,
            probability=record.probability,
            pain_point=record.pain_point,
            audience_scale=record.audience_scale,
            monetization_potential=record.monetization_potential,
            feasibility=record.feasibility,
            overall_score=record.overall_score,
        )
        async with self._session_factory() as session:
            try:
                session.add(row)
                await session.commit()
                await session.refresh(row)
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error saving score record for r/{record.subreddit}: {e}", exc_info=True)
                raise StorageError(f"Failed to save score record: {e}", original_error=e) from e

        logger.info(f"Saved score record id={row.id} for r/{record.subreddit}")
        return to_dto(row)

    async def list_all(self) -> List[ScoreRecordDTO]:
        """
        Return every stored record, newest first (``created_at`` desc, then ``id`` desc).

        Raises:
            StorageError: If the query fails.
        """
        query = select(ScoreRecordORM).order_by(desc(ScoreRecordORM.created_at), desc(ScoreRecordORM.id))
        async with self._session_factory() as session:
            try:
                result = await session.execute(query)
                rows = result.scalars().all()
            except SQLAlchemyError as e:
                logger.error(f"Database error listing score records: {e}", exc_info=True)
                raise StorageError(f"Failed to list score records: {e}", original_error=e) from e

        logger.info(f"Retrieved {len(rows)} score records")
        return [to_dto(row) for row in rows]

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self.engine.dispose()
