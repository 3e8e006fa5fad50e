"""
Opportunity search and history API endpoints.

``GET /search`` runs the full pipeline for a fresh set of suggested topics;
``GET /history`` returns every stored score record, newest first.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from opportunity_scanner.core.exceptions import StorageError, UpstreamModelError
from opportunity_scanner.core.pipeline import OpportunityPipeline
from opportunity_scanner.models.dtos import ErrorResponse, OpportunityResultDTO, ScoreRecordDTO

router = APIRouter()
logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> OpportunityPipeline:
    """Pipeline built during application startup."""
    return request.app.state.pipeline


@router.get(
    "/search",
    response_model=List[OpportunityResultDTO],
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def search_opportunities(
    pipeline: OpportunityPipeline = Depends(get_pipeline),
) -> Union[List[OpportunityResultDTO], JSONResponse]:
    """
    Suggest subreddits, analyze each one, and return one result per subreddit.

    Per-subreddit failures come back as zero-score placeholder entries. Only a
    failed topic suggestion (or an unexpected error) produces a 500.
    """
    try:
        logger.info("Handling incoming request for /search endpoint")
        results = await pipeline.run_search()
        return results
    except UpstreamModelError as e:
        logger.error(f"Gemini API Error: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Gemini API Error", details=e.message).model_dump(),
        )
    except Exception as e:
        logger.error(f"Error during search: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="An error occurred during the search.").model_dump(exclude_none=True),
        )


@router.get(
    "/history",
    response_model=List[ScoreRecordDTO],
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def read_history(
    pipeline: OpportunityPipeline = Depends(get_pipeline),
) -> Union[List[ScoreRecordDTO], JSONResponse]:
    """Return every persisted score record, most recent first."""
    try:
        logger.info("Handling incoming request for /history endpoint")
        return await pipeline.history()
    except StorageError as e:
        logger.error(f"Error retrieving history: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to retrieve history.").model_dump(exclude_none=True),
        )
