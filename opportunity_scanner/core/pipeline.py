"""
Main Pipeline Orchestrator for the Opportunity Scanner service.

Asks the model for topics once, then runs fetch -> extract -> analyze ->
persist for every topic. Failures inside one topic's run are isolated and
replaced by a placeholder result, so a search always answers with exactly one
entry per suggested topic, in suggestion order.
"""
import asyncio
import logging
from typing import List, Optional

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.content_fetcher import ContentFetcher
from opportunity_scanner.core.exceptions import AnalysisError, FetchError, ParseError, StorageError
from opportunity_scanner.core.llm_client import GeminiClient
from opportunity_scanner.core.opportunity_analyzer import OpportunityAnalyzer
from opportunity_scanner.core.result_store import ResultStore
from opportunity_scanner.core.text_extractor import extract_visible_text
from opportunity_scanner.core.topic_suggester import TopicSuggester, normalize_topic
from opportunity_scanner.models.dtos import AnalysisVariant, OpportunityResultDTO, ScoreRecordDTO

logger = logging.getLogger(__name__)

FETCH_ERROR_IDEA = "Error fetching the subreddit page: {message}"
PARSE_ERROR_IDEA = "Error parsing the subreddit page."
ANALYSIS_ERROR_IDEA = "Could not generate or parse analysis."


class OpportunityPipeline:
    """
    Orchestrates one search request across all suggested topics.
    """
    def __init__(
        self,
        suggester: TopicSuggester,
        fetcher: ContentFetcher,
        analyzer: OpportunityAnalyzer,
        store: ResultStore,
        max_concurrency: int = settings.PIPELINE_MAX_CONCURRENCY,
    ):
        """
        Args:
            suggester: Source of the topics to analyze.
            fetcher: Downloads subreddit pages.
            analyzer: Turns page text into a score record.
            store: Persists successful analyses.
            max_concurrency: Topics processed at once; 1 keeps the run strictly sequential.
        """
        self.suggester = suggester
        self.fetcher = fetcher
        self.analyzer = analyzer
        self.store = store
        self.max_concurrency = max(1, max_concurrency)

    @property
    def variant(self) -> AnalysisVariant:
        return self.analyzer.variant

    def placeholder(self, topic: str, link: str, idea: str) -> OpportunityResultDTO:
        """A zero-score result carrying an error message in place of the idea."""
        if self.variant == "simple":
            return OpportunityResultDTO(subreddit=topic, link=link, idea=idea, probability=0, variant="simple")
        return OpportunityResultDTO(
            subreddit=topic,
            link=link,
            idea=idea,
            pain_point=0,
            audience_scale=0,
            monetization_potential=0,
            feasibility=0,
            overall_score=0.0,
            variant="extended",
        )

    async def process_topic(self, raw_topic: str) -> OpportunityResultDTO:
        """
        Run one topic through fetch, extraction, analysis and persistence.

        Never raises for per-topic failures; returns a placeholder instead.
        """
        topic = normalize_topic(raw_topic)
        link = self.fetcher.build_url(topic)

        # 1. Fetch
        try:
            markup = await self.fetcher.fetch(topic)
        except FetchError as e:
            logger.error(f"Error processing link {link}: {e}")
            return self.placeholder(topic, link, FETCH_ERROR_IDEA.format(message=e.message))

        # 2. Extract
        try:
            text = extract_visible_text(markup)
        except ParseError as e:
            logger.error(f"Parse error for {link}: {e}")
            return self.placeholder(topic, link, PARSE_ERROR_IDEA)

        # 3. Analyze
        try:
            record = await self.analyzer.analyze(topic, text)
        except AnalysisError as e:
            logger.error(f"Analysis or JSON parsing error for {link}: {e}")
            return self.placeholder(topic, link, ANALYSIS_ERROR_IDEA)

        # 4. Persist; a storage failure does not discard the analysis
        try:
            await self.store.insert(record)
        except StorageError as e:
            logger.error(f"Failed to persist analysis for {link}; returning it unsaved: {e}")

        return self.to_result(record, link)

    @staticmethod
    def to_result(record: ScoreRecordDTO, link: str) -> OpportunityResultDTO:
        """The response entry for a successful analysis (store-assigned fields left empty)."""
        data = record.model_dump(exclude={"id", "created_at"})
        return OpportunityResultDTO(**data, link=link, variant=record.variant)

    async def run_search(self) -> List[OpportunityResultDTO]:
        """
        Suggest topics and analyze each one.

        Returns:
            One result per suggested topic, in suggestion order.

        Raises:
            UpstreamModelError: If the topic suggestion call fails.
        """
        topics = await self.suggester.suggest_topics()
        logger.info(f"Starting search over {len(topics)} topics (max concurrency {self.max_concurrency})")

        if self.max_concurrency == 1:
            results = []
            for raw_topic in topics:
                results.append(await self.process_topic(raw_topic))
        else:
            semaphore = asyncio.Semaphore(self.max_concurrency)

            async def bounded(raw_topic: str) -> OpportunityResultDTO:
                async with semaphore:
                    return await self.process_topic(raw_topic)

            tasks = [asyncio.ensure_future(bounded(topic)) for topic in topics]
            try:
                results = list(await asyncio.gather(*tasks))
            except BaseException:
                # No sibling may keep running (and persisting) once the search has failed
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        logger.info(f"Search finished with {len(results)} results")
        return results

    async def history(self) -> List[ScoreRecordDTO]:
        """All persisted records, newest first."""
        return await self.store.list_all()

    async def close(self) -> None:
        """Release the HTTP client and the database engine."""
        await self.fetcher.close()
        await self.store.close()


def build_pipeline(store: ResultStore, fetcher: Optional[ContentFetcher] = None) -> OpportunityPipeline:
    """Wire the default components from settings around an existing store."""
    llm_client = GeminiClient(api_key=settings.GOOGLE_API_KEY, model_name=settings.GEMINI_MODEL_NAME)
    return OpportunityPipeline(
        suggester=TopicSuggester(llm_client),
        fetcher=fetcher or ContentFetcher(),
        analyzer=OpportunityAnalyzer(llm_client),
        store=store,
    )
