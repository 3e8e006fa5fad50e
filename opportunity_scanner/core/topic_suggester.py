"""
Topic Suggester component for the Opportunity Scanner service.

Asks the language model for a handful of subreddits where people discuss
problems and unmet needs.
"""
import logging
import re
from typing import List

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.exceptions import LLMCallError, UpstreamModelError
from opportunity_scanner.core.llm_client import GeminiClient

logger = logging.getLogger(__name__)

SUGGESTION_PROMPT = (
    "Find {count} diverse and popular subreddits where people discuss problems, "
    "frustrations, or unmet needs. Provide only the name of each subreddit, "
    "one per line (e.g., 'personalfinance')."
)

_SUBREDDIT_PREFIX = re.compile(r"^r/", re.IGNORECASE)


def normalize_topic(raw_topic: str) -> str:
    """Trim a suggested topic and strip a single leading ``r/`` marker."""
    return _SUBREDDIT_PREFIX.sub("", raw_topic.strip(), count=1).strip()


def split_suggestions(raw_text: str) -> List[str]:
    """Split the model's raw answer into lines, dropping blank ones."""
    return [line for line in raw_text.splitlines() if line.strip()]


class TopicSuggester:
    """
    Requests subreddit suggestions from the language model.
    """

    def __init__(self, llm_client: GeminiClient, topic_count: int = settings.TOPIC_COUNT):
        self.llm_client = llm_client
        self.topic_count = topic_count

    async def suggest_topics(self) -> List[str]:
        """
        Returns the raw (non-blank) suggestion lines, in the order given by the model.

        Raises:
            UpstreamModelError: If the model call fails.
        """
        prompt = SUGGESTION_PROMPT.format(count=self.topic_count)
        try:
            raw_text = await self.llm_client.generate(prompt)
        except LLMCallError as e:
            logger.error(f"Topic suggestion failed: {e}")
            raise UpstreamModelError(str(e), original_error=e) from e

        topics = split_suggestions(raw_text)
        logger.info(f"Model suggested {len(topics)} topics: {topics}")
        return topics
