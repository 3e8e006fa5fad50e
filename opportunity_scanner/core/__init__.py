"""
Core components for the Opportunity Scanner service.
"""

from .content_fetcher import ContentFetcher
from .llm_client import GeminiClient
from .opportunity_analyzer import OpportunityAnalyzer
from .pipeline import OpportunityPipeline, build_pipeline
from .result_store import ResultStore
from .text_extractor import extract_visible_text
from .topic_suggester import TopicSuggester, normalize_topic

__all__ = [
    "ContentFetcher",
    "GeminiClient",
    "OpportunityAnalyzer",
    "OpportunityPipeline",
    "ResultStore",
    "TopicSuggester",
    "build_pipeline",
    "extract_visible_text",
    "normalize_topic",
]
