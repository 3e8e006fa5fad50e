"""
Opportunity Analyzer component for the Opportunity Scanner service.

Asks the language model to read a subreddit's text as a venture capitalist
would and to answer with a single JSON object describing one business idea and
its scores. The answer is cleaned of code fences, parsed, and validated against
the payload schema of the configured variant before it becomes a score record.
"""
import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Type, Union

from pydantic import BaseModel, ValidationError

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.exceptions import AnalysisError, LLMCallError
from opportunity_scanner.core.llm_client import GeminiClient
from opportunity_scanner.models.dtos import (
    AnalysisVariant,
    ExtendedAnalysisPayload,
    ScoreRecordDTO,
    SimpleAnalysisPayload,
)

logger = logging.getLogger(__name__)

SIMPLE_ANALYSIS_PROMPT = """
Analyze the following content from the subreddit '{topic}'.
Act as a Venture Capitalist identifying market gaps.
Based on the problems, frustrations, and unmet needs discussed, provide:
1. A single, concrete business idea that could solve a key problem.
2. A "Gap Probability" score from 0 to 100, representing your confidence that there is a significant, underserved need for this business idea.

Return ONLY a single, raw JSON object in the format: {{"businessIdea": "Your idea here", "gapProbability": percentage}}.
Do not include any other text, formatting, or explanations.

Content:
{content}
"""

EXTENDED_ANALYSIS_PROMPT = """
Analyze the following content from the subreddit '{topic}'.
Act as a Venture Capitalist identifying market gaps.
Based on the problems, frustrations, and unmet needs discussed, provide a single, concrete business idea that could solve a key problem, and score it from 0 to 100 on each of:
- "painPoint": how severe and frequent the underlying problem is.
- "audienceScale": how many people share the problem.
- "monetizationPotential": how willing and able the audience is to pay for a solution.
- "feasibility": how realistic it is for a small team to build the solution.

Return ONLY a single, raw JSON object in the format: {{"businessIdea": "Your idea here", "painPoint": score, "audienceScale": score, "monetizationPotential": score, "feasibility": score}}.
All scores must be integers between 0 and 100. Do not include any other text, formatting, or explanations.

Content:
{content}
"""

PROMPTS: Dict[str, str] = {
    "simple": SIMPLE_ANALYSIS_PROMPT,
    "extended": EXTENDED_ANALYSIS_PROMPT,
}

PAYLOAD_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "simple": SimpleAnalysisPayload,
    "extended": ExtendedAnalysisPayload,
}


def strip_code_fences(raw_text: str) -> str:
    """Remove ```json / ``` markers the model may wrap its answer in."""
    return raw_text.replace("```json", "").replace("```", "").strip()


def compute_overall_score(pain_point: int, audience_scale: int, monetization_potential: int, feasibility: int) -> float:
    """
    Mean of the four sub-scores rounded half-up to one decimal, e.g. (80, 60, 40, 90) -> 67.5.
    """
    total = Decimal(pain_point + audience_scale + monetization_potential + feasibility)
    mean = (total / Decimal(4)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(mean)


def parse_analysis(raw_text: str, variant: AnalysisVariant) -> Union[SimpleAnalysisPayload, ExtendedAnalysisPayload]:
    """
    Parse and validate the model's raw answer.

    Raises:
        AnalysisError: If the text is not a JSON object or violates the payload schema.
    """
    cleaned = strip_code_fences(raw_text)
    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Invalid JSON in model output: {e}. Raw text: {raw_text[:200]}", original_error=e) from e

    if not isinstance(data, dict):
        raise AnalysisError(f"Expected a JSON object, got {type(data).__name__}. Raw text: {raw_text[:200]}")

    try:
        return PAYLOAD_SCHEMAS[variant].model_validate(data)
    except ValidationError as e:
        error_summary = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise AnalysisError(f"Schema validation failed: {error_summary}", original_error=e) from e


class OpportunityAnalyzer:
    """
    Produces an unpersisted ScoreRecordDTO for one subreddit's text.
    """

    def __init__(self, llm_client: GeminiClient, variant: AnalysisVariant = settings.ANALYSIS_VARIANT):
        if variant not in PROMPTS:
            raise ValueError(f"Unknown analysis variant '{variant}'")
        self.llm_client = llm_client
        self.variant = variant

    def build_prompt(self, topic: str, text: str) -> str:
        return PROMPTS[self.variant].format(topic=topic, content=text)

    async def analyze(self, topic: str, text: str) -> ScoreRecordDTO:
        """
        Analyze ``text`` from subreddit ``topic``.

        Raises:
            AnalysisError: On model failure, unparseable JSON, or schema violations.
        """
        logger.info(f"Analyzing {len(text)} chars from r/{topic} ({self.variant} variant)")
        try:
            raw_text = await self.llm_client.generate(self.build_prompt(topic, text))
        except LLMCallError as e:
            raise AnalysisError(f"Model analysis call failed: {e}", original_error=e) from e

        payload = parse_analysis(raw_text, self.variant)

        if isinstance(payload, SimpleAnalysisPayload):
            record = ScoreRecordDTO(
                subreddit=topic,
                idea=payload.business_idea,
                probability=payload.gap_probability,
                variant="simple",
            )
        else:
            record = ScoreRecordDTO(
                subreddit=topic,
                idea=payload.business_idea,
                pain_point=payload.pain_point,
                audience_scale=payload.audience_scale,
                monetization_potential=payload.monetization_potential,
                feasibility=payload.feasibility,
                overall_score=compute_overall_score(
                    payload.pain_point,
                    payload.audience_scale,
                    payload.monetization_potential,
                    payload.feasibility,
                ),
                variant="extended",
            )

        logger.debug(f"Analysis for r/{topic}: {record.model_dump(by_alias=True, exclude_none=True)}")
        return record
