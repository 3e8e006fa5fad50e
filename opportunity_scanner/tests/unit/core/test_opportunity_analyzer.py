import json

import pytest

from opportunity_scanner.core.exceptions import AnalysisError, LLMCallError
from opportunity_scanner.core.opportunity_analyzer import (
    OpportunityAnalyzer,
    compute_overall_score,
    parse_analysis,
    strip_code_fences,
)
from opportunity_scanner.models.dtos import ExtendedAnalysisPayload, SimpleAnalysisPayload

EXTENDED_ANSWER = {
    "businessIdea": "Automated receipt tracker for freelancers",
    "painPoint": 80,
    "audienceScale": 60,
    "monetizationPotential": 40,
    "feasibility": 90,
}


@pytest.mark.parametrize(
    "scores, expected",
    [
        ((80, 60, 40, 90), 67.5),
        ((100, 100, 100, 100), 100.0),
        ((0, 0, 0, 0), 0.0),
        ((81, 60, 40, 90), 67.8),  # 67.75 rounds half-up
        ((1, 0, 0, 0), 0.3),  # 0.25 rounds half-up
    ],
)
def test_compute_overall_score(scores, expected):
    assert compute_overall_score(*scores) == expected


def test_strip_code_fences():
    fenced = '```json\n{"businessIdea": "x", "gapProbability": 5}\n```'
    assert strip_code_fences(fenced) == '{"businessIdea": "x", "gapProbability": 5}'
    assert strip_code_fences("  {}  ") == "{}"


def test_parse_fenced_extended_answer():
    payload = parse_analysis("```json\n" + json.dumps(EXTENDED_ANSWER) + "\n```", "extended")

    assert isinstance(payload, ExtendedAnalysisPayload)
    assert payload.business_idea == "Automated receipt tracker for freelancers"
    assert payload.pain_point == 80


def test_parse_simple_answer():
    payload = parse_analysis('{"businessIdea": "Budget coach app", "gapProbability": 72}', "simple")

    assert isinstance(payload, SimpleAnalysisPayload)
    assert payload.gap_probability == 72


@pytest.mark.parametrize(
    "raw",
    [
        '{"businessIdea": "x", "gapProbability": 50,}',  # trailing comma
        "Sorry, I cannot help with that.",
        "",
    ],
)
def test_invalid_json_raises_analysis_error(raw):
    with pytest.raises(AnalysisError, match="Invalid JSON"):
        parse_analysis(raw, "simple")


def test_non_object_json_raises_analysis_error():
    with pytest.raises(AnalysisError, match="Expected a JSON object"):
        parse_analysis("[1, 2, 3]", "extended")


@pytest.mark.parametrize(
    "answer",
    [
        {"businessIdea": "x"},  # scores missing
        {**EXTENDED_ANSWER, "painPoint": 120},  # out of range
        {**EXTENDED_ANSWER, "feasibility": -1},
        {**EXTENDED_ANSWER, "audienceScale": "lots"},
        {**EXTENDED_ANSWER, "businessIdea": "   "},  # blank idea
    ],
)
def test_schema_violation_raises_analysis_error(answer):
    with pytest.raises(AnalysisError, match="Schema validation failed"):
        parse_analysis(json.dumps(answer), "extended")


def test_unknown_variant_is_rejected(mock_llm_client):
    with pytest.raises(ValueError):
        OpportunityAnalyzer(mock_llm_client, variant="detailed")


@pytest.mark.asyncio
async def test_analyze_extended_builds_record(mock_llm_client):
    mock_llm_client.generate.return_value = json.dumps(EXTENDED_ANSWER)
    analyzer = OpportunityAnalyzer(mock_llm_client, variant="extended")

    record = await analyzer.analyze("personalfinance", "I never know where my money goes")

    assert record.subreddit == "personalfinance"
    assert record.idea == "Automated receipt tracker for freelancers"
    assert (record.pain_point, record.audience_scale, record.monetization_potential, record.feasibility) == (80, 60, 40, 90)
    assert record.overall_score == 67.5
    assert record.probability is None
    assert record.id is None and record.created_at is None

    prompt = mock_llm_client.generate.call_args.args[0]
    assert "'personalfinance'" in prompt
    assert "I never know where my money goes" in prompt
    assert '"monetizationPotential"' in prompt


@pytest.mark.asyncio
async def test_analyze_simple_builds_record(mock_llm_client):
    mock_llm_client.generate.return_value = '```json\n{"businessIdea": "Budget coach app", "gapProbability": 72}\n```'
    analyzer = OpportunityAnalyzer(mock_llm_client, variant="simple")

    record = await analyzer.analyze("personalfinance", "text")

    assert record.variant == "simple"
    assert record.probability == 72
    assert record.overall_score is None
    assert record.model_dump(by_alias=True, exclude_none=True) == {
        "subreddit": "personalfinance",
        "idea": "Budget coach app",
        "probability": 72,
    }


@pytest.mark.asyncio
async def test_analyze_model_failure_raises_analysis_error(mock_llm_client):
    mock_llm_client.generate.side_effect = LLMCallError("GOOGLE_API_KEY is not configured")
    analyzer = OpportunityAnalyzer(mock_llm_client, variant="extended")

    with pytest.raises(AnalysisError, match="GOOGLE_API_KEY"):
        await analyzer.analyze("personalfinance", "text")


@pytest.mark.asyncio
async def test_analyze_missing_scores_raises_analysis_error(mock_llm_client):
    mock_llm_client.generate.return_value = '{"businessIdea": "x"}'
    analyzer = OpportunityAnalyzer(mock_llm_client, variant="extended")

    with pytest.raises(AnalysisError):
        await analyzer.analyze("personalfinance", "text")


@pytest.mark.parametrize(
    "variant, answer",
    [
        ("extended", {**EXTENDED_ANSWER, "painPoint": "80"}),
        ("extended", {**EXTENDED_ANSWER, "feasibility": True}),
        ("extended", {**EXTENDED_ANSWER, "audienceScale": 60.5}),
        ("simple", {"businessIdea": "Budget coach app", "gapProbability": "72"}),
    ],
)
def test_scores_must_be_json_integers(variant, answer):
    with pytest.raises(AnalysisError, match="Schema validation failed"):
        parse_analysis(json.dumps(answer), variant)
