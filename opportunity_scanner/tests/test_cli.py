import json

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from opportunity_scanner.cli import app
from opportunity_scanner.core.exceptions import StorageError, UpstreamModelError

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("opportunity_scanner.cli.setup_logging"):
        yield


def test_search_prints_results():
    results = [
        {
            "subreddit": "personalfinance",
            "link": "https://www.reddit.com/r/personalfinance",
            "idea": "Receipt tracker",
            "overallScore": 67.5,
        }
    ]
    with patch("opportunity_scanner.cli.run_search_once", new=AsyncMock(return_value=results)):
        result = runner.invoke(app, ["search"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == results


def test_search_failure_exits_nonzero():
    failing = AsyncMock(side_effect=UpstreamModelError("quota exceeded"))
    with patch("opportunity_scanner.cli.run_search_once", new=failing):
        result = runner.invoke(app, ["search"])

    assert result.exit_code == 1


def test_history_prints_records():
    records = [{"id": 1, "subreddit": "personalfinance", "idea": "Budget coach", "probability": 72}]
    with patch("opportunity_scanner.cli.load_history", new=AsyncMock(return_value=records)):
        result = runner.invoke(app, ["history"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == records


def test_history_failure_exits_nonzero():
    with patch("opportunity_scanner.cli.load_history", new=AsyncMock(side_effect=StorageError("locked"))):
        result = runner.invoke(app, ["history"])

    assert result.exit_code == 1


def test_serve_runs_uvicorn():
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve", "--port", "8080"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == "opportunity_scanner.api.main:app"
    assert mock_run.call_args.kwargs["port"] == 8080
