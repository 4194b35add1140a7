"""Tests for CLI commands using CliRunner (no live LLM required).

Covers the happy path and error paths for:
  - stratgen generate
  - stratgen chat
  - stratgen extract
"""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
from typer.testing import CliRunner

from stratgen.domain import BusinessStrategy, ChatReply, StrategyGenerationError
from stratgen.interfaces.cli import app

runner = CliRunner()

_GENERATE_ARGS = [
    "generate",
    "--industry", "Coffee",
    "--market-reach", "Lisbon",
    "--budget", "$40k",
    "--target-customers", "Commuters",
]


def _strategy() -> BusinessStrategy:
    return BusinessStrategy.from_json({
        "executiveSummary": "Kiosk plan",
        "marketingPlan": {"strategyOverview": "Local", "channels": [
            {"name": "Instagram", "description": "Photos", "estimatedBudgetPercentage": 100},
        ]},
        "risks": [{"riskName": "Rent", "impactLevel": "High", "probability": 3}],
    })


# ---------------------------------------------------------------------------
# stratgen generate
# ---------------------------------------------------------------------------

def test_generate_json_output():
    with patch("stratgen.interfaces.cli.generate_strategy", new_callable=AsyncMock,
               return_value=_strategy()) as mock_gen:
        result = runner.invoke(app, _GENERATE_ARGS + ["--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["executiveSummary"] == "Kiosk plan"
    user_input = mock_gen.call_args.args[0]
    assert user_input.industry == "Coffee"
    assert user_input.market_reach == "Lisbon"


def test_generate_renders_report_and_saves_file(tmp_path):
    out = tmp_path / "plan.json"
    with patch("stratgen.interfaces.cli.generate_strategy", new_callable=AsyncMock, return_value=_strategy()):
        result = runner.invoke(app, _GENERATE_ARGS + ["--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Kiosk plan" in result.output
    assert "Instagram" in result.output
    assert json.loads(out.read_text())["executiveSummary"] == "Kiosk plan"


def test_generate_strategy_error_exits_1():
    with patch("stratgen.interfaces.cli.generate_strategy", new_callable=AsyncMock,
               side_effect=StrategyGenerationError("Failed to parse strategy data.")):
        result = runner.invoke(app, _GENERATE_ARGS)

    assert result.exit_code == 1
    assert "Failed to parse strategy data" in result.output


def test_generate_connect_error_exits_1():
    with patch("stratgen.interfaces.cli.generate_strategy", new_callable=AsyncMock,
               side_effect=httpx.ConnectError("refused")):
        result = runner.invoke(app, _GENERATE_ARGS)

    assert result.exit_code == 1
    assert "unreachable" in result.output


# ---------------------------------------------------------------------------
# stratgen chat
# ---------------------------------------------------------------------------

def test_chat_prints_reply(tmp_path):
    plan = tmp_path / "plan.json"
    plan.write_text(json.dumps(_strategy().to_json()))
    with patch("stratgen.interfaces.cli.chat_with_strategy", new_callable=AsyncMock,
               return_value=ChatReply(text="Start with Instagram.")) as mock_chat:
        result = runner.invoke(app, ["chat", str(plan), "Which channel first?", "--thinking"])

    assert result.exit_code == 0, result.output
    assert "Start with Instagram." in result.output
    args, kwargs = mock_chat.call_args
    assert args[1] == "Which channel first?"
    assert args[2].executive_summary == "Kiosk plan"
    assert kwargs["use_thinking"] is True
    assert kwargs["attached_image"] is None


def test_chat_attaches_image_as_data_url(tmp_path):
    plan = tmp_path / "plan.json"
    plan.write_text(json.dumps(_strategy().to_json()))
    image = tmp_path / "shop.png"
    image.write_bytes(b"ABC")
    with patch("stratgen.interfaces.cli.chat_with_strategy", new_callable=AsyncMock,
               return_value=ChatReply(text="Nice shop.")) as mock_chat:
        result = runner.invoke(app, ["chat", str(plan), "Thoughts?", "--image", str(image)])

    assert result.exit_code == 0, result.output
    assert mock_chat.call_args.kwargs["attached_image"] == "data:image/png;base64,QUJD"


def test_chat_unreadable_strategy_exits_1(tmp_path):
    plan = tmp_path / "plan.txt"
    plan.write_text("not a strategy")
    result = runner.invoke(app, ["chat", str(plan), "Hi"])
    assert result.exit_code == 1
    assert "no_brace_found" in result.output


# ---------------------------------------------------------------------------
# stratgen extract
# ---------------------------------------------------------------------------

def test_extract_from_stdin():
    result = runner.invoke(app, ["extract", "--indent", "0"], input='Sure!\n```json\n{"a": 1}\n```\n')
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"a": 1}


def test_extract_from_file(tmp_path):
    f = tmp_path / "reply.txt"
    f.write_text('{"a": 1} then {"a": 2} done')
    result = runner.invoke(app, ["extract", str(f)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"a": 2}


def test_extract_failure_exits_1():
    result = runner.invoke(app, ["extract"], input="no json at all")
    assert result.exit_code == 1
    assert "no_brace_found" in result.output
