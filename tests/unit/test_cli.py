"""Tests for the costlens command line."""

import json

import pytest

from costlens_sdk.cli import main


pytestmark = pytest.mark.unit


def test_estimate(capsys):
    main(["estimate", "gpt-4", "Hi"])
    out = capsys.readouterr().out
    assert "Estimated cost:    $0.000270" in out
    assert "Recommended model: gpt-3.5-turbo" in out
    assert "(98.0%)" in out


def test_estimate_json(capsys):
    main(["estimate", "gpt-4", "Hi", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["recommended_model"] == "gpt-3.5-turbo"
    assert data["current_cost"] > data["optimized_cost"]


def test_route_critical_prompt(capsys):
    main(["route", "gemini-1.5-pro", "This is a medical emergency question"])
    out = capsys.readouterr().out
    assert "Selected model:  gemini-1.5-pro" in out
    assert "Critical task requires premium model" in out


def test_pricing(capsys):
    main(["pricing"])
    out = capsys.readouterr().out
    assert "gpt-3.5-turbo" in out
    assert "Last verified: January 2025" in out


def test_no_command_prints_help(capsys):
    main([])
    assert "usage:" in capsys.readouterr().out
