"""
Tests for the evaluation scheduler.
"""
import asyncio
import pytest
from unittest.mock import patch

from goaltracker import dependencies
from goaltracker.services import scheduler_service
from goaltracker.services.scheduler_service import parse_evaluation_time, run_auto_evaluation


class TestParseEvaluationTime:
    """Tests for parse_evaluation_time"""

    @pytest.mark.parametrize("value,expected", [
        ("23:55", (23, 55)),
        ("0600", (6, 0)),
        ("00:01", (0, 1)),
    ])
    def test_valid_values(self, value, expected):
        assert parse_evaluation_time(value) == expected

    @pytest.mark.parametrize("value", [None, "", "25:00", "12:75", "noon", "6:00"])
    def test_invalid_values_fall_back(self, value):
        assert parse_evaluation_time(value) == (23, 55)


class TestRunAutoEvaluation:
    """Tests for the scheduled job"""

    def test_snapshots_and_evaluates_goals_in_json_store(self, json_store, monkeypatch):
        json_store.put("personal-goals", {"user-1": [{
            "id": "goal-1", "name": "Billable Hours", "type": "Billable Hours",
            "frequency": "daily", "target": 8, "current": 9, "status": "active"
        }]})
        monkeypatch.setattr(dependencies, "STORAGE_BACKEND", "json")
        monkeypatch.setattr(dependencies, "DATA_DIRECTORY", str(json_store.data_dir))

        asyncio.run(run_auto_evaluation())

        history = json_store.get("goal-history")["data"]["goalHistory"]
        assert [entry["status"] for entry in history] == ["Met"]

        snapshots = json_store.get("daily-snapshots")["dailySnapshots"]
        assert [(s["userId"], s["billableHours"]) for s in snapshots] == [("user-1", 9)]

    def test_errors_are_logged_not_raised(self, json_store, monkeypatch):
        monkeypatch.setattr(dependencies, "STORAGE_BACKEND", "json")
        monkeypatch.setattr(dependencies, "DATA_DIRECTORY", str(json_store.data_dir))

        with patch.object(scheduler_service.GoalService, "evaluate_all", side_effect=RuntimeError("boom")):
            asyncio.run(run_auto_evaluation())
