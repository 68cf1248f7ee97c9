import asyncio
import json

from callcoach.__main__ import check_env, run_demo
from callcoach.interview.models import SessionMode


def test_check_env_reports_presence(monkeypatch, capsys):
    monkeypatch.setenv("VAPI_WEB_TOKEN", "tok")

    assert check_env() == 0

    out = capsys.readouterr().out
    report, _ = json.JSONDecoder().raw_decode(out)
    assert report["environment"]["vapiToken"] is True
    assert report["environment"]["vapiWorkflowId"] is False
    assert "onboarding calls cannot start: missing VAPI_WORKFLOW_ID" in out
    assert "interview calls are configured" in out


def test_demo_runs_interview_call(capsys):
    assert asyncio.run(run_demo(SessionMode.INTERVIEW)) == 0

    out = capsys.readouterr().out
    assert "Final state: finished" in out
    assert "/interview/interview-1/feedback" in out


def test_demo_runs_onboarding_call(capsys):
    assert asyncio.run(run_demo(SessionMode.ONBOARDING)) == 0

    out = capsys.readouterr().out
    assert "Navigate to: /" in out
