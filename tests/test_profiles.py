import pytest

from callcoach.interview.models import SessionContext, SessionMode
from callcoach.interview.profiles import (
    INTERVIEWER_ASSISTANT,
    build_start_variables,
    format_questions,
    select_profile,
)


def test_format_questions_one_line_each():
    assert format_questions(["What is Python?", " Why here? ", ""]) == "- What is Python?\n- Why here?"


def test_interview_variables_and_profile():
    context = SessionContext(SessionMode.INTERVIEW, "Alice", question_list=["Q1", "Q2"])

    assert build_start_variables(context) == {"questions": "- Q1\n- Q2"}
    profile = select_profile(context, workflow_id="ignored")
    assert profile.assistant is INTERVIEWER_ASSISTANT
    assert profile.workflow_id is None


def test_interviewer_prompt_has_questions_placeholder():
    system_message = INTERVIEWER_ASSISTANT["model"]["messages"][0]["content"]
    assert "{{questions}}" in system_message


def test_onboarding_variables_and_profile():
    context = SessionContext("onboarding", "Alice", candidate_id="u-1")

    assert build_start_variables(context) == {"username": "Alice", "userid": "u-1"}
    profile = select_profile(context, workflow_id="wf-1")
    assert profile.workflow_id == "wf-1"
    assert profile.assistant is None


def test_onboarding_without_workflow_raises():
    context = SessionContext(SessionMode.ONBOARDING, "Alice", candidate_id="u-1")
    with pytest.raises(ValueError):
        select_profile(context, workflow_id=None)
