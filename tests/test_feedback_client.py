from unittest.mock import MagicMock, patch

import pytest
import requests

from callcoach.infrastructure.feedback import HttpFeedbackGateway
from callcoach.interview.errors import FeedbackSubmissionError
from callcoach.interview.models import Speaker, TranscriptEntry
from callcoach.interview.schemas import FeedbackRequest

POST = "callcoach.infrastructure.feedback.client.requests.post"


def _request() -> FeedbackRequest:
    return FeedbackRequest.from_entries(
        interview_id="i-1",
        candidate_id="u-1",
        entries=[TranscriptEntry(Speaker.CANDIDATE, "Hello")],
    )


def _response(status: int = 200, body=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def test_requires_url():
    with pytest.raises(ValueError):
        HttpFeedbackGateway("")


def test_successful_submission():
    gateway = HttpFeedbackGateway("https://example.test/feedback", api_key="k", timeout=3)

    with patch(POST, return_value=_response(body={"success": True, "feedbackId": "abc"})) as post:
        result = gateway.submit_sync(_request())

    assert result.success is True
    assert result.feedback_id == "abc"
    args, kwargs = post.call_args
    assert args == ("https://example.test/feedback",)
    assert kwargs["headers"]["Authorization"] == "Bearer k"
    assert kwargs["timeout"] == 3
    assert kwargs["json"] == {
        "interviewId": "i-1",
        "userId": "u-1",
        "transcript": [{"role": "user", "content": "Hello"}],
    }


def test_no_authorization_header_without_key():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(body={"success": True, "feedbackId": "abc"})) as post:
        gateway.submit_sync(_request())

    assert "Authorization" not in post.call_args.kwargs["headers"]


def test_wrapped_response_with_id_field():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(body={"data": {"success": True, "id": "xyz"}})):
        result = gateway.submit_sync(_request())

    assert result.feedback_id == "xyz"


def test_http_error_raises():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(status=500, text="boom")):
        with pytest.raises(FeedbackSubmissionError, match="500"):
            gateway.submit_sync(_request())


def test_transport_error_raises():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, side_effect=requests.ConnectionError("refused")):
        with pytest.raises(FeedbackSubmissionError):
            gateway.submit_sync(_request())


def test_non_json_body_raises():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(body=ValueError("no json"), text="<html>")):
        with pytest.raises(FeedbackSubmissionError):
            gateway.submit_sync(_request())


def test_unexpected_body_raises():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(body=["not", "a", "dict"])):
        with pytest.raises(FeedbackSubmissionError):
            gateway.submit_sync(_request())


@pytest.mark.asyncio
async def test_async_submit_runs_in_thread():
    gateway = HttpFeedbackGateway("https://example.test/feedback")

    with patch(POST, return_value=_response(body={"success": True, "feedbackId": "abc"})):
        result = await gateway.submit(_request())

    assert result.feedback_id == "abc"
