"""
HTTP client for the feedback submission gateway.
"""
import asyncio
import logging
from typing import Optional, Dict, Any, Protocol

import requests
from pydantic import ValidationError

from ...config import FEEDBACK_TIMEOUT
from ...interview.errors import FeedbackSubmissionError
from ...interview.schemas import FeedbackRequest, FeedbackResult

logger = logging.getLogger("feedback_client")


class FeedbackGateway(Protocol):
    async def submit(self, request: FeedbackRequest) -> FeedbackResult:
        ...


class HttpFeedbackGateway:
    """Posts transcripts to the feedback service and reads back the feedback id."""

    def __init__(self,
                 url: str,
                 api_key: Optional[str] = None,
                 timeout: float = FEEDBACK_TIMEOUT):
        if not url:
            raise ValueError("url is required for feedback submission")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    async def submit(self, request: FeedbackRequest) -> FeedbackResult:
        """Submit without blocking the event loop."""
        return await asyncio.to_thread(self.submit_sync, request)

    def submit_sync(self, request: FeedbackRequest) -> FeedbackResult:
        """
        Submit a transcript for feedback.

        Args:
            request: Interview, candidate and transcript to score

        Returns:
            FeedbackResult reported by the service

        Raises:
            FeedbackSubmissionError: On transport errors, HTTP errors or an unreadable body
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = request.to_payload()
        logger.info(f"Submitting {len(payload['transcript'])} transcript lines for interview {request.interview_id}")

        try:
            resp = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise FeedbackSubmissionError(f"Feedback request failed: {e}") from e

        if resp.status_code >= 400:
            raise FeedbackSubmissionError(f"Feedback API error {resp.status_code}: {resp.text}")

        try:
            body = resp.json()
        except ValueError as e:
            raise FeedbackSubmissionError(f"Feedback API returned non-JSON body: {resp.text}") from e

        return self._parse_result(body)

    def _parse_result(self, body: Any) -> FeedbackResult:
        """
        Parse the response body. Accepts ``{success, feedbackId}`` at the top
        level or wrapped in ``data``.
        """
        if isinstance(body, dict) and isinstance(body.get("data"), dict) and "success" not in body:
            body = body["data"]
        if not isinstance(body, dict):
            raise FeedbackSubmissionError(f"Unexpected feedback response: {body!r}")

        data: Dict[str, Any] = dict(body)
        if "feedbackId" not in data and data.get("id"):
            data["feedbackId"] = data["id"]
        try:
            result = FeedbackResult.model_validate(data)
        except ValidationError as e:
            raise FeedbackSubmissionError(f"Invalid feedback response: {e}") from e

        logger.info(f"Feedback result: success={result.success} feedback_id={result.feedback_id}")
        return result
