"""Feedback submission gateway contract and HTTP client."""

from .client import FeedbackGateway, HttpFeedbackGateway

__all__ = ["FeedbackGateway", "HttpFeedbackGateway"]
