"""
callcoach: orchestration of voice-driven mock interview calls.

Owns the lifecycle of one call with an AI interviewer, accumulates the
transcript from streamed events and hands it off for feedback when the call ends.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.orchestrator import SessionOrchestrator
from .interview.models import CallState, SessionContext, SessionMode, NavigationSignal

__all__ = ["SessionOrchestrator", "CallState", "SessionContext", "SessionMode", "NavigationSignal"]
