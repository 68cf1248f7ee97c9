"""
Callcoach Configuration System
==============================

This file contains ALL configuration for the callcoach session orchestrator.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional, Dict, List


# =============================================================================
# USER SETTINGS - Edit these to customize call behaviour
# =============================================================================

# REQUIRED: voice vendor credential (public web token)
VAPI_WEB_TOKEN = None
# REQUIRED for onboarding calls: workflow that collects interview parameters
VAPI_WORKFLOW_ID = None

# Feedback submission endpoint (interview calls only)
FEEDBACK_API_URL = None
FEEDBACK_API_KEY = None
FEEDBACK_TIMEOUT = 30

# Seconds a call may stay CONNECTING before it is failed. None disables it.
CONNECT_TIMEOUT_SECONDS = None

# Logging
LOG_FILE = "./_calls/session.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Environment variable names, first match wins
ENV_VAPI_WEB_TOKEN = ("VAPI_WEB_TOKEN", "NEXT_PUBLIC_VAPI_WEB_TOKEN")
ENV_VAPI_WORKFLOW_ID = ("VAPI_WORKFLOW_ID", "NEXT_PUBLIC_VAPI_WORKFLOW_ID")

# Navigation paths of the hosting UI
HOME_PATH = "/"
FEEDBACK_PATH_TEMPLATE = "/interview/{interview_id}/feedback"

# Audio input probe
PROBE_SAMPLE_RATE = 16000
PROBE_CHANNELS = 1
PROBE_FRAMES = 1024

# Interviewer assistant (interview mode start profile)
INTERVIEWER_NAME = "Interviewer"
INTERVIEWER_VOICE_PROVIDER = "11labs"
INTERVIEWER_VOICE_ID = "sarah"
INTERVIEWER_TRANSCRIBER_PROVIDER = "deepgram"
INTERVIEWER_TRANSCRIBER_MODEL = "nova-2"
INTERVIEWER_MODEL_PROVIDER = "openai"
INTERVIEWER_MODEL_NAME = "gpt-4"
LANGUAGE = "en"


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

def _getenv_first(names, default=None) -> Optional[str]:
    for name in names:
        raw = os.getenv(name)
        if raw is not None and raw.strip() != "":
            return raw.strip()
    return default


def _getenv_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Config:
    """Main configuration object, validated once per session."""
    vapi_web_token: Optional[str] = VAPI_WEB_TOKEN
    vapi_workflow_id: Optional[str] = VAPI_WORKFLOW_ID
    feedback_api_url: Optional[str] = FEEDBACK_API_URL
    feedback_api_key: Optional[str] = FEEDBACK_API_KEY
    feedback_timeout: float = FEEDBACK_TIMEOUT
    connect_timeout_seconds: Optional[float] = CONNECT_TIMEOUT_SECONDS
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL

    def missing_credentials(self, mode: str) -> List[str]:
        """
        Names of required settings that are absent for a call in ``mode``.

        Only presence is checked; values are handed to the vendor untouched.
        """
        missing = []
        if not self.vapi_web_token:
            missing.append(ENV_VAPI_WEB_TOKEN[0])
        if mode == "onboarding" and not self.vapi_workflow_id:
            missing.append(ENV_VAPI_WORKFLOW_ID[0])
        return missing

    def environment_report(self) -> Dict[str, bool]:
        """Presence report of every external setting."""
        return {
            "vapiToken": bool(self.vapi_web_token),
            "vapiWorkflowId": bool(self.vapi_workflow_id),
            "feedbackApiUrl": bool(self.feedback_api_url),
            "feedbackApiKey": bool(self.feedback_api_key),
        }


def get_config() -> Config:
    """Load configuration from the environment, falling back to the settings above."""
    timeout = _getenv_float("FEEDBACK_TIMEOUT", FEEDBACK_TIMEOUT)
    return Config(
        vapi_web_token=_getenv_first(ENV_VAPI_WEB_TOKEN, VAPI_WEB_TOKEN),
        vapi_workflow_id=_getenv_first(ENV_VAPI_WORKFLOW_ID, VAPI_WORKFLOW_ID),
        feedback_api_url=_getenv_first(("FEEDBACK_API_URL",), FEEDBACK_API_URL),
        feedback_api_key=_getenv_first(("FEEDBACK_API_KEY",), FEEDBACK_API_KEY),
        feedback_timeout=FEEDBACK_TIMEOUT if timeout is None else timeout,
        connect_timeout_seconds=_getenv_float("CONNECT_TIMEOUT_SECONDS", CONNECT_TIMEOUT_SECONDS),
        log_file=_getenv_first(("CALLCOACH_LOG_FILE",), LOG_FILE),
        log_level=_getenv_first(("CALLCOACH_LOG_LEVEL",), LOG_LEVEL).upper(),
    )
