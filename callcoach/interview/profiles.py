"""
Start profiles for the voice vendor.

This module holds the fixed interviewer assistant and the onboarding workflow
profile, keeping the vendor-facing script out of the orchestration logic.
"""
from typing import Dict, Iterable, Optional

from ..config import (
    INTERVIEWER_NAME, INTERVIEWER_VOICE_PROVIDER, INTERVIEWER_VOICE_ID,
    INTERVIEWER_TRANSCRIBER_PROVIDER, INTERVIEWER_TRANSCRIBER_MODEL,
    INTERVIEWER_MODEL_PROVIDER, INTERVIEWER_MODEL_NAME, LANGUAGE
)
from ..infrastructure.voice import StartProfile
from .models import SessionContext, SessionMode


INTERVIEWER_SYSTEM_PROMPT = """
You are a professional job interviewer conducting a real-time voice interview with a candidate.
Your goal is to assess their qualifications, motivation, and fit for the role.

Interview Guidelines:
Follow the structured question flow:
{{questions}}

Engage naturally & react appropriately:
- Listen actively to responses and acknowledge them before moving forward.
- Ask brief follow-up questions if a response is vague or requires more detail.
- Keep the conversation flowing smoothly while maintaining control.

Be professional, yet warm and welcoming:
- Use official yet friendly language.
- Keep responses concise and to the point (like in a real voice interview).
- Avoid robotic phrasing; sound natural and conversational.

Answer the candidate's questions professionally:
- If asked about the role, company, or expectations, provide a clear and relevant answer.
- If unsure, redirect the candidate to HR for more details.

Conclude the interview properly:
- Thank the candidate for their time.
- Inform them that the company will reach out soon with feedback.
- End the conversation on a polite and positive note.

Keep all your responses short and simple, this is a voice conversation.
""".strip()


INTERVIEWER_ASSISTANT = {
    "name": INTERVIEWER_NAME,
    "firstMessage": (
        "Hello! Thank you for taking the time to speak with me today. "
        "I'm looking forward to learning more about you and your experience."
    ),
    "transcriber": {
        "provider": INTERVIEWER_TRANSCRIBER_PROVIDER,
        "model": INTERVIEWER_TRANSCRIBER_MODEL,
        "language": LANGUAGE,
    },
    "voice": {
        "provider": INTERVIEWER_VOICE_PROVIDER,
        "voiceId": INTERVIEWER_VOICE_ID,
        "stability": 0.4,
        "similarityBoost": 0.8,
        "speed": 0.9,
        "style": 0.5,
        "useSpeakerBoost": True,
    },
    "model": {
        "provider": INTERVIEWER_MODEL_PROVIDER,
        "model": INTERVIEWER_MODEL_NAME,
        "messages": [
            {"role": "system", "content": INTERVIEWER_SYSTEM_PROMPT},
        ],
    },
}


def format_questions(questions: Iterable[str]) -> str:
    """One ``- question`` line per question, in order."""
    return "\n".join(f"- {q.strip()}" for q in questions if q and q.strip())


def interview_profile() -> StartProfile:
    return StartProfile(name="interview", assistant=INTERVIEWER_ASSISTANT)


def onboarding_profile(workflow_id: str) -> StartProfile:
    return StartProfile(name="onboarding", workflow_id=workflow_id)


def build_start_variables(context: SessionContext) -> Dict[str, str]:
    """Variable values the selected profile is parameterized with."""
    if context.mode == SessionMode.ONBOARDING:
        return {
            "username": context.candidate_display_name,
            "userid": context.candidate_id or "",
        }
    return {"questions": format_questions(context.question_list)}


def select_profile(context: SessionContext, workflow_id: Optional[str]) -> StartProfile:
    """
    Pick the start profile for a session.

    Raises:
        ValueError: If onboarding is requested without a workflow reference
    """
    if context.mode == SessionMode.ONBOARDING:
        if not workflow_id:
            raise ValueError("Onboarding profile requires a workflow id")
        return onboarding_profile(workflow_id)
    return interview_profile()
