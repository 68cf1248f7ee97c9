#!/usr/bin/env python3
"""
Main entry point for callcoach.
Allows running the package with: python -m callcoach
"""
import asyncio
import json
import sys

from .config import get_config
from .utils import setup_logging
from .interview.models import SessionMode
from .interview.orchestrator import SessionOrchestrator
from .interview.testing import (
    MockVoiceChannel, MockFeedbackGateway, MockAudioInput,
    create_test_config, create_test_context
)

USAGE = """Usage: python -m callcoach [--check-env] [--demo[=interview|onboarding]]

  --check-env            Report which external settings are present
  --demo                 Run a scripted interview call against mock collaborators
  --demo=onboarding      Run a scripted onboarding call instead
"""


def check_env() -> int:
    """Print the presence report of every external setting."""
    config = get_config()
    report = config.environment_report()
    print(json.dumps({"success": True, "environment": report}, indent=2))

    for mode in SessionMode:
        missing = config.missing_credentials(mode.value)
        if missing:
            print(f"❌ {mode.value} calls cannot start: missing {', '.join(missing)}")
        else:
            print(f"✅ {mode.value} calls are configured")
    return 0


async def run_demo(mode: SessionMode) -> int:
    """Drive one call through a scripted channel and print the outcome."""
    channel = MockVoiceChannel()
    orchestrator = SessionOrchestrator(
        context=create_test_context(mode),
        channel=channel,
        gateway=MockFeedbackGateway(),
        config=create_test_config(),
        audio_input=MockAudioInput(),
        session_id=f"demo_{mode.value}",
    )

    print(f"\n🎙️  Demo {mode.value} call")
    print("=" * 50)

    async with orchestrator:
        await orchestrator.request_start()
        profile, variables = channel.start_calls[-1]
        print(f"📞 Start command: profile={profile.name} variables={variables}")

        await channel.emit_started()
        await channel.emit_message("Hello! Thanks for joining today.", role="assistant")
        await channel.emit_message("Hi, I'm", role="user", final=False)
        await channel.emit_message("Hi, I'm Alice and I'm ready.", role="user")
        print(f"💬 Latest: \"{orchestrator.snapshot().latest_text}\"")
        await channel.emit_ended()

    snapshot = orchestrator.snapshot()
    print("=" * 50)
    print(f"🎯 Final state: {snapshot.state.value}")
    print(f"📝 Transcript entries: {snapshot.transcript_length}")
    if snapshot.navigation is not None:
        print(f"🧭 Navigate to: {snapshot.navigation.path}")
    print(f"📈 Session metrics: {orchestrator.get_metrics()}")
    return 0


def main():
    """Command-line interface for callcoach."""
    config = get_config()
    log_file = setup_logging(config.log_file, config.log_level)

    if "--help" in sys.argv or "-h" in sys.argv or len(sys.argv) == 1:
        print(USAGE)
        sys.exit(0)

    exit_code = 0
    for arg in sys.argv[1:]:
        if arg == "--check-env":
            exit_code = check_env()
        elif arg == "--demo" or arg.startswith("--demo="):
            mode_name = arg.split("=", 1)[1] if "=" in arg else SessionMode.INTERVIEW.value
            try:
                mode = SessionMode(mode_name)
            except ValueError:
                print(f"❌ Unknown demo mode: {mode_name}. Use interview or onboarding")
                sys.exit(1)
            exit_code = asyncio.run(run_demo(mode))
        else:
            print(f"❌ Unknown option: {arg}")
            print(USAGE)
            sys.exit(1)

    print(f"📁 Detailed logs: {log_file}")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
