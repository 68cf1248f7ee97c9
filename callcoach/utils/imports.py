"""
Utilities for native audio library noise suppression.
"""
import os


# Keep JACK from spawning a server when PortAudio enumerates devices
os.environ.setdefault("JACK_NO_START_SERVER", "1")


def with_suppressed_audio_warnings(func):
    """
    Decorator that silences native audio warnings (ALSA, JACK) during a call.
    This temporarily redirects stderr at the file descriptor level.
    """
    def wrapper(*args, **kwargs):
        try:
            original_stderr_fd = os.dup(2)
            null_fd = os.open(os.devnull, os.O_WRONLY)
            os.dup2(null_fd, 2)
            os.close(null_fd)
        except OSError:
            original_stderr_fd = None

        try:
            return func(*args, **kwargs)
        finally:
            if original_stderr_fd is not None:
                os.dup2(original_stderr_fd, 2)
                os.close(original_stderr_fd)

    return wrapper
