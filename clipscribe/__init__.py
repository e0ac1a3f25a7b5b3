"""
Clipscribe: record a short microphone clip and transcribe it.

The clip is captured from the default input device into a temporary WAV
file, uploaded to a speech-to-text service, printed and deleted.
The default entrypoint is ``python -m clipscribe``.
"""

__all__ = [
    "config",
    "interfaces",
    "models",
    "pipeline",
]
