from .reply import Reply
from .runtime import RuntimeDeps
from .session import VoiceSession
from .settings import AppSettings
from .utterance import Utterance

__all__ = ["AppSettings", "Reply", "RuntimeDeps", "Utterance", "VoiceSession"]
