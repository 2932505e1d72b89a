from .tts import select_synthesizer
from .deepgram import DeepgramTranscriber
from .anthropic import AnthropicCompletions
from .base import SpeechToText, CompletionRequest, SpeechSynthesizer, CompletionStreamer

__all__ = [
    "AnthropicCompletions",
    "CompletionRequest",
    "CompletionStreamer",
    "DeepgramTranscriber",
    "SpeechSynthesizer",
    "SpeechToText",
    "select_synthesizer",
]
