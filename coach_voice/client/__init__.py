from .session import VoiceAgentClient
from .playback import PlaybackQueue
from .recorder import PcmRecorder
from .segmenter import VoiceActivitySegmenter
from .transport import VoiceAgentTransport

__all__ = ["PcmRecorder", "PlaybackQueue", "VoiceActivitySegmenter", "VoiceAgentClient", "VoiceAgentTransport"]
