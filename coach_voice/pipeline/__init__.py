from .ordered import OrderedAudioSender
from .utterance import UtterancePipeline
from .sentences import SentenceBuffer

__all__ = ["OrderedAudioSender", "SentenceBuffer", "UtterancePipeline"]
