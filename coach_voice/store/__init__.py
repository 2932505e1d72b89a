from .context import PromptAssembler
from .conversations import ConversationStore

__all__ = ["ConversationStore", "PromptAssembler"]
