"""
Chat Service - recruiter assistant scoped to the focused match result.
"""

from .conversation import CHAT_ERROR_REPLY, Conversation, ConversationManager

__all__ = ["CHAT_ERROR_REPLY", "Conversation", "ConversationManager"]
