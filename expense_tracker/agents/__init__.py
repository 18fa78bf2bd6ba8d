"""
AI Agents Package

The chat assistant: Gemini completion with fallbacks, and the persisted
chat sessions built on top of it.
"""

from expense_tracker.agents.chatbot import CONNECTION_APOLOGY, ChatbotService
from expense_tracker.agents.gemini import (
    GeminiChatService,
    build_finance_prompt,
    build_general_prompt,
    fallback_response,
)

__all__ = [
    "CONNECTION_APOLOGY",
    "ChatbotService",
    "GeminiChatService",
    "build_finance_prompt",
    "build_general_prompt",
    "fallback_response",
]
