"""
Gemini Chat Completion

DESIGN DECISION: The assistant ALWAYS answers.
Any failure in the completion call (no API key, network error, a blocked
or empty response) is logged and replaced by a canned reply chosen by
keyword. The chat UI never has to handle an error from this layer.

TWO PERSONAS:

1. FINANCE ADVISOR (default):
   - Knows the user's current totals, top categories and recent records
   - Gives short, practical budgeting advice

2. GENERAL ASSISTANT:
   - No financial context
   - Answers general knowledge questions

The model only sees what we put in the prompt. It has no access to the
record store.
"""

from typing import Any, Optional, Sequence

import google.generativeai as genai

from expense_tracker.config import GeminiSettings
from expense_tracker.log import get_logger
from expense_tracker.models.chat import ChatMessage, ChatRole, ExpenseContext


logger = get_logger(__name__)

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

FINANCE_PERSONA = """You are ExpenseBot, an AI assistant specialized in personal finance and expense tracking. You help users manage their expenses, provide budgeting advice, and offer financial insights.

Your personality:
- Friendly and supportive
- Knowledgeable about personal finance
- Practical and actionable advice
- Encouraging towards financial goals
- Use emojis occasionally to be engaging

Keep responses concise (2-3 sentences max) unless the user asks for detailed analysis.

You can help with:
- Expense categorization
- Budgeting advice
- Financial goal setting
- Spending pattern analysis
- Money-saving tips
- Investment basics
- Debt management

"""

GENERAL_PERSONA = """You are a helpful AI assistant that can answer questions about any topic. You can provide information, explanations, and insights on a wide variety of subjects.

Your personality:
- Helpful and informative
- Concise but thorough
- Friendly and engaging
- Use emojis occasionally to be engaging

Keep responses concise (2-4 sentences) unless the user asks for detailed information.

If you don't know something, say so honestly and suggest how the user might find the answer."""


def build_finance_prompt(context: Optional[ExpenseContext] = None) -> str:
    """Finance persona, followed by the user's numbers when available."""
    if context is None:
        return FINANCE_PERSONA

    sym = context.currency_symbol
    categories = "\n".join(
        f"- {c.category}: {sym}{c.amount:.2f} ({c.percentage:.1f}%)"
        for c in context.top_categories
    )
    recent = "\n".join(
        f"- {t.description}: {sym}{t.amount:.2f} ({t.category})"
        for t in context.recent_transactions[:5]
    )

    return (
        FINANCE_PERSONA
        + "Current user's financial context:\n"
        + f"- Total monthly expenses: {sym}{context.total_expenses:.2f}\n"
        + f"- Total monthly income: {sym}{context.total_income:.2f}\n"
        + f"- Net amount: {sym}{context.net_amount:.2f}\n\n"
        + f"Top spending categories:\n{categories}\n\n"
        + f"Recent transactions:\n{recent}\n\n"
        + "Use this context to provide personalized advice."
    )


def build_general_prompt() -> str:
    return GENERAL_PERSONA


def fallback_response(
    message: str,
    context: Optional[ExpenseContext] = None,
    general: bool = False,
) -> str:
    """Keyword-matched reply used whenever the model cannot answer."""
    text = message.lower()

    if general:
        if "weather" in text:
            return (
                "🌤️ I can't check live weather data, but a weather app or a "
                "quick search for 'weather [your city]' will have it!"
            )
        if "news" in text or "current" in text:
            return (
                "📰 For the latest news, check reliable sources like BBC, "
                "Reuters, AP News, or your local news outlets!"
            )
        if "time" in text or "date" in text:
            return (
                "🕐 I can't check the current time, but your device's clock "
                "has it for any timezone!"
            )
        return (
            "🤖 I'm having trouble connecting right now, but I'd love to help! "
            "Try asking about science, history, technology, or anything else "
            "you're curious about."
        )

    if "budget" in text or "spending" in text:
        return (
            "💰 Great question about budgeting! The 50/30/20 rule is a good "
            "starting point: 50% for needs, 30% for wants, and 20% for savings. "
            "Would you like me to analyze your current spending patterns?"
        )
    if "save" in text or "saving" in text:
        return (
            "🎯 Smart thinking about saving! Start small: even $25/week adds up "
            "to $1,300 yearly. Track your expenses for a week to find areas "
            "where you can cut back. What's your savings goal?"
        )
    if "category" in text or "categorize" in text:
        return (
            "📊 I can help you categorize expenses! Common categories include "
            "Food, Transportation, Entertainment, Utilities, Shopping and "
            "Healthcare. What transaction do you need help categorizing?"
        )
    if "voice" in text or "speech" in text:
        return (
            "🎤 Just say things like 'I spent $25 on lunch' or 'Paid 60 dollars "
            "for gas' and the amount, category and description are detected "
            "for you."
        )
    if context is not None and ("analyze" in text or "insight" in text):
        sym = context.currency_symbol
        net = context.net_amount
        if net > 0:
            top = context.top_categories[0].category if context.top_categories else "unknown"
            return (
                f"📈 Good news! You're saving {sym}{net:.2f} this month. Your top "
                f"expense is {top}. Consider setting aside this surplus for an "
                "emergency fund or investments!"
            )
        top = context.top_categories[0].category if context.top_categories else "top"
        return (
            f"⚠️ You're spending {sym}{abs(net):.2f} more than you earn. Focus on "
            f"reducing {top} expenses first. Need specific tips?"
        )

    return (
        "👋 Hi! I'm your AI assistant. I can help with finance questions and "
        "general knowledge. Try asking me about budgeting, saving tips, or any "
        "topic you're curious about!"
    )


class GeminiChatService:
    """
    Chat completion through Gemini, with canned fallbacks.

    Args:
        settings: Gemini configuration. Without it (and without a model)
            every reply is a fallback.
        model: Pre-built model exposing generate_content_async(contents).
            Injected in tests.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
    ):
        self._settings = settings
        self._model = model

        if self._model is None and self._settings is not None:
            self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "top_k": self._settings.top_k,
                "top_p": self._settings.top_p,
                "max_output_tokens": self._settings.max_tokens,
            },
            safety_settings=SAFETY_SETTINGS,
        )

    @property
    def is_configured(self) -> bool:
        return self._model is not None

    @property
    def history_turns(self) -> int:
        return self._settings.history_turns if self._settings else 10

    def build_contents(
        self,
        user_message: str,
        context: Optional[ExpenseContext] = None,
        history: Sequence[ChatMessage] = (),
        general: bool = False,
    ) -> list[dict]:
        """
        Conversation payload: system prompt as the first user turn, the
        trailing history (assistant mapped to 'model'), then the new message.
        """
        system_prompt = build_general_prompt() if general else build_finance_prompt(context)

        turns = list(history)[-self.history_turns:] if self.history_turns else []

        contents = [{"role": "user", "parts": [system_prompt]}]
        for message in turns:
            role = "model" if message.role == ChatRole.ASSISTANT else "user"
            contents.append({"role": role, "parts": [message.content]})
        contents.append({"role": "user", "parts": [user_message]})
        return contents

    async def generate_response(
        self,
        user_message: str,
        context: Optional[ExpenseContext] = None,
        history: Sequence[ChatMessage] = (),
        general: bool = False,
    ) -> str:
        """Model reply, or a fallback reply on any failure."""
        if self._model is None:
            logger.warning("gemini_not_configured")
            return fallback_response(user_message, context, general)

        contents = self.build_contents(user_message, context, history, general)

        try:
            response = await self._model.generate_content_async(contents)
            # .text raises ValueError when the candidate was blocked
            text = (response.text or "").strip()
            if not text:
                raise ValueError("Empty response from Gemini")
            logger.info("gemini_response_received", general=general, chars=len(text))
            return text
        except Exception as e:
            logger.error(
                "gemini_request_failed",
                error=str(e),
                error_type=type(e).__name__,
                general=general,
            )
            return fallback_response(user_message, context, general)
