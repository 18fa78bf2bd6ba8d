"""
Chat Sessions

Keeps the conversation history with the assistant. Sessions are stored
newest first as one JSON array; the current session is tracked in memory
only and a new one is started on demand.

DESIGN DECISION: send_message() always records a reply.
The completion layer already falls back on its own failures; if it still
raises, an apology is stored instead so the conversation never ends on an
unanswered question.
"""

from typing import Optional

from pydantic import TypeAdapter, ValidationError

from expense_tracker.agents.gemini import GeminiChatService
from expense_tracker.log import get_logger
from expense_tracker.models.chat import ChatMessage, ChatRole, ChatSession, ExpenseContext
from expense_tracker.models.transaction import utcnow
from expense_tracker.services.storage import CorruptDataError, KeyValueStore


logger = get_logger(__name__)

_SESSIONS_ADAPTER = TypeAdapter(list[ChatSession])

CONNECTION_APOLOGY = (
    "I'm having trouble connecting right now. Please try again in a moment! 🤖"
)


class ChatbotService:
    def __init__(
        self,
        store: KeyValueStore,
        ai_service: GeminiChatService,
        key: str = "expense-chatbot-sessions",
    ):
        self._store = store
        self._ai = ai_service
        self._key = key
        self._current_id: Optional[str] = None

        if self._store.get(self._key) is None:
            self._save([])

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def all_sessions(self) -> list[ChatSession]:
        """
        Every stored session, newest first.

        Raises:
            CorruptDataError: If the stored sessions do not decode
        """
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return _SESSIONS_ADAPTER.validate_json(raw)
        except ValidationError as e:
            logger.error("chat_sessions_decode_failed", key=self._key, errors=e.error_count())
            raise CorruptDataError(self._key, str(e)) from e

    def create_new_session(self) -> ChatSession:
        session = ChatSession()
        self._save([session, *self.all_sessions()])
        self._current_id = session.id
        logger.info("chat_session_created", session_id=session.id)
        return session

    def current_session(self) -> ChatSession:
        """The active session, starting a new one if there is none."""
        if self._current_id is not None:
            for session in self.all_sessions():
                if session.id == self._current_id:
                    return session
        return self.create_new_session()

    @property
    def current_session_id(self) -> Optional[str]:
        return self._current_id

    def switch_to_session(self, session_id: str) -> bool:
        """Make another stored session current. Returns False if it does not exist."""
        if not any(s.id == session_id for s in self.all_sessions()):
            return False
        self._current_id = session_id
        return True

    def clear_current_session(self) -> None:
        """Remove all messages from the current session, keeping the session."""
        session = self.current_session()
        session.messages = []
        session.last_activity = utcnow()
        self._replace(session)

    def delete_session(self, session_id: str) -> bool:
        sessions = self.all_sessions()
        remaining = [s for s in sessions if s.id != session_id]
        if len(remaining) == len(sessions):
            return False

        self._save(remaining)
        if self._current_id == session_id:
            self._current_id = None
        logger.info("chat_session_deleted", session_id=session_id)
        return True

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def send_message(
        self,
        content: str,
        context: Optional[ExpenseContext] = None,
        general: bool = False,
    ) -> ChatMessage:
        """
        Append the user's message and the assistant's reply to the current
        session and persist it.

        Returns:
            The assistant message
        """
        session = self.current_session()
        history = list(session.messages)

        session.messages.append(ChatMessage(content=content, role=ChatRole.USER))
        session.last_activity = utcnow()

        try:
            reply = await self._ai.generate_response(
                content,
                context=context,
                history=history,
                general=general,
            )
        except Exception as e:
            logger.error(
                "chat_reply_failed",
                session_id=session.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            reply = CONNECTION_APOLOGY

        assistant_message = ChatMessage(content=reply, role=ChatRole.ASSISTANT)
        session.messages.append(assistant_message)
        session.last_activity = utcnow()
        self._replace(session)

        return assistant_message

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _replace(self, session: ChatSession) -> None:
        sessions = self.all_sessions()
        for index, stored in enumerate(sessions):
            if stored.id == session.id:
                sessions[index] = session
                self._save(sessions)
                return

    def _save(self, sessions: list[ChatSession]) -> None:
        self._store.set(self._key, _SESSIONS_ADAPTER.dump_json(sessions).decode("utf-8"))
