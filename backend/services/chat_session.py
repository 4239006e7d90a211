"""
Chat Session - Conversation turns, windowed context and cancellable sends

State machine: IDLE -> SENDING -> (RECEIVING | CANCELLED | ERRORED) -> IDLE.
The user's turn is appended before the request goes out and is never rolled
back; a cancelled request contributes no assistant turn.
"""

from __future__ import annotations

import asyncio
import logging

from models.chat import (
    ChatOutcome,
    ChatRole,
    ChatState,
    ConversationTurn,
    TranscriptEntry,
)
from models.document import TextDocument, TextRange
from models.events import EventType, PresentationEvent

from .cancellation import CancellationToken
from .errors import GatewayError, RequestCancelled, SessionBusyError
from .event_bus import EventBus
from .llm_service import LLMService, to_contents
from .prompt_builder import TASK_PARAMS, TaskKind, build_chat_message
from .response_parser import extract_code_blocks

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_TURNS = 6
CANCEL_NOTICE = "\n\n_[Response stopped by user]_"


class ChatSession:
    """One chat panel's conversation"""

    def __init__(
        self,
        llm_service: LLMService,
        events: EventBus | None = None,
        context_turns: int = DEFAULT_CONTEXT_TURNS,
    ):
        self.llm_service = llm_service
        self._events = events
        self.context_turns = context_turns
        self.state = ChatState.IDLE
        self.turns: list[ConversationTurn] = []
        self.transcript: list[TranscriptEntry] = []
        self._handle: CancellationToken | None = None

    @property
    def busy(self) -> bool:
        return self._handle is not None

    def context_window(self) -> list[ConversationTurn]:
        """Most recent turns sent with each request, oldest first"""
        if self.context_turns <= 0:
            return []
        return list(self.turns[-self.context_turns :])

    async def send(
        self,
        message: str,
        document: TextDocument | None = None,
        selection: TextRange | None = None,
    ) -> ChatOutcome:
        if self._handle is not None:
            raise SessionBusyError()
        # No state changes when the key is missing
        self.llm_service.require_api_key()

        code = None
        if document is not None and selection is not None and not selection.is_empty:
            code = document.get_text(selection)
        user_turn = ConversationTurn(role=ChatRole.USER, content=build_chat_message(message, document, code))

        token = CancellationToken()
        self._handle = token
        self.state = ChatState.SENDING
        self._append_turn(user_turn)

        try:
            contents = to_contents(self.context_window())
            reply = await self.llm_service.generate(contents, TASK_PARAMS[TaskKind.CHAT], token)
        except RequestCancelled:
            logger.info("[ChatSession] Request cancelled; no reply recorded")
            return ChatOutcome(status="cancelled", notice=CANCEL_NOTICE)
        except GatewayError as e:
            return self._fail(token, e)
        except asyncio.CancelledError:
            # The caller went away (request torn down, shutdown)
            token.cancel()
            if self._handle is token:
                self.state = ChatState.IDLE
            raise
        finally:
            if self._handle is token:
                self._handle = None

        if token.cancelled:
            return ChatOutcome(status="cancelled", notice=CANCEL_NOTICE)

        self.state = ChatState.RECEIVING
        assistant_turn = ConversationTurn(role=ChatRole.ASSISTANT, content=reply)
        self._append_turn(assistant_turn)
        self.state = ChatState.IDLE
        return ChatOutcome(
            status="completed",
            turn=assistant_turn,
            code_blocks=extract_code_blocks(reply),
        )

    def cancel(self) -> bool:
        """Cancel the outstanding request, if any"""
        token = self._handle
        if token is None:
            return False
        token.cancel()
        self._handle = None
        self.state = ChatState.CANCELLED
        self.transcript.append(TranscriptEntry(kind="notice", content=CANCEL_NOTICE))
        self._publish(PresentationEvent(type=EventType.CHAT_CANCELLED, message=CANCEL_NOTICE))
        self.state = ChatState.IDLE
        logger.info("[ChatSession] Response stopped by user")
        return True

    def clear(self):
        """Drop all history; an outstanding request is cancelled silently"""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.turns = []
        self.transcript = []
        self.state = ChatState.IDLE
        self._publish(PresentationEvent(type=EventType.CHAT_CLEARED))

    def _fail(self, token: CancellationToken, error: GatewayError) -> ChatOutcome:
        if token.cancelled:
            return ChatOutcome(status="cancelled", notice=CANCEL_NOTICE)
        self.state = ChatState.ERRORED
        text = f"AI request failed: {error}"
        logger.warning("[ChatSession] %s", text)
        self.transcript.append(TranscriptEntry(kind="error", content=text))
        self._publish(PresentationEvent(type=EventType.CHAT_ERROR, message=text))
        self.state = ChatState.IDLE
        return ChatOutcome(status="error", error=text)

    def _append_turn(self, turn: ConversationTurn):
        self.turns.append(turn)
        self.transcript.append(TranscriptEntry(kind="turn", content=turn.content, role=turn.role))
        self._publish(PresentationEvent(type=EventType.CHAT_TURN_APPENDED, turn=turn))

    def _publish(self, event: PresentationEvent):
        if self._events is not None:
            self._events.publish(event)
