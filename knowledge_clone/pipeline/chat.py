"""Chat session: transcript, turn locking and user-facing outcomes."""

import logging

from knowledge_clone.config.provider import ConfigProvider
from knowledge_clone.core import (
    ChatTurn,
    ConversationMessage,
    KnowledgeCloneError,
    MessageRole,
    Notification,
    NotificationLevel,
    TurnResult,
)
from knowledge_clone.pipeline.composer import HISTORY_WINDOW, ResponseComposer
from knowledge_clone.pipeline.summarizer import gate

logger = logging.getLogger(__name__)

GREETING = "Hi there! I'm your knowledge clone assistant. Ask me anything based on your uploaded data."
FALLBACK_ERROR_MESSAGE = (
    "Sorry, I couldn't generate a response. Please check your API keys in the settings and try again."
)
COMPLETION_FAILED_NOTICE = "Failed to get a response from the language model. Check your API keys."


class ChatSession:
    """Holds one conversation and runs at most one turn at a time.

    Usage:
        session = ChatSession(config_provider, composer)
        result = await session.submit("What did I write about pricing?")
        if result.turn and result.turn.is_summarized:
            print(session.expand(-1))
    """

    def __init__(
        self,
        config_provider: ConfigProvider,
        composer: ResponseComposer,
        history_window: int = HISTORY_WINDOW,
    ) -> None:
        self.config_provider = config_provider
        self.composer = composer
        self.history_window = history_window
        self._greeting = ChatTurn(display_content=GREETING)
        self.transcript: list[ChatTurn] = [self._greeting]
        self._pending = False

    @property
    def is_pending(self) -> bool:
        """True while a turn is in flight; submissions are rejected meanwhile."""
        return self._pending

    def history(self) -> list[ConversationMessage]:
        """Prior dialogue for the model, newest last.

        The greeting and error bubbles are display-only and never sent.
        """
        messages = [
            ConversationMessage(role=turn.role, content=turn.expanded())
            for turn in self.transcript
            if turn is not self._greeting and not turn.is_error
        ]
        return messages[-self.history_window :] if self.history_window > 0 else []

    async def submit(self, prompt: str) -> TurnResult:
        """Run one chat turn.

        Blank prompts and prompts submitted while another turn is pending are
        not accepted and leave the transcript untouched.
        """
        if not prompt.strip():
            return TurnResult(accepted=False)
        if self._pending:
            logger.info("Ignoring submission while a turn is pending")
            return TurnResult(accepted=False)

        self._pending = True
        try:
            history = self.history()
            self.transcript.append(ChatTurn(role=MessageRole.USER, display_content=prompt))
            context = self.config_provider.snapshot()

            try:
                composed = await self.composer.respond(prompt, history, context)
            except KnowledgeCloneError as e:
                logger.error("Error generating chat completion: %s", e)
                turn = ChatTurn(display_content=FALLBACK_ERROR_MESSAGE, is_error=True)
                self.transcript.append(turn)
                return TurnResult(
                    turn=turn,
                    notifications=[Notification(level=NotificationLevel.ERROR, message=COMPLETION_FAILED_NOTICE)],
                )

            turn = gate(composed.content, context.config.summarize_threshold)
            self.transcript.append(turn)
            return TurnResult(
                turn=turn,
                notifications=[
                    Notification(level=NotificationLevel.WARNING, message=warning)
                    for warning in composed.warnings
                ],
            )
        finally:
            self._pending = False

    def expand(self, index: int) -> str:
        """Full text of the transcript entry at ``index``."""
        return self.transcript[index].expanded()

    def last_summarized_index(self) -> int | None:
        for index in range(len(self.transcript) - 1, -1, -1):
            if self.transcript[index].is_summarized:
                return index
        return None
