"""Chat with conversation memory.

Loads the caller's history, appends the new user turn, resolves an answer
across the chat adapters, then records the assistant turn and saves the
history with a fresh expiry. The web-lookup answer and the "no provider"
message are recorded like any other answer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src import providers
from src.llm.models import DEFAULT_MODEL
from src.memory.models import ConversationTurn, transcript
from src.memory.store import ConversationStore
from src.providers.base import ChatRequest, TextResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from src.providers.base import Adapter

logger = logging.getLogger(__name__)

NO_ANSWER = "No provider available to answer this question."


async def generate_response(
    conversation_id: str | int,
    prompt: str,
    model_key: str = DEFAULT_MODEL,
    *,
    adapters: Sequence[Adapter] | None = None,
    store: ConversationStore | None = None,
) -> str:
    """Answer *prompt* in the context of the conversation and remember both turns."""
    store = store or ConversationStore.get()
    adapters = providers.CHAT_ADAPTERS if adapters is None else adapters

    async with store.lock(conversation_id):
        history = await store.get_history(conversation_id)
        history.append(ConversationTurn(role="user", content=prompt))

        request = ChatRequest(prompt=prompt, context=transcript(history), model_key=model_key)
        result = await providers.resolve(adapters, request)

        if isinstance(result, TextResult):
            answer = result.text
            logger.info("Chat for %s answered by %s", conversation_id, result.provider)
        else:
            answer = NO_ANSWER
            logger.warning("Chat for %s exhausted all providers", conversation_id)

        history.append(ConversationTurn(role="assistant", content=answer))
        await store.put_history(conversation_id, history)

    return answer
