# app/assistant/service.py
import logging
from functools import lru_cache
from typing import Callable, List, Optional

from app.assistant.groq_llm import (
    NOT_CONFIGURED_MESSAGE,
    SYSTEM_PROMPT,
    create_completion,
    get_groq_client,
)
from app.assistant.schemas import ChatRequest, ChatResponse
from app.assistant.tools import TOOL_DEFINITIONS, ToolDispatcher
from app.core.config import Settings, settings
from app.services.expense_service import ExpenseService, get_expense_service

logger = logging.getLogger(__name__)

EMPTY_REPLY = "I processed your request but have no response to provide."
ROUND_LIMIT_REPLY = (
    "I could not finish that request: it needed more lookups than I am allowed "
    "to make in one message. Please try a more specific question."
)


def _assistant_turn(message) -> dict:
    turn = {"role": "assistant", "content": message.content or ""}
    if message.tool_calls:
        turn["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.function.name,
                    "arguments": call.function.arguments,
                },
            }
            for call in message.tool_calls
        ]
    return turn


class ChatService:
    def __init__(
        self,
        expense_service: ExpenseService,
        cfg: Settings = settings,
        client_factory: Optional[Callable] = None,
    ):
        self.settings = cfg
        self.dispatcher = ToolDispatcher(expense_service, cfg)
        self.client_factory = client_factory or get_groq_client

    @property
    def is_configured(self) -> bool:
        return self.settings.assistant_configured

    def build_messages(self, request: ChatRequest) -> List[dict]:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for msg in request.history or []:
            messages.append({"role": msg.role, "content": msg.content})
        messages.append({"role": "user", "content": request.message})
        return messages

    def send_message(self, request: ChatRequest) -> ChatResponse:
        if not self.is_configured:
            return ChatResponse(success=True, message=NOT_CONFIGURED_MESSAGE)

        try:
            client = self.client_factory(self.settings)
            messages = self.build_messages(request)

            response = create_completion(client, self.settings, messages, TOOL_DEFINITIONS)
            message = response.choices[0].message

            rounds = 0
            while message.tool_calls:
                if rounds >= self.settings.CHAT_MAX_TOOL_ROUNDS:
                    logger.warning(
                        "Chat stopped after %d tool rounds", self.settings.CHAT_MAX_TOOL_ROUNDS
                    )
                    return ChatResponse(
                        success=False,
                        message=ROUND_LIMIT_REPLY,
                        error="Tool call limit reached",
                    )
                rounds += 1

                messages.append(_assistant_turn(message))
                for call in message.tool_calls:
                    logger.info("Running tool %s", call.function.name)
                    result = self.dispatcher.execute(call.function.name, call.function.arguments)
                    messages.append(
                        {"role": "tool", "tool_call_id": call.id, "content": result}
                    )

                response = create_completion(client, self.settings, messages, TOOL_DEFINITIONS)
                message = response.choices[0].message

            return ChatResponse(success=True, message=message.content or EMPTY_REPLY)

        except Exception as e:
            logger.exception("Error in chat service")
            return ChatResponse(
                success=False,
                message="An error occurred while processing your request.",
                error=str(e),
            )


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService(get_expense_service(), settings)
