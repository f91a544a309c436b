from fastapi import APIRouter, Depends

from app.assistant.schemas import ChatRequest, ChatResponse, ChatStatus
from app.assistant.service import ChatService, get_chat_service

router = APIRouter(tags=["Chat"])


@router.post("", response_model=ChatResponse)
def send_message(
    payload: ChatRequest,
    chat: ChatService = Depends(get_chat_service),
):
    return chat.send_message(payload)


@router.get("/status", response_model=ChatStatus)
def get_status(chat: ChatService = Depends(get_chat_service)):
    return ChatStatus(configured=chat.is_configured)
