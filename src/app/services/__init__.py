"""Serviços de aplicação do gateway."""

from app.services.auto_reply import AutoReplyService
from app.services.bulk_sender import BulkSendReport, RecipientResult, send_bulk
from app.services.chat_ids import is_group_chat, to_chat_id

__all__ = [
    "AutoReplyService",
    "BulkSendReport",
    "RecipientResult",
    "is_group_chat",
    "send_bulk",
    "to_chat_id",
]
