"""Endpoints /api/* do gateway.

Todos exigem API key. Operações de envio e consulta exigem READY e
respondem 503 {"error", "phase"} fora dele (ver errors.py).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from api.routes.gateway.dependencies import (
    get_email_notifier,
    get_email_settings_dep,
    get_gateway_settings_dep,
    get_supervisor,
    require_api_key,
)
from api.routes.gateway.schemas import SendBulkRequest, SendMediaRequest, SendMessageRequest
from app.infra.notifications import EmailNotifier
from app.protocols.models import MediaAttachment, OutboundPayload
from app.services import send_bulk, to_chat_id
from app.supervisor import SessionSupervisor
from config.logging import mask_identifier
from config.settings import EmailSettings, GatewaySettings
from utils.errors import NotReadyError, PairingRequiredError, SupervisorStoppedError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])

ALREADY_AUTHENTICATED = "Client is already authenticated"
QR_NOT_AVAILABLE = "QR code not available yet. Please wait..."


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _ensure_ready(supervisor: SessionSupervisor) -> None:
    snapshot = supervisor.snapshot()
    if not snapshot.is_ready:
        raise NotReadyError(snapshot.phase)


def _chat_id_or_400(number: str) -> str:
    try:
        return to_chat_id(number)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


# ──────────────────────────────────────────────────────────────────────────────
# QR / status
# ──────────────────────────────────────────────────────────────────────────────


@router.get("/qr")
async def get_qr(supervisor: SessionSupervisor = Depends(get_supervisor)) -> dict[str, Any]:
    snapshot = supervisor.snapshot()
    if snapshot.is_ready:
        return {"message": ALREADY_AUTHENTICATED}
    if snapshot.pairing_challenge is None:
        return {"message": QR_NOT_AVAILABLE, "phase": snapshot.phase_name}
    return {"qr": snapshot.pairing_challenge}


@router.get("/qr-email")
async def send_qr_email(
    supervisor: SessionSupervisor = Depends(get_supervisor),
    email_settings: EmailSettings = Depends(get_email_settings_dep),
) -> dict[str, Any]:
    """Reenvia o QR vigente ao operador pelo notifier."""
    snapshot = supervisor.snapshot()
    if snapshot.is_ready:
        return {"message": ALREADY_AUTHENTICATED}
    try:
        await supervisor.resend_pairing_challenge()
    except PairingRequiredError:
        return {"message": QR_NOT_AVAILABLE, "phase": snapshot.phase_name}
    return {
        "message": "QR code sent to email successfully",
        "email": email_settings.notification_email,
    }


@router.get("/status")
async def get_status(supervisor: SessionSupervisor = Depends(get_supervisor)) -> dict[str, Any]:
    return {**supervisor.snapshot().to_dict(), "timestamp": _now_iso()}


# ──────────────────────────────────────────────────────────────────────────────
# Envio
# ──────────────────────────────────────────────────────────────────────────────


@router.post("/send-message")
async def send_message(
    body: SendMessageRequest,
    supervisor: SessionSupervisor = Depends(get_supervisor),
) -> dict[str, Any]:
    _ensure_ready(supervisor)
    chat_id = _chat_id_or_400(body.to)
    if body.delay > 0:
        await asyncio.sleep(body.delay / 1000)

    result = await supervisor.request_send(chat_id, body.message)
    return {
        "success": True,
        "messageId": result.message_id,
        "to": chat_id,
        "message": body.message,
        "timestamp": _now_iso(),
    }


@router.post("/send-bulk")
async def send_bulk_messages(
    body: SendBulkRequest,
    supervisor: SessionSupervisor = Depends(get_supervisor),
    settings: GatewaySettings = Depends(get_gateway_settings_dep),
) -> dict[str, Any]:
    _ensure_ready(supervisor)
    if len(body.recipients) > settings.max_bulk_recipients:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {settings.max_bulk_recipients} recipients per request",
        )

    delay_ms = settings.bulk_default_delay_ms if body.delay is None else body.delay
    report = await send_bulk(
        supervisor,
        body.recipients,
        OutboundPayload(text=body.message),
        delay_ms=delay_ms,
    )
    return {"success": True, **report.to_dict()}


@router.post("/send-media")
async def send_media(
    body: SendMediaRequest,
    supervisor: SessionSupervisor = Depends(get_supervisor),
) -> dict[str, Any]:
    _ensure_ready(supervisor)
    chat_id = _chat_id_or_400(body.to)
    payload = OutboundPayload(
        text=body.caption or None,
        media=MediaAttachment(mimetype=body.mimetype, data=body.data, filename=body.filename),
    )

    result = await supervisor.request_send(chat_id, payload)
    return {
        "success": True,
        "messageId": result.message_id,
        "to": chat_id,
        "caption": body.caption,
        "mediaType": body.mimetype,
        "timestamp": _now_iso(),
    }


# ──────────────────────────────────────────────────────────────────────────────
# Consultas
# ──────────────────────────────────────────────────────────────────────────────


@router.get("/chats")
async def list_chats(supervisor: SessionSupervisor = Depends(get_supervisor)) -> dict[str, Any]:
    chats = await supervisor.get_chats()
    return {"success": True, "chats": chats, "total": len(chats)}


@router.get("/contact/{phone_number}")
async def get_contact(
    phone_number: str,
    supervisor: SessionSupervisor = Depends(get_supervisor),
) -> dict[str, Any]:
    contact_id = _chat_id_or_400(phone_number)
    contact = await supervisor.get_contact_by_id(contact_id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return {"success": True, "contact": contact}


# ──────────────────────────────────────────────────────────────────────────────
# Operação
# ──────────────────────────────────────────────────────────────────────────────


@router.post("/restart")
async def restart_client(supervisor: SessionSupervisor = Depends(get_supervisor)) -> dict[str, Any]:
    """Restart explícito: cancela timer pendente e zera o limite de restarts."""
    try:
        await supervisor.restart()
    except SupervisorStoppedError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supervisor not running",
        ) from exc
    logger.info("restart_requested", extra={"client_id": supervisor.client_id})
    return {"success": True, "message": "Client restart initiated"}


@router.post("/test-email", response_model=None)
async def test_email(
    notifier: EmailNotifier | None = Depends(get_email_notifier),
    email_settings: EmailSettings = Depends(get_email_settings_dep),
) -> dict[str, Any] | JSONResponse:
    """Envia email de teste; falha é devolvida ao chamador (500)."""
    try:
        if notifier is None:
            raise RuntimeError("email notifier not configured")
        await notifier.send_test()
    except Exception as exc:
        logger.warning("email_test_failed", extra={"error_type": type(exc).__name__})
        return JSONResponse(
            {"error": "Email test failed", "details": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    logger.info(
        "email_test_sent",
        extra={"to": mask_identifier(email_settings.notification_email)},
    )
    return {
        "success": True,
        "message": "Test email sent successfully",
        "sentTo": email_settings.notification_email,
    }
