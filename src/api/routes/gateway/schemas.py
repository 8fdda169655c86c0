"""Modelos de request das rotas de envio."""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, Field, field_validator


class SendMessageRequest(BaseModel):
    to: str = Field(min_length=1)
    message: str = Field(min_length=1)
    delay: int = Field(default=0, ge=0, description="Delay em ms antes do envio")


class SendBulkRequest(BaseModel):
    recipients: list[str] = Field(min_length=1)
    message: str = Field(min_length=1)
    delay: int | None = Field(default=None, ge=0, description="Delay em ms entre mensagens")


class SendMediaRequest(BaseModel):
    """Mídia em base64 no corpo JSON."""

    to: str = Field(min_length=1)
    data: str = Field(min_length=1)
    mimetype: str = Field(min_length=1)
    filename: str | None = None
    caption: str = ""

    @field_validator("data")
    @classmethod
    def _validate_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("data deve ser base64 válido") from exc
        return value
