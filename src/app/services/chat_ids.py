"""Normalização de números de telefone para chat ids do WhatsApp Web."""

from __future__ import annotations

import re

USER_SUFFIX = "@c.us"
GROUP_SUFFIX = "@g.us"

_NON_DIGITS = re.compile(r"\D+")


def to_chat_id(number: str) -> str:
    """Converte número em chat id (<dígitos>@c.us).

    Ids que já contêm "@" são mantidos. Pontuação e espaços são removidos.

    Raises:
        ValueError: Se não sobrar nenhum dígito.
    """
    value = (number or "").strip()
    if "@" in value:
        return value
    digits = _NON_DIGITS.sub("", value)
    if not digits:
        raise ValueError("número inválido")
    return f"{digits}{USER_SUFFIX}"


def is_group_chat(chat_id: str) -> bool:
    return chat_id.endswith(GROUP_SUFFIX)
