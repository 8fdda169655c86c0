"""Settings de Email.

Configurações do envio de notificações ao operador via SMTP.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

NotifierBackend = Literal["log", "email"]


@dataclass(frozen=True)
class EmailSettings:
    """Configurações de Email.

    Attributes:
        smtp_host: Host do servidor SMTP
        smtp_port: Porta do servidor SMTP
        smtp_username: Usuário SMTP
        smtp_password: Senha SMTP
        smtp_use_tls: Usar STARTTLS
        from_email: Email de origem
        notification_email: Destinatário das notificações do operador
        notifier_backend: Backend de notificação (log|email)
        request_timeout_seconds: Timeout da conexão SMTP
    """

    # SMTP (envio)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True

    # Identidade
    from_email: str = ""
    notification_email: str = ""

    notifier_backend: NotifierBackend = "log"
    request_timeout_seconds: float = 30.0

    @property
    def is_configured(self) -> bool:
        """Retorna True se há dados mínimos para enviar email."""
        return bool(self.smtp_host and self.notification_email)

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Email."""
        errors: list[str] = []
        if self.notifier_backend not in ("log", "email"):
            errors.append(f"NOTIFIER_BACKEND inválido: {self.notifier_backend}")
        if self.notifier_backend != "email":
            return errors
        if not self.smtp_host:
            errors.append("EMAIL_SMTP_HOST não configurado")
        if not self.notification_email:
            errors.append("NOTIFICATION_EMAIL não configurado")
        if not 0 < self.smtp_port < 65536:
            errors.append("EMAIL_SMTP_PORT inválida")
        return errors


def _load_from_env() -> EmailSettings:
    """Carrega EmailSettings de variáveis de ambiente."""
    backend_str = os.getenv("NOTIFIER_BACKEND", "log").lower()
    backend: NotifierBackend = "email" if backend_str == "email" else "log"
    username = os.getenv("EMAIL_SMTP_USERNAME", "")
    return EmailSettings(
        smtp_host=os.getenv("EMAIL_SMTP_HOST", ""),
        smtp_port=int(os.getenv("EMAIL_SMTP_PORT", "587")),
        smtp_username=username,
        smtp_password=os.getenv("EMAIL_SMTP_PASSWORD", ""),
        smtp_use_tls=os.getenv("EMAIL_SMTP_USE_TLS", "true").lower() in ("true", "1"),
        from_email=os.getenv("EMAIL_FROM", username),
        notification_email=os.getenv("NOTIFICATION_EMAIL", ""),
        notifier_backend=backend,
        request_timeout_seconds=float(os.getenv("EMAIL_REQUEST_TIMEOUT_SECONDS", "30")),
    )


@lru_cache(maxsize=1)
def get_email_settings() -> EmailSettings:
    """Retorna instância cacheada de EmailSettings."""
    return _load_from_env()
