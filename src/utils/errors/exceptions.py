"""Exceções de domínio do gateway e falhas recuperáveis de infraestrutura."""

from __future__ import annotations


class GatewayError(Exception):
    """Base para erros de domínio do gateway."""


class NotReadyError(GatewayError):
    """Operação exige conexão READY e a fase atual é outra.

    Exposta ao chamador (HTTP 503), nunca enfileirada nem re-tentada.
    """

    def __init__(self, phase: object) -> None:
        self.phase = str(phase) if phase is not None else "NotStarted"
        super().__init__(f"client not ready (phase={self.phase})")


class PairingRequiredError(GatewayError):
    """Ainda não há credenciais; o operador precisa ler o QR code."""


class AuthFailureError(GatewayError):
    """Credenciais rejeitadas pelo serviço de mensagens."""


class TransportDisconnectedError(GatewayError):
    """Queda da conexão no meio da sessão."""


class InitializationError(GatewayError):
    """Falha ao carregar a sessão ou construir o cliente de transporte."""


class NotificationFailure(GatewayError):
    """Falha de notificação (email/log). Logada, nunca propagada."""


class TransportError(GatewayError):
    """Falha ao executar operação no cliente de transporte (ex: envio)."""


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class SupervisorStoppedError(RuntimeError):
    """Comando enviado a um supervisor não iniciado ou já em shutdown."""
