"""Domain errors and their HTTP mapping."""

import json
from typing import Any

from fastapi import status
from pydantic import ValidationError


class MasterAgentesError(Exception):
    """Base class for errors the API turns into JSON responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Erro interno do servidor"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        super().__init__(message or self.error)
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        if self.details is not None:
            body["details"] = self.details
        return body


class CredentialsRequiredError(MasterAgentesError):
    """API key / org id headers were not supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "API Key e Organization ID são obrigatórios"


class OrganizationRequiredError(MasterAgentesError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Organization ID é obrigatório"


class InvalidSignatureError(MasterAgentesError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Assinatura inválida"


class InvalidCredentialsError(MasterAgentesError):
    """No active credential matches the supplied identity."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "Configuração não encontrada ou inativa"


class NotFoundError(MasterAgentesError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Recurso não encontrado"


class ConversationNotFoundError(NotFoundError):
    error = "Conversa não encontrada"


class AgentNotFoundError(NotFoundError):
    error = "Agente não encontrado"


class ContactNotFoundError(NotFoundError):
    error = "Contato não encontrado"


class CredentialNotFoundError(NotFoundError):
    error = "Configuração não encontrada"


class ValidationFailedError(MasterAgentesError):
    """Payload failed schema validation; ``details`` carries field errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Dados inválidos"


def validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    """JSON-safe field errors from a pydantic ValidationError."""
    return json.loads(exc.json(include_url=False))
