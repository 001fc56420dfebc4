"""Public integration guide for ChatVolt operators."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from master_agentes.domain.models.chatvolt import ProxyCommand, ProxyRoute, WebhookEventType
from master_agentes.settings import settings

router = APIRouter()

_EVENT_DESCRIPTIONS = {
    WebhookEventType.MESSAGE_RECEIVED: "Nova mensagem recebida",
    WebhookEventType.CONVERSATION_STARTED: "Nova conversa iniciada",
    WebhookEventType.CONVERSATION_ENDED: "Conversa encerrada",
    WebhookEventType.CONTACT_CREATED: "Contato criado ou atualizado",
}

_EXAMPLE_CONTACT = {"name": "João Silva", "phone": "+5511999999999", "email": "joao@email.com"}

_EVENT_EXAMPLES = {
    WebhookEventType.MESSAGE_RECEIVED: {
        "message_id": "msg_123",
        "conversation_id": "conv_456",
        "message_text": "Olá, preciso de ajuda",
        "message_type": "text",
        "sender_type": "user",
        "contact": _EXAMPLE_CONTACT,
        "metadata": {},
    },
    WebhookEventType.CONVERSATION_STARTED: {
        "conversation_id": "conv_456",
        "contact": _EXAMPLE_CONTACT,
    },
    WebhookEventType.CONVERSATION_ENDED: {"conversation_id": "conv_456"},
    WebhookEventType.CONTACT_CREATED: {**_EXAMPLE_CONTACT, "tags": ["chatvolt"]},
}


def build_integration_guide(base_url: str) -> dict:
    """Assemble the guide with absolute URLs under ``base_url``."""
    api_base = f"{base_url.rstrip('/')}{settings.api_prefix}"
    return {
        "title": "Master Agentes - API de Integração ChatVolt",
        "version": settings.api_version,
        "description": "API para integração entre Master Agentes e ChatVolt",
        "base_url": f"{api_base}/chatvolt",
        "authentication": {
            "type": "API Key",
            "headers": {
                "x-api-key": "Sua API Key do ChatVolt",
                "x-org-id": "Seu Organization ID do ChatVolt",
            },
            "note": "Configure essas credenciais no painel de configurações do Master Agentes",
        },
        "endpoints": {
            "main_api": {
                "url": f"{settings.api_prefix}/chatvolt",
                "methods": ["GET", "POST"],
                "parameters": {
                    "route": {
                        "type": "string",
                        "required": True,
                        "options": [route.value for route in ProxyRoute],
                    },
                },
                "commands": [command.value for command in ProxyCommand],
                "examples": [
                    {
                        "title": f"Buscar {route.value}",
                        "url": f"{api_base}/chatvolt?route={route.value}",
                    }
                    for route in ProxyRoute
                ],
            },
            "webhook": {
                "url": f"{settings.api_prefix}/chatvolt/webhook",
                "method": "POST",
                "headers": {
                    "x-org-id": "Seu Organization ID",
                    "x-chatvolt-signature": "sha256=<HMAC-SHA256 do corpo> (opcional)",
                },
                "events": [
                    {
                        "type": event.value,
                        "description": _EVENT_DESCRIPTIONS[event],
                        "payload": {"type": event.value, "data": _EVENT_EXAMPLES[event]},
                    }
                    for event in WebhookEventType
                ],
            },
            "configuration": {
                "url": f"{settings.api_prefix}/chatvolt/config",
                "methods": ["GET", "POST", "PUT", "DELETE"],
                "authentication": "Bearer session token",
            },
        },
        "integration_guide": {
            "step1": {
                "title": "Configurar credenciais",
                "description": "Salve sua API Key e Organization ID do ChatVolt",
                "url": f"{api_base}/chatvolt/config",
            },
            "step2": {
                "title": "Configurar webhook",
                "description": "No painel do ChatVolt, configure o webhook URL",
                "webhook_url": f"{api_base}/chatvolt/webhook",
            },
            "step3": {
                "title": "Testar integração",
                "description": "Faça uma requisição de teste para verificar se tudo está funcionando",
                "test_url": f"{api_base}/chatvolt?route={ProxyRoute.STATUS.value}",
            },
        },
        "error_codes": {
            "400": "Dados inválidos ou tipo de operação não suportado",
            "401": "API Key, Organization ID ou assinatura ausentes ou inválidos",
            "403": "Configuração não encontrada ou inativa",
            "404": "Rota ou recurso não encontrado",
            "500": "Erro interno do servidor",
        },
    }


@router.get("/chatvolt-integration")
async def chatvolt_integration_guide() -> JSONResponse:
    """Integration guide; public, so it also allows cross-origin reads."""
    return JSONResponse(
        content=build_integration_guide(settings.public_base_url),
        headers={"Access-Control-Allow-Origin": "*"},
    )
