"""API routes."""

from fastapi import APIRouter

from master_agentes.api.routes import activities, agents, chatvolt, chatvolt_config, chatvolt_webhook, contacts, docs

api_router = APIRouter()

# ChatVolt bridge (API key or org id, no session)
api_router.include_router(chatvolt.router, prefix="/chatvolt", tags=["chatvolt"])
api_router.include_router(chatvolt_webhook.router, prefix="/chatvolt", tags=["chatvolt-webhooks"])

# Public documentation
api_router.include_router(docs.router, prefix="/docs", tags=["docs"])

# Protected routes (session required)
api_router.include_router(chatvolt_config.router, prefix="/chatvolt", tags=["chatvolt-config"])
api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
