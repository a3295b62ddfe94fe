from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from contacthub.api.v1 import contacts, chat, notifications
from contacthub.core.config import settings
from contacthub.core.errors import ContactError, contact_error_handler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title="Contact Hub API",
    description="Contact requests, direct messaging and notifications between platform users",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Domain errors -> {"error": ..., "message": ...}
app.add_exception_handler(ContactError, contact_error_handler)

# Include routers
app.include_router(contacts.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")

@app.get("/")
async def root():
    """API information and Quick Reference"""
    return {
        "message": "Welcome to Contact Hub API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "contacts": {
                "settings": "GET/PUT /api/v1/contacts/settings",
                "send_request": "POST /api/v1/contacts/requests",
                "received_requests": "GET /api/v1/contacts/requests",
                "respond": "POST /api/v1/contacts/requests/{id}/respond"
            },
            "messaging": {
                "conversations": "GET /api/v1/messages/conversations",
                "send_message": "POST /api/v1/messages",
                "history": "GET /api/v1/messages/conversations/{id}/messages"
            },
            "notifications": {
                "inbox": "GET /api/v1/notifications",
                "websocket": "WS /api/v1/notifications/ws?token={access_token}"
            }
        }
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "contacthub-api",
        "environment": settings.ENVIRONMENT,
        "storage": settings.STORAGE_BACKEND
    }
