# main.py

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, DEBUG_MODE
from logging_config import setup_logging

# Routers
from routers.auth import router as auth_router
from routers.connections import router as connections_router
from routers.health import router as health_router
from routers.webhook import router as webhook_router

# Initialize logging once
setup_logging(DEBUG_MODE)

logger = logging.getLogger(__name__)
logger.info("Starting the GitHub-Confluence Connector...")

app = FastAPI(
    title="GitHub-Confluence Connector",
    description="Relays GitHub push events into Confluence page updates",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(connections_router)
app.include_router(webhook_router)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
