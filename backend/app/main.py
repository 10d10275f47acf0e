import logging
from fastapi import FastAPI
from backend.app.routes import ingest, documents, qa
from backend.app.services.mcp_bridge import mcp_bridge
from backend.app.services.reasoning_service import reasoning_service
from shared.config import settings

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title="DocuMind")

@app.on_event("startup")
async def _startup():
    # Start MCP server & client
    await mcp_bridge.start()
    await reasoning_service.init()

@app.on_event("shutdown")
async def _shutdown():
    await reasoning_service.close()
    await mcp_bridge.stop()

app.include_router(ingest.router)
app.include_router(documents.router)
app.include_router(qa.router)
