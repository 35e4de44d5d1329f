"""
FastAPI Main Application

Entry point for the Web Test Agent API.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.routes import runs, health
from webtest_agent.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Web Test Agent API - natural-language UI tests with self-healing locators",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix=settings.api_prefix, tags=["Health"])
app.include_router(runs.router, prefix=settings.api_prefix, tags=["Runs"])


@app.on_event("startup")
async def startup_event():
    """Startup event handler"""
    logger.info("Web Test Agent API starting up")
    logger.info(f"API Version: {settings.api_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Automation backend: {settings.automation_backend}")
    logger.info(f"LLM Provider: {settings.llm_provider} (reasoning {'enabled' if settings.reasoning_enabled else 'disabled'})")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown event handler"""
    logger.info("Web Test Agent API shutting down")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Web Test Agent API",
        "version": settings.api_version,
        "status": "running",
    }
