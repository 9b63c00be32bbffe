"""
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helios.api.v1.routes import api_router
from helios.core.config import ConfigManager, get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan - startup and shutdown events.

    Startup:
    - Validates catalog and provider configuration
    - Loads the lead catalog and builds the call console
    - Initializes the TTS provider for voice cues (optional)

    Shutdown:
    - Cancels console timers and any voice cue in flight
    """
    # ========================
    # STARTUP
    # ========================
    logger.info("Starting Helios call console...")

    config = ConfigManager(env=settings.environment, config_dir=settings.config_dir)
    strict_validation = settings.environment == "production"

    from helios.core.validation import validate_on_startup
    try:
        validate_on_startup(config, strict=strict_validation)
    except RuntimeError as e:
        if strict_validation:
            logger.error(f"Startup failed: {e}")
            raise
        logger.warning(f"Configuration warnings (non-fatal in {settings.environment}): {e}")

    from helios.domain.services.announcement import AnnouncementSink
    from helios.domain.services.call_console import CallConsole
    from helios.domain.services.lead_catalog import LeadCatalog
    from helios.infrastructure.tts.factory import create_configured_provider

    catalog = LeadCatalog.from_yaml(config.get_catalog_path())
    provider = await create_configured_provider(config)
    voice_id = config.get_provider_config("tts").get("voice_id", "") if provider else ""

    app.state.console = CallConsole(
        catalog,
        timing=config.get_session_timing(),
        sink=AnnouncementSink(provider=provider, voice_id=voice_id),
    )

    logger.info(f"Helios call console started with {len(catalog)} leads")

    yield  # Application is running

    # ========================
    # SHUTDOWN
    # ========================
    logger.info("Shutting down Helios call console...")

    try:
        await app.state.console.shutdown()
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")
    app.state.console = None

    logger.info("Helios call console shutdown complete")


app = FastAPI(
    title="Helios Call Console",
    description="Guided outbound call sessions with scripted journals and wrap-up",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"message": "Helios Call Console API", "status": "running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
