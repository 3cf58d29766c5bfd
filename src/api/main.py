import logging
import os

from fastapi import FastAPI

from api.routers import ops, process

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Logging configuration
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="braindump", description="Deterministic text-to-todo/event extraction")

app.include_router(process.router)
app.include_router(ops.router)

logger.info("braindump API ready")
