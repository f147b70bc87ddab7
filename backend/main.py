from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import store
from config import load_settings
from routes import context, reference, signals

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    store.runtime = store.Runtime(settings)
    store.runtime.start()
    logger.info(
        "ctxbridge started (buffer=%d, window=%ds, endpoint=%s)",
        settings.event_buffer_size, settings.event_window_seconds, settings.endpoint or "-",
    )
    try:
        yield
    finally:
        store.runtime.stop()
        store.runtime = None


app = FastAPI(title="ctxbridge API", version="0.1.0", lifespan=lifespan)

app.include_router(signals.router)
app.include_router(context.router)
app.include_router(reference.router)


@app.get("/")
def health():
    return {"status": "ok", "service": "ctxbridge"}


if __name__ == "__main__":
    import os

    import uvicorn

    logging.basicConfig(level=os.environ.get("CTXBRIDGE_LOG_LEVEL", "INFO"))
    uvicorn.run(
        app,
        host=os.environ.get("CTXBRIDGE_HOST", "127.0.0.1"),
        port=int(os.environ.get("CTXBRIDGE_PORT", "8765")),
    )
