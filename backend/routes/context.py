import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

import store
from context.assembler import assemble
from context.formatter import format_bundle
from delivery.sink import DeliveryError
from models.bundle import ContextBundle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["context"])


# ---------- Response schemas ----------

class AssembleResponse(BaseModel):
    text: str
    delivered: bool
    delivery_error: Optional[str] = None


# ---------- Helpers ----------

async def _assemble_now() -> ContextBundle:
    rt = store.get_runtime()
    return await assemble(
        rt.log,
        rt.poller,
        rt.poller,
        window_seconds=rt.settings.event_window_seconds,
        max_diagnostics=rt.settings.max_diagnostics,
    )


# ---------- Endpoints ----------

@router.get("/context", response_class=PlainTextResponse)
async def get_context_text():
    """Assembles a bundle and returns it rendered as markdown."""
    bundle = await _assemble_now()
    return format_bundle(bundle)


@router.get("/context/json")
async def get_context_json():
    """Assembles a bundle and returns its wire JSON."""
    bundle = await _assemble_now()
    return bundle.to_wire()


@router.post("/context/assemble", response_model=AssembleResponse)
async def assemble_and_deliver():
    """
    Assembles and renders a bundle, places the text on the local sink and,
    when an endpoint is configured, POSTs the raw bundle to it.
    A delivery failure is reported in the response, not raised.
    """
    rt = store.get_runtime()
    bundle = await _assemble_now()
    text = format_bundle(bundle)
    rt.local_sink.put_text(text)

    if rt.http_sink is None:
        return AssembleResponse(text=text, delivered=False)

    try:
        await rt.http_sink.deliver(bundle.to_wire())
    except DeliveryError as e:
        logger.warning("context: endpoint send failed: %s", e)
        return AssembleResponse(text=text, delivered=False, delivery_error=str(e))
    return AssembleResponse(text=text, delivered=True)
