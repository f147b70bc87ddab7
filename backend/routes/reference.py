import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

import store
from context.reference import NoActiveEditorError, build_code_reference, build_markdown_reference
from delivery.sink import DeliveryError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reference"])


# ---------- Response schemas ----------

class ReferenceResponse(BaseModel):
    reference: dict[str, Any]
    delivered: bool
    delivery_error: Optional[str] = None


class MarkdownReferenceResponse(BaseModel):
    text: str


# ---------- Endpoints ----------

@router.post("/reference", response_model=ReferenceResponse)
async def send_code_reference():
    """
    Builds a ``code.reference`` payload for the active editor's selection
    (or cursor) and sends it to the endpoint when one is configured.
    """
    rt = store.get_runtime()
    try:
        reference = build_code_reference(rt.host.active_editor)
    except NoActiveEditorError as e:
        raise HTTPException(status_code=409, detail=str(e))

    rt.local_sink.put_text(json.dumps(reference, indent=2), label="Code Reference")

    if rt.http_sink is None:
        return ReferenceResponse(reference=reference, delivered=False)

    try:
        await rt.http_sink.deliver(reference)
    except DeliveryError as e:
        logger.warning("reference: endpoint send failed: %s", e)
        return ReferenceResponse(reference=reference, delivered=False, delivery_error=str(e))
    return ReferenceResponse(reference=reference, delivered=True)


@router.post("/reference/markdown", response_model=MarkdownReferenceResponse)
async def markdown_reference():
    """Paste-ready markdown reference to the active editor's selection or cursor line."""
    rt = store.get_runtime()
    try:
        text = build_markdown_reference(rt.host.active_editor, rt.host.workspace_folders)
    except NoActiveEditorError as e:
        raise HTTPException(status_code=409, detail=str(e))

    rt.local_sink.put_text(text, label="Code Reference")
    return MarkdownReferenceResponse(text=text)
