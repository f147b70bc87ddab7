from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import TypeAdapter, ValidationError

import store
from models.host import HostSignal

router = APIRouter(tags=["signals"])

_signal_adapter: TypeAdapter[HostSignal] = TypeAdapter(HostSignal)


# ---------- Endpoints ----------

@router.post("/signals", status_code=200)
async def ingest_signal(payload: dict[str, Any] = Body(...)):
    """
    Accepts one raw editor notification (discriminated by ``signal``).
    The host tables are updated and the recorder turns it into an event.
    """
    try:
        signal = _signal_adapter.validate_python(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    store.get_runtime().host.dispatch(signal)
    return {}


@router.post("/signals/batch", status_code=200)
async def ingest_signals(payload: list[dict[str, Any]] = Body(...)):
    """Same as /signals for several notifications, applied in order."""
    try:
        signals = [_signal_adapter.validate_python(p) for p in payload]
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    host = store.get_runtime().host
    for signal in signals:
        host.dispatch(signal)
    return {"accepted": len(signals)}


@router.get("/events")
async def list_events():
    """Every event currently held in the log, oldest first."""
    log = store.get_runtime().log
    return {
        "size": log.size,
        "capacity": log.capacity,
        "events": [e.model_dump(mode="json", by_alias=True) for e in log.to_list()],
    }
