import time
from datetime import datetime, timezone

# Wall-clock anchor taken once; later readings advance with the monotonic
# clock so recorded timestamps never go backwards if the system clock steps.
_WALL_ANCHOR_MS = int(time.time() * 1000)
_MONO_ANCHOR = time.monotonic()


def now_ms() -> int:
    """Current time in Unix milliseconds, non-decreasing for the life of the process."""
    return _WALL_ANCHOR_MS + int((time.monotonic() - _MONO_ANCHOR) * 1000)


def iso_from_ms(ms: int) -> str:
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
