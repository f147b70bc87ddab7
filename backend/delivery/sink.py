"""
Where rendered context goes.

LogSink is the local sink: it keeps the last text placed on it and writes
it to the log. HttpSink POSTs a JSON payload to a configured endpoint; any
non-2xx status or transport error surfaces as DeliveryError.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Delivery failed: {body}")
        else:
            super().__init__(f"Status {status_code} body: {body}")


class LogSink:
    def __init__(self):
        self.last_text: Optional[str] = None

    def put_text(self, text: str, label: str = "Context Bundle") -> None:
        self.last_text = text
        logger.info("--- %s ---\n%s\n--- End %s ---", label, text, label)


class HttpSink:
    def __init__(
        self,
        endpoint: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def deliver(self, payload: Any) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.warning("HttpSink: transport error posting to %s: %s", self.endpoint, e)
            raise DeliveryError(None, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning("HttpSink: %s returned %d", self.endpoint, response.status_code)
            raise DeliveryError(response.status_code, response.text)
        logger.debug("HttpSink: delivered to %s (%d)", self.endpoint, response.status_code)
