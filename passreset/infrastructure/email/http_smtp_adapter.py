from __future__ import annotations

from typing import Optional
import httpx

from passreset.domain.errors import DeliveryFailed
from passreset.domain.ports.email_port import EmailPort


class HttpSmtpEmailAdapter(EmailPort):
    """Hands messages to a mail relay that exposes a JSON `/send` endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> None:
        url = f"{self._base_url}{self._send_path}"
        payload = {"to": to, "subject": subject, "body": body}
        if html_body is not None:
            payload["html_body"] = html_body

        try:
            resp = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise DeliveryFailed(f"mail relay HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            raise DeliveryFailed(f"mail relay responded {resp.status_code}: {text}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
