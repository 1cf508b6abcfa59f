"""
Claim API client - one POST per claim attempt.

The endpoint is a tRPC batch route. A 2xx answer carries the result under
[0].result.data.json, an error answer carries [0].error.json.message.
Nothing here raises for network or HTTP errors; every attempt comes back as
either a ClaimResponse or a ClaimFailure for the classifier.
"""
import logging
from typing import Optional, Union

import httpx

from pointclaim.config import ClaimerConfig
from pointclaim.models import ClaimFailure, ClaimResponse

log = logging.getLogger(__name__)


class ClaimClient:
    """Sends claim requests for a single identity at a time."""

    def __init__(self, config: ClaimerConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self.client = httpx.Client(timeout=config.request_timeout_s, transport=transport)

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def get_headers(self, identity: str) -> dict:
        return {
            "Content-Type": "application/json",
            "Trpc-Accept": "application/json",
            "X-Trpc-Source": "nextjs-react",
            "Origin": self.config.site_url,
            "Referer": f"{self.config.site_url}/boost/{identity}",
            "User-Agent": self.config.user_agent,
            "Cookie": self.config.cookie,
        }

    @staticmethod
    def get_payload(identity: str) -> dict:
        return {"0": {"json": {"username": identity}}}

    def claim(self, identity: str) -> Union[ClaimResponse, ClaimFailure]:
        """Issue one claim request for identity."""
        try:
            resp = self.client.post(
                self.config.api_url,
                json=self.get_payload(identity),
                headers=self.get_headers(identity),
            )
        except httpx.TransportError as e:
            log.warning(f"Transport error claiming @{identity}: {e!r}")
            return ClaimFailure(message=None, error=str(e) or type(e).__name__)
        except httpx.RequestError as e:
            # A response arrived but couldn't be read (e.g. corrupt gzip body)
            log.warning(f"Unreadable response claiming @{identity}: {e!r}")
            return ClaimFailure(message="", error=str(e) or type(e).__name__)

        log.debug(f"@{identity}: HTTP {resp.status_code} - {resp.text[:200]}")

        if resp.is_success:
            return parse_success(_json_or_none(resp))

        return ClaimFailure(
            message=parse_error_message(_json_or_none(resp)),
            status_code=resp.status_code,
            error=f"HTTP {resp.status_code}",
        )


def _json_or_none(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError:
        return None


def _first(body) -> dict:
    if isinstance(body, list) and body and isinstance(body[0], dict):
        return body[0]
    return {}


def _points(section) -> float:
    if isinstance(section, dict):
        points = section.get("points")
        if isinstance(points, (int, float)) and not isinstance(points, bool):
            return points
    return 0


def parse_success(body) -> ClaimResponse:
    """
    Parse a 2xx body.

    Anything that doesn't have the expected shape becomes an unsuccessful
    response with no message.
    """
    data = _first(body).get("result", {})
    data = data.get("data", {}) if isinstance(data, dict) else {}
    data = data.get("json") if isinstance(data, dict) else None

    if not isinstance(data, dict):
        return ClaimResponse(success=False)

    message = data.get("message")
    return ClaimResponse(
        success=data.get("success") is True,
        message=message if isinstance(message, str) else "",
        claimed=_points(data.get("onboarding")),
        total=_points(data.get("userPoints")),
    )


def parse_error_message(body) -> str:
    """Extract [0].error.json.message, "" when absent."""
    error = _first(body).get("error", {})
    error = error.get("json", {}) if isinstance(error, dict) else {}
    message = error.get("message") if isinstance(error, dict) else None
    return message if isinstance(message, str) else ""
