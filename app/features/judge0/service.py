import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import httpx

from app.Core.config import Settings
from .schemas import CodeSubmissionCreate, Judge0ExecutionResult

logger = logging.getLogger("judge0")

# Judge0 status ids: 1 In Queue, 2 Processing; everything else is final.
PENDING_STATUS_IDS = frozenset({1, 2})
ACCEPTED_STATUS_ID = 3


class JudgeGatewayError(Exception):
    """Raised when the judge answers with a non-success status or cannot be reached."""


class JudgeGateway(Protocol):
    async def submit_batch(self, submissions: List[CodeSubmissionCreate]) -> List[Optional[str]]:
        ...

    async def poll_batch_results(self, tokens: List[str]) -> List[Judge0ExecutionResult]:
        ...


def _ensure_status(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Normalise flattened ``status_id``/``status_description`` into a ``status`` dict."""
    if not isinstance(payload, dict) or isinstance(payload.get("status"), dict):
        return payload
    payload = dict(payload)
    payload["status"] = {
        "id": payload.get("status_id"),
        "description": payload.get("status_description") or "",
    }
    return payload


class Judge0Service:
    """HTTP backend talking to a Judge0 (CE or RapidAPI) deployment."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.base_url = settings.judge0_api_url.rstrip("/")
        self.poll_interval = settings.judge0_poll_interval_s
        self.headers = {"Content-Type": "application/json"}
        if settings.judge0_api_key and settings.judge0_host:
            self.headers.update({
                "X-RapidAPI-Key": settings.judge0_api_key,
                "X-RapidAPI-Host": settings.judge0_host,
            })

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if not self.base_url:
            raise JudgeGatewayError("Judge0 base URL is not configured (JUDGE0_API_URL).")
        if not path.startswith("/"):
            path = "/" + path
        url = self.base_url + path

        masked = {k: ("[REDACTED]" if k.lower() == "x-rapidapi-key" else v) for k, v in self.headers.items()}
        logger.debug("Judge0 request: %s %s headers=%s", method, url, masked)

        timeout = httpx.Timeout(connect=3.0, read=self.settings.judge0_timeout_s, write=5.0, pool=5.0)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                return await client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as e:
            raise JudgeGatewayError(f"Failed to reach Judge0 at {self.base_url}: {e}") from e

    async def submit_batch(self, submissions: List[CodeSubmissionCreate]) -> List[Optional[str]]:
        """Submit every case in one request; tokens come back in submission order."""
        payload = {"submissions": [s.model_dump(exclude_none=True) for s in submissions]}
        resp = await self._request("POST", "/submissions/batch?base64_encoded=false", json=payload)
        if not resp.is_success:
            raise JudgeGatewayError(f"Batch submit failed: {resp.status_code} {resp.text[:200]}")

        data = resp.json()
        items = data.get("submissions", []) if isinstance(data, dict) else data
        tokens: List[Optional[str]] = []
        for item in items or []:
            tokens.append(item.get("token") if isinstance(item, dict) else None)
        return tokens

    async def get_batch_results(self, tokens: List[str]) -> List[Judge0ExecutionResult]:
        if not tokens:
            return []
        query = f"/submissions/batch?tokens={','.join(tokens)}&base64_encoded=false"
        resp = await self._request("GET", query)
        if not resp.is_success:
            raise JudgeGatewayError(f"Batch get failed: {resp.status_code} {resp.text[:200]}")

        data = resp.json()
        arr = data.get("submissions", []) if isinstance(data, dict) else data
        return [Judge0ExecutionResult(**_ensure_status(item)) for item in arr or [] if isinstance(item, dict)]

    async def poll_batch_results(self, tokens: List[str]) -> List[Judge0ExecutionResult]:
        """Poll at a fixed interval until no token is queued or processing.

        There is no overall deadline: an unresponsive judge keeps the caller waiting.
        """
        if not tokens:
            return []
        attempt = 0
        while True:
            attempt += 1
            results = await self.get_batch_results(tokens)
            if results and all(r.status_id not in PENDING_STATUS_IDS for r in results):
                logger.info("judge0.batch_done tokens=%d attempts=%d", len(tokens), attempt)
                return results
            logger.debug("judge0.batch_pending attempt=%d", attempt)
            await asyncio.sleep(self.poll_interval)


class SimulatedJudge0Service:
    """Stand-in backend: every submission is accepted without running anything."""

    delay_s = 0.03

    async def submit_batch(self, submissions: List[CodeSubmissionCreate]) -> List[Optional[str]]:
        stamp = int(time.time() * 1000)
        return [f"sim-{stamp}-{i}" for i in range(len(submissions))]

    async def poll_batch_results(self, tokens: List[str]) -> List[Judge0ExecutionResult]:
        await asyncio.sleep(self.delay_s)
        return [
            Judge0ExecutionResult(token=token, status={"id": ACCEPTED_STATUS_ID, "description": "Accepted"})
            for token in tokens
        ]


def build_judge_gateway(settings: Settings) -> JudgeGateway:
    if settings.judge0_enabled:
        logger.info("judge0.backend mode=real url=%s", settings.judge0_api_url)
        return Judge0Service(settings)
    logger.info("judge0.backend mode=simulated")
    return SimulatedJudge0Service()
