import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config.settings import settings

from .model import CheckEnvelope, SubmitEnvelope

logger = logging.getLogger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)


class GenerationError(Exception):
    """Base class for failures talking to the generation service."""


class TransportError(GenerationError):
    """Network failure or non-2xx response."""


class MalformedResponseError(GenerationError):
    """Response body does not carry the expected fields."""


class GenerationClient:
    """
    Client of the remote generation service: submit a prompt, check a job,
    download the resulting image.
    """

    def __init__(
        self,
        base_url: str = settings.SKYGEN_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        # No client-side timeout: a hung service keeps the caller waiting.
        return httpx.AsyncClient(timeout=None, transport=self.transport)

    async def submit(self, prompt: str) -> str:
        """
        POST /gen with {"q": prompt}.
        Returns the job id found under results.id.
        """
        url = f"{self.base_url}/gen"
        logger.info("Submitting prompt (%d chars) to %s", len(prompt), url)
        data = await self._request_json(
            "POST",
            url,
            json={"q": prompt},
            headers={"Content-Type": "application/json"},
        )
        envelope = self._parse(SubmitEnvelope, data)
        job_id = envelope.results.id
        logger.info("Got job id: %s", job_id)
        return job_id

    async def fetch_result(self, job_id: str) -> str:
        """
        GET /check?id=<job_id>.
        Returns the first URL of results.urls, the others are ignored.
        """
        url = f"{self.base_url}/check"
        logger.info("Checking job %s", job_id)
        data = await self._request_json("GET", url, params={"id": job_id})
        envelope = self._parse(CheckEnvelope, data)
        image_url = envelope.results.urls[0]
        logger.info("Job %s ready: %s", job_id, image_url)
        return image_url

    async def download(self, url: str) -> bytes:
        logger.info("Downloading image from: %s", url)
        try:
            async with self._client() as client:
                r = await client.get(url)
                r.raise_for_status()
                return r.content
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"download failed: {exc}") from exc

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            async with self._client() as client:
                r = await client.request(method, url, **kwargs)
                if r.is_error:
                    logger.warning("%s %s returned %s: %s", method, url, r.status_code, r.text[:500])
                r.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            return r.json()
        except ValueError as exc:
            raise MalformedResponseError(f"response of {url} is not JSON: {r.text[:200]!r}") from exc

    @staticmethod
    def _parse(model: Type[EnvelopeT], data: Any) -> EnvelopeT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"unexpected response {repr(data)[:200]}: {exc.error_count()} error(s)") from exc
