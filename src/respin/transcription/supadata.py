"""URL transcription through the Supadata transcript API.

Supadata fetches the video from YouTube, TikTok, Instagram, X or a direct
file URL and returns its transcript. Large files are processed as an
asynchronous job which has to be polled.
"""

import logging
import time
from typing import Any

import httpx

from respin.config import RespinConfig
from respin.errors import AcquisitionError
from respin.llm import as_stage_error

logger = logging.getLogger(__name__)

_PENDING_STATUSES = {"queued", "active"}


class SupadataTranscriber:
    """Fetch transcripts for video URLs."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.supadata.ai/v1",
        timeout: float = 60.0,
        proxy: str | None = None,
        poll_interval: float = 2.0,
        max_polls: int = 30,
    ) -> None:
        self.api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._proxy = proxy
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    @classmethod
    def from_config(cls, config: RespinConfig) -> "SupadataTranscriber":
        return cls(
            api_key=config.supadata.api_key,
            base_url=config.supadata.base_url,
            timeout=config.general.request_timeout,
            proxy=config.proxy.url,
            poll_interval=config.supadata.poll_interval,
            max_polls=config.supadata.max_polls,
        )

    def transcribe_url(
        self,
        url: str,
        language: str = "en",
        text_only: bool = True,
        mode: str = "auto",
    ) -> str:
        """Return the transcript of the video at ``url``.

        ``language``, ``text_only`` and ``mode`` are passed to the service
        verbatim.
        """
        if not self.api_key:
            msg = "SUPADATA_API_KEY is not configured"
            raise AcquisitionError(msg, reason="unauthorized")

        params = {
            "url": url,
            "lang": language,
            "text": "true" if text_only else "false",
            "mode": mode,
        }
        logger.info("Requesting transcript for %s", url)
        try:
            with httpx.Client(
                base_url=self._base_url,
                headers={"x-api-key": self.api_key},
                timeout=self._timeout,
                proxy=self._proxy,
                trust_env=False,
            ) as client:
                response = client.get("/transcript", params=params)
                response.raise_for_status()
                data = response.json()
                if isinstance(data, dict) and (
                    response.status_code == 202 or "jobId" in data
                ):
                    data = self._wait_for_job(client, str(data["jobId"]))
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise as_stage_error(e, AcquisitionError) from e

        text = extract_text(data)
        if not text:
            msg = f"No transcript returned for {url}"
            raise AcquisitionError(msg)
        logger.info("Received transcript: %d characters", len(text))
        return text

    def _wait_for_job(self, client: httpx.Client, job_id: str) -> Any:
        logger.info("Transcript queued as job %s", job_id)
        for attempt in range(self._max_polls):
            time.sleep(self._poll_interval)
            response = client.get(f"/transcript/{job_id}")
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                msg = f"Unexpected job payload for {job_id}"
                raise AcquisitionError(msg)
            status = data.get("status")
            if status == "completed":
                return data
            if status == "failed":
                error = data.get("error")
                if isinstance(error, dict):
                    error = error.get("message")
                msg = f"Transcript job {job_id} failed: {error or 'unknown'}"
                raise AcquisitionError(msg)
            if status not in _PENDING_STATUSES:
                msg = f"Unexpected job status {status!r} for {job_id}"
                raise AcquisitionError(msg)
            logger.debug(
                "Job %s still %s (poll %d/%d)",
                job_id,
                status,
                attempt + 1,
                self._max_polls,
            )
        msg = (
            f"Transcript job {job_id} did not finish "
            f"after {self._max_polls} polls"
        )
        raise AcquisitionError(msg)


def extract_text(data: Any) -> str:
    """Pull plain text out of a transcript payload.

    Accepts a bare string, a ``content``/``text`` string, or a list of
    timed chunks each carrying ``text``.
    """
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, list):
        return " ".join(
            str(chunk.get("text", "")).strip()
            for chunk in data
            if isinstance(chunk, dict)
        ).strip()
    if isinstance(data, dict):
        for key in ("content", "text"):
            if key in data:
                return extract_text(data[key])
    return ""
