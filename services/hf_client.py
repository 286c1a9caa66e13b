"""
Hugging Face Inference API client with retry logic
"""

import logging
import time
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

import httpx
from tenacity import before_sleep_log, retry, retry_if_exception_type, wait_exponential

from config import get_config
from services.logging_utils import get_logger
from services.profiles import resolve_profile

logger = get_logger(__name__)

HF_SOURCE = "Hugging Face API"

# Model still loading or provider throttling; worth another attempt
RETRYABLE_STATUS = {429, 503}


class HuggingFaceError(Exception):
    """Raised when the provider cannot produce a usable classification."""


class HuggingFaceUnavailable(HuggingFaceError):
    """Transient provider failure that may succeed on retry."""


def normalize_label(label: Any) -> str:
    """Map provider labels (``POS``, ``negative``, ``LABEL_1``...) to our three."""
    lowered = str(label or "").lower()
    if "pos" in lowered:
        return "positive"
    if "neg" in lowered:
        return "negative"
    return "neutral"


def _stop_after_client_attempts(retry_state) -> bool:
    client = retry_state.args[0]
    return retry_state.attempt_number >= client.max_attempts


def _client_backoff(retry_state) -> float:
    client = retry_state.args[0]
    return wait_exponential(multiplier=client.backoff_seconds, max=4)(retry_state)


class HuggingFaceClient:
    """Async client for the hosted sentiment models"""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_seconds: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = get_config()
        self.api_key = api_key
        self.base_url = (base_url or self.config.HF_API_URL).rstrip("/")
        self.max_attempts = max_attempts or self.config.HF_MAX_ATTEMPTS
        self.backoff_seconds = backoff_seconds
        self.client = httpx.AsyncClient(
            timeout=timeout or self.config.HF_TIMEOUT_SECONDS,
            transport=transport,
        )

    @retry(
        stop=_stop_after_client_attempts,
        wait=_client_backoff,
        retry=retry_if_exception_type((HuggingFaceUnavailable, httpx.TransportError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _query(self, model_id: str, text: str) -> Any:
        response = await self.client.post(
            f"{self.base_url}/{model_id}",
            json={"inputs": text, "options": {"wait_for_model": True}},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        if response.status_code in RETRYABLE_STATUS:
            raise HuggingFaceUnavailable(f"HTTP {response.status_code} from {model_id}")
        if response.is_error:
            raise HuggingFaceError(f"HTTP {response.status_code}: {response.text[:200]}")
        try:
            return response.json()
        except ValueError as e:
            raise HuggingFaceError("Respuesta inválida de Hugging Face") from e

    async def analyze(self, text: str, profile: Optional[str] = None) -> Dict[str, Any]:
        """
        Classify ``text`` with the model behind ``profile``

        Args:
            text: Text to classify
            profile: Profile id (spanish, multilingual, english)

        Returns:
            Result envelope shaped like the local engine's output
        """
        model_id = resolve_profile(profile).hf_model

        start_time = time.time()
        payload = await self._query(model_id, text)
        results = self._extract_results(payload)
        top = max(results, key=lambda item: item["score"])

        duration = time.time() - start_time
        logger.info(f"Hugging Face call to {model_id} completed in {duration:.2f}s")

        sentiment = normalize_label(top["label"])
        return {
            "success": True,
            "text": text,
            "model": model_id,
            "source": HF_SOURCE,
            "analysis": {
                "sentiment": sentiment,
                "confidence": round(top["score"] * 100, 2),
                "label": top["label"],
                "all_scores": [
                    {"label": item["label"], "score": round(item["score"] * 100, 2)}
                    for item in results
                ],
            },
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @staticmethod
    def _extract_results(payload: Any) -> List[Dict[str, Any]]:
        # Text classification answers are either [[...]] or [...]
        if isinstance(payload, dict) and payload.get("error"):
            raise HuggingFaceError(str(payload["error"]))
        if isinstance(payload, list) and payload and isinstance(payload[0], list):
            payload = payload[0]
        if not isinstance(payload, list):
            raise HuggingFaceError("Respuesta inválida de Hugging Face")

        results = [
            {"label": item.get("label"), "score": float(item["score"])}
            for item in payload
            if isinstance(item, dict) and isinstance(item.get("score"), (int, float))
        ]
        if not results:
            raise HuggingFaceError("Respuesta inválida de Hugging Face")
        return results

    async def aclose(self) -> None:
        await self.client.aclose()


__all__ = [
    "HF_SOURCE",
    "HuggingFaceClient",
    "HuggingFaceError",
    "HuggingFaceUnavailable",
    "normalize_label",
]
