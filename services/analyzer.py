"""
analyzer.py
-----------

Entry point used by the HTTP layer. A single analysis goes to the
Hugging Face provider when an API key is configured and falls back to
the local heuristic engine when the provider fails or no key exists;
the fallback result carries a ``warning`` explaining why. Batches are
always analysed locally.

The analyzer subscribes to configuration updates so that changing the
API key (or the phrase weight) at runtime takes effect on the next
request without restarting the service.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import httpx

from config import Config, get_config, subscribe_to_updates
from services.hf_client import HuggingFaceClient, HuggingFaceError
from services.logging_utils import get_structured_logger
from services.observability import record_analysis, record_external_call
from services.sentiment import LOCAL_SOURCE, SentimentService

logger = get_structured_logger(__name__)

MISSING_KEY_WARNING = "HUGGING_FACE_API_KEY no configurada: usando análisis local"


def _error_message(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class SentimentAnalyzer:
    """Remote-first sentiment analysis with a local fallback."""

    def __init__(
        self,
        *,
        local: Optional[SentimentService] = None,
        remote: Optional[HuggingFaceClient] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or get_config()
        self.local = local or SentimentService(phrase_weight=self.config.PHRASE_WEIGHT)
        self._remote_injected = remote is not None
        self.remote = remote if remote is not None else self._build_remote(self.config)
        # Clients replaced by a key change, closed on the next call or shutdown
        self._retired: List[HuggingFaceClient] = []
        self._unsubscribe = subscribe_to_updates(self._on_config_change)

    @staticmethod
    def _build_remote(config: Config) -> Optional[HuggingFaceClient]:
        if not config.HUGGING_FACE_API_KEY:
            return None
        return HuggingFaceClient(config.HUGGING_FACE_API_KEY)

    def _on_config_change(self, config: Config, changes: Dict[str, Any]) -> None:
        self.config = config
        if "PHRASE_WEIGHT" in changes or "__reset__" in changes:
            self.local.phrase_weight = config.PHRASE_WEIGHT
        if self._remote_injected:
            return
        if "HUGGING_FACE_API_KEY" in changes or "__reset__" in changes:
            if self.remote is not None:
                self._retired.append(self.remote)
            self.remote = self._build_remote(config)
            logger.info(
                "Remote provider reconfigured",
                hf_enabled=self.remote is not None,
            )

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    async def analyze(self, text: str, model: Optional[str] = None) -> Dict[str, Any]:
        """Analyse ``text``, preferring the remote provider when configured."""
        await self._close_retired()
        model = model or self.config.DEFAULT_MODEL

        if self.remote is None:
            result = self.local.analyze(text, model, warning=MISSING_KEY_WARNING)
            record_analysis(LOCAL_SOURCE, result["analysis"]["sentiment"])
            return result

        try:
            result = await self.remote.analyze(text, model)
        except (HuggingFaceError, httpx.HTTPError) as e:
            record_external_call("huggingface", "failure")
            reason = _error_message(e)
            logger.warning(f"Hugging Face failed, using local engine: {reason}", model=model)
            result = self.local.analyze(
                text,
                model,
                warning=f"Fallback local: Hugging Face falló ({reason})",
            )
            record_analysis(LOCAL_SOURCE, result["analysis"]["sentiment"])
            return result

        record_external_call("huggingface", "success")
        record_analysis(result["source"], result["analysis"]["sentiment"])
        return result

    def analyze_batch(self, texts: Iterable[Any], model: Optional[str] = None) -> List[Dict[str, Any]]:
        """Analyse every item locally; failures become per-item error records."""
        results = self.local.analyze_batch(texts, model or self.config.DEFAULT_MODEL)
        for result in results:
            if "analysis" in result:
                record_analysis(LOCAL_SOURCE, result["analysis"]["sentiment"])
        return results

    async def _close_retired(self) -> None:
        retired, self._retired = self._retired, []
        for client in retired:
            await client.aclose()

    async def aclose(self) -> None:
        self._unsubscribe()
        await self._close_retired()
        if self.remote is not None:
            await self.remote.aclose()


__all__ = ["MISSING_KEY_WARNING", "SentimentAnalyzer"]
