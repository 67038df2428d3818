# ============================================================================
# src/biomarker_ingestion/inference/base.py
# ============================================================================
"""
Base Inference Client Interface

Defines the abstract interface every inference backend must implement. The
core never talks to a network itself; the application supplies a client
(hosted API, local model, test fake) that turns a prompt into response text.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from json_repair import repair_json

from ..parsing.recovery_parser import strip_code_fences


@dataclass(frozen=True)
class InferenceRequest:
    """
    One generation request.

    inline_data carries a base64 encoded file for vision requests. It is
    only ever set by the unanonymized vision fallback.
    """
    prompt: str
    inline_data: Optional[str] = None
    mime_type: Optional[str] = None
    temperature: float = 0.1
    max_output_tokens: Optional[int] = None

    @property
    def has_attachment(self) -> bool:
        return self.inline_data is not None


class BaseInferenceClient(ABC):
    """
    Abstract base class for inference clients.

    All backends must implement:
    - generate(): Async text generation
    - health_check(): Verify backend is available
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

        self._inference_count = 0
        self._failure_count = 0
        self._total_inference_time = 0.0

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def generate(self, request: InferenceRequest) -> str:
        """
        Generate response text for a request.

        Raises:
            InferenceError: backend failure
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Check if the backend is available and ready.

        Returns:
            {
                "healthy": bool,
                "model": str,
                "details": str
            }
        """
        pass

    async def infer(self, request: InferenceRequest) -> str:
        """Call generate() and record timing statistics."""
        start = time.perf_counter()
        try:
            text = await self.generate(request)
        except Exception:
            self._failure_count += 1
            raise
        finally:
            self._total_inference_time += time.perf_counter() - start

        self._inference_count += 1
        self.logger.debug(f"Inference returned {len(text)} chars")
        return text

    def extract_json(self, response_text: str) -> Optional[Dict]:
        """
        Extract a JSON object from generated text.

        Models often wrap JSON in prose or code fences, or emit single quotes
        and trailing commas. Tries a strict parse, then json_repair, then the
        first balanced brace block. Used for insight responses; measurement
        responses go through the recovery parser instead.
        """
        if not response_text or not response_text.strip():
            self.logger.warning("Empty response text, no JSON to extract")
            return None

        cleaned = strip_code_fences(response_text)

        try:
            parsed = json.loads(cleaned)
            if isinstance(parsed, dict):
                return parsed
        except (ValueError, RecursionError):
            pass

        try:
            repaired = repair_json(cleaned, return_objects=True)
            if isinstance(repaired, dict) and repaired:
                self.logger.debug("json_repair fixed entire response")
                return repaired
        except Exception as e:
            self.logger.debug(f"json_repair failed on entire response: {type(e).__name__}")

        block = _first_brace_block(cleaned)
        if block is None:
            self.logger.warning("No JSON found in response")
            return None

        try:
            return json.loads(block)
        except (ValueError, RecursionError):
            pass

        try:
            repaired = repair_json(block, return_objects=True)
            if isinstance(repaired, dict):
                self.logger.debug("json_repair fixed extracted JSON block")
                return repaired
        except Exception as e:
            self.logger.debug(f"json_repair failed on extracted block: {type(e).__name__}")

        self.logger.warning(f"Could not parse JSON from response ({len(response_text)} chars)")
        return None

    def get_statistics(self) -> Dict[str, Any]:
        """Get inference statistics."""
        avg_time = (
            self._total_inference_time / self._inference_count
            if self._inference_count > 0
            else 0.0
        )

        return {
            "model": self.model_name,
            "inference_count": self._inference_count,
            "failure_count": self._failure_count,
            "total_inference_time": self._total_inference_time,
            "avg_inference_time": avg_time,
        }


def _first_brace_block(text: str) -> Optional[str]:
    """First balanced {...} block, or everything from the first '{' if unbalanced."""
    start_idx = text.find('{')
    if start_idx == -1:
        return None

    depth = 0
    for i, char in enumerate(text[start_idx:], start=start_idx):
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]

    return text[start_idx:]
