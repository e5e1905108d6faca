# src/gist_agents/services/tts.py
"""
Google Cloud Text-to-Speech (REST) com mock mode.

Sem API key o serviço opera em mock mode e retorna a mesma URL placeholder
determinística do OpenAIService. Textos longos são divididos em chunks de
até 4500 bytes (limite do provedor: 5000) e o MP3 resultante é concatenado.
"""

from __future__ import annotations

import base64
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import httpx

from gist_agents.core.exceptions import ExternalServiceError

from .openai_service import mock_audio_url

logger = logging.getLogger("gist_agents.services.tts")

SYNTHESIZE_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"
MAX_INPUT_BYTES = 4500


def split_by_bytes(text: str, max_bytes: int = MAX_INPUT_BYTES) -> List[str]:
    """Divide o texto em pedaços de até `max_bytes` (UTF-8), preferindo cortes em espaço."""
    chunks: List[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if len(candidate.encode("utf-8")) <= max_bytes:
            current = candidate
            continue
        if current:
            chunks.append(current)
        # palavra isolada maior que o limite: corte por caractere
        while len(word.encode("utf-8")) > max_bytes:
            cut = max_bytes
            while len(word[:cut].encode("utf-8")) > max_bytes:
                cut -= 1
            chunks.append(word[:cut])
            word = word[cut:]
        current = word
    if current:
        chunks.append(current)
    return chunks


class GoogleTTSService:
    def __init__(self, config: Optional[Mapping[str, Any]] = None, *, mock_mode: bool = False):
        cfg: Dict[str, Any] = dict(config or {})
        self._api_key = str(cfg.get("api_key") or os.getenv("GOOGLE_TTS_API_KEY", "") or "")
        self._mock_mode = bool(mock_mode) or not self._api_key
        self._voice = str(cfg.get("voice_name", "ko-KR-Neural2-C"))
        self._language_code = str(cfg.get("language_code", "ko-KR"))
        self._speaking_rate = float(cfg.get("speaking_rate", 1.0))
        self._timeout = float(cfg.get("timeout", 30))
        self._storage_path = Path(cfg.get("storage_path", "storage/audio"))

    def is_configured(self) -> bool:
        return bool(self._api_key) and not self._mock_mode

    def is_mock_mode(self) -> bool:
        return self._mock_mode

    def text_to_speech(self, text: str, options: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        text = (text or "").strip()
        if not text:
            return None
        if self._mock_mode:
            return mock_audio_url(text)

        opts = dict(options or {})
        voice = str(opts.get("voice") or self._voice)
        audio = b"".join(self._synthesize(chunk, voice) for chunk in split_by_bytes(text))

        self._storage_path.mkdir(parents=True, exist_ok=True)
        filename = f"tts_{uuid.uuid4().hex[:12]}.mp3"
        (self._storage_path / filename).write_bytes(audio)
        logger.info("Stored TTS audio %s (%d bytes)", filename, len(audio))
        return f"/storage/audio/{filename}"

    def _synthesize(self, text: str, voice: str) -> bytes:
        payload = {
            "input": {"text": text},
            "voice": {"languageCode": self._language_code, "name": voice},
            "audioConfig": {"audioEncoding": "MP3", "speakingRate": self._speaking_rate},
        }
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(SYNTHESIZE_URL, params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Google TTS request failed: {exc}", service="google_tts") from exc

        if response.status_code != 200:
            raise ExternalServiceError(
                f"Google TTS error: HTTP {response.status_code}",
                service="google_tts",
                status_code=response.status_code,
            )
        content = response.json().get("audioContent")
        if not content:
            raise ExternalServiceError("Google TTS response has no audioContent", service="google_tts")
        return base64.b64decode(content)
