# src/gist_agents/services/openai_service.py
"""
Cliente OpenAI (chat, TTS, embeddings, imagens) com mock mode.

Responsabilidades:
    - Chat Completion, TTS, Embeddings e geração de imagem via SDK `openai`
    - Erros do SDK (`openai.APIError`) viram ExternalServiceError
    - Mock mode determinístico e sem rede, ativado quando não há API key
      ou quando `mock_mode` é configurado explicitamente

Mock mode:
    - `chat` despacha primeiro por `options["task"]` e, na ausência dele,
      por palavras-chave do prompt; respostas JSON seguem o schema que cada
      agente espera
    - `text_to_speech` retorna `/storage/audio/mock_audio_<md5[:8]>.mp3?mock=true`
    - `create_embedding` retorna 1536 floats normalizados, gerados por numpy
      com semente derivada do texto (mesmo texto → mesmo vetor)
    - `create_image` retorna uma URL placeholder derivada do prompt

Limites explícitos:
    - Não implementa retry (responsabilidade do agente via RetryPolicy)
    - Não faz streaming
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import numpy as np
from openai import APIError, APIStatusError, OpenAI

from gist_agents.core.exceptions import ExternalServiceError

logger = logging.getLogger("gist_agents.services.openai")

EMBEDDING_DIMENSIONS = 1536

DEFAULTS: Dict[str, Any] = {
    "api_key": "",
    "base_url": "https://api.openai.com/v1",
    "model": "gpt-4o-mini",
    "temperature": 0.7,
    "max_tokens": 4000,
    "timeout": 60,
    "tts_model": "tts-1",
    "tts_voice": "alloy",
    "tts_speed": 1.0,
    "embedding_model": "text-embedding-3-small",
    "image_model": "dall-e-3",
    "image_size": "1792x1024",
    "audio_storage_path": "storage/audio",
    "mock_mode": False,
}


def mock_audio_url(text: str) -> str:
    digest = hashlib.md5(text.encode("utf-8")).hexdigest()[:8]
    return f"/storage/audio/mock_audio_{digest}.mp3?mock=true"


def mock_embedding(text: str, dimensions: int = EMBEDDING_DIMENSIONS) -> List[float]:
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
    rng = np.random.default_rng(seed)
    vector = rng.standard_normal(dimensions)
    norm = np.linalg.norm(vector)
    if norm > 0:
        vector = vector / norm
    return vector.astype(float).tolist()


# -----------------------------
# Respostas mock por tarefa
# -----------------------------
_MOCK_JSON: Dict[str, Dict[str, Any]] = {
    "validate_url": {
        "is_valid": True,
        "is_news": True,
        "reason": "[Mock] URL is reachable and contains article content.",
        "detected_language": "en",
        "article_type": "news",
        "confidence": 0.95,
    },
    "full_analysis": {
        "news_title": "[Mock] 글로벌 정책 전환, 한국 산업에 미칠 파장",
        "original_title": "[Mock] Global policy shift reshapes supply chains",
        "author": "Mock Reporter",
        "content_summary": "[Mock] Major economies are shifting trade policy, with knock-on effects for supply chains.",
        "translation_summary": (
            "[Mock] 이 기사는 주요국의 정책 변화와 그 영향을 다루며, "
            "공급망과 무역 질서에 대한 향후 전망을 제시합니다."
        ),
        "key_points": [
            "[Mock] 주요국의 정책 방향 전환이 감지됨",
            "[Mock] 경제적 파급효과가 예상보다 클 것으로 분석",
            "[Mock] 반도체와 자동차 산업에 직접적인 영향",
            "[Mock] 기업과 정부의 선제적 대응 전략이 필요한 시점",
        ],
        "critical_analysis": {
            "why_important": "[Mock] 글로벌 공급망과 무역 질서에 직접적인 영향을 미칩니다.",
            "future_prediction": "[Mock] 향후 6개월 내 관련 정책 발표와 시장 변동성 확대가 예상됩니다.",
        },
        "narration": "[Mock] 시청자 여러분, 오늘은 주요국의 정책 변화가 공급망에 미칠 영향을 살펴봅니다.",
    },
    "validate_query": {
        "is_valid": True,
        "reason": "[Mock] Query is specific enough to interpret.",
        "clarification_question": None,
        "confidence": 0.9,
    },
    "interpret": {
        "main_topic": "[Mock] Global trade policy",
        "sub_topics": ["[Mock] Supply chains", "[Mock] Industrial policy"],
        "analysis_direction": "[Mock] Focus on the impact on Korean industry.",
        "key_questions": [
            "[Mock] Which sectors are most exposed?",
            "[Mock] How fast will policy changes take effect?",
        ],
        "confidence": 0.85,
    },
    "check_clarity": {
        "is_clear": True,
        "confidence": 0.9,
        "question": None,
        "reason": "[Mock] The summary has a clear focus.",
    },
    "apply_style": {
        "styled_text": "[Mock] 핵심은 바로 공급망 재편입니다. 주목할 점은 한국 산업에 미칠 영향입니다.",
        "patterns_applied": ["[Mock] Lead with the key point", "[Mock] Close with an outlook"],
    },
    "analyze_patterns": {
        "style": {"formality": "formal", "detail_level": "detailed", "tone": "analytical"},
        "common_patterns": [
            "[Mock] Lead with the key point",
            "[Mock] Support claims with data and cases",
            "[Mock] Close with an outlook",
        ],
        "emphasis": ["[Mock] Implications for Korea", "[Mock] Practical responses"],
        "unique_expressions": ["[Mock] \"The key point is...\"", "[Mock] \"Notably...\""],
    },
}
_MOCK_JSON["revise"] = _MOCK_JSON["full_analysis"]

_MOCK_TEXT: Dict[str, str] = {
    "translate": "[Mock translation] This translation was generated in mock mode.",
    "summarize": "[Mock summary]\n1. The article covers a major global issue.\n2. Economic and political impacts are analysed.",
    "default": "[Mock analysis] This response was generated in mock mode.",
}

# Palavras-chave usadas quando nenhuma tarefa explícita é informada (ordem importa).
_KEYWORD_TASKS = (
    ("translation_summary", "full_analysis"),
    ("key_points", "full_analysis"),
    ("is_clear", "check_clarity"),
    ("main_topic", "interpret"),
    ("is_valid", "validate_url"),
    ("styled_text", "apply_style"),
    ("pattern", "analyze_patterns"),
    ("style", "analyze_patterns"),
)


class OpenAIService:
    """Cliente OpenAI síncrono (SDK oficial) com mock mode."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None, *, client: Optional[OpenAI] = None):
        self.config: Dict[str, Any] = {**DEFAULTS, **dict(config or {})}
        self._api_key: str = str(self.config.get("api_key") or os.getenv("OPENAI_API_KEY", "") or "")
        self._mock_mode: bool = bool(self.config.get("mock_mode")) or not self._api_key
        self._client = client

    @property
    def client(self) -> OpenAI:
        """Cliente do SDK, criado sob demanda; retry fica a cargo da RetryPolicy dos agentes."""
        if self._client is None:
            logger.debug("Creating OpenAI client (base_url=%s)", self.config["base_url"])
            self._client = OpenAI(
                api_key=self._api_key,
                base_url=str(self.config["base_url"]),
                timeout=float(self.config["timeout"]),
                max_retries=0,
            )
        return self._client

    # -----------------------------
    # Estado
    # -----------------------------
    def is_configured(self) -> bool:
        return bool(self._api_key) and not self._mock_mode

    def is_mock_mode(self) -> bool:
        return self._mock_mode

    # -----------------------------
    # Chat
    # -----------------------------
    def chat(self, system_prompt: str, user_prompt: str, options: Optional[Mapping[str, Any]] = None) -> str:
        opts = dict(options or {})
        if self._mock_mode:
            return self._mock_chat(user_prompt, opts.get("task"))

        client = self.client
        if opts.get("timeout"):
            client = client.with_options(timeout=float(opts["timeout"]))
        with _translate_errors("openai.chat"):
            response = client.chat.completions.create(
                model=opts.get("model", self.config["model"]),
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=opts.get("temperature", self.config["temperature"]),
                max_tokens=opts.get("max_tokens", self.config["max_tokens"]),
            )
        if not response.choices or response.choices[0].message is None:
            raise ExternalServiceError("OpenAI chat response has no content", service="openai.chat")
        return response.choices[0].message.content or ""

    def _mock_chat(self, prompt: str, task: Optional[str]) -> str:
        if task in _MOCK_JSON:
            return json.dumps(_MOCK_JSON[task], ensure_ascii=False)
        if task in _MOCK_TEXT:
            return _MOCK_TEXT[task]

        lowered = (prompt or "").lower()
        if "json" in lowered:
            for keyword, mapped in _KEYWORD_TASKS:
                if keyword in lowered:
                    return json.dumps(_MOCK_JSON[mapped], ensure_ascii=False)
            return json.dumps({"result": "[Mock] Done.", "confidence": 0.9, "mock_mode": True})
        if "translate" in lowered or "번역" in lowered:
            return _MOCK_TEXT["translate"]
        if "summar" in lowered or "요약" in lowered:
            return _MOCK_TEXT["summarize"]
        return _MOCK_TEXT["default"]

    # -----------------------------
    # TTS
    # -----------------------------
    def text_to_speech(self, text: str, options: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        if self._mock_mode:
            return mock_audio_url(text)

        opts = dict(options or {})
        with _translate_errors("openai.audio.speech"):
            response = self.client.audio.speech.create(
                model=opts.get("model", self.config["tts_model"]),
                voice=opts.get("voice") or self.config["tts_voice"],
                input=text,
                speed=opts.get("speed", self.config["tts_speed"]),
                response_format=opts.get("format", "mp3"),
            )
            audio = response.content

        storage = Path(self.config["audio_storage_path"])
        storage.mkdir(parents=True, exist_ok=True)
        filename = f"analysis_{uuid.uuid4().hex[:12]}.mp3"
        (storage / filename).write_bytes(audio)
        return f"/storage/audio/{filename}"

    # -----------------------------
    # Embeddings
    # -----------------------------
    def create_embedding(self, text: str) -> List[float]:
        if self._mock_mode:
            return mock_embedding(text)

        with _translate_errors("openai.embeddings"):
            response = self.client.embeddings.create(model=self.config["embedding_model"], input=text)
        if not response.data:
            raise ExternalServiceError("OpenAI embeddings response has no vector", service="openai.embeddings")
        return [float(x) for x in response.data[0].embedding]

    # -----------------------------
    # Imagens
    # -----------------------------
    def create_image(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> str:
        if self._mock_mode:
            digest = hashlib.md5(prompt.encode("utf-8")).hexdigest()[:8]
            return f"https://placehold.co/800x500/0f172a/e2e8f0?text=Mock+{digest}"

        opts = dict(options or {})
        with _translate_errors("openai.images"):
            response = self.client.images.generate(
                model=opts.get("model", self.config["image_model"]),
                prompt=prompt,
                n=1,
                size=opts.get("size", self.config["image_size"]),
            )
        if not response.data or not response.data[0].url:
            raise ExternalServiceError("OpenAI image response has no url", service="openai.images")
        return str(response.data[0].url)


@contextmanager
def _translate_errors(service: str) -> Iterator[None]:
    """Converte erros do SDK em ExternalServiceError (status HTTP preservado quando houver)."""
    try:
        yield
    except APIStatusError as exc:
        raise ExternalServiceError(
            f"OpenAI API error: HTTP {exc.status_code}",
            service=service,
            status_code=exc.status_code,
        ) from exc
    except APIError as exc:
        raise ExternalServiceError(f"OpenAI request failed: {exc}", service=service) from exc
