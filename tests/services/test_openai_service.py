# tests/services/test_openai_service.py
"""
Testes do OpenAIService.

Os testes asseguram que:
- sem API key o serviço opera em mock mode (determinístico, sem rede)
- o mock de chat despacha por tarefa e, na ausência dela, por palavras-chave
- fora do mock mode, as chamadas passam pelo SDK `openai` e seus erros
  viram ExternalServiceError (status HTTP preservado)
"""

import json

import httpx
import numpy as np
import pytest
from openai import OpenAI

from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.services.openai_service import EMBEDDING_DIMENSIONS, OpenAIService


@pytest.fixture
def offline(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return OpenAIService()


def _client(handler):
    return OpenAI(
        api_key="sk-test",
        base_url="https://api.test/v1",
        max_retries=0,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_mock_mode_without_api_key(offline):
    assert offline.is_mock_mode() is True
    assert offline.is_configured() is False


def test_mock_chat_dispatches_by_task(offline):
    analysis = json.loads(offline.chat("sys", "anything", {"task": "full_analysis"}))
    assert len(analysis["key_points"]) == 4
    assert json.loads(offline.chat("sys", "x", {"task": "validate_query"}))["is_valid"] is True
    assert offline.chat("sys", "x", {"task": "translate"}).startswith("[Mock translation]")


def test_mock_chat_falls_back_to_keywords(offline):
    assert "is_clear" in json.loads(offline.chat("sys", "Respond in JSON with is_clear"))
    assert json.loads(offline.chat("sys", "respond in json please"))["mock_mode"] is True
    assert offline.chat("sys", "Please summarize this").startswith("[Mock summary]")
    assert offline.chat("sys", "hello").startswith("[Mock analysis]")


def test_mock_audio_and_embedding_are_deterministic(offline):
    url = offline.text_to_speech("안녕하세요")
    assert url == offline.text_to_speech("안녕하세요")
    assert url.startswith("/storage/audio/mock_audio_") and url.endswith(".mp3?mock=true")

    first = offline.create_embedding("trade policy")
    assert first == offline.create_embedding("trade policy")
    assert first != offline.create_embedding("another text")
    assert len(first) == EMBEDDING_DIMENSIONS
    assert np.linalg.norm(first) == pytest.approx(1.0)

    assert offline.create_image("a prompt").startswith("https://placehold.co/")


def test_chat_over_http():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

    service = OpenAIService({"api_key": "sk-test"}, client=_client(handler))
    assert service.is_configured() is True
    assert service.chat("system", "user", {"temperature": 0.2}) == "hello"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["temperature"] == 0.2
    assert seen["body"]["messages"][1] == {"role": "user", "content": "user"}


def test_http_errors_are_typed():
    service = OpenAIService({"api_key": "sk-test"}, client=_client(lambda r: httpx.Response(429)))
    with pytest.raises(ExternalServiceError) as exc_info:
        service.chat("s", "u")
    assert exc_info.value.status_code == 429

    empty = OpenAIService({"api_key": "sk-test"}, client=_client(lambda r: httpx.Response(200, json={"choices": []})))
    with pytest.raises(ExternalServiceError, match="no content"):
        empty.chat("s", "u")


def test_tts_over_http_writes_file(tmp_path):
    service = OpenAIService(
        {"api_key": "sk-test", "audio_storage_path": str(tmp_path)},
        client=_client(lambda r: httpx.Response(200, content=b"ID3audio")),
    )
    url = service.text_to_speech("hello")
    filename = url.rsplit("/", 1)[-1]
    assert url.startswith("/storage/audio/analysis_")
    assert (tmp_path / filename).read_bytes() == b"ID3audio"


def test_embedding_and_image_over_http():
    def handler(request):
        if request.url.path.endswith("/embeddings"):
            return httpx.Response(
                200,
                json={
                    "object": "list",
                    "model": "text-embedding-3-small",
                    "data": [{"object": "embedding", "index": 0, "embedding": [0.1, 0.2, 0.3]}],
                    "usage": {"prompt_tokens": 1, "total_tokens": 1},
                },
            )
        return httpx.Response(200, json={"created": 0, "data": [{"url": "https://img.test/a.png"}]})

    service = OpenAIService({"api_key": "sk-test"}, client=_client(handler))
    assert service.create_embedding("trade") == [0.1, 0.2, 0.3]
    assert service.create_image("a prompt") == "https://img.test/a.png"


def test_connection_errors_are_typed():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = OpenAIService({"api_key": "sk-test"}, client=_client(handler))
    with pytest.raises(ExternalServiceError) as exc_info:
        service.create_embedding("trade")
    assert exc_info.value.status_code is None
    assert exc_info.value.service == "openai.embeddings"
