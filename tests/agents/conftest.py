# tests/agents/conftest.py
"""
Fixtures dos testes de agentes.

`ScriptedLLM` é um ChatService roteirizado por tarefa: cada chamada a
`chat` consulta `responses[task]` (string ou exceção). Permite exercitar
fallbacks e caminhos "configurado" (fora do mock mode) sem rede.
"""

import pytest


@pytest.fixture
def ScriptedLLM():
    from gist_agents.core.exceptions import ExternalServiceError

    class _ScriptedLLM:
        def __init__(self, responses=None, configured=True, image_url=None, image_error=False, tts_error=False):
            self.responses = dict(responses or {})
            self.configured = configured
            self.image_url = image_url
            self.image_error = image_error
            self.tts_error = tts_error
            self.calls = []

        def is_configured(self):
            return self.configured

        def is_mock_mode(self):
            return not self.configured

        def chat(self, system_prompt, user_prompt, options=None):
            task = (options or {}).get("task")
            self.calls.append({"task": task, "system": system_prompt, "prompt": user_prompt})
            response = self.responses.get(task, "")
            if isinstance(response, BaseException):
                raise response
            return response

        def create_image(self, prompt, options=None):
            self.calls.append({"task": "image", "prompt": prompt})
            if self.image_error:
                raise ExternalServiceError("image backend down", service="openai.images")
            return self.image_url

        def text_to_speech(self, text, options=None):
            if self.tts_error:
                raise ExternalServiceError("tts backend down", service="openai.audio/speech")
            return "/storage/audio/scripted.mp3"

        def create_embedding(self, text):
            return [1.0, 0.0, 0.0]

    return _ScriptedLLM


@pytest.fixture
def article_ctx(base_ctx, sample_article):
    return base_ctx.with_article_data(sample_article)


@pytest.fixture
def analysis_ctx(article_ctx):
    from gist_agents.models.analysis import AnalysisResult

    analysis = AnalysisResult(
        translation_summary=(
            "주요국의 무역 정책 전환이 반도체와 자동차 수출에 먼저 영향을 미치고, "
            "물류와 에너지 시장으로 파급될 것으로 전망됩니다."
        ),
        key_points=("정책 전환", "반도체 영향", "물류 파급", "6개월 내 세부 발표"),
    )
    return article_ctx.with_analysis_result(analysis)
