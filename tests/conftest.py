# tests/conftest.py
"""
Fixtures compartilhados para testes do Gist Agents.

Este módulo define fixtures reutilizáveis que fornecem:
- serviços em mock mode (LLM, scraper) sem rede
- política de retry sem espera real
- artigo e contexto canônicos
- agentes stub (duck typing) para testes estruturais do sequenciador

Decisões arquiteturais:
    - Fixtures de agentes retornam *classes* (não instâncias), permitindo
      que cada teste configure o comportamento desejado
    - Imports do pacote são realizados de forma lazy para que falhas de
      import apareçam como falhas claras dos testes
    - Nenhuma fixture acessa rede; o filesystem só é usado via `tmp_path`

Invariantes:
    - Dados retornados são determinísticos e isolados entre testes
    - Nenhuma fixture executa o pipeline real

Limites explícitos:
    - Não substitui testes end-to-end (tests/e2e)
"""

import pytest


@pytest.fixture
def no_sleep():
    """Função de espera que apenas registra os atrasos solicitados."""

    class _Sleeper:
        def __init__(self):
            self.delays = []

        def __call__(self, seconds):
            self.delays.append(seconds)

    return _Sleeper()


@pytest.fixture
def fast_retry(no_sleep):
    from gist_agents.core.retry import RetryPolicy

    return RetryPolicy(max_attempts=3, base_delay=0.0, sleep=no_sleep)


@pytest.fixture
def mock_llm():
    from gist_agents.services.openai_service import OpenAIService

    return OpenAIService({"mock_mode": True, "api_key": ""})


@pytest.fixture
def sample_article():
    from gist_agents.models.article import ArticleData

    return ArticleData(
        url="https://news.example.com/world/trade-shift",
        title="Global trade policy shift reshapes supply chains",
        content=(
            "Major economies announced a coordinated shift in trade policy this week. "
            "Analysts expect the changes to affect semiconductor and automotive exports first, "
            "with ripple effects across logistics and energy markets. Officials said details "
            "will follow over the next six months."
        ),
        description="Trade policy changes and their impact on industry.",
        author="Jane Doe",
        published_at="2026-01-01T00:00:00+00:00",
        image_url="https://cdn.example.com/img/trade.jpg",
        language="en",
    )


@pytest.fixture
def base_ctx():
    from gist_agents.core.pipeline.context import AgentContext

    return AgentContext(url="https://news.example.com/world/trade-shift")


@pytest.fixture
def FakeScraper(sample_article):
    """
    Fixture que retorna uma *classe* de scraper em memória.

    O scraper devolve `sample_article` (com a URL solicitada), pode ser
    configurado como inacessível e pode falhar nas primeiras N chamadas
    de `fetch` com ScrapeError (com `fail_status` como status HTTP),
    permitindo testar o retry do agente.
    """
    from dataclasses import replace

    from gist_agents.core.exceptions import ScrapeError

    class _FakeScraper:
        def __init__(self, article=None, accessible=True, fail_times=0, fail_status=None):
            self.article = article or sample_article
            self.accessible = accessible
            self.fail_times = fail_times
            self.fail_status = fail_status
            self.fetch_calls = 0

        def is_accessible(self, url):
            return self.accessible

        def fetch(self, url):
            self.fetch_calls += 1
            if self.fetch_calls <= self.fail_times:
                raise ScrapeError(f"failure #{self.fetch_calls}", url=url, status_code=self.fail_status)
            return replace(self.article, url=url)

    return _FakeScraper


@pytest.fixture
def StubAgent():
    """
    Fixture que retorna uma *classe* de agente stub para testes do sequenciador.

    Comportamentos (`behavior`):
        - "ok": sucesso com `data` informado
        - "fail": falha dura
        - "clarify": resultado parcial (clarificação)
        - "raise": lança RuntimeError em `process`
        - "invalid": retorna um objeto que não é AgentResult

    Cada instância registra os contextos recebidos em `seen`.
    """
    from gist_agents.core.pipeline.types import AgentResult

    class _StubAgent:
        def __init__(self, name, behavior="ok", data=None, annotations=None, init_error=None):
            self.name = name
            self.behavior = behavior
            self.data = dict(data or {})
            self.annotations = dict(annotations or {})
            self.init_error = init_error
            self.initialized = 0
            self.seen = []

        def initialize(self):
            self.initialized += 1
            if self.init_error is not None:
                raise self.init_error

        def is_ready(self):
            return self.initialized > 0

        def validate(self, value):
            return True

        def get_name(self):
            return self.name

        def get_config(self):
            return {}

        def process(self, ctx):
            self.seen.append(ctx)
            if self.behavior == "raise":
                raise RuntimeError("boom")
            if self.behavior == "invalid":
                return {"success": True}
            if self.behavior == "fail":
                return AgentResult.fail(f"{self.name} failed", agent=self.name)
            if self.behavior == "clarify":
                return AgentResult.clarify({"needs_clarification": True, **self.data})
            metadata = {"annotations": self.annotations} if self.annotations else {}
            return AgentResult.ok(self.data, metadata=metadata)

    return _StubAgent
