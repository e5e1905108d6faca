# tests/core/test_retry.py
"""
Testes da RetryPolicy.

Os testes asseguram que:
- uma operação que sempre falha executa exatamente `max_attempts` vezes
- o backoff linear e o exponencial produzem os atrasos esperados
- não há espera após a última tentativa
- `max_attempts <= 0` é erro de configuração (fail-fast)
- exceções fora de `retry_on` propagam imediatamente
- erros HTTP permanentes (4xx) não são re-tentados
"""

import pytest

try:
    from gist_agents.core.exceptions import RetryConfigurationError
    from gist_agents.core.retry import RetryPolicy
except Exception as e:  # noqa: BLE001
    RetryPolicy = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if RetryPolicy is None:
        pytest.fail(f"Missing RetryPolicy. Import error: {_IMPORT_ERR}")


class _Flaky:
    def __init__(self, fail_times, exc=RuntimeError):
        self.fail_times = fail_times
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise self.exc(f"failure {self.calls}")
        return "done"


def test_always_failing_operation_runs_exactly_max_attempts(no_sleep):
    _require_imports()
    op = _Flaky(fail_times=10)
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=no_sleep)

    with pytest.raises(RuntimeError, match="failure 3"):
        policy.call(op)

    assert op.calls == 3
    assert no_sleep.delays == [1.0, 2.0]


def test_succeeds_after_transient_failures(no_sleep):
    _require_imports()
    op = _Flaky(fail_times=2)
    assert RetryPolicy(max_attempts=3, base_delay=0.5, sleep=no_sleep).call(op) == "done"
    assert op.calls == 3
    assert no_sleep.delays == [0.5, 1.0]


def test_exponential_backoff(no_sleep):
    _require_imports()
    policy = RetryPolicy(max_attempts=4, base_delay=1.0, backoff="exponential", sleep=no_sleep)
    with pytest.raises(RuntimeError):
        policy.call(_Flaky(fail_times=10))
    assert no_sleep.delays == [1.0, 2.0, 4.0]


def test_single_attempt_never_sleeps(no_sleep):
    _require_imports()
    policy = RetryPolicy(max_attempts=3, sleep=no_sleep)
    with pytest.raises(RuntimeError):
        policy.call(_Flaky(fail_times=10), max_attempts=1)
    assert no_sleep.delays == []


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"backoff": "random"}, {"base_delay": -1.0}])
def test_invalid_policy_is_rejected(kwargs):
    _require_imports()
    with pytest.raises(RetryConfigurationError):
        RetryPolicy(**kwargs)


def test_zero_attempts_override_is_rejected(no_sleep):
    _require_imports()
    op = _Flaky(fail_times=0)
    with pytest.raises(RetryConfigurationError):
        RetryPolicy(sleep=no_sleep).call(op, max_attempts=0)
    assert op.calls == 0


def test_non_retryable_exception_propagates_immediately(no_sleep):
    _require_imports()
    op = _Flaky(fail_times=10, exc=KeyError)
    policy = RetryPolicy(max_attempts=3, retry_on=(RuntimeError,), sleep=no_sleep)
    with pytest.raises(KeyError):
        policy.call(op)
    assert op.calls == 1
    assert no_sleep.delays == []


@pytest.mark.parametrize("status,expected_calls", [(404, 1), (400, 1), (429, 3), (503, 3), (None, 3)])
def test_permanent_http_errors_are_not_retried(no_sleep, status, expected_calls):
    """
    Verifica que apenas erros transitórios de serviços externos são re-tentados.

    Invariantes:
        - HTTP 4xx (exceto 408/429) propaga na primeira ocorrência, sem espera
        - 429, 5xx e falhas sem status seguem o limite de tentativas
    """
    _require_imports()
    from gist_agents.core.exceptions import ExternalServiceError

    calls = []

    def op():
        calls.append(1)
        raise ExternalServiceError("boom", service="test", status_code=status)

    with pytest.raises(ExternalServiceError):
        RetryPolicy(max_attempts=3, base_delay=1.0, sleep=no_sleep).call(op)
    assert len(calls) == expected_calls
    assert len(no_sleep.delays) == expected_calls - 1


def test_from_config_reads_agent_keys(no_sleep):
    _require_imports()
    policy = RetryPolicy.from_config(
        {"max_retries": 5, "retry_delay": 0.25, "retry_backoff": "exponential"}, sleep=no_sleep
    )
    assert policy.max_attempts == 5
    assert policy.base_delay == 0.25
    assert policy.backoff == "exponential"
    assert RetryPolicy.from_config({}).max_attempts == 3
