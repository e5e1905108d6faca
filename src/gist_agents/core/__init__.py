# src/gist_agents/core/__init__.py
"""
Core do Gist Agents.

Este pacote reúne as responsabilidades de orquestração do pipeline de
agentes, independentes de provedores externos de IA ou rede.

Componentes principais:
    - config   → resolução de configuração (defaults + overrides)
    - pipeline → AgentContext, AgentResult, contrato de Agent e registry
    - engine   → AgentPipeline (sequenciador) e PipelineResult
    - retry    → RetryPolicy para operações falíveis
    - errors / exceptions → erros canônicos e exceções tipadas

Princípios fundamentais:
    - Contexto e resultados são imutáveis
    - Exceções de agentes nunca escapam do sequenciador
    - O core não realiza I/O

Limites explícitos:
    - Não contém prompts nem lógica de domínio de notícias
    - Não chama serviços externos diretamente
"""
