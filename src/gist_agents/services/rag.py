# src/gist_agents/services/rag.py
"""
RAG (retrieval-augmented generation) sobre críticas editoriais e análises passadas.

Responsabilidades:
    - Indexar textos (em chunks) no backend vetorial
    - Recuperar críticas/análises semelhantes a uma consulta
    - Injetar o contexto recuperado no system prompt de um agente

Decisões arquiteturais:
    - Falha ao gerar embedding da consulta degrada para contexto vazio
      (com warning); RAG enriquece, nunca bloqueia a análise
    - O backend é injetado (`VectorSearch`); o padrão é InMemoryVectorStore

Limites explícitos:
    - Não persiste embeddings fora do backend injetado
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .protocols import EmbeddingService, SearchHit
from .vector_store import InMemoryVectorStore

KIND_CRITIQUE = "critique"
KIND_ANALYSIS = "analysis"

CHUNK_MAX_CHARS = 1000
_SENTENCE_SEPARATORS = (". ", "? ", "! ", ".\n", "?\n", "!\n", "\n\n", "\n")
_WORD_SEPARATORS = (", ", " ")


def split_into_chunks(text: str, max_chars: int = CHUNK_MAX_CHARS) -> List[str]:
    """
    Divide o texto em chunks de até `max_chars`, cortando preferencialmente
    em fim de frase; cai para vírgula/espaço quando o melhor corte ficaria
    antes de 30% da janela.
    """
    text = (text or "").strip()
    if not text:
        return []
    if len(text) <= max_chars:
        return [text]

    chunks: List[str] = []
    offset = 0
    while offset < len(text):
        if len(text) - offset <= max_chars:
            chunks.append(text[offset:].strip())
            break

        window = text[offset : offset + max_chars]
        cut = max((window.rfind(sep) + len(sep) for sep in _SENTENCE_SEPARATORS if sep in window), default=-1)
        if cut < int(max_chars * 0.3):
            cut = max(
                [cut] + [window.rfind(sep) + len(sep) for sep in _WORD_SEPARATORS if sep in window]
            )
        if cut <= 0:
            cut = max_chars

        piece = window[:cut].strip()
        if piece:
            chunks.append(piece)
        offset += cut

    return [c for c in chunks if c]


class RAGService:
    def __init__(
        self,
        embedder: EmbeddingService,
        store: Optional[InMemoryVectorStore] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._embedder = embedder
        self._store = store if store is not None else InMemoryVectorStore()
        self._logger = logger or logging.getLogger("gist_agents.services.rag")

    @property
    def store(self) -> InMemoryVectorStore:
        return self._store

    def is_configured(self) -> bool:
        return len(self._store) > 0

    # -----------------------------
    # Indexação
    # -----------------------------
    def index(self, source_id: str, text: str, kind: str = KIND_ANALYSIS) -> int:
        """Indexa `text` em chunks; retorna o número de chunks armazenados."""
        stored = 0
        for position, chunk in enumerate(split_into_chunks(text)):
            vector = self._embedder.create_embedding(chunk)
            if not vector:
                continue
            chunk_id = source_id if position == 0 else f"{source_id}#{position}"
            self._store.add(chunk_id, chunk, vector, kind=kind)
            stored += 1
        return stored

    def store_analysis(self, source_id: str, text: str) -> int:
        return self.index(source_id, text, kind=KIND_ANALYSIS)

    def store_critique(self, source_id: str, text: str) -> int:
        return self.index(source_id, text, kind=KIND_CRITIQUE)

    # -----------------------------
    # Recuperação
    # -----------------------------
    def search(self, query: str, *, top_k: int = 5, min_score: float = 0.0, kind: Optional[str] = None) -> List[SearchHit]:
        try:
            vector = self._embedder.create_embedding(query)
        except Exception as exc:
            self._logger.warning("RAG embedding failed, continuing without context: %s", exc)
            return []
        if not vector:
            return []
        hits = self._store.search(vector, top_k, kind=kind)
        return [h for h in hits if h.score >= min_score]

    def retrieve_relevant_context(
        self,
        query: str,
        top_k: int = 5,
        min_score: float = 0.0,
    ) -> Dict[str, List[SearchHit]]:
        return {
            "critiques": self.search(query, top_k=top_k, min_score=min_score, kind=KIND_CRITIQUE),
            "analyses": self.search(query, top_k=top_k, min_score=min_score, kind=KIND_ANALYSIS),
        }

    @staticmethod
    def build_system_prompt_with_rag(base_prompt: str, context: Mapping[str, Any]) -> str:
        sections: List[str] = []
        titled = (
            ("critiques", "## Editor critiques (past feedback)"),
            ("analyses", "## Past analyses for reference"),
        )
        for key, title in titled:
            lines = []
            for hit in context.get(key) or []:
                text = hit.text if isinstance(hit, SearchHit) else str(hit.get("text", ""))
                score = hit.score if isinstance(hit, SearchHit) else hit.get("score")
                if not text:
                    continue
                label = f"{float(score):.3f}" if score is not None else "?"
                lines.append(f"- [similarity {label}] {text}")
            if lines:
                sections.append(title + "\n" + "\n".join(lines))

        if not sections:
            return base_prompt
        return base_prompt + "\n\n--- RAG Context (editorial knowledge) ---\n" + "\n\n".join(sections)
