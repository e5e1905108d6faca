# src/gist_agents/services/vector_store.py
"""
Backend de busca vetorial em memória (similaridade de cosseno com numpy).

Implementa o protocolo `VectorSearch`. Backends remotos (ex.: pgvector)
ficam fora do core; este backend cobre execução local, testes e o
knowledge base carregado pelo InterpretAgent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .protocols import SearchHit


@dataclass(frozen=True)
class _Entry:
    source_id: str
    text: str
    kind: str
    vector: np.ndarray


class InMemoryVectorStore:
    def __init__(self) -> None:
        self._entries: List[_Entry] = []

    def add(self, source_id: str, text: str, vector: Sequence[float], kind: str = "analysis") -> None:
        arr = np.asarray(vector, dtype=float)
        if arr.ndim != 1 or arr.size == 0:
            raise ValueError("vector must be a non-empty 1-D sequence")
        self._entries.append(_Entry(source_id=source_id, text=text, kind=kind, vector=arr))

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        *,
        kind: Optional[str] = None,
    ) -> List[SearchHit]:
        if top_k <= 0:
            return []

        candidates = [e for e in self._entries if kind is None or e.kind == kind]
        if not candidates:
            return []

        query = np.asarray(query_vector, dtype=float)
        matrix = np.vstack([e.vector for e in candidates])
        if matrix.shape[1] != query.shape[0]:
            raise ValueError(
                f"dimension mismatch: store has {matrix.shape[1]}, query has {query.shape[0]}"
            )

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = np.where(norms > 0, matrix @ query / norms, 0.0)

        # ordenação estável: empate preserva ordem de inserção
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [
            SearchHit(
                text=candidates[i].text,
                score=round(float(scores[i]), 6),
                source_id=candidates[i].source_id,
                kind=candidates[i].kind,
            )
            for i in order
        ]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
