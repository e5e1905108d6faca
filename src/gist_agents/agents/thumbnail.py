# src/gist_agents/agents/thumbnail.py
"""Agente canônico: ThumbnailAgent.

Responsabilidades:
- definir a imagem de capa do artigo, em ordem de preferência:
    1. ilustração gerada por IA (apenas com LLM configurado, fora do mock mode)
    2. imagem original do artigo (og:image), quando utilizável
    3. placeholder por categoria (placehold.co)
- detectar a categoria por palavras-chave quando não configurada

Saída (sucesso):
- data: {article (com image_url atualizado), thumbnail: {image_url, source, style}}
- anotação `thumbnail`

Limites explícitos:
- NÃO baixa nem armazena imagens
- Falha de geração de imagem nunca é falha do agente
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from gist_agents.core.errors import validation_error
from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import THUMBNAIL_AGENT, AgentResult
from gist_agents.models.article import ArticleData
from gist_agents.utils.logging_config import log_step, log_warning

from .base import BaseAgent

SOURCE_AI = "ai"
SOURCE_ORIGINAL = "original"
SOURCE_PLACEHOLDER = "placeholder"

_STYLES = {SOURCE_AI: "illustration", SOURCE_ORIGINAL: "original", SOURCE_PLACEHOLDER: "placeholder"}

# categoria -> (bg, fg, label)
PLACEHOLDER_THEMES: Dict[str, Tuple[str, str, str]] = {
    "diplomacy": ("0f172a", "38bdf8", "Diplomacy"),
    "economy": ("0f172a", "34d399", "Economy"),
    "entertainment": ("0f172a", "fb923c", "Entertainment"),
    "technology": ("0f172a", "a78bfa", "Tech"),
    "security": ("0f172a", "f87171", "Security"),
}
DEFAULT_THEME = ("1e293b", "94a3b8", "The+Gist")

_STYLE_HINTS = {
    "diplomacy": "geopolitical theme, world map elements, diplomatic imagery",
    "economy": "financial theme, charts, currency symbols, economic imagery",
    "entertainment": "entertainment theme, vibrant colors, pop culture elements",
    "technology": "technology theme, digital elements, futuristic imagery",
    "security": "security theme, strategic imagery, defense elements",
}
_CATEGORY_ALIASES = {"politics": "diplomacy", "finance": "economy", "tech": "technology", "military": "security"}

_CATEGORY_KEYWORDS = (
    ("security", ("military", "defense", "missile", "army", " war ", "nuclear", "security", "안보", "군사")),
    ("diplomacy", ("diplomat", "summit", "foreign minister", "treaty", "embassy", "sanction", "외교", "정상회담")),
    ("economy", ("economy", "economic", "trade", "market", "inflation", "tariff", "stock", "supply chain", "경제", "무역")),
    ("technology", ("technology", "semiconductor", "chip", "artificial intelligence", " ai ", "software", "기술", "반도체")),
    ("entertainment", ("film", "movie", "music", "celebrity", "k-pop", "drama", "festival", "연예", "영화")),
)


def normalize_category(category: Optional[str]) -> str:
    value = (category or "").strip().lower()
    return _CATEGORY_ALIASES.get(value, value)


def detect_category(text: str) -> str:
    """Categoria por palavras-chave (primeira família com ocorrência); "" quando nenhuma."""
    lowered = f" {(text or '').lower()} "
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ""


def placeholder_url(category: str) -> str:
    bg, fg, label = PLACEHOLDER_THEMES.get(normalize_category(category), DEFAULT_THEME)
    return f"https://placehold.co/800x500/{bg}/{fg}?text={label}"


def is_usable_original(url: Optional[str]) -> bool:
    if not url or not url.strip():
        return False
    if "placehold.co" in url or url.startswith("data:"):
        return False
    return url.startswith(("http://", "https://"))


class ThumbnailAgent(BaseAgent):
    name = THUMBNAIL_AGENT
    prompt_name = "thumbnail"

    def default_config(self) -> Dict[str, Any]:
        return {"use_ai_image": True, "keep_original_image": True, "category": ""}

    def default_prompts(self) -> Dict[str, Any]:
        return {
            "system": "Thumbnail image selection agent.",
            "tasks": {
                "image": {
                    "prompt": (
                        "Create a high-quality editorial illustration for an international news article. "
                        "Style: flat vector art, clean minimalist design, bold colors on dark background (#1e293b), "
                        "NO text, NO letters, NO words, NO realistic human faces. "
                        "Theme: {style_hint}. Mood/topic inspired by: {topic}"
                    )
                }
            },
        }

    def validate(self, value: Any) -> bool:
        return isinstance(value, AgentContext) and value.article_data is not None

    def resolve_category(self, article: ArticleData) -> str:
        configured = normalize_category(self.config.get("category"))
        if configured:
            return configured
        from_metadata = normalize_category(article.metadata.get("category"))
        if from_metadata:
            return from_metadata
        return detect_category(f"{article.title} {article.description or ''}")

    def build_image_prompt(self, article: ArticleData, category: str) -> str:
        topic = f"{article.title} {article.description or ''}".strip()[:600]
        hint = _STYLE_HINTS.get(category, "professional news editorial imagery")
        return self.format_prompt(self.get_prompt("image"), {"style_hint": hint, "topic": topic})

    def process(self, ctx: AgentContext) -> AgentResult:
        if not self.validate(ctx):
            return AgentResult.from_error(
                validation_error(message="No article data; run ValidationAgent first", agent=self.name)
            )

        article = ctx.article_data
        category = self.resolve_category(article)
        image_url, source = self._generate(article, category), SOURCE_AI

        if not image_url:
            if self.config.get("keep_original_image", True) and is_usable_original(article.image_url):
                image_url, source = article.image_url, SOURCE_ORIGINAL
            else:
                image_url, source = placeholder_url(category), SOURCE_PLACEHOLDER

        thumbnail = {"image_url": image_url, "source": source, "style": _STYLES[source], "category": category}
        log_step(self.logger, self.name, f"{source} image for {article.title[:50]}")
        return AgentResult.ok(
            {"article": article.with_image_url(image_url).to_dict(), "thumbnail": thumbnail},
            metadata={"annotations": {"thumbnail": thumbnail}},
        )

    def _generate(self, article: ArticleData, category: str) -> Optional[str]:
        if not self.config.get("use_ai_image", True) or not self.llm.is_configured():
            return None
        try:
            generated = self.with_retry(
                lambda: self.llm.create_image(self.build_image_prompt(article, category)),
                label=f"{self.name}.create_image",
            )
        except ExternalServiceError as exc:
            log_warning(self.logger, f"Image generation failed, using fallback: {exc}")
            return None
        return generated or None
