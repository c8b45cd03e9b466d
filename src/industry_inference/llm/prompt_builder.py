"""
Prompt builder for LLM requests.

Responsible for:
- Loading and rendering Jinja2 templates (system, classification, normalization)
- Truncating the user description at a sentence boundary
- Listing the taxonomy (only the locked category when one is set)
- Passing local candidates to the model as hints
- Constructing complete LLMGenerationRequest objects
"""

from pathlib import Path
from typing import Optional, Sequence

import structlog
from jinja2 import Environment, FileSystemLoader

from industry_inference.llm.text_utils import count_tokens_approximate, truncate_at_sentence_boundary
from industry_inference.models.industry_models import ClassificationCandidate
from industry_inference.models.llm_models import LLMGenerationRequest
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy

logger = structlog.get_logger(__name__)


class PromptBuilder:
    """Build chat prompts for classification and normalization."""

    def __init__(
        self,
        templates_dir: str | Path,
        taxonomy: IndustryTaxonomy,
        max_description_length: int = 200,
        default_model: str = "deepseek-chat",
        default_temperature: float = 0.3,
        default_max_tokens: int = 500,
        normalization_max_tokens: int = 50,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates
            taxonomy: Taxonomy listed in the classification prompt
            max_description_length: Max description characters sent to the model
            default_model: Model name
            default_temperature: Sampling temperature
            default_max_tokens: Max tokens for classification replies
            normalization_max_tokens: Max tokens for normalization replies
        """
        self.templates_dir = Path(templates_dir)
        self.taxonomy = taxonomy
        self.max_description_length = max_description_length
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        self.normalization_max_tokens = normalization_max_tokens

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # We're generating prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template("system_prompt.txt")
            self.classification_template = self.jinja_env.get_template("classification_prompt.txt")
            self.normalization_template = self.jinja_env.get_template("normalization_prompt.txt")
            logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e))
            raise

    def build_system_prompt(self) -> str:
        return self.system_template.render().strip()

    def build_classification_prompt(
        self,
        description: str,
        locked_category_id: Optional[str] = None,
        hints: Sequence[ClassificationCandidate] = (),
    ) -> tuple[str, dict]:
        """
        Render the user message for a classification request.

        Returns:
            Tuple of (rendered_prompt, metadata_dict)
        """
        truncated = truncate_at_sentence_boundary(description, self.max_description_length)

        locked_category = self.taxonomy.find_category(locked_category_id)
        tree = self.taxonomy.tree()
        if locked_category is not None:
            tree = [node for node in tree if node["id"] == locked_category.id]

        hint_dicts = [
            {
                "category": h.category.id,
                "segment": h.segment.id,
                "niche": h.niche.id if h.niche else None,
                "confidence": round(h.confidence, 2),
                "reasoning": h.reasoning,
            }
            for h in hints
        ]

        rendered = self.classification_template.render(
            taxonomy=tree,
            locked_category=locked_category,
            hints=hint_dicts,
            description=truncated,
        ).strip()

        metadata = {
            "truncation_applied": len(truncated) < len(description),
            "description_length": len(truncated),
            "locked_category": locked_category.id if locked_category else None,
            "hints_count": len(hint_dicts),
            "prompt_length": len(rendered),
            "estimated_tokens": count_tokens_approximate(rendered),
        }
        logger.debug("Classification prompt built", **metadata)
        return rendered, metadata

    def build_classification_request(
        self,
        description: str,
        locked_category_id: Optional[str] = None,
        hints: Sequence[ClassificationCandidate] = (),
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> tuple[LLMGenerationRequest, dict]:
        prompt, metadata = self.build_classification_prompt(description, locked_category_id, hints)
        request = LLMGenerationRequest(
            system_prompt=self.build_system_prompt(),
            prompt=prompt,
            model=model or self.default_model,
            temperature=temperature if temperature is not None else self.default_temperature,
            max_tokens=max_tokens or self.default_max_tokens,
            json_mode=True,
        )
        return request, {**metadata, "model": request.model}

    def build_normalization_request(self, description: str) -> LLMGenerationRequest:
        truncated = truncate_at_sentence_boundary(description, self.max_description_length)
        return LLMGenerationRequest(
            prompt=self.normalization_template.render(description=truncated).strip(),
            model=self.default_model,
            temperature=0.0,
            max_tokens=self.normalization_max_tokens,
            json_mode=True,
        )
