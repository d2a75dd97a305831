"""LLM action classifier — asks a language model to group page elements into actions."""

from __future__ import annotations

import json
import re

import logfire
from pydantic import BaseModel, Field, ValidationError

from actionscout.actions.models import Action
from actionscout.actions.prompts import SYSTEM_PROMPT, build_classification_prompt
from actionscout.core.config import get_settings
from actionscout.crawler.models import CrawlResult
from actionscout.llm.provider import LLMProvider, get_provider


class LLMClassificationError(Exception):
    """Raised when the LLM classification call fails."""


class ActionSchemaError(LLMClassificationError):
    """Raised when the model's answer does not match the action schema."""


class ActionCandidate(BaseModel):
    """One action as reported by the model."""

    type: str
    name: str
    description: str = ""
    element_indices: list[int] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


class ActionAnalysis(BaseModel):
    """Top-level shape of the model's answer."""

    actions: list[ActionCandidate]


def _extract_json(content: str) -> dict:
    """Extract a JSON object from LLM response text."""
    json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
    if json_match:
        json_str = json_match.group(1).strip()
    else:
        json_match = re.search(r"\{[\s\S]*\}", content)
        if not json_match:
            raise ActionSchemaError("No JSON found in response")
        json_str = json_match.group(0)

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ActionSchemaError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ActionSchemaError("Expected a JSON object")
    return data


def parse_action_analysis(content: str) -> ActionAnalysis:
    """Parse and validate the model's answer.

    Raises:
        ActionSchemaError: If the answer is not JSON or does not fit the schema
    """
    data = _extract_json(content)
    try:
        return ActionAnalysis.model_validate(data)
    except ValidationError as e:
        raise ActionSchemaError(f"Response does not match action schema: {e}") from e


class LLMActionClassifier:
    """Classifies page elements into actions with a single LLM completion.

    Produces the same Action shape as the heuristic classifier. Failures are
    raised, not swallowed; callers decide how to degrade.
    """

    def __init__(
        self,
        llm: LLMProvider,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        log: logfire.Logfire | None = None,
    ) -> None:
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._log = log or logfire.with_tags("llm-action-classifier")

    async def classify(self, crawl_result: CrawlResult) -> list[Action]:
        """Identify user actions on a crawled page.

        Raises:
            ActionSchemaError: If the completion does not match the schema
            LLMClassificationError: If the provider call fails
        """
        self._log.info(
            "Analyzing elements for user actions using LLM",
            url=crawl_result.url,
            elements=len(crawl_result.elements),
        )

        prompt = build_classification_prompt(crawl_result.url, crawl_result.elements)
        try:
            response = await self.llm.generate(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise LLMClassificationError(f"LLM call failed: {e}") from e

        analysis = parse_action_analysis(response.content)
        actions = self._to_actions(analysis, crawl_result)

        self._log.info(
            "LLM identified potential user actions",
            url=crawl_result.url,
            actions=len(actions),
            dropped=len(analysis.actions) - len(actions),
        )
        return actions

    def _to_actions(self, analysis: ActionAnalysis, crawl_result: CrawlResult) -> list[Action]:
        """Resolve element indices; drop unknown indices and element-less actions."""
        elements = crawl_result.elements
        actions = []
        for candidate in analysis.actions:
            valid = (i for i in candidate.element_indices if 0 <= i < len(elements))
            indices = list(dict.fromkeys(valid))
            if not indices:
                self._log.warn("Dropping LLM action without valid elements", name=candidate.name)
                continue
            actions.append(
                Action(
                    type=candidate.type,
                    name=candidate.name,
                    description=candidate.description,
                    elements=[elements[i] for i in indices],
                    url=crawl_result.url,
                    confidence=candidate.confidence,
                )
            )
        return actions


def get_llm_classifier(provider_name: str | None = None) -> LLMActionClassifier | None:
    """Build the LLM classifier from settings, or None when it cannot be used.

    A missing API key or an unknown provider disables the LLM path instead
    of failing the crawl.
    """
    settings = get_settings()
    if not settings.enable_llm_classification:
        logfire.info("LLM classification disabled by configuration")
        return None

    try:
        provider = get_provider(provider_name)
    except ValueError as e:
        logfire.warn("LLM classification unavailable", error=str(e))
        return None

    return LLMActionClassifier(provider)
