"""Action classification — heuristic and LLM-based."""

from actionscout.actions.classifier import ClassifierThresholds, HeuristicActionClassifier
from actionscout.actions.llm_classifier import (
    ActionSchemaError,
    LLMActionClassifier,
    LLMClassificationError,
    get_llm_classifier,
)
from actionscout.actions.models import Action, ActionType

__all__ = [
    "Action",
    "ActionSchemaError",
    "ActionType",
    "ClassifierThresholds",
    "HeuristicActionClassifier",
    "LLMActionClassifier",
    "LLMClassificationError",
    "get_llm_classifier",
]
