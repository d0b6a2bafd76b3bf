"""
Heuristic response quality scoring and prompt-based routing decisions.

The thresholds and model tables in this module are fixed values; routing
behaviour elsewhere depends on them exactly.
"""

import re
from typing import Any, List, Sequence

from ...models.generation import QualityAnalysis, QualityMetrics, RoutingDecision
from ..normalization.messages import joined_text

QUESTION_WORDS = ("what", "how", "why", "when", "where", "which", "who")

UNCERTAINTY_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"i'm not sure",
        r"i don't know",
        r"might be wrong",
        r"uncertain",
        r"i think",
        r"i believe",
        r"probably",
        r"maybe",
        r"perhaps",
    )
]

CONFIDENCE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"definitely",
        r"certainly",
        r"clearly",
        r"obviously",
        r"without a doubt",
        r"absolutely",
        r"precisely",
    )
]

CITATION_PATTERN = re.compile(
    r"according to|research shows|studies indicate|data shows|evidence suggests", re.IGNORECASE
)
FACTUAL_PATTERN = re.compile(r"\d{4}|\d+%|\$\d+|\d+\.\d+", re.ASCII)
HEDGING_PATTERN = re.compile(
    r"typically|generally|often|usually|in most cases|commonly", re.IGNORECASE
)
ABSOLUTE_PATTERN = re.compile(r"always|never|all|every|none", re.IGNORECASE)
REPEATED_WORD_PATTERN = re.compile(r"\b(the the|and and|is is)\b", re.ASCII)
KEY_TERM_PATTERN = re.compile(r"\b\w{4,}\b", re.ASCII)

CRITICAL_PATTERN = re.compile(
    r"critical|important|medical|legal|financial|safety|production|accurate|precise"
)


class QualityDetector:
    """Scores responses and judges whether a prompt is safe to route."""

    @classmethod
    def analyze_response(cls, response: str, original_prompt: str) -> QualityAnalysis:
        """
        Score a response against the prompt that produced it.

        Args:
            response: Response text
            original_prompt: Prompt text (the orchestrator passes the
                JSON-rendered conversation)

        Returns:
            QualityAnalysis whose score is the unweighted mean of the four metrics
        """
        completeness = cls._measure_completeness(response, original_prompt)
        coherence = cls._measure_coherence(response)
        relevance = cls._measure_relevance(response, original_prompt)
        accuracy = cls._measure_accuracy(response)

        quality_score = (completeness + coherence + relevance + accuracy) / 4

        return QualityAnalysis(
            quality_score=quality_score,
            metrics=QualityMetrics(
                completeness=completeness,
                coherence=coherence,
                relevance=relevance,
                accuracy=accuracy,
            ),
        )

    @staticmethod
    def _measure_completeness(response: str, prompt: str) -> float:
        if not response or len(response) < 10:
            return 0.0

        score = 0.3

        prompt_length = len(prompt or "")
        response_length = len(response)
        length_ratio = response_length / max(prompt_length, 1)

        if 0.5 < length_ratio < 3.0:
            score += 0.3
        if response_length > 100:
            score += 0.2
        if response_length > 500:
            score += 0.1

        if prompt and "?" in prompt:
            prompt_lower = prompt.lower()
            has_question_words = any(word in prompt_lower for word in QUESTION_WORDS)
            if has_question_words and response_length > 50:
                score += 0.2

        if re.search(r"[.!?]$", response.strip()):
            score += 0.1

        if (
            not response.endswith("...")
            and "[incomplete]" not in response
            and "[truncated]" not in response
        ):
            score += 0.1

        return min(1.0, score)

    @staticmethod
    def _measure_coherence(response: str) -> float:
        if not response:
            return 0.0

        score = 0.5

        sentences = [s for s in re.split(r"[.!?]+", response) if s.strip()]
        if len(sentences) >= 2:
            score += 0.2

        words = re.split(r"\s+", response.lower())
        unique_words = set(words)
        repetition_ratio = len(unique_words) / len(words)
        if repetition_ratio > 0.7:
            score += 0.2

        if not REPEATED_WORD_PATTERN.search(response):
            score += 0.1

        return min(1.0, score)

    @staticmethod
    def _measure_relevance(response: str, prompt: str) -> float:
        if not response or not prompt:
            return 0.0

        prompt_lower = prompt.lower()
        response_lower = response.lower()

        score = 0.3

        unique_terms = list(dict.fromkeys(KEY_TERM_PATTERN.findall(prompt_lower)))
        matched_terms = [term for term in unique_terms if term in response_lower]

        relevance_ratio = len(matched_terms) / max(len(unique_terms), 1)
        score += relevance_ratio * 0.4

        if "?" in prompt_lower and len(response_lower) > 20:
            score += 0.2

        if "i cannot" not in response_lower and "i'm sorry" not in response_lower:
            score += 0.1

        return min(1.0, score)

    @staticmethod
    def _measure_accuracy(response: str) -> float:
        if not response:
            return 0.0

        score = 0.6

        uncertainty_count = sum(1 for pattern in UNCERTAINTY_PATTERNS if pattern.search(response))
        score -= uncertainty_count * 0.1

        confidence_count = sum(1 for pattern in CONFIDENCE_PATTERNS if pattern.search(response))
        score += confidence_count * 0.05

        if CITATION_PATTERN.search(response):
            score += 0.15

        if FACTUAL_PATTERN.search(response):
            score += 0.1

        if HEDGING_PATTERN.search(response):
            score += 0.08

        if not ABSOLUTE_PATTERN.search(response):
            score += 0.05

        if len(response) > 200:
            score += 0.05
        if len(response) > 500:
            score += 0.05

        return min(1.0, max(0.0, score))

    @classmethod
    def should_route(
        cls,
        requested_model: str,
        messages: Sequence[Any],
        quality_threshold: float = 0.75,
    ) -> RoutingDecision:
        """
        Decide whether a conversation can be served by a cheaper model.

        Critical or highly complex prompts are never routed. Simple prompts
        always go to a task-specific cheap model; medium prompts only when a
        better-suited alternative exists. ``quality_threshold`` is accepted
        for callers that pass one; the tier boundaries are fixed.
        """
        complexity = cls.estimate_complexity(messages)
        task_types = cls.detect_task_type(messages)
        is_critical = cls.is_critical(messages)

        if complexity > 0.8 or is_critical:
            return RoutingDecision(
                should_route=False,
                target_model=requested_model,
                confidence=0.9,
                reasoning=(
                    "Critical task requires premium model"
                    if is_critical
                    else "High complexity task requires premium model"
                ),
            )

        if complexity < 0.3:
            target_model = cls._optimal_simple_model(requested_model, task_types)
            return RoutingDecision(
                should_route=True,
                target_model=target_model,
                confidence=0.85,
                reasoning=f"Simple task suitable for {target_model}",
            )

        if complexity < 0.6:
            target_model = cls._optimal_medium_model(requested_model, task_types)
            changed = target_model != requested_model
            return RoutingDecision(
                should_route=changed,
                target_model=target_model,
                confidence=0.8,
                reasoning=(
                    f"Medium complexity task can use {target_model}"
                    if changed
                    else "No suitable alternative found"
                ),
            )

        return RoutingDecision(
            should_route=False,
            target_model=requested_model,
            confidence=0.7,
            reasoning="Complex task requires original model",
        )

    @staticmethod
    def _optimal_simple_model(requested_model: str, task_types: List[str]) -> str:
        if "coding" in task_types:
            return "claude-3-haiku"
        if "writing" in task_types:
            return "gpt-3.5-turbo"
        if "math" in task_types:
            return "gpt-3.5-turbo"
        return "gpt-3.5-turbo"

    @staticmethod
    def _optimal_medium_model(requested_model: str, task_types: List[str]) -> str:
        if "coding" in task_types and "gpt-4" in requested_model:
            return "claude-3.5-sonnet"
        if "writing" in task_types and "gpt-4" in requested_model:
            return "claude-3.5-sonnet"
        if "analysis" in task_types and requested_model == "gpt-4":
            return "gpt-4o"
        if "claude-3-opus" in requested_model:
            return "claude-3.5-sonnet"
        return requested_model

    @staticmethod
    def estimate_complexity(messages: Sequence[Any]) -> float:
        """Complexity score in [0, 1] from length and keyword cues."""
        text = joined_text(messages).lower()

        complexity = 0.2

        if len(text) > 1000:
            complexity += 0.3
        if re.search(r"complex|advanced|detailed|comprehensive", text):
            complexity += 0.4
        if re.search(r"analyze|evaluate|compare|critique", text):
            complexity += 0.3
        if re.search(r"simple|basic|quick|easy", text):
            complexity -= 0.3

        return max(0.0, min(1.0, complexity))

    @staticmethod
    def detect_task_type(messages: Sequence[Any]) -> List[str]:
        text = joined_text(messages).lower()
        types = []

        if re.search(r"simple|basic|quick|easy|straightforward", text):
            types.append("simple")
        if re.search(r"code|programming|function", text):
            types.append("coding")
        if re.search(r"write|creative|story", text):
            types.append("writing")

        return types

    @staticmethod
    def is_critical(messages: Sequence[Any]) -> bool:
        """True when the prompt touches a domain that must not be downgraded."""
        return bool(CRITICAL_PATTERN.search(joined_text(messages).lower()))
