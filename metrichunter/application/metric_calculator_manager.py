"""Selection of the metric calculator for a repository's language."""
import asyncio
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set
from metrichunter.domain.metric_interface import IMetricCalculator
from metrichunter.domain.models import Metric, Repository


logger = logging.getLogger(__name__)


# GitHub primary language names mapped to the tags calculators register for
LANGUAGES_MAP: Dict[str, str] = {
    "C#": "C#",
    "csharp": "C#",
    "C++": "C++",
    "cpp": "C++",
    "Java": "Java",
    "java": "Java",
}


def map_language(github_language: Optional[str]) -> str:
    """Translate a GitHub language name, unknown names pass through."""
    if not github_language:
        return ""
    return LANGUAGES_MAP.get(github_language, github_language)


class NullMetricCalculator(IMetricCalculator):
    """Calculator for languages nobody registered for. Never calculates anything."""

    languages: FrozenSet[str] = frozenset()

    async def calculate_metrics(
        self,
        repository: Repository,
        cancel_event: Optional[asyncio.Event] = None
    ) -> List[Metric]:
        logger.info(f"No language statistics available for {repository.full_name}")
        return []


class MetricCalculatorManager:
    """Registry of metric calculators keyed by language tag."""

    def __init__(self, calculators: Iterable[IMetricCalculator]):
        """Initialize calculator manager.

        Args:
            calculators: Calculators to register, each under all of its languages.
                Later calculators win when two claim the same language.
        """
        self._calculators: Dict[str, IMetricCalculator] = {}
        for calculator in calculators:
            for language in calculator.languages:
                self._calculators[language] = calculator
        self._null_calculator = NullMetricCalculator()

    def find_calculator(self, language: str) -> IMetricCalculator:
        """Return the calculator registered for exactly this language.

        Falls back to a NullMetricCalculator for unsupported languages.
        """
        calculator = self._calculators.get(language)
        if calculator is None:
            logger.info(f"No metric calculator registered for language '{language}'")
            return self._null_calculator
        return calculator

    def supported_languages(self) -> Set[str]:
        return set(self._calculators)
