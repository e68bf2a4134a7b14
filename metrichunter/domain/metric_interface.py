"""Metric calculator interface (port)."""
import asyncio
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional
from metrichunter.domain.models import Metric, Repository


class IMetricCalculator(ABC):
    """Computes metrics for repositories written in a set of languages."""

    languages: FrozenSet[str] = frozenset()

    @abstractmethod
    async def calculate_metrics(
        self,
        repository: Repository,
        cancel_event: Optional[asyncio.Event] = None
    ) -> List[Metric]:
        """Calculate metrics for a locally available repository.

        Args:
            repository: Repository to analyze
            cancel_event: Set to stop before the repository is processed

        Returns:
            Metrics in report order, empty when nothing was calculated
        """
        pass
