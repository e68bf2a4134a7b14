"""Flattening of per-repository metrics into CSV rows."""
import csv
import io
import logging
from typing import Dict, List, Sequence, Tuple
from metrichunter.domain.models import Metric, Repository


DEFAULT_TOPIC = "summary"
TOPIC_SEPARATOR = ":"
IDENTITY_COLUMNS = ("repository_id", "repository", "language", "topic")
RENAMED_METRIC_PREFIX = "metric_"


logger = logging.getLogger(__name__)


def split_topic(metric_name: str) -> Tuple[str, str]:
    """Split "<topic>: <name>" into its parts.

    Names without a topic prefix belong to the default topic.
    """
    topic, separator, name = metric_name.partition(TOPIC_SEPARATOR)
    if not separator or not topic.strip() or not name.strip():
        return DEFAULT_TOPIC, metric_name
    return topic.strip(), name.strip()


def to_dictionary_list_by_topics(
    repository: Repository,
    metrics: Sequence[Metric]
) -> List[Dict[str, str]]:
    """Group a repository's metrics into one row per topic.

    Every row starts with the columns identifying the repository and the
    topic, followed by the topic's metrics in report order. A metric named
    like an identity column is exported with a "metric_" prefix instead of
    overwriting it.

    Args:
        repository: Repository the metrics belong to
        metrics: Metrics as extracted from the report

    Returns:
        One dictionary per topic, topics in order of first appearance
    """
    rows: Dict[str, Dict[str, str]] = {}
    for metric in metrics:
        topic, name = split_topic(metric.name)
        row = rows.get(topic)
        if row is None:
            row = {
                "repository_id": str(repository.repo_id),
                "repository": repository.full_name,
                "language": repository.language,
                "topic": topic,
            }
            rows[topic] = row
        if name in IDENTITY_COLUMNS:
            logger.warning(
                f"Metric '{name}' of {repository.full_name} clashes with an identity column, "
                f"exported as '{RENAMED_METRIC_PREFIX}{name}'"
            )
            name = f"{RENAMED_METRIC_PREFIX}{name}"
        if name in row:
            logger.warning(
                f"Duplicate metric '{name}' in topic '{topic}' of {repository.full_name}, "
                f"keeping the last value"
            )
        row[name] = metric.value
    return list(rows.values())


def metrics_to_csv(rows: Sequence[Dict[str, str]]) -> str:
    """Serialize rows into CSV text.

    The header is the union of all keys in first-seen order; a row lacking
    a column gets an empty cell.
    """
    fieldnames: List[str] = []
    seen = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                fieldnames.append(key)

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fieldnames, restval="")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return output.getvalue()
