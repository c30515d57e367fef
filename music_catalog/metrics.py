"""Prometheus metrics for the music catalog service."""
from prometheus_client import Counter, Histogram, generate_latest

# Search metrics
search_queries_total = Counter(
    'catalog_search_queries_total',
    'Total number of artist search queries',
    ['sorted']  # 'yes', 'no'
)

search_results_total = Counter(
    'catalog_search_results_total',
    'Total number of artist search results returned'
)

search_duration_seconds = Histogram(
    'catalog_search_duration_seconds',
    'Time spent planning and executing artist searches',
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0)
)

# Mutation metrics
mutations_total = Counter(
    'catalog_mutations_total',
    'Total number of catalog mutations',
    ['resource', 'action', 'outcome']  # outcome: 'success', 'denied', 'invalid', 'error'
)

authorization_denials_total = Counter(
    'catalog_authorization_denials_total',
    'Total number of mutations denied by policy',
    ['resource', 'action']
)


def get_metrics() -> bytes:
    """Render all metrics in the Prometheus text format."""
    return generate_latest()
