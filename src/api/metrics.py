from prometheus_client import Counter, Histogram, REGISTRY


# already-registered metrics are reused so hot reloads and repeated test imports don't fail
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "braindump_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "braindump_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

ITEMS_EXTRACTED_TOTAL = get_or_create_metric(
    "braindump_items_extracted_total",
    "Total structured items extracted from text",
    Counter,
    labelnames=["type"],
)

FOLLOWUPS_TOTAL = get_or_create_metric(
    "braindump_followups_total", "Total follow-up questions generated", Counter
)

INFERRED_TYPE_TOTAL = get_or_create_metric(
    "braindump_inferred_type_total",
    "Overall suggestion per processed request",
    Counter,
    labelnames=["type"],
)
