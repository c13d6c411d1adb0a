from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path", "status"],
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total HTTP 5xx responses",
    ["method", "path", "status"],
)

TEMPLATE_EDITS = Counter(
    "agreement_template_edits_total",
    "Content-changing agreement template edits",
    ["template_type", "language"],
)
TEMPLATE_INTEGRITY_FAILURES = Counter(
    "agreement_template_integrity_failures_total",
    "Agreement templates whose stored hash does not match their content",
    ["template_type"],
)
SIGNATURES_RECORDED = Counter(
    "investor_signatures_total",
    "Investor signatures recorded",
    ["template_type"],
)


def observe_request(method: str, path: str, status: int, duration: float) -> None:
    labels = {"method": method, "path": path, "status": str(status)}
    REQUEST_COUNT.labels(**labels).inc()
    REQUEST_LATENCY.labels(**labels).observe(duration)
    if status >= 500:
        REQUEST_ERRORS.labels(**labels).inc()
