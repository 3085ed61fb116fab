from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "redirect_guard_api_requests_total",
    "Total API requests",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "redirect_guard_api_request_latency_seconds",
    "API request latency",
    ["method", "path"],
)

REDIRECT_DECISIONS = Counter(
    "redirect_guard_redirect_decisions_total",
    "Redirect validation outcomes",
    ["verdict", "reason"],
)
