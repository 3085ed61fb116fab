def error_response(
    code: str,
    message: str,
    trace_id: str,
    status: int = 400,
    details: dict | None = None,
) -> tuple[dict, int]:
    """Build the JSON error envelope returned for non-redirect failures."""
    return (
        {
            "data": None,
            "error": {
                "code": code,
                "message": message,
                "trace_id": trace_id,
                "details": details or {},
            },
            "meta": {},
        },
        status,
    )
