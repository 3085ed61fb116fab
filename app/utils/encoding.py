import re
from urllib.parse import quote, unquote

# Characters left unescaped by JavaScript's encodeURIComponent.
_COMPONENT_SAFE = "-_.!~*'()"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE, encoding="utf-8", errors="strict")


def decode_component(value: str) -> str:
    if _BAD_ESCAPE.search(value):
        raise ValueError("Malformed percent-escape sequence")
    # UnicodeDecodeError is a ValueError.
    return unquote(value, encoding="utf-8", errors="strict")


def round_trip(value: str) -> str:
    """Encode then decode ``value``; identity for any UTF-8 encodable string."""
    return decode_component(encode_component(value))
