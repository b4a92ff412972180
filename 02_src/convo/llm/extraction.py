"""Reply text extraction from generation responses."""

from typing import Any

from ..logging_config import get_logger

logger = get_logger(__name__)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _items(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _text_of(obj: Any) -> str | None:
    text = _field(obj, "text")
    return text if isinstance(text, str) and text.strip() else None


def extract_text(response: Any) -> str:
    """Pull reply text out of a flat or nested backend response.

    Tries the flat ``output_text`` field first, then walks ``output[]``
    items (and their ``content[]`` parts) and top-level ``content[]``
    blocks, concatenating every text-bearing part in order. Any other
    shape yields an empty string.
    """
    try:
        if isinstance(response, str):
            return response.strip()

        flat = _field(response, "output_text")
        if isinstance(flat, str) and flat.strip():
            return flat.strip()

        parts: list[str] = []
        for item in _items(_field(response, "output")):
            for part in _items(_field(item, "content")):
                text = _text_of(part)
                if text:
                    parts.append(text)
            text = _text_of(item)
            if text:
                parts.append(text)

        for block in _items(_field(response, "content")):
            text = _text_of(block)
            if text:
                parts.append(text)

        return "\n".join(parts).strip()
    except Exception as e:
        logger.warning(f"Could not extract text from response: {e}")
        return ""
