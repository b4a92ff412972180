"""Split outbound text into transport-sized chunks."""

DEFAULT_MAX_CHARS = 3500


def split_into_chunks(text: str | None, max_chars: int = DEFAULT_MAX_CHARS) -> list[str]:
    """Greedy line packing.

    Lines are accumulated until the next one would push the buffer past
    max_chars; the buffer is then flushed as one chunk. A single line longer
    than max_chars is hard-cut at the limit. A buffer holding only blank
    lines is never flushed, since an empty chunk cannot be sent; such lines
    are lost when the next line does not fit beside them. Otherwise joining
    the chunks with "\\n" reproduces the trimmed input whenever no line
    exceeds the limit.
    """
    if max_chars < 1:
        raise ValueError("max_chars must be positive")

    trimmed = (text or "").strip()
    if not trimmed:
        return []
    if len(trimmed) <= max_chars:
        return [trimmed]

    chunks: list[str] = []
    buffer: str | None = None

    for line in trimmed.split("\n"):
        candidate = line if buffer is None else f"{buffer}\n{line}"
        if len(candidate) <= max_chars:
            buffer = candidate
            continue

        if buffer is not None and buffer.strip():
            chunks.append(buffer)

        if len(line) <= max_chars:
            buffer = line
            continue

        chunks.extend(line[i : i + max_chars] for i in range(0, len(line), max_chars))
        buffer = None

    if buffer is not None and buffer.strip():
        chunks.append(buffer)

    return chunks
