from typing import Any

# --------------------------------------------------
# Compact vocabulary prefixes
# --------------------------------------------------

VOCAB_PREFIXES = (
    ("aat:", "http://vocab.getty.edu/aat/"),
    ("tgn:", "http://vocab.getty.edu/tgn/"),
    ("ulan:", "http://vocab.getty.edu/ulan/"),
)

NUMERIC_ID_MESSAGE = "Numeric IDs used instead of full URIs."


def convert_to_full_uri(value: Any, log_messages=None) -> Any:
    """
    aat:300312355 -> http://vocab.getty.edu/aat/300312355
    """
    if not value or not isinstance(value, str):
        return value

    for prefix, base_uri in VOCAB_PREFIXES:
        if value.startswith(prefix):
            if log_messages is not None:
                log_messages.add(NUMERIC_ID_MESSAGE)
            return base_uri + value[len(prefix):]

    return value


def expand_numeric_ids(data: Any, log_messages=None) -> Any:
    """
    Expand every compact `id` in the document, in place.
    Returns the same object for convenience.
    """
    if isinstance(data, list):
        for i, item in enumerate(data):
            data[i] = expand_numeric_ids(item, log_messages)

    elif isinstance(data, dict):
        for key, value in data.items():
            if key == "id" and isinstance(value, str):
                data[key] = convert_to_full_uri(value, log_messages)
            else:
                data[key] = expand_numeric_ids(value, log_messages)

    return data
