import re


def slugify(value: str) -> str:
    """Lowercase, collapse non-alphanumerics into single dashes, trim dashes."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
