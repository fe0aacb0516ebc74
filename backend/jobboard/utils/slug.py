import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = 96) -> str:
    """Lowercase, collapse every non-alphanumeric run to ``-`` and trim the ends."""
    slug = _NON_ALNUM.sub("-", (text or "").lower()).strip("-")
    return slug[:max_length].rstrip("-") or "item"
