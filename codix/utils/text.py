"""Обработка текста блога."""
import math
import re
import uuid

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 300


def slugify(value: str) -> str:
    """Строчные латинские буквы и цифры через дефис."""
    slug = re.sub(r"[^a-z0-9\s_-]", "", value.lower().strip())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug or uuid.uuid4().hex[:8]


def unique_slug(title: str) -> str:
    return f"{slugify(title)}-{uuid.uuid4().hex[:6]}"


def strip_html(content: str) -> str:
    return re.sub(r"<[^>]+>", " ", content or "")


def reading_time(content: str) -> str:
    words = len(strip_html(content).split())
    return f"{max(1, math.ceil(words / WORDS_PER_MINUTE))} min read"


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    text = " ".join(strip_html(content).split())
    return text[:length]
