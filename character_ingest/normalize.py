"""
Field normalization into the canonical character record.

Responsibilities:
- ordered key fallback per canonical field (canonical key, then localized alias)
- default values for optional text fields
- tag splitting, type synonym lookup, official flag coercion
- rejection of rows without a name
"""

from __future__ import annotations

import random
import re
import uuid
from typing import Any, Callable, Mapping, Optional, Sequence

from .errors import MissingName
from .models import CanonicalRecord
from .rules import (
    AFFIRMATIVE_TOKENS,
    DEFAULT_CREATOR,
    DEFAULT_DESCRIPTION,
    DEFAULT_IMAGES,
    DEFAULT_PERSONALITY,
    DEFAULT_PROMPT,
    DEFAULT_SOURCE,
    DEFAULT_TAG,
    FIELD_FALLBACKS,
    REVIEW_STATUS_PENDING,
    TAG_SEPARATORS,
    TYPE_OTHER,
    TYPE_SYNONYMS,
)

_TAG_SPLIT = re.compile("[" + re.escape(TAG_SEPARATORS) + "]")

ImagePicker = Callable[[Sequence[str]], str]


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return bool(value)
    return True


def first_value(raw: Mapping[str, Any], field: str) -> Any:
    """
    Return the first present value among the keys accepted for ``field``.
    """
    for key in FIELD_FALLBACKS[field]:
        value = raw.get(key)
        if _is_present(value):
            return value
    return None


def text_value(raw: Mapping[str, Any], field: str, default: str = "") -> str:
    value = first_value(raw, field)
    if value is None:
        return default
    return str(value).strip()


def split_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        candidates = _TAG_SPLIT.split(value)
    elif isinstance(value, (list, tuple)):
        candidates = [str(item) for item in value if item is not None]
    else:
        candidates = []

    tags: list[str] = []
    for candidate in candidates:
        tag = candidate.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags or [DEFAULT_TAG]


def resolve_type(value: Any) -> str:
    if not isinstance(value, str):
        return TYPE_OTHER
    return TYPE_SYNONYMS.get(value.strip().lower(), TYPE_OTHER)


def coerce_official(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in AFFIRMATIVE_TOKENS
    return False


class FieldNormalizer:
    """
    Build canonical records from raw field maps.

    Image selection and id generation are injectable so runs can be made
    reproducible; production defaults are a uniform random pick and uuid4.
    """

    def __init__(
        self,
        *,
        image_picker: Optional[ImagePicker] = None,
        id_factory: Optional[Callable[[], str]] = None,
        images: Sequence[str] = DEFAULT_IMAGES,
    ) -> None:
        self._pick_image = image_picker or random.choice
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
        self._images = tuple(images)

    @classmethod
    def seeded(cls, seed: int, **kwargs: Any) -> "FieldNormalizer":
        rng = random.Random(seed)
        return cls(image_picker=rng.choice, **kwargs)

    def normalize(self, raw: Mapping[str, Any]) -> CanonicalRecord:
        name = text_value(raw, "name")
        if not name:
            raise MissingName("Row has no name.")

        is_official = coerce_official(first_value(raw, "isOfficial"))

        return CanonicalRecord(
            id=self._new_id(),
            name=name,
            description=text_value(raw, "description", DEFAULT_DESCRIPTION),
            personality=text_value(raw, "personality", DEFAULT_PERSONALITY),
            prompt=text_value(raw, "prompt", DEFAULT_PROMPT),
            tags=tuple(split_tags(first_value(raw, "tags"))),
            type=resolve_type(first_value(raw, "type")),
            source=text_value(raw, "source", DEFAULT_SOURCE),
            creator=text_value(raw, "creator", DEFAULT_CREATOR),
            image_url=text_value(raw, "imageUrl") or self._pick_image(self._images),
            is_official=is_official,
            category="official" if is_official else "community",
            is_favorited=False,
            review_status=REVIEW_STATUS_PENDING,
        )
