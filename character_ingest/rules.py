"""
Fixed import rules.

Tables here are data, not behaviour: canonical field order, header aliases,
type synonyms and default values applied by the normalizer.
"""

CANONICAL_FIELDS = (
    "name",
    "description",
    "personality",
    "prompt",
    "tags",
    "type",
    "source",
    "creator",
    "imageUrl",
    "isOfficial",
)

# Localized (feishu export) headers -> canonical keys
LOCALIZED_ALIASES = {
    "角色名": "name",
    "角色描述": "description",
    "性格特点": "personality",
    "提示词": "prompt",
    "标签": "tags",
    "角色类型": "type",
    "来源作品": "source",
    "创作者": "creator",
    "头像URL": "imageUrl",
    "是否官方": "isOfficial",
}

# Ordered fallback keys per canonical field, read left to right
FIELD_FALLBACKS = {
    field: (field,) + tuple(alias for alias, target in LOCALIZED_ALIASES.items() if target == field)
    for field in CANONICAL_FIELDS
}

# Delimiter candidates in tie-breaking priority order
DELIMITER_CANDIDATES = ("\t", ",", "，", ";", "；")
DOCUMENT_DEFAULT_DELIMITER = ","
LINE_DEFAULT_DELIMITER = "\t"

TAG_SEPARATORS = ",，;；|｜"

# Only the ASCII double quote delimits fields; curly quotes are content
FIELD_QUOTE = '"'

# Pairs stripped from a cleaned field value
WRAPPING_QUOTES = (('"', '"'), ("“", "”"), ("'", "'"), ("‘", "’"))

TYPE_OTHER = "other"
TYPE_SYNONYMS = {
    "game": "game",
    "游戏": "game",
    "anime": "anime",
    "动漫": "anime",
    "动画": "anime",
    "real": "real-person",
    "real-person": "real-person",
    "真人": "real-person",
    "virtual": "virtual-idol",
    "virtual-idol": "virtual-idol",
    "vtuber": "virtual-idol",
    "虚拟偶像": "virtual-idol",
    "other": TYPE_OTHER,
    "其他": TYPE_OTHER,
}

AFFIRMATIVE_TOKENS = frozenset({"true", "1", "是"})

DEFAULT_TAG = "导入角色"
DEFAULT_PERSONALITY = "friendly, helpful"
DEFAULT_SOURCE = "imported data"
DEFAULT_CREATOR = "data import"
DEFAULT_DESCRIPTION = ""
DEFAULT_PROMPT = ""

DEFAULT_IMAGES = (
    "/src/assets/character-1.jpg",
    "/src/assets/character-2.jpg",
    "/src/assets/character-3.jpg",
    "/src/assets/character-4.jpg",
    "/src/assets/character-5.jpg",
)

REVIEW_STATUS_PENDING = "pending"

PREVIEW_CHARS = 100
