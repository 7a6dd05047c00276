"""
Supported input dialects and their sample templates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .rules import CANONICAL_FIELDS, DOCUMENT_DEFAULT_DELIMITER, LOCALIZED_ALIASES

DEFAULT_KNOWN_HEADERS = frozenset(
    name.lower() for name in (*CANONICAL_FIELDS, *LOCALIZED_ALIASES)
)


@dataclass(frozen=True)
class Dialect:
    """
    One input convention: delimiter default plus header vocabulary.
    """

    name: str
    document_default_delimiter: str = DOCUMENT_DEFAULT_DELIMITER
    header_aliases: Mapping[str, str] = field(default_factory=dict)
    known_header_names: frozenset[str] = DEFAULT_KNOWN_HEADERS

    @property
    def is_json(self) -> bool:
        return self.name == "json"

    def looks_standard(self, headers: list[str]) -> bool:
        return any(header.strip().lower() in self.known_header_names for header in headers)

    def canonical_key(self, header: str) -> str:
        header = header.strip()
        if header in self.header_aliases:
            return self.header_aliases[header]
        for canonical in CANONICAL_FIELDS:
            if header.lower() == canonical.lower():
                return canonical
        return header


CSV = Dialect(name="csv")
LOCALIZED = Dialect(name="localized", header_aliases=MappingProxyType(dict(LOCALIZED_ALIASES)))
JSON = Dialect(name="json")

DIALECTS = {dialect.name: dialect for dialect in (CSV, LOCALIZED, JSON)}

_LOCALIZED_MARKERS = ("角色名", "角色描述")


def get_dialect(name: str) -> Dialect:
    try:
        return DIALECTS[name.strip().lower()]
    except KeyError:
        allowed = ", ".join(sorted(DIALECTS))
        raise ValueError(f"Unknown dialect {name!r}. Allowed values: {allowed}.") from None


def detect_dialect(text: str, filename: str | None = None) -> Dialect:
    """
    Guess the dialect from the file name and payload.
    """
    if filename and filename.lower().endswith(".json"):
        return JSON
    if text.lstrip("\ufeff \t\r\n").startswith("["):
        return JSON
    if any(marker in text for marker in _LOCALIZED_MARKERS):
        return LOCALIZED
    return CSV


_TEMPLATES = {
    "csv": """name,description,personality,prompt,tags,type,source,creator,imageUrl,isOfficial
"小樱","魔卡少女樱主角，拥有强大的魔法力量","开朗勇敢,善良纯真","你是木之本樱，一个10岁的小学生，拥有收集库洛牌的使命。","魔法少女,动漫,治愈","anime","魔卡少女樱","CLAMP","",true
"路飞","海贼王主角，橡胶果实能力者","乐观向上,永不放弃","你是蒙奇·D·路飞，草帽海贼团的船长。","海贼,冒险,热血","anime","海贼王","尾田荣一郎","",true
"AI助手","智能助手角色","专业友好,乐于助人","你是一个专业的AI助手，总是耐心回答用户的问题。","助手,AI,智能","other","系统默认","开发团队","",false
""",
    "localized": """角色名,角色描述,性格特点,提示词,标签,角色类型,来源作品,创作者,头像URL,是否官方
"小樱","魔卡少女樱主角，拥有强大的魔法力量","开朗勇敢;善良纯真","你是木之本樱，一个10岁的小学生，拥有收集库洛牌的使命。","魔法少女;动漫;治愈","动漫","魔卡少女樱","CLAMP","",是
"路飞","海贼王主角，橡胶果实能力者","乐观向上;永不放弃","你是蒙奇·D·路飞，草帽海贼团的船长。","海贼;冒险;热血","动漫","海贼王","尾田荣一郎","",是
"AI助手","智能助手角色","专业友好;乐于助人","你是一个专业的AI助手，总是耐心回答用户的问题。","助手;AI;智能","其他","系统默认","开发团队","",否
""",
    "json": """[
  {
    "name": "小樱",
    "description": "魔卡少女樱主角，拥有强大的魔法力量",
    "personality": "开朗勇敢,善良纯真",
    "prompt": "你是木之本樱，一个10岁的小学生，拥有收集库洛牌的使命。",
    "tags": ["魔法少女", "动漫", "治愈"],
    "type": "anime",
    "source": "魔卡少女樱",
    "creator": "CLAMP",
    "imageUrl": "",
    "isOfficial": true
  },
  {
    "name": "AI助手",
    "description": "智能助手角色",
    "personality": "专业友好,乐于助人",
    "prompt": "你是一个专业的AI助手，总是耐心回答用户的问题。",
    "tags": ["助手", "AI", "智能"],
    "type": "other",
    "source": "系统默认",
    "creator": "开发团队",
    "imageUrl": "",
    "isOfficial": false
  }
]
""",
}


def template_for(dialect: Dialect) -> str:
    return _TEMPLATES[dialect.name]
