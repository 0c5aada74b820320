"""Fixed labels of the generated digest post."""

from typing import Final


TITLE_PREFIX: Final[str] = "AI日报"
CATEGORY: Final[str] = "每日资讯"
TAGS: Final[tuple[str, ...]] = ("AI", "每日资讯")

HEADING_IMPORTANT: Final[str] = "重点资讯"
HEADING_OVERVIEW: Final[str] = "当日要点概述"
HEADING_REFERENCES: Final[str] = "参考内容"

EMPTY_IMPORTANT: Final[str] = "（暂无重点资讯）"
EMPTY_OVERVIEW: Final[str] = "（暂无要点输出）"

IMPORTANCE_PREFIX: Final[str] = "重要性："
DEFAULT_IMPORTANCE_REASON: Final[str] = "影响范围较广，建议优先关注后续动态。"

SYNOPSIS_IMPORTANT: Final[str] = "重点资讯：{titles}。"
SYNOPSIS_OVERVIEW: Final[str] = "今日重点：{titles}。"
SYNOPSIS_FALLBACK: Final[str] = "AI日报：当日要点、重点关注与参考来源。"
SYNOPSIS_SEPARATOR: Final[str] = "、"

UNKNOWN_SOURCE: Final[str] = "未知来源"
UNTRANSLATED_TITLE: Final[str] = "（标题待翻译）"

# Maximum characters of the material title shown in a citation preview
CITE_PREVIEW_MAX_CHARS: Final[int] = 220
