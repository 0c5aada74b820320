"""Notices attached to degraded or flagged daily summaries."""

from typing import Final


NOTICE_NO_MATERIAL: Final[str] = "（素材不足：正文抽取失败或内容过短）"
NOTICE_SKIPPED: Final[str] = "（已跳过模型调用：dry-run/skip-llm）"
NOTICE_FAILED: Final[str] = "（模型调用失败：请稍后重试）"
NOTICE_URL_REMOVED: Final[str] = "（模型输出包含 URL，已移除；请人工复核）"
