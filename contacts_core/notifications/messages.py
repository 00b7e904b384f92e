# =============================================================================
# contacts_core/notifications/messages.py
# Parsing-Completion Message Formatting
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, List, Optional

from contacts_core.models import parse_timestamp

MAX_LISTED_QUERIES = 3


@dataclass
class ParsingSummary:
    """What a finished parsing run reports to the notification message."""
    task_name: Optional[str]
    original_query: str
    results: List[Dict[str, Any]] = field(default_factory=list)
    generated_queries: List[str] = field(default_factory=list)
    completed_at: Optional[datetime] = None

    @property
    def result_count(self) -> int:
        return len(self.results)

    @property
    def email_count(self) -> int:
        return sum(1 for row in self.results if (row.get("email") or "").strip())

    @classmethod
    def from_pipeline(
        cls,
        task_name: Optional[str],
        original_query: str,
        output: Any,
    ) -> ParsingSummary:
        """
        Build a summary from a pipeline result.

        `output` is either a list of result rows or a mapping with
        "results", optional "queryInfo"/"query_info" {"queries": [...]}
        and optional "timestamp".
        """
        if isinstance(output, dict):
            rows = output.get("results") or []
            query_info = output.get("query_info") or output.get("queryInfo") or {}
            queries = list(query_info.get("queries") or [])
            completed = parse_timestamp(output.get("timestamp"))
        else:
            rows = list(output or [])
            queries = []
            completed = None

        return cls(
            task_name=task_name,
            original_query=original_query,
            results=rows,
            generated_queries=queries,
            completed_at=completed,
        )


def format_parsing_notification(summary: ParsingSummary) -> str:
    """
    HTML message for the Telegram sendMessage call.

    Lists at most three generated queries. User-supplied text is escaped.
    """
    completed = summary.completed_at or datetime.now(timezone.utc)
    lines = [
        "🎉 <b>Parsing completed successfully!</b>",
        "",
        f"📋 <b>Task name:</b> {escape(summary.task_name or 'Untitled')}",
        f"🔍 <b>Your query:</b> {escape(summary.original_query or '')}",
        "",
        "🤖 <b>AI-generated queries:</b>",
    ]

    queries = summary.generated_queries[:MAX_LISTED_QUERIES]
    if queries:
        lines.extend(f'   {i}. "{escape(str(q))}"' for i, q in enumerate(queries, start=1))
    else:
        lines.append("   Not available")

    lines += [
        "",
        "📊 <b>Search results:</b>",
        f"   • Organizations found: <b>{summary.result_count}</b>",
        f"   • With email addresses: <b>{summary.email_count}</b>",
        f"   • Added to the database: <b>{summary.result_count}</b>",
        "",
        f"🕐 <b>Completed at:</b> {completed.strftime('%d.%m.%Y %H:%M')}",
        "",
        "✅ All data has been saved to your database!",
    ]
    return "\n".join(lines)
