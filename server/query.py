"""FakeSO: question ordering and search.

All functions work on plain question dicts (as returned by the
repository, with ``tags`` and, for ``active``, ``answers`` populated)
and return new lists.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import List, Optional

ORDERS = ("newest", "unanswered", "active", "mostViewed")

_TAG_RE = re.compile(r"\[([^\]]+)\]")
_WORD_RE = re.compile(r"\b\w+\b")
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _as_datetime(value) -> datetime:
    """Parse a stored timestamp; anything unreadable sorts as oldest."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except (ValueError, TypeError):
            return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_tags(search: str) -> List[str]:
    """Extract ``[tag]`` tokens from a search string."""
    return _TAG_RE.findall(search or "")


def parse_keywords(search: str) -> List[str]:
    """Extract the plain words left once ``[tag]`` tokens are removed."""
    return _WORD_RE.findall(_TAG_RE.sub(" ", search or ""))


def _tag_names(question: dict) -> List[str]:
    return [
        t.get("name") if isinstance(t, dict) else t
        for t in question.get("tags") or []
    ]


def has_any_tag(question: dict, tags: List[str]) -> bool:
    names = _tag_names(question)
    return any(t in names for t in tags)


def has_any_keyword(question: dict, keywords: List[str]) -> bool:
    title = question.get("title") or ""
    text = question.get("text") or ""
    return any(w in title or w in text for w in keywords)


def filter_questions_by_search(questions: List[dict], search: str) -> List[dict]:
    """Keep questions matching any searched tag OR any searched keyword."""
    if not questions:
        return []
    tags = parse_tags(search)
    keywords = parse_keywords(search)
    if not tags and not keywords:
        return list(questions)
    return [
        q for q in questions
        if (tags and has_any_tag(q, tags))
        or (keywords and has_any_keyword(q, keywords))
    ]


def filter_questions_by_asked_by(questions: List[dict], asked_by: str) -> List[dict]:
    return [q for q in questions or [] if q.get("asked_by") == asked_by]


def latest_answer_time(question: dict) -> Optional[datetime]:
    """Most recent answer timestamp, or None for unanswered questions."""
    times = [
        _as_datetime(a.get("ans_date_time"))
        for a in question.get("answers") or []
        if isinstance(a, dict)
    ]
    return max(times) if times else None


def sort_newest(questions: List[dict]) -> List[dict]:
    return sorted(
        questions or [],
        key=lambda q: _as_datetime(q.get("ask_date_time")),
        reverse=True,
    )


def sort_unanswered(questions: List[dict]) -> List[dict]:
    return [q for q in sort_newest(questions) if not q.get("answers")]


def sort_active(questions: List[dict]) -> List[dict]:
    """Answered questions by latest answer, then unanswered by newest."""
    newest = sort_newest(questions)
    answered = [q for q in newest if latest_answer_time(q) is not None]
    unanswered = [q for q in newest if latest_answer_time(q) is None]
    answered.sort(key=latest_answer_time, reverse=True)
    return answered + unanswered


def sort_most_viewed(questions: List[dict]) -> List[dict]:
    return sorted(
        sort_newest(questions),
        key=lambda q: len(q.get("views") or []),
        reverse=True,
    )


_SORTERS = {
    "newest": sort_newest,
    "unanswered": sort_unanswered,
    "active": sort_active,
    "mostViewed": sort_most_viewed,
}


def order_questions(questions: List[dict], order: str) -> List[dict]:
    """Order questions; unknown orders fall back to newest."""
    return _SORTERS.get(order, sort_newest)(questions)


def sort_threads_by_updated(threads: List[dict]) -> List[dict]:
    """Most recently active threads first."""
    return sorted(
        threads or [],
        key=lambda t: _as_datetime(t.get("thread_updated_date_time")),
        reverse=True,
    )


def sort_messages_chronologically(messages: List[dict]) -> List[dict]:
    """Oldest first, from a thread's newest-first list.

    Messages sharing a timestamp keep the order they were posted in.
    """
    return sorted(
        reversed(messages or []),
        key=lambda m: _as_datetime(m.get("message_date_time")),
    )
