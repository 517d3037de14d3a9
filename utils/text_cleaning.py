from __future__ import annotations

import html
import re
from typing import Optional

from bs4 import BeautifulSoup


_whitespace_re = re.compile(r"\s+")
_tag_re = re.compile(r"<\s*/?\s*[a-zA-Z][^>]*>")
_escaped_tag_re = re.compile(r"&lt;\s*/?\s*[a-zA-Z]")
_site_separator_re = re.compile(r"\s+(?:\||::|·)\s+")
_dash_separator_re = re.compile(r"\s+(?:-|–|—)\s+")
_role_at_company_re = re.compile(r"^(?P<role>.+?)\s+at\s+(?P<company>.+)$", re.IGNORECASE)
_company_prefix_re = re.compile(r"^(?:at|by)\s+", re.IGNORECASE)
_company_suffix_re = re.compile(r"\s+logo$", re.IGNORECASE)


def normalize_whitespace(text: str) -> str:
    return _whitespace_re.sub(" ", text).strip()


def normalize_multiline(text: str) -> str:
    """Collapse whitespace inside lines and drop blank lines."""
    lines = (normalize_whitespace(line) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def strip_html(text: str) -> str:
    """
    Turn an HTML fragment (possibly entity-escaped) into plain text.

    Block boundaries become newlines; whitespace is left for the caller
    to normalize.
    """
    if _escaped_tag_re.search(text):
        text = html.unescape(text)
    if _tag_re.search(text):
        return BeautifulSoup(text, "lxml").get_text(separator="\n")
    return html.unescape(text)


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut text so the result, suffix included, is at most `limit` characters."""
    if limit <= 0 or len(text) <= limit:
        return text
    if limit <= len(suffix):
        return text[:limit]
    return text[: limit - len(suffix)].rstrip() + suffix


def primary_title_segment(title: str) -> str:
    """
    The part of a page title that names the posting.

    Anything after '|', '::' or '·' is a site suffix and dropped. Dashes only
    split when there is no site suffix or the first dash segment reads
    'role at company', so 'Senior Engineer - Backend | Acme' keeps
    'Senior Engineer - Backend' and 'Developer at Acme - Careers' keeps
    'Developer at Acme'.
    """
    site_parts = [part for part in _site_separator_re.split(normalize_whitespace(title)) if part]
    if not site_parts:
        return ""
    head = site_parts[0]
    first_dash_part = _dash_separator_re.split(head)[0]
    if len(site_parts) > 1 and not _role_at_company_re.match(first_dash_part):
        return head
    return first_dash_part


def split_role_and_company(text: str) -> tuple[str, Optional[str]]:
    """
    Split 'Backend Developer at Acme' into ('Backend Developer', 'Acme').

    Text without an ' at ' returns (text, None).
    """
    match = _role_at_company_re.match(normalize_whitespace(text))
    if not match:
        return text, None
    return match.group("role").strip(), match.group("company").strip()


def clean_company_name(name: str) -> str:
    name = _company_prefix_re.sub("", normalize_whitespace(name))
    return _company_suffix_re.sub("", name).strip()
