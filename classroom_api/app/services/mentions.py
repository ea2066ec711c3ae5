"""
Extraction of @‑mentioned student emails from notification text.

A mention is an ``@`` immediately followed by an email address, e.g.
``@studentagnes@gmail.com``.  This is a lexical scan only; whether the
address belongs to a student is decided by the caller.
"""

import re
from typing import List

MENTION_PATTERN = re.compile(r"@([\w.%+-]+@[\w.-]+\.[a-zA-Z]{2,})")


def extract_mentioned_emails(notification: str) -> List[str]:
    """Return mentioned emails in order of appearance, without the leading ``@``.

    Matches do not overlap, and an email mentioned twice is returned
    twice.
    """
    if not notification:
        return []
    return MENTION_PATTERN.findall(notification)
