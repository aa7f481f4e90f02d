"""Status-conditional blocks.

A template may contain one ``{{IF_UP}}...{{END_UP}}`` block and one
``{{IF_DOWN}}...{{END_DOWN}}`` block. The block matching the heartbeat status
is unwrapped; the other one is removed along with its contents.
"""

from __future__ import annotations

import re

from uptime_notifier.templating.models import HeartbeatStatus

IF_UP_RE = re.compile(r"\{\{IF_UP\}\}(.*?)\{\{END_UP\}\}", re.DOTALL)
IF_DOWN_RE = re.compile(r"\{\{IF_DOWN\}\}(.*?)\{\{END_DOWN\}\}", re.DOTALL)


def _remove_block(pattern: re.Pattern[str], text: str) -> str:
    return pattern.sub("", text, count=1)


def _unwrap_block(pattern: re.Pattern[str], text: str) -> str:
    # Callable replacement keeps the inner text literal
    return pattern.sub(lambda match: match.group(1), text, count=1)


def resolve_conditionals(text: str, status: HeartbeatStatus) -> str:
    """Resolve the up/down blocks of a template for the given status.

    Only the first occurrence of each block is resolved. A template without a
    complete block for a status is returned unchanged for that block.

    Args:
        text: Template text.
        status: Status of the heartbeat being reported.

    Returns:
        Text with the conditional blocks resolved.
    """
    if status == HeartbeatStatus.DOWN:
        text = _remove_block(IF_UP_RE, text)
        return _unwrap_block(IF_DOWN_RE, text)

    text = _remove_block(IF_DOWN_RE, text)
    return _unwrap_block(IF_UP_RE, text)
