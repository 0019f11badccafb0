"""Find conversation file blobs referenced from stored message trees.

Message parts come from several model providers and UI versions, so file
references can sit anywhere: plain text, markdown links, presigned URLs,
nested attachment objects. The walk visits every string in the tree and keeps
whatever looks like a key under the workspace's ``conversation-files/`` prefix.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

CONVERSATION_FILES_ROOT = "conversation-files"

_TRAILING_PUNCTUATION = re.compile(r"""[).,;:'"\]>}\s]+$""")


def conversation_file_prefix(workspace_id: str) -> str:
    return f"{CONVERSATION_FILES_ROOT}/{workspace_id}/"


def normalize_conversation_file_key(value: str, workspace_id: str) -> str | None:
    """Return the object key embedded in ``value``, or None when there is none.

    >>> normalize_conversation_file_key(
    ...     "https://cdn.example/conversation-files/ws1/a/b.png?sig=1", "ws1"
    ... )
    'conversation-files/ws1/a/b.png'
    """
    prefix = conversation_file_prefix(workspace_id)
    start = value.find(prefix)
    if start == -1:
        return None
    end = len(value)
    for marker in ("?", "#"):
        index = value.find(marker, start)
        if index != -1:
            end = min(end, index)
    key = _TRAILING_PUNCTUATION.sub("", value[start:end].strip())
    return key if key.startswith(prefix) else None


def extract_conversation_file_keys(messages: Any, workspace_id: str) -> set[str]:
    """Collect every file key for ``workspace_id`` found anywhere in ``messages``.

    Strings are scanned, lists/tuples and mappings are descended into, every
    other value is ignored. The walk is iterative and skips containers it has
    already seen, so deep or self-referencing trees cannot make it raise.
    """
    keys: set[str] = set()
    seen: set[int] = set()
    pending: list[Any] = [messages]
    while pending:
        value = pending.pop()
        if isinstance(value, str):
            key = normalize_conversation_file_key(value, workspace_id)
            if key:
                keys.add(key)
            continue
        if isinstance(value, Mapping):
            children: Any = value.values()
        elif isinstance(value, (list, tuple)):
            children = value
        else:
            continue
        if id(value) in seen:
            continue
        seen.add(id(value))
        pending.extend(children)
    return keys
