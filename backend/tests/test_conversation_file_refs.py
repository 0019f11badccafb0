# ruff: noqa: INP001, S101
from __future__ import annotations

from app.services.agent_cleanup.file_refs import (
    extract_conversation_file_keys,
    normalize_conversation_file_key,
)


def test_key_is_cut_at_query_string() -> None:
    messages = [{"attachments": ["see conversation-files/ws1/abc.png?x=1 here"]}]

    assert extract_conversation_file_keys(messages, "ws1") == {"conversation-files/ws1/abc.png"}


def test_keys_of_other_workspaces_are_ignored() -> None:
    messages = [{"attachments": ["see conversation-files/ws1/abc.png?x=1 here"]}]

    assert extract_conversation_file_keys(messages, "ws2") == set()


def test_trailing_markdown_punctuation_is_stripped() -> None:
    assert (
        normalize_conversation_file_key("![img](conversation-files/ws1/x/y.jpg).", "ws1")
        == "conversation-files/ws1/x/y.jpg"
    )
    assert (
        normalize_conversation_file_key('"conversation-files/ws1/q.pdf#page=2"', "ws1")
        == "conversation-files/ws1/q.pdf"
    )


def test_bare_prefix_is_still_a_key() -> None:
    # Matches nothing useful, but deleting a missing object is harmless.
    assert normalize_conversation_file_key("conversation-files/ws1/", "ws1") == (
        "conversation-files/ws1/"
    )
    assert normalize_conversation_file_key("nothing here", "ws1") is None


def test_nested_parts_and_duplicates_collapse_to_one_set() -> None:
    messages = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "look at conversation-files/ws1/a.png"},
                {"type": "image", "source": {"url": "https://cdn/conversation-files/ws1/a.png?sig=2"}},
            ],
        },
        {"role": "assistant", "content": ("conversation-files/ws1/b.csv",), "tokens": 12},
        None,
        42,
    ]

    assert extract_conversation_file_keys(messages, "ws1") == {
        "conversation-files/ws1/a.png",
        "conversation-files/ws1/b.csv",
    }


def test_non_container_input_yields_nothing() -> None:
    assert extract_conversation_file_keys(None, "ws1") == set()
    assert extract_conversation_file_keys(3.5, "ws1") == set()
    assert extract_conversation_file_keys("conversation-files/ws1/top.txt", "ws1") == {
        "conversation-files/ws1/top.txt"
    }


def test_self_referencing_tree_terminates() -> None:
    node: dict[str, object] = {"file": "conversation-files/ws1/loop.txt"}
    node["self"] = node
    items: list[object] = [node]
    items.append(items)

    assert extract_conversation_file_keys(items, "ws1") == {"conversation-files/ws1/loop.txt"}


def test_deeply_nested_tree_does_not_hit_recursion_limit() -> None:
    tree: list[object] = ["conversation-files/ws1/deep.bin"]
    for _ in range(5000):
        tree = [tree]

    assert extract_conversation_file_keys(tree, "ws1") == {"conversation-files/ws1/deep.bin"}
