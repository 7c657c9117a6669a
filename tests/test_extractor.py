from txtai_thinking.augment import ChatMessage, get_query_text, substitute_params
from txtai_thinking.augment.extractor import collapse_newlines


def test_last_two_messages_in_chronological_order(chat):
    assert get_query_text(chat, 2) == "hi\nreply"


def test_system_and_empty_messages_are_skipped():
    chat = [
        ChatMessage(role="user", content="first"),
        ChatMessage(role="system", content="note", is_system=True),
        ChatMessage(role="assistant", content=""),
        ChatMessage(role="user", content="second"),
    ]
    out = get_query_text(chat, 10)
    assert out == "first\nsecond"
    assert "note" not in out


def test_message_count_is_capped():
    chat = [ChatMessage(role="user", content=f"m{i}") for i in range(5)]
    assert get_query_text(chat, 3) == "m2\nm3\nm4"
    assert get_query_text(chat, 50).count("\n") == 4


def test_zero_query_messages_gives_empty_query(chat):
    assert get_query_text(chat, 0) == ""


def test_no_eligible_messages():
    chat = [ChatMessage(role="system", content="only system", is_system=True)]
    assert get_query_text(chat, 2) == ""
    assert get_query_text([], 2) == ""


def test_newlines_are_collapsed_and_text_trimmed():
    chat = [ChatMessage(role="user", content="  line one\n\n\nline two\n")]
    assert get_query_text(chat, 1) == "line one\nline two"
    assert collapse_newlines("a\n\n\nb\n\nc") == "a\nb\nc"


def test_macros_are_substituted():
    chat = [ChatMessage(role="user", content="Hello {{char}}, I am {{ User }}")]
    out = get_query_text(chat, 1, {"user": "Ann", "char": "Bot"})
    assert out == "Hello Bot, I am Ann"


def test_unknown_macros_are_kept():
    assert substitute_params("{{who}} is {{user}}", {"user": "Ann"}) == "{{who}} is Ann"
    assert substitute_params("{{user}}", None) == "{{user}}"


def test_message_empty_after_substitution_is_dropped():
    chat = [
        ChatMessage(role="user", content="keep"),
        ChatMessage(role="user", content="{{blank}}"),
    ]
    assert get_query_text(chat, 1, {"blank": ""}) == "keep"
