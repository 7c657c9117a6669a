import asyncio

from txtai_thinking.augment import ChatMessage, GenerationType, Placement, ReferenceAugmenter
from txtai_thinking.generate import ChatGenerator, EchoDevClient

HITS = [{"text": "Watchtower pulls new images on a schedule.", "score": 0.9}]


class RecordingClient:
    """Remembers the prompt it was given and answers with a leaked reference block."""

    def __init__(self, reply="<txtai_box>leaked</txtai_box>Sure."):
        self.reply = reply
        self.messages = None

    def generate(self, messages, params):
        self.messages = messages
        return self.reply, {"engine": "recording"}


def build(model_client, augmenter=None):
    gen = ChatGenerator(model_client=model_client, system_prompt="You are helpful.")
    if augmenter is not None:
        gen.register_prompt_modifier(augmenter)
        gen.on_message_received(augmenter)
    return gen


def test_reference_block_lands_in_system_prompt(make_client, session):
    client, _ = make_client(payload=HITS)
    model = RecordingClient()
    gen = build(model, ReferenceAugmenter(client))

    out = asyncio.run(gen.chat(session, "What does Watchtower do?", []))

    system = model.messages[0]
    assert system.role == "system"
    assert system.content.startswith("You are helpful.")
    assert "Watchtower pulls new images" in system.content
    assert "<txtai_box>" in system.content
    assert model.messages[-1].role == "user"
    assert out.meta["augmented"] is True


def test_reply_is_sanitized_before_storing(make_client, session):
    client, _ = make_client(payload=HITS)
    gen = build(RecordingClient(), ReferenceAugmenter(client))

    out = asyncio.run(gen.chat(session, "hello", [ChatMessage(role="assistant", content="earlier")]))

    assert out.text == "Sure."
    assert [m.role for m in out.history] == ["assistant", "user", "assistant"]
    assert out.history[-1].content == "Sure."
    assert out.history[1].augmented is True


def test_quiet_turn_is_not_stored_or_augmented(make_client, session):
    client, fake = make_client(payload=HITS)
    model = RecordingClient(reply="summary")
    gen = build(model, ReferenceAugmenter(client))

    out = asyncio.run(gen.chat(session, "summarize", [], kind=GenerationType.QUIET))

    assert fake.calls == []
    assert out.history[-1].role == "user"
    assert model.messages[0].content == "You are helpful."


def test_in_chat_slot_inserted_at_depth(session):
    model = RecordingClient(reply="ok")
    gen = build(model)
    session.slots.set("note", "remember this", Placement.IN_CHAT, depth=1)
    history = [ChatMessage(role="user", content="a"), ChatMessage(role="assistant", content="b")]

    asyncio.run(gen.chat(session, "c", history))

    assert [m.content for m in model.messages[1:]] == ["a", "b", "remember this", "c"]


def test_echo_client_without_modifiers(session):
    gen = build(EchoDevClient())
    out = asyncio.run(gen.chat(session, "ping", []))
    assert out.text == "[ECHO RESPONSE]\nping"
    assert out.meta["engine"] == "echo"
    assert out.meta["augmented"] is False


def test_disabling_drops_previous_reference_block(make_client, session):
    client, _ = make_client(payload=[{"text": "OLD REF", "score": 0.9}])
    model = RecordingClient(reply="ok")
    gen = build(model, ReferenceAugmenter(client))

    asyncio.run(gen.chat(session, "first", []))
    assert "OLD REF" in model.messages[0].content

    session.settings = session.settings.model_copy(update={"enabled": False})
    out = asyncio.run(gen.chat(session, "second", []))

    assert model.messages[0].content == "You are helpful."
    assert out.meta["augmented"] is False


class ParamsClient:
    def __init__(self):
        self.params = None

    def generate(self, messages, params):
        self.params = params
        return "ok", {}


def test_zero_temperature_is_passed_through(session):
    model = ParamsClient()
    gen = build(model)

    asyncio.run(gen.chat(session, "hi", [], temperature=0.0, max_tokens=0))

    assert model.params.temperature == 0.0
    assert model.params.max_tokens == 0


def test_defaults_when_params_omitted(session):
    model = ParamsClient()
    asyncio.run(build(model).chat(session, "hi", []))
    assert model.params.temperature == 0.3
    assert model.params.max_tokens == 1000


def test_generator_config_file(tmp_path, session):
    path = tmp_path / "generator.yaml"
    path.write_text("system_prompt: From config.\ntemperature: 0.9\nmax_tokens: 256\n", encoding="utf-8")
    model = ParamsClient()
    gen = ChatGenerator(model_client=model, config_path=str(path))

    asyncio.run(gen.chat(session, "hi", []))

    assert gen.system_prompt == "From config."
    assert model.params.temperature == 0.9
    assert model.params.max_tokens == 256


def test_no_config_path_uses_builtin_defaults():
    gen = ChatGenerator(model_client=ParamsClient())
    assert gen.cfg == {}
    assert gen.system_prompt == ""
