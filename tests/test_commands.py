from __future__ import annotations

import types

import pytest

from panel_plugin.commands import (
    DEFAULT_ALIASES,
    CommandInterpreter,
    TextCommandRegistry,
    Verb,
    normalise_aliases,
    parse_verb,
)


def _build_interpreter():
    calls = types.SimpleNamespace(actions=[], echoes=[])
    target = types.SimpleNamespace(
        show=lambda: calls.actions.append("show"),
        hide=lambda: calls.actions.append("hide"),
        reset=lambda: calls.actions.append("reset"),
    )
    interpreter = CommandInterpreter(target, calls.echoes.append, label="Generic")
    return interpreter, calls


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("show", Verb.SHOW),
        ("SHOW", Verb.SHOW),
        ("Hide", Verb.HIDE),
        (" reset ", Verb.RESET),
        ("res", None),
        ("show extra", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_verb_is_exact_and_case_insensitive(raw, expected):
    assert parse_verb(raw) is expected


def test_execute_dispatches_recognised_verbs():
    interpreter, calls = _build_interpreter()

    assert interpreter.execute("Show") is Verb.SHOW
    assert interpreter.execute("HIDE") is Verb.HIDE
    assert interpreter.execute("reset") is Verb.RESET

    assert calls.actions == ["show", "hide", "reset"]
    assert calls.echoes == [
        "Generic: Processed (Show) command",
        "Generic: Processed (HIDE) command",
        "Generic: Processed (reset) command",
    ]


def test_execute_echoes_unrecognised_input_without_acting():
    interpreter, calls = _build_interpreter()

    assert interpreter.execute("dance") is None
    assert interpreter.execute("") is None

    assert calls.actions == []
    assert calls.echoes == ["Generic: Processed (dance) command", "Generic: Processed () command"]


def test_normalise_aliases_drops_blanks_and_duplicates():
    assert normalise_aliases(["!GE", " !ge ", "", "!generic", "two words", 5]) == ("!ge", "!generic")
    assert normalise_aliases([]) == ()


def test_registry_handles_send_text_for_registered_alias():
    registry = TextCommandRegistry()
    received = []
    registry.register(DEFAULT_ALIASES, received.append)

    assert registry.handle_entry({"event": "SendText", "Message": "!GE Show"}) is True
    assert registry.handle_entry({"event": "SendText", "Message": "  !generic   reset  "}) is True
    assert registry.handle_entry({"event": "SendText", "Message": "!ge"}) is True

    assert received == ["Show", "reset", ""]


@pytest.mark.parametrize(
    "entry",
    [
        {"event": "ReceiveText", "Message": "!ge show"},
        {"event": "SendText", "Message": "!overlay show"},
        {"event": "SendText", "Message": "hello !ge show"},
        {"event": "SendText", "Message": "   "},
        {"event": "SendText", "Message": None},
        {"event": "SendText"},
        {},
    ],
)
def test_registry_ignores_other_entries(entry):
    registry = TextCommandRegistry()
    received = []
    registry.register(DEFAULT_ALIASES, received.append)

    assert registry.handle_entry(entry) is False
    assert received == []


def test_registry_last_registration_wins():
    registry = TextCommandRegistry()
    first, second = [], []
    registry.register(["!ge", "!GE"], first.append)
    registry.register(["!ge"], second.append)

    registry.handle_entry({"event": "SendText", "Message": "!ge hide"})

    assert first == []
    assert second == ["hide"]
    assert registry.aliases == ("!ge",)


def test_registry_unregister_and_clear():
    registry = TextCommandRegistry()
    registry.register(["!ge", "!generic"], lambda raw: None)

    registry.unregister(["!GE"])
    assert registry.aliases == ("!generic",)
    assert registry.handle_entry({"event": "SendText", "Message": "!ge show"}) is False

    registry.clear()
    assert registry.aliases == ()
