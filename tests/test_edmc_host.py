from __future__ import annotations

from panel_plugin.commands import TextCommandRegistry
from panel_plugin.edmc_host import EDMCHost
from panel_plugin.host import PanelCallbacks

from conftest import FakePanel


def _build_host(commander: str = "", **kwargs):
    created = []

    def factory(owner, **options):
        panel = FakePanel(options["callbacks"], options["portrait_fn"])
        created.append((owner, options, panel))
        return panel

    host = EDMCHost(title="Generic", commander_fn=lambda: commander, panel_factory=factory, **kwargs)
    return host, created


def _callbacks():
    return PanelCallbacks(pointer_down=lambda: None, pointer_up=lambda: None, close=lambda: None)


def test_create_panel_passes_presentation_options():
    host, created = _build_host(tooltip_text="Hello")
    callbacks = _callbacks()

    panel = host.create_panel("Frame", "parent", "PortraitFrame", callbacks)

    owner, options, built = created[0]
    assert panel is built
    assert owner == "parent"
    assert options["title"] == "Generic"
    assert options["tooltip_text"] == "Hello"
    assert options["callbacks"] is callbacks


def test_portrait_text_resolves_local_player():
    host, _ = _build_host(commander="Jameson")
    assert host.portrait_text("player") == "Jameson"
    assert host.portrait_text("npc-42") == "npc-42"

    anonymous, _ = _build_host()
    assert anonymous.portrait_text("player") == "Commander"


def test_subscription_book():
    host, _ = _build_host()
    host.subscribe("ADDON_LOADED")
    host.subscribe("PLAYER_LOGOUT")
    host.unsubscribe("ADDON_LOADED")
    host.unsubscribe("ADDON_LOADED")

    assert host.subscriptions == frozenset({"PLAYER_LOGOUT"})
    assert host.is_subscribed("PLAYER_LOGOUT")

    host.unsubscribe_all()
    assert host.subscriptions == frozenset()


def test_text_commands_go_through_registry():
    registry = TextCommandRegistry()
    host, _ = _build_host(text_commands=registry)
    received = []

    host.register_text_command(["!GE"], received.append)
    assert registry.handle_entry({"event": "SendText", "Message": "!ge show"}) is True

    host.unregister_text_command(["!ge"])
    assert registry.handle_entry({"event": "SendText", "Message": "!ge show"}) is False
    assert received == ["show"]


def test_message_updates_status_label():
    host, _ = _build_host()
    host.message("before label")

    label = {}
    host.attach_status_label(label)
    host.message("Generic: Processed (show) command")

    assert label["text"] == "Generic: Processed (show) command"


def test_set_tooltip_forwards_to_panel():
    host, _ = _build_host()
    seen = []
    panel = host.create_panel("Frame", None, "PortraitFrame", _callbacks())
    panel.set_tooltip = seen.append

    host.set_tooltip("Updated")

    assert seen == ["Updated"]
