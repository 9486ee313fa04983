from __future__ import annotations

import pytest

from panel_plugin.event_router import EventRouter, Notification, SubscriptionError, parse_notification


class _Target:
    def __init__(self) -> None:
        self.calls = []


def _build_router(host):
    target = _Target()
    router = EventRouter(host, target)
    return router, target


def test_parse_notification_maps_wire_names():
    assert parse_notification("ADDON_LOADED") is Notification.LOADED
    assert parse_notification("UNIT_PORTRAIT_UPDATE") is Notification.PORTRAIT_UPDATE
    assert parse_notification("PLAYER_LOGOUT") is Notification.LOGOUT
    assert parse_notification(Notification.LOGOUT) is Notification.LOGOUT
    assert parse_notification("addon_loaded") is None
    assert parse_notification(None) is None


def test_subscribe_without_handler_is_a_wiring_error(host):
    router, _ = _build_router(host)
    with pytest.raises(SubscriptionError):
        router.subscribe(Notification.LOGOUT)
    assert host.subscribe_calls == []


def test_double_subscription_is_a_wiring_error(host):
    router, _ = _build_router(host)
    router.register(Notification.LOGOUT, lambda target: None)
    router.subscribe(Notification.LOGOUT)
    with pytest.raises(SubscriptionError):
        router.subscribe(Notification.LOGOUT)
    assert host.subscribe_calls == ["PLAYER_LOGOUT"]


def test_subscribe_all_registers_each_handled_notification_once(host):
    router, _ = _build_router(host)
    for notification in Notification:
        router.register(notification, lambda target, *args: None)

    router.subscribe_all()

    assert host.subscribe_calls == ["ADDON_LOADED", "UNIT_PORTRAIT_UPDATE", "PLAYER_LOGOUT"]
    assert router.subscriptions == frozenset(Notification)


def test_dispatch_passes_target_and_arguments(host):
    router, target = _build_router(host)
    router.register(Notification.PORTRAIT_UPDATE, lambda tgt, *args: tgt.calls.append(args))
    router.subscribe(Notification.PORTRAIT_UPDATE)

    assert router.dispatch("UNIT_PORTRAIT_UPDATE", "player") is True
    assert router.dispatch("UNIT_PORTRAIT_UPDATE") is True
    assert target.calls == [("player",), ()]


@pytest.mark.parametrize("name", ["", "UNKNOWN_EVENT", "addon_loaded", None, 42])
def test_dispatch_ignores_unknown_names(host, name):
    router, target = _build_router(host)
    for notification in Notification:
        router.register(notification, lambda tgt, *args: tgt.calls.append(args))
    router.subscribe_all()

    assert router.dispatch(name, "player") is False
    assert target.calls == []


def test_dispatch_ignores_unsubscribed_notifications(host):
    router, target = _build_router(host)
    router.register(Notification.LOADED, lambda tgt, *args: tgt.calls.append(args))

    assert router.dispatch("ADDON_LOADED", "Generic") is False

    router.subscribe(Notification.LOADED)
    router.unsubscribe(Notification.LOADED)
    assert router.dispatch("ADDON_LOADED", "Generic") is False
    assert target.calls == []
    assert host.unsubscribe_calls == ["ADDON_LOADED"]


def test_unsubscribe_is_quiet_when_not_subscribed(host):
    router, _ = _build_router(host)
    router.unsubscribe(Notification.LOGOUT)
    assert host.unsubscribe_calls == []


def test_unsubscribe_all_clears_everything(host):
    router, target = _build_router(host)
    for notification in Notification:
        router.register(notification, lambda tgt, *args: tgt.calls.append(args))
    router.subscribe_all()

    router.unsubscribe_all()

    assert router.subscriptions == frozenset()
    assert host.subscribed == set()
    assert all(router.dispatch(n.value) is False for n in Notification)
    assert target.calls == []
