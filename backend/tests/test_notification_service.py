"""Transient notification tests (driven by a fake clock)."""

from devicepay.services.notification_service import LEVEL_ERROR, LEVEL_SUCCESS, Notifier


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_message_expires_after_ttl():
    clock = FakeClock()
    notifier = Notifier(ttl_seconds=3, clock=clock)

    notifier.notify("iPhone 15 added to inventory")
    clock.now += 2.9
    assert notifier.current().message == "iPhone 15 added to inventory"

    clock.now += 0.1
    assert notifier.current() is None


def test_newer_message_replaces_and_resets_timer():
    clock = FakeClock()
    notifier = Notifier(ttl_seconds=3, clock=clock)

    notifier.notify("first")
    clock.now += 2
    notifier.error("second")
    clock.now += 2

    current = notifier.current()
    assert current.message == "second"
    assert current.level == LEVEL_ERROR
    assert current.to_dict() == {"message": "second", "level": "error"}


def test_clear():
    notifier = Notifier(clock=FakeClock())
    notifier.notify("done")
    assert notifier.current().level == LEVEL_SUCCESS

    notifier.clear()
    assert notifier.current() is None
