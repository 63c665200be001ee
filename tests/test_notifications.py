import threading
import time

from light_controller import LightController
from utils import NotificationQueue


def wait_for(predicate, timeout=1.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_show_pending_drains_in_order():
    shown = []
    notifications = NotificationQueue(show=lambda title, message: shown.append((title, message)))
    notifications("A", "first")
    notifications("B", "second")

    assert shown == []
    assert notifications.show_pending() == 2
    assert shown == [("A", "first"), ("B", "second")]
    assert notifications.show_pending() == 0


def test_timer_failure_is_shown_on_main_thread(endpoint):
    shown_on_main = []
    notifications = NotificationQueue(
        show=lambda title, message: shown_on_main.append(threading.current_thread() is threading.main_thread())
    )
    endpoint.fail_with = "connection refused"
    controller = LightController(endpoint, notify=notifications, debounce_delay=0.01)

    controller.step_brightness("up")
    assert wait_for(lambda: not controller.scheduler.pending)
    time.sleep(0.05)
    assert shown_on_main == []

    assert notifications.show_pending() == 1
    assert shown_on_main == [True]


def test_default_notify_queues_instead_of_showing(endpoint):
    controller = LightController(endpoint)
    endpoint.fail_with = "timed out"

    assert controller.synchronize_now() is False
    assert isinstance(controller.notify, NotificationQueue)
    shown = []
    controller.notify.show = lambda title, message: shown.append(message)
    assert controller.notify.show_pending() == 1
    assert "timed out" in shown[0]
