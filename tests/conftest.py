import pytest

from light_controller import LightController
from light_endpoint import LightEndpointError, build_payload


class RecordingEndpoint:
    """Stands in for the device: records payloads, can be told to fail."""

    def __init__(self):
        self.payloads = []
        self.fail_with = None
        self.closed = False

    def update(self, power, brightness, temperature):
        if self.fail_with is not None:
            raise LightEndpointError(self.fail_with)
        self.payloads.append(build_payload(power, brightness, temperature))

    def close(self):
        self.closed = True


class ManualScheduler:
    """Debouncer double that only fires when the test says so."""

    def __init__(self):
        self.action = None
        self.schedule_calls = 0

    @property
    def pending(self):
        return self.action is not None

    def schedule(self, action, delay=None):
        self.schedule_calls += 1
        self.action = action

    def cancel(self):
        self.action = None

    def fire(self):
        action, self.action = self.action, None
        if action is not None:
            action()
        return action is not None

    flush = fire


@pytest.fixture
def endpoint():
    return RecordingEndpoint()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(endpoint, notifications, scheduler):
    return LightController(
        endpoint,
        notify=lambda title, message: notifications.append((title, message)),
        scheduler=scheduler,
        brightness_step=5,
        temperature_step=10,
        min_brightness=3,
        max_brightness=100,
        min_temperature=143,
        max_temperature=344,
        brightness=50,
        temperature=170,
    )
