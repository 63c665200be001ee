import threading

from debounce import Debouncer
from light_endpoint import LightEndpointError
from utils import (
    DEBOUNCE_DELAY, BRIGHTNESS_STEP, TEMPERATURE_STEP,
    MIN_BRIGHTNESS, MAX_BRIGHTNESS, MIN_TEMPERATURE, MAX_TEMPERATURE,
    DEFAULT_BRIGHTNESS, DEFAULT_TEMPERATURE, NotificationQueue,
)


class LightController:
    """
    Holds the desired state of one networked light and pushes it to the device.

    Power toggles are sent immediately. Brightness and temperature steps are
    debounced: a burst of steps (a held key, a held gesture) collapses into a
    single update carrying the latest state once input goes quiet.
    The device is never read back; the state kept here is authoritative.
    """
    def __init__(self, endpoint, notify=None, scheduler=None,
                 debounce_delay=DEBOUNCE_DELAY,
                 brightness_step=BRIGHTNESS_STEP, temperature_step=TEMPERATURE_STEP,
                 min_brightness=MIN_BRIGHTNESS, max_brightness=MAX_BRIGHTNESS,
                 min_temperature=MIN_TEMPERATURE, max_temperature=MAX_TEMPERATURE,
                 brightness=DEFAULT_BRIGHTNESS, temperature=DEFAULT_TEMPERATURE):
        self.endpoint = endpoint
        # Failures can happen on timer threads; by default they queue for the UI thread
        self.notify = notify if notify is not None else NotificationQueue()
        self.scheduler = scheduler if scheduler is not None else Debouncer(debounce_delay)

        self.brightness_step = brightness_step
        self.temperature_step = temperature_step
        self.min_brightness = min_brightness
        self.max_brightness = max_brightness
        self.min_temperature = min_temperature
        self.max_temperature = max_temperature

        self.is_on = False
        self.brightness = max(min_brightness, min(max_brightness, int(brightness)))
        self.temperature = max(min_temperature, min(max_temperature, int(temperature)))

        self._state_lock = threading.Lock()  # Guards state fields
        self._send_lock = threading.Lock()   # Endpoint calls never overlap

    def toggle_power(self):
        """Flip power and send it right away (not debounced)."""
        with self._state_lock:
            self.is_on = not self.is_on
            is_on = self.is_on
        print(f"[LIGHT] Power {'ON' if is_on else 'OFF'}")
        return self.synchronize_now()

    def step_brightness(self, direction):
        with self._state_lock:
            if direction == "up":
                self.brightness = min(self.brightness + self.brightness_step, self.max_brightness)
            elif direction == "down":
                self.brightness = max(self.brightness - self.brightness_step, self.min_brightness)
            else:
                return
        self.scheduler.schedule(self.synchronize_now)

    def step_temperature(self, direction):
        with self._state_lock:
            if direction == "up":
                self.temperature = min(self.temperature + self.temperature_step, self.max_temperature)
            elif direction == "down":
                self.temperature = max(self.temperature - self.temperature_step, self.min_temperature)
            else:
                return
        self.scheduler.schedule(self.synchronize_now)

    def handle_intent(self, intent):
        """Dispatch a trigger token such as 'toggle' or 'brightness:up'."""
        if intent == "toggle":
            self.toggle_power()
            return
        kind, _, direction = intent.partition(":")
        if kind == "brightness":
            self.step_brightness(direction)
        elif kind == "temperature":
            self.step_temperature(direction)

    def snapshot(self):
        with self._state_lock:
            return self.is_on, self.brightness, self.temperature

    def synchronize_now(self):
        """Send the current state. Returns False (and notifies) on failure."""
        error = None
        with self._send_lock:
            power, brightness, temperature = self.snapshot()
            try:
                self.endpoint.update(power, brightness, temperature)
            except LightEndpointError as e:
                error = e

        if error is not None:
            print(f"[LIGHT] Sync failed: {error}")
            self._report_failure(str(error))
            return False

        print(f"[LIGHT] Synced: {'ON' if power else 'OFF'} | Bri: {brightness}% | Temp: {temperature}")
        return True

    def _report_failure(self, message):
        try:
            self.notify("Light update failed", message)
        except Exception as e:
            print(f"[LIGHT] Could not show notification: {e}")

    def get_status(self):
        power, brightness, temperature = self.snapshot()
        return {
            "on": power,
            "brightness": brightness,
            "temperature": temperature,
            "pending_sync": self.scheduler.pending,
        }

    def close(self):
        """Send any pending step update, then release the endpoint."""
        self.scheduler.flush()
        # A timer may have taken the action before flush(); let its send finish
        with self._send_lock:
            self.endpoint.close()
