import os
import queue
import cv2


def _env(name, default, cast=str):
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return cast(value)


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Device
LIGHT_HOST = _env("LIGHT_HOST", "192.168.1.50")
LIGHT_PORT = _env("LIGHT_PORT", 9123, int)
LIGHT_PATH = _env("LIGHT_PATH", "/elgato/lights")
REQUEST_TIMEOUT = _env("REQUEST_TIMEOUT", 2.0, float)

# Adjustment behaviour
DEBOUNCE_DELAY = _env("DEBOUNCE_DELAY", 0.3, float)  # Seconds of quiet before syncing
BRIGHTNESS_STEP = _env("BRIGHTNESS_STEP", 5, int)
TEMPERATURE_STEP = _env("TEMPERATURE_STEP", 10, int)

MIN_BRIGHTNESS = _env("MIN_BRIGHTNESS", 3, int)
MAX_BRIGHTNESS = _env("MAX_BRIGHTNESS", 100, int)
MIN_TEMPERATURE = _env("MIN_TEMPERATURE", 143, int)  # ~7000K
MAX_TEMPERATURE = _env("MAX_TEMPERATURE", 344, int)  # ~2900K

DEFAULT_BRIGHTNESS = _env("DEFAULT_BRIGHTNESS", 50, int)
DEFAULT_TEMPERATURE = _env("DEFAULT_TEMPERATURE", 170, int)

# Optional trigger sources
ENABLE_GESTURES = _env_flag("ENABLE_GESTURES")
ENABLE_AUDIO = _env_flag("ENABLE_AUDIO")
GESTURE_REPEAT_INTERVAL = 0.15  # Seconds between repeats of a held step gesture

# Window
WEBCAM_ID = _env("WEBCAM_ID", 0, int)
WINDOW_NAME = "Key Light Controller"
FRAME_WIDTH = 640
FRAME_HEIGHT = 480

# Keys pressed in the preview window -> intent tokens
KEY_BINDINGS = {
    ord('t'): "toggle",
    ord(' '): "toggle",
    ord('w'): "brightness:up",
    ord('s'): "brightness:down",
    ord('d'): "temperature:up",
    ord('a'): "temperature:down",
}
QUIT_KEYS = (ord('q'), 27)  # q, Esc

# Colors (BGR)
COLOR_TEXT = (255, 255, 255)
COLOR_ON = (0, 255, 0)
COLOR_OFF = (0, 0, 255)


def draw_text(image, text, position, color=COLOR_TEXT, scale=0.7):
    cv2.putText(image, text, position, cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2)


def show_error(title, message):
    """Show a blocking error dialog, falling back to the console without a display."""
    try:
        import tkinter as tk
        from tkinter import messagebox

        root = tk.Tk()
        root.withdraw()
        try:
            messagebox.showerror(title, message, parent=root)
        finally:
            root.destroy()
    except Exception as e:
        print(f"[ERROR] {title}: {message} (dialog unavailable: {e})")


class NotificationQueue:
    """
    Collects error notifications from any thread (debounce timers, the clap
    listener) so the UI thread can show them with show_pending().
    """
    def __init__(self, show=show_error):
        self.show = show
        self._queue = queue.Queue()

    def __call__(self, title, message):
        self._queue.put((title, message))

    def show_pending(self):
        """Show every queued notification on the calling thread. Returns how many."""
        shown = 0
        while True:
            try:
                title, message = self._queue.get_nowait()
            except queue.Empty:
                return shown
            self.show(title, message)
            shown += 1
