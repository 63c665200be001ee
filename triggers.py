import numpy as np

from utils import GESTURE_REPEAT_INTERVAL

# Finger state tuple: (thumb, index, middle, ring, pinky) -> intent
GESTURE_INTENTS = {
    (False, False, False, False, False): "toggle",           # Closed fist
    (False, True, False, False, False): "brightness:up",     # Index up
    (False, True, True, False, False): "brightness:down",    # Peace sign
    (False, False, False, False, True): "temperature:up",    # Pinky up
    (True, False, False, False, True): "temperature:down",   # Shaka
}

# (tip, middle joint) landmark indices for index, middle, ring and pinky
FINGER_JOINTS = ((8, 6), (12, 10), (16, 14), (20, 18))


def thumb_extended(points):
    """Thumb tip sits past its IP joint on the side away from the wrist."""
    wrist_x, ip_x, tip_x = points[0][0], points[3][0], points[4][0]
    return (tip_x - ip_x) * (ip_x - wrist_x) > 0


def fingers_open(points):
    """Open/closed per finger from 21 (x, y) pixel landmarks; y grows downwards."""
    return (thumb_extended(points),) + tuple(
        points[tip][1] < points[joint][1] for tip, joint in FINGER_JOINTS
    )


def classify_gesture(fingers):
    return GESTURE_INTENTS.get(tuple(bool(f) for f in fingers))


class GestureIntentTracker:
    """
    Turns a stream of per-frame gestures into intents.

    A gesture must be held for `hold_time` before it counts. Step gestures then
    repeat every `repeat_interval` while held, like a held key; toggle fires once
    per hold and respects `toggle_cooldown`.
    """
    def __init__(self, hold_time=0.4, repeat_interval=GESTURE_REPEAT_INTERVAL, toggle_cooldown=1.0):
        self.hold_time = hold_time
        self.repeat_interval = repeat_interval
        self.toggle_cooldown = toggle_cooldown
        self.current_gesture = None
        self.gesture_start_time = 0
        self.last_fire_time = None
        self.last_toggle_time = None

    def progress(self, now):
        if self.current_gesture is None:
            return 0.0
        return min(1.0, (now - self.gesture_start_time) / self.hold_time)

    def update(self, gesture, now):
        """Feed the gesture seen in this frame (or None). Returns an intent or None."""
        if gesture != self.current_gesture:
            self.current_gesture = gesture
            self.gesture_start_time = now
            self.last_fire_time = None
            return None
        if gesture is None or now - self.gesture_start_time < self.hold_time:
            return None

        if gesture == "toggle":
            if self.last_fire_time is not None:
                return None  # Once per hold
            if self.last_toggle_time is not None and now - self.last_toggle_time < self.toggle_cooldown:
                return None
            self.last_fire_time = now
            self.last_toggle_time = now
            return gesture

        if self.last_fire_time is None or now - self.last_fire_time >= self.repeat_interval:
            self.last_fire_time = now
            return gesture
        return None


class ClapPatternDetector:
    """
    Groups clap timestamps into patterns and maps them to light intents.
    Driven with plain timestamps; the microphone side lives in audio_control.
    """
    PATTERN_INTENTS = {
        2: ["toggle"],
        3: ["brightness:up"] * 3,
    }

    def __init__(self, min_interval=0.12, max_interval=0.6, pattern_timeout=0.8, cooldown=1.5):
        self.min_interval = min_interval        # Closer peaks are one clap
        self.max_interval = max_interval        # Wider gaps break a pattern
        self.pattern_timeout = pattern_timeout  # Silence that ends a pattern
        self.cooldown = cooldown                # Quiet time after a confirmed pattern
        self.claps = []
        self.last_pattern_time = -cooldown

    def add_clap(self, now):
        self.claps.append(now)

    def poll(self, now):
        """Return the intents of a finished pattern, or an empty list."""
        self.claps = [t for t in self.claps if now - t < 2.0]
        if not self.claps:
            return []
        if now - self.last_pattern_time < self.cooldown:
            return []
        if now - self.claps[-1] < self.pattern_timeout:
            return []  # Still waiting for more claps

        claps, self.claps = self.claps, []
        for earlier, later in zip(claps, claps[1:]):
            interval = later - earlier
            if interval < self.min_interval or interval > self.max_interval:
                return []

        intents = self.PATTERN_INTENTS.get(min(len(claps), 3), [])
        if intents:
            self.last_pattern_time = now
        return list(intents)


def is_clap_shape(samples, peak, attack_window=0.7, decay_span=100, max_decay_ratio=0.5):
    """Sharp attack early in the chunk, then a fast fall-off."""
    magnitude = np.abs(samples)
    peak_idx = int(np.argmax(magnitude))
    if peak_idx > len(samples) * attack_window:
        return False

    tail = magnitude[peak_idx + decay_span // 2:peak_idx + decay_span]
    if len(tail) < decay_span // 2:
        return True  # Too close to the chunk end to judge the decay
    return np.mean(tail) / (peak + 1) <= max_decay_ratio
