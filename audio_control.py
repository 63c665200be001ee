import pyaudio
import numpy as np
import time
import threading
from collections import deque

from triggers import ClapPatternDetector, is_clap_shape


class AudioController:
    """Listens on the microphone and turns clap patterns into light intents."""

    def __init__(self, light_controller, chunk=2048, rate=44100):
        self.light_controller = light_controller
        self.chunk = chunk
        self.stream_config = {
            "format": pyaudio.paInt16,
            "channels": 1,
            "rate": rate,
            "input": True,
            "frames_per_buffer": chunk,
        }

        # Adaptive threshold over ambient noise
        self.base_threshold = 2000
        self.threshold_multiplier = 3.0
        self.dynamic_threshold = self.base_threshold
        self.ambient_samples = deque(maxlen=50)
        self.calibration_frames = 30

        self.detector = ClapPatternDetector()
        self.last_peak_time = 0

        self.audio = pyaudio.PyAudio()
        self.stream = None
        self.thread = None
        self._stop = threading.Event()

    def start(self):
        self.stream = self.audio.open(**self.stream_config)
        self._stop.clear()
        self.thread = threading.Thread(target=self.listen, name="clap-listener", daemon=True)
        self.thread.start()

    def _update_threshold(self, rms):
        calibrating = len(self.ambient_samples) < self.calibration_frames
        if calibrating or rms < self.dynamic_threshold * 0.5:
            self.ambient_samples.append(rms)
            ambient = np.mean(self.ambient_samples)
            self.dynamic_threshold = max(self.base_threshold, ambient * self.threshold_multiplier)
            if len(self.ambient_samples) == self.calibration_frames and calibrating:
                print(f"[AUDIO] Calibrated. Ambient: {int(ambient)}, Threshold: {int(self.dynamic_threshold)}")

    def _read_chunk(self):
        data = self.stream.read(self.chunk, exception_on_overflow=False)
        return np.frombuffer(data, dtype=np.int16).astype(np.float64)

    def listen(self):
        print("[AUDIO] Listening for claps... (double clap: toggle, triple clap: brighter)")

        while not self._stop.is_set():
            try:
                samples = self._read_chunk()
                peak = np.max(np.abs(samples))
                self._update_threshold(np.sqrt(np.mean(np.square(samples))))

                now = time.time()
                if peak > self.dynamic_threshold and now - self.last_peak_time > self.detector.min_interval:
                    if is_clap_shape(samples, peak):
                        self.detector.add_clap(now)
                        self.last_peak_time = now

                for intent in self.detector.poll(now):
                    print(f"[AUDIO] Clap pattern -> {intent}")
                    self.light_controller.handle_intent(intent)

            except Exception as e:
                if not self._stop.is_set():
                    print(f"[AUDIO] Error: {e}")

            self._stop.wait(0.01)

    def stop(self):
        """Stop the listener thread before releasing the stream it reads from."""
        self._stop.set()
        if self.thread is not None:
            self.thread.join(timeout=1.0)
        if self.stream is not None:
            self.stream.stop_stream()
            self.stream.close()
            self.stream = None
        self.audio.terminate()
