import threading


class Debouncer:
    """
    Runs an action once the caller has stopped scheduling for `delay` seconds.
    Only one action is ever pending; scheduling again cancels it and restarts the wait.
    """
    def __init__(self, delay):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer = None
        self._action = None
        self._generation = 0  # Bumped on every arm/cancel so stale timers can't fire

    @property
    def pending(self):
        with self._lock:
            return self._action is not None

    def schedule(self, action, delay=None):
        """Cancel any pending action, then arm `action` after the quiet period."""
        if delay is None:
            delay = self.delay

        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._action = action
            timer = threading.Timer(delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self):
        with self._lock:
            self._cancel_locked()

    def flush(self):
        """Run the pending action right away. Returns True if there was one."""
        with self._lock:
            action = self._action
            self._cancel_locked()
        if action is None:
            return False
        self._run(action)
        return True

    def _cancel_locked(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._action = None
        self._generation += 1

    def _fire(self, generation):
        with self._lock:
            # A newer schedule() or cancel() may have raced with this timer
            if generation != self._generation or self._action is None:
                return
            action = self._action
            self._action = None
            self._timer = None
        self._run(action)

    def _run(self, action):
        try:
            action()
        except Exception as e:
            print(f"[DEBOUNCE] Error in scheduled action: {e}")
