import threading
from ..config import settings

class LoadingDots:
    """Cycles ".", "..", "..." on a background tick while a quiz is loading.

    Purely cosmetic: it knows nothing about the fetch it decorates, the driver
    starts it when a session enters fetching and stops it when the fetch resolves.
    """

    max_dots = 3

    def __init__(self, interval: float | None = None) -> None:
        self.interval = interval if interval is not None else settings.loading_tick_seconds
        self.text = "."
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> str:
        with self._lock:
            self.text = "." if len(self.text) >= self.max_dots else self.text + "."
            return self.text

    def start(self) -> None:
        if self.running:
            return
        self._stop = threading.Event()
        with self._lock:
            self.text = "."
        self._thread = threading.Thread(target=self._run, args=(self._stop,), name="loading-dots", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval * 2)

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.tick()
