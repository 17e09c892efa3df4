import fcntl
import time


class FileLock:
    """Exclusive advisory lock held on a sidecar ``.lock`` file."""

    def __init__(self, lock_file_path: str, timeout: float = 10, delay: float = 0.05):
        self.is_locked = False
        self.lock_file_path = lock_file_path
        self._lock_file = None
        self.timeout = timeout
        self.delay = delay

    def __enter__(self):
        start_time = time.monotonic()
        self._lock_file = open(self.lock_file_path, "a")
        while True:
            try:
                fcntl.flock(self._lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
                self.is_locked = True
                return self
            except BlockingIOError:
                if time.monotonic() - start_time >= self.timeout:
                    self._lock_file.close()
                    self._lock_file = None
                    raise TimeoutError(f"Timeout occurred while waiting for lock on {self.lock_file_path}")
                time.sleep(self.delay)

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.is_locked and self._lock_file:
            fcntl.flock(self._lock_file, fcntl.LOCK_UN)
            self.is_locked = False
        if self._lock_file:
            self._lock_file.close()
            self._lock_file = None
