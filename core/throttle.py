import time
from typing import Callable


class Throttle:
    """Keeps a fixed delay between successive upstream requests.

    The first call returns immediately; every later call sleeps for
    ``delay_seconds`` first. ``sleep`` is injectable so tests can count
    the delays instead of waiting on the wall clock.
    """

    def __init__(self, delay_seconds: float, sleep: Callable[[float], None] = time.sleep):
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._calls = 0

    def wait(self):
        if self._calls and self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
        self._calls += 1

    @property
    def calls(self) -> int:
        return self._calls
