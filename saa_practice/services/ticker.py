"""
services/ticker.py

일정 주기로 콜백을 호출하는 백그라운드 타이머 (시험 세션의 tick 구동용).
"""

import logging
import threading
from typing import Callable, Optional

from config import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class SessionTicker:
    """
    daemon 스레드에서 interval초마다 callback()을 호출한다.

    stop()은 여러 번 불러도 되고, 콜백 안에서 불러도 된다 (자기 자신은 join하지 않음).
    다른 스레드에서 stop()이 반환된 뒤에는 콜백이 새로 시작되지 않는다.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval: float = TICK_INTERVAL_SECONDS,
        name: str = "exam-ticker",
    ):
        self._callback = callback
        self._interval = interval
        self._name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name=self._name, daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("tick 콜백 오류")
