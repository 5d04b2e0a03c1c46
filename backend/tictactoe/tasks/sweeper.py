"""
Background sweep that removes idle game rooms on a fixed interval.
"""
import logging
import threading
from typing import Optional

from ..services.room_manager import RoomManager

logger = logging.getLogger(__name__)


class RoomSweeper:
    """
    Runs RoomManager.sweep_expired every `interval_seconds` in a daemon thread
    """

    def __init__(self, manager: RoomManager, interval_seconds: float = 300):
        self.manager = manager
        self.interval_seconds = interval_seconds
        self.sweeper_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self.sweeper_thread is not None and self.sweeper_thread.is_alive()

    def start(self):
        """Start the sweeper in a separate thread"""
        if self.is_running:
            logger.warning("Room sweeper is already running")
            return

        self._stop_event.clear()
        self.sweeper_thread = threading.Thread(target=self._run, name="room-sweeper")
        self.sweeper_thread.daemon = True
        self.sweeper_thread.start()

        logger.info(f"Room sweeper started, interval {self.interval_seconds}s")

    def stop(self):
        """Stop the sweeper and wait for the thread to finish"""
        if not self.is_running:
            logger.warning("Room sweeper is not running")
            return

        self._stop_event.set()
        self.sweeper_thread.join(timeout=5.0)
        self.sweeper_thread = None

        logger.info("Room sweeper stopped")

    def run_once(self) -> int:
        removed = self.manager.sweep_expired()
        if removed:
            logger.info(f"Room sweep removed {removed} idle rooms")
        return removed

    def _run(self):
        # wait() returns True as soon as stop() is called
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                logger.exception("Error in room sweep")
