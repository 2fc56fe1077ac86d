import threading
import time
from typing import Optional

import schedule
from flask import Flask

from sitegate.utils.logs import logger


class MaintenanceScheduler:
    """Corre a manutenção do monitor de acessos numa thread daemon."""

    def __init__(self, app: Flask, monitor, interval_seconds: int):
        self.app = app
        self.monitor = monitor
        self.interval_seconds = max(1, int(interval_seconds))
        self.scheduler = schedule.Scheduler()
        self.scheduler_thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def _run_job(self):
        with self.app.app_context():
            try:
                self.monitor.run_maintenance()
            except Exception:
                logger.exception("Falha na manutenção do monitor de acessos")

    def start(self):
        if self.scheduler_thread is not None:
            return
        self.scheduler.every(self.interval_seconds).seconds.do(self._run_job)
        self.scheduler_thread = threading.Thread(
            target=self._run_scheduler, name="AccessMonitorMaintenance", daemon=True
        )
        self.scheduler_thread.start()
        logger.info("Manutenção do monitor agendada a cada %ss", self.interval_seconds)

    def _run_scheduler(self):
        while not self._stop.is_set():
            self.scheduler.run_pending()
            time.sleep(1)

    def stop(self):
        self._stop.set()
        self.scheduler.clear()
