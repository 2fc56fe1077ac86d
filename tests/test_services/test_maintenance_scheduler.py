from sitegate.services.security.scheduler import MaintenanceScheduler


class CountingMonitor:
    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail

    def run_maintenance(self):
        self.calls += 1
        if self.fail:
            raise RuntimeError("boom")
        return {}


def test_job_runs_maintenance(app):
    monitor = CountingMonitor()
    scheduler = MaintenanceScheduler(app, monitor, interval_seconds=300)

    scheduler._run_job()
    assert monitor.calls == 1


def test_job_errors_are_contained(app):
    monitor = CountingMonitor(fail=True)
    MaintenanceScheduler(app, monitor, interval_seconds=300)._run_job()
    assert monitor.calls == 1


def test_start_registers_single_job(app):
    scheduler = MaintenanceScheduler(app, CountingMonitor(), interval_seconds=300)
    scheduler.start()
    scheduler.start()
    try:
        assert len(scheduler.scheduler.jobs) == 1
        assert scheduler.scheduler_thread.daemon is True
    finally:
        scheduler.stop()
    assert scheduler.scheduler.jobs == []
