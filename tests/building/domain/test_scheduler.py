from building.session.scheduler import ManualScheduler


class TestManualScheduler:
    def test_runs_only_when_due(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(0.5, lambda: calls.append("a"))

        scheduler.advance(0.4)
        assert calls == []
        assert scheduler.pending == 1

        scheduler.advance(0.1)
        assert calls == ["a"]
        assert scheduler.pending == 0

    def test_cancelled_call_never_runs(self):
        scheduler = ManualScheduler()
        calls = []
        call = scheduler.call_later(0.1, lambda: calls.append("a"))
        call.cancel()
        scheduler.advance(1)
        assert calls == []

    def test_due_calls_run_in_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(0.3, lambda: calls.append("late"))
        scheduler.call_later(0.1, lambda: calls.append("early"))
        scheduler.advance(1)
        assert calls == ["early", "late"]
