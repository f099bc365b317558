import time

from clipmaster.core.clipboard import ClipboardPoller, PollerState


def contents(store):
    return [item.content for item in store.list()]


def test_initial_state_is_idle(poller):
    assert poller.state is PollerState.IDLE
    assert poller.interval == 5000
    assert not poller.is_running


def test_start_does_not_record_existing_clipboard(poller, store, clipboard):
    poller.start()
    assert poller.last_observed == "already there"
    poller.check_now()
    assert len(store) == 0


def test_change_is_recorded(poller, store, clipboard):
    poller.start()
    clipboard.text = "fresh copy"
    poller.check_now()
    assert contents(store) == ["fresh copy"]
    assert poller.last_observed == "fresh copy"


def test_unchanged_clipboard_is_not_recorded_twice(poller, store, clipboard):
    poller.start()
    clipboard.text = "once"
    poller.check_now()
    poller.check_now()
    poller.check_now()
    assert contents(store) == ["once"]


def test_whitespace_variant_updates_observed_value_but_not_history(poller, store, clipboard):
    poller.start()
    clipboard.text = "value"
    poller.check_now()
    clipboard.text = "value  "
    poller.check_now()
    assert poller.last_observed == "value  "
    assert contents(store) == ["value"]


def test_read_failure_is_swallowed_and_retried(poller, store, clipboard):
    poller.start()
    clipboard.text = "after outage"
    clipboard.fail_reads = True
    poller.check_now()
    assert len(store) == 0

    clipboard.fail_reads = False
    poller.check_now()
    assert contents(store) == ["after outage"]


def test_start_survives_unreadable_clipboard(poller, clipboard):
    clipboard.fail_reads = True
    poller.start()
    assert poller.is_running
    assert poller.last_observed == ""


def test_mark_observed_suppresses_recapture(poller, store, clipboard):
    poller.start()
    clipboard.text = "pasted by us"
    poller.mark_observed("pasted by us")
    poller.check_now()
    assert len(store) == 0


def test_storage_failure_does_not_escape_tick(poller, store, clipboard, persistence):
    poller.start()
    persistence.fail_writes = True
    clipboard.text = "unsaved"
    poller.check_now()
    assert contents(store) == ["unsaved"]


def test_set_active_switches_interval(poller):
    poller.start()
    poller.set_active(True)
    assert poller.state is PollerState.ACTIVE
    assert poller._timer.interval() == 200
    assert poller._timer.isActive()

    poller.set_active(False)
    assert poller.state is PollerState.IDLE
    assert poller._timer.interval() == 5000


def test_set_active_before_start_only_records_state(poller):
    poller.set_active(True)
    assert poller.state is PollerState.ACTIVE
    assert not poller._timer.isActive()

    poller.start()
    assert poller._timer.interval() == 200


def test_stop_cancels_timer(poller):
    poller.start()
    poller.stop()
    assert not poller.is_running
    assert not poller._timer.isActive()


def test_timer_ticks_record_changes(qapp, pump, store, clipboard):
    poller = ClipboardPoller(clipboard, store, idle_interval=20, active_interval=10)
    poller.start()
    clipboard.text = "picked up by timer"
    try:
        assert pump(lambda: len(store) == 1, timeout=1.0)
    finally:
        poller.stop()


def test_becoming_active_ticks_within_active_interval(poller, pump, clipboard):
    poller.start()
    reads_after_start = clipboard.reads

    # Idle: nothing fires for far longer than the active interval
    pump(lambda: False, timeout=0.3)
    assert clipboard.reads == reads_after_start

    started = time.monotonic()
    poller.set_active(True)
    assert pump(lambda: clipboard.reads > reads_after_start, timeout=1.0)
    assert time.monotonic() - started < 0.45
