import time
from unittest.mock import MagicMock

from authenticator_chooser.chooser import SecurityKeyChooser
from authenticator_chooser.config import ChooserSettings
from authenticator_chooser.connectors.sim import SimNode, passkey_dialog
from authenticator_chooser.errors import InteropFailure
from authenticator_chooser.keyboard import StaticKeyOracle
from authenticator_chooser.watcher import WindowWatcher


def test_dispatches_each_new_window_once(sim):
    chooser = MagicMock()
    watcher = WindowWatcher(sim, chooser)
    notepad = sim.open_window(SimNode(class_name="Notepad"))
    assert watcher.poll_once() == [notepad]
    assert watcher.poll_once() == []
    dialog = sim.open_window(passkey_dialog(["Security key"]))
    assert watcher.poll_once() == [dialog]
    assert [c.args[0] for c in chooser.on_candidate_window_opened.call_args_list] == [notepad, dialog]


def test_reopened_window_is_dispatched_again(sim):
    chooser = MagicMock()
    watcher = WindowWatcher(sim, chooser)
    dialog = sim.open_window(passkey_dialog(["Security key"]))
    watcher.poll_once()
    sim.close_window(dialog)
    assert watcher.poll_once() == []
    sim.open_window(dialog)
    assert watcher.poll_once() == [dialog]
    assert chooser.on_candidate_window_opened.call_count == 2


def test_handler_errors_do_not_escape(sim, caplog):
    chooser = MagicMock()
    chooser.on_candidate_window_opened.side_effect = [RuntimeError("boom"), None]
    watcher = WindowWatcher(sim, chooser)
    sim.open_window(SimNode(class_name="A"))
    sim.open_window(SimNode(class_name="B"))
    assert len(watcher.poll_once()) == 2
    assert chooser.on_candidate_window_opened.call_count == 2
    assert "Unexpected error" in caplog.text


def test_unidentifiable_window_is_skipped(sim):
    chooser = MagicMock()
    accessor = MagicMock(wraps=sim)
    good = sim.open_window(SimNode(class_name="A"))
    gone = sim.open_window(SimNode(class_name="B"))

    def window_key(node):
        if node is gone:
            raise InteropFailure("window closed")
        return id(node)

    accessor.window_key.side_effect = window_key
    watcher = WindowWatcher(accessor, chooser)
    assert watcher.poll_once() == [good]


def test_background_thread_runs_chooser_end_to_end(sim, make_chooser):
    watcher = WindowWatcher(sim, make_chooser(), interval=0.01, max_workers=2)
    dialog = sim.open_window(passkey_dialog(["iPhone, iPad, or Android device", "Security key"]))
    watcher.start()
    try:
        assert watcher.running
        deadline = time.monotonic() + 5
        while len(sim.actions) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        watcher.stop()
    assert not watcher.running
    assert [a["action"] for a in sim.actions] == ["select", "invoke"]
    assert dialog in sim.desktop.children


def test_start_and_stop_are_idempotent(sim):
    watcher = WindowWatcher(sim, MagicMock(), interval=0.01)
    watcher.stop()
    watcher.start()
    watcher.start()
    watcher.stop()
    watcher.stop()
    assert not watcher.running


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        time.sleep(0.01)
    return predicate()


def test_unexpected_scan_error_does_not_stop_watcher(sim, make_chooser, caplog):
    real_top_level_windows = sim.top_level_windows
    calls = []

    def flaky_top_level_windows():
        calls.append(1)
        if len(calls) == 1:
            raise ValueError("transient")
        return real_top_level_windows()

    sim.top_level_windows = flaky_top_level_windows
    sim.open_window(passkey_dialog(["iPhone, iPad, or Android device", "Security key"]))
    watcher = WindowWatcher(sim, make_chooser(), interval=0.01)
    watcher.start()
    try:
        assert _wait_until(lambda: len(sim.actions) >= 2)
        assert watcher.running
    finally:
        watcher.stop()
    assert [a["action"] for a in sim.actions] == ["select", "invoke"]
    assert "Unexpected error while scanning top-level windows" in caplog.text


def test_dialog_waiting_for_its_list_does_not_block_others(sim):
    timeout = 3.0
    chooser = SecurityKeyChooser(sim, key_oracle=StaticKeyOracle(False), settings=ChooserSettings(timeout_seconds=timeout))
    slow = sim.open_window(passkey_dialog([], with_list=False))
    watcher = WindowWatcher(sim, chooser, interval=0.01, max_workers=2)
    started = time.monotonic()
    watcher.start()
    try:
        time.sleep(0.05)
        fast = sim.open_window(passkey_dialog(["iPhone, iPad, or Android device", "Security key"]))
        assert _wait_until(lambda: len(sim.actions) >= 2, timeout=timeout)
        assert time.monotonic() - started < timeout / 2
        assert [a["action"] for a in sim.actions] == ["select", "invoke"]
    finally:
        watcher.stop()
    assert slow in sim.desktop.children and fast in sim.desktop.children


def test_no_dispatch_after_stop(sim):
    chooser = MagicMock()
    watcher = WindowWatcher(sim, chooser, interval=0.01)
    watcher.start()
    watcher.stop()
    sim.open_window(SimNode(class_name="Notepad"))
    assert watcher.dispatch(sim.desktop.children[-1]) is None
    watcher.poll_once()
    chooser.on_candidate_window_opened.assert_not_called()


def test_stop_keeps_thread_that_has_not_exited(sim):
    watcher = WindowWatcher(sim, MagicMock(), interval=0.01)
    stuck = MagicMock()
    stuck.is_alive.return_value = True
    watcher._thread = stuck
    watcher.stop()
    stuck.join.assert_called_once_with(timeout=2)
    assert watcher._thread is stuck
    assert watcher.running
