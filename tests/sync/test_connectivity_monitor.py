from src.clock_terminal.clock_terminal.sync.connectivity import ConnectivityMonitor


def test_listeners_fire_only_on_transition():
    monitor = ConnectivityMonitor(online=True)
    seen = []
    monitor.subscribe(seen.append)

    assert monitor.set_online(True) is False
    assert monitor.set_online(False) is True
    assert monitor.set_online(False) is False
    assert monitor.set_online(True) is True

    assert seen == [False, True]


def test_poll_uses_probe():
    state = {"up": False}
    monitor = ConnectivityMonitor(online=True, probe=lambda: state["up"])

    assert monitor.poll() is False
    assert monitor.online is False

    state["up"] = True
    assert monitor.poll() is True
    assert monitor.online is True


def test_probe_error_counts_as_offline():
    def probe():
        raise OSError("network unreachable")

    monitor = ConnectivityMonitor(online=True, probe=probe)

    assert monitor.poll() is False
    assert monitor.online is False


def test_poll_without_probe_keeps_state():
    monitor = ConnectivityMonitor(online=False)

    assert monitor.poll() is False
