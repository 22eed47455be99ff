from GazeGate.control.playback import PAUSE, PLAY, PlaybackController


class FakeBackend:
    def __init__(self, playing=False):
        self.playing = playing
        self.calls = []

    def is_playing(self):
        return self.playing

    def play(self):
        self.calls.append(PLAY)
        self.playing = True

    def pause(self):
        self.calls.append(PAUSE)
        self.playing = False


class DeafBackend:
    """Accepts play() but never starts, like a player with no media loaded."""

    def __init__(self):
        self.play_calls = 0
        self.pause_calls = 0

    def is_playing(self):
        return False

    def play(self):
        self.play_calls += 1

    def pause(self):
        self.pause_calls += 1


class LoadingBackend(DeafBackend):
    def __init__(self):
        super().__init__()
        self.ready = False

    def is_ready(self):
        return self.ready

    def is_playing(self):
        return self.ready and self.play_calls > 0


def test_play_only_when_paused():
    be = FakeBackend()
    ctl = PlaybackController(be)
    assert ctl.apply(True) == PLAY
    assert ctl.apply(True) is None
    assert ctl.apply(True) is None
    assert be.calls == [PLAY]


def test_pause_only_when_playing():
    be = FakeBackend(playing=True)
    ctl = PlaybackController(be)
    assert ctl.apply(False) == PAUSE
    assert ctl.apply(False) is None
    assert be.calls == [PAUSE]


def test_follows_backend_state_changes():
    be = FakeBackend()
    ctl = PlaybackController(be)
    ctl.apply(True)
    ctl.apply(True)
    be.playing = False  # user paused the player directly
    assert ctl.apply(True) == PLAY
    assert be.calls == [PLAY, PLAY]


def test_hold_pauses():
    be = FakeBackend(playing=True)
    ctl = PlaybackController(be)
    assert ctl.hold() == PAUSE
    assert ctl.hold() is None


def test_no_backend():
    ctl = PlaybackController()
    assert ctl.apply(True) is None


def test_listener_receives_commands():
    be = FakeBackend()
    ctl = PlaybackController(be)
    seen = []
    ctl.add_listener(lambda e: seen.append(e.command))
    ctl.apply(True)
    ctl.apply(True)
    ctl.apply(False)
    assert seen == [PLAY, PAUSE]


def test_ignored_play_is_not_repeated(caplog):
    be = DeafBackend()
    ctl = PlaybackController(be)
    seen = []
    ctl.add_listener(seen.append)
    with caplog.at_level("INFO", logger="GazeGate.control.playback"):
        results = [ctl.apply(True) for _ in range(30)]
    assert be.play_calls == 1
    assert results[0] == PLAY
    assert results[1:] == [None] * 29
    assert len(seen) == 1
    assert sum("Playback play" in r.getMessage() for r in caplog.records) == 1


def test_ignored_play_retried_after_pause_decision():
    be = DeafBackend()
    ctl = PlaybackController(be)
    ctl.apply(True)
    ctl.apply(True)
    assert ctl.apply(False) is None
    assert ctl.apply(True) == PLAY
    assert be.play_calls == 2
    assert be.pause_calls == 0


def test_not_ready_backend_gets_no_play():
    be = LoadingBackend()
    ctl = PlaybackController(be)
    for _ in range(10):
        assert ctl.apply(True) is None
    assert be.play_calls == 0
    be.ready = True
    assert ctl.apply(True) == PLAY
    assert ctl.apply(True) is None
    assert be.play_calls == 1
