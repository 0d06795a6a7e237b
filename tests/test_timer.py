import time

from iiptiles.timer import Timer


def test_elapsed_is_not_negative():
    timer = Timer()
    timer.start()
    assert timer.elapsed() >= 0


def test_elapsed_grows_with_sleep():
    timer = Timer()
    timer.start()
    time.sleep(0.01)
    assert timer.elapsed() >= 10000


def test_start_resets():
    timer = Timer()
    timer.start()
    time.sleep(0.02)
    before = timer.elapsed()
    timer.start()
    assert timer.elapsed() < before