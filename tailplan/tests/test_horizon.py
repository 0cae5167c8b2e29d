from datetime import date

import pytest

from tailplan.engine.horizon import HorizonWindow, horizon_windows


def _days(windows):
    return [(w.start.day, w.end.day) for w in windows]


def test_back_to_back_windows_clip_the_tail():
    windows = list(horizon_windows(date(2024, 1, 1), date(2024, 1, 10), 4))
    assert _days(windows) == [(1, 4), (5, 8), (9, 10)]


def test_overlapping_windows():
    windows = list(horizon_windows(date(2024, 1, 1), date(2024, 1, 10), 4, overlap_days=1))
    assert _days(windows) == [(1, 4), (4, 7), (7, 10)]


def test_single_window_covers_short_range():
    windows = list(horizon_windows(date(2024, 1, 1), date(2024, 1, 2), 7))
    assert windows == [HorizonWindow(date(2024, 1, 1), date(2024, 1, 2))]
    assert windows[0].contains(date(2024, 1, 2))
    assert not windows[0].contains(date(2024, 1, 3))


@pytest.mark.parametrize("window_days, overlap_days", [(0, 0), (3, 3), (3, -1)])
def test_invalid_arguments(window_days, overlap_days):
    with pytest.raises(ValueError):
        list(horizon_windows(date(2024, 1, 1), date(2024, 1, 10), window_days, overlap_days))
