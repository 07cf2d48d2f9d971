"""
Tests for PhaseClock: progress, completion latch and phase lookup.
"""

import pytest

from lifestage.core.phase import PhaseClock, PhaseSpec


def birth_clock():
    return PhaseClock(7000, [
        PhaseSpec('prebirth', 0, 2000),
        PhaseSpec('birth', 2000, 5000),
        PhaseSpec('appear', 5000, 7000),
    ])


class TestProgress:

    def test_progress_is_fraction_of_duration(self):
        clock = PhaseClock(4000)
        clock.advance(1000)
        assert clock.progress == pytest.approx(0.25)

    def test_progress_clamped(self):
        clock = PhaseClock(4000)
        clock.advance(-500)
        assert clock.progress == 0.0
        clock.advance(9000)
        assert clock.progress == 1.0

    def test_progress_monotonic_for_increasing_time(self):
        clock = PhaseClock(1000)
        last = -1.0
        for t in range(0, 1500, 50):
            clock.advance(t)
            assert clock.progress >= last
            last = clock.progress

    @pytest.mark.parametrize("duration", [0, -100])
    def test_non_positive_duration_is_complete_immediately(self, duration):
        clock = PhaseClock(duration)
        clock.advance(0)
        assert clock.progress == 1.0
        assert clock.is_complete


class TestCompletion:

    def test_not_complete_before_duration(self):
        clock = PhaseClock(4000)
        clock.advance(3999)
        assert not clock.is_complete

    def test_complete_at_duration(self):
        clock = PhaseClock(4000)
        clock.advance(4000)
        assert clock.is_complete

    def test_completion_latches(self):
        clock = PhaseClock(4000)
        clock.advance(4500)
        clock.advance(100)
        assert clock.is_complete
        assert clock.progress == pytest.approx(0.025)


class TestPhases:

    def test_single_progress_phase(self):
        clock = PhaseClock(4000)
        clock.advance(2000)
        assert clock.current_phase == 'progress'
        assert clock.phase_progress == pytest.approx(0.5)

    @pytest.mark.parametrize("time, phase", [
        (0, 'prebirth'),
        (1999, 'prebirth'),
        (2000, 'birth'),
        (4999, 'birth'),
        (5000, 'appear'),
        (6000, 'appear'),
        (7000, 'appear'),
        (9000, 'appear'),
    ])
    def test_phase_lookup(self, time, phase):
        clock = birth_clock()
        clock.advance(time)
        assert clock.current_phase == phase

    def test_phase_progress_within_phase(self):
        clock = birth_clock()
        clock.advance(6000)
        assert clock.phase_progress == pytest.approx(0.5)
        assert clock.phase_elapsed == pytest.approx(1000)

    def test_negative_time_reports_first_phase(self):
        clock = birth_clock()
        clock.advance(-10)
        assert clock.current_phase == 'prebirth'
        assert clock.phase_progress == 0.0

    def test_from_lengths(self):
        clock = PhaseClock.from_lengths([('a', 100), ('b', 300)])
        assert clock.duration == 400
        assert clock.phases[1] == PhaseSpec('b', 100, 400)


class TestValidation:

    def test_gap_between_phases_rejected(self):
        with pytest.raises(ValueError):
            PhaseClock(300, [PhaseSpec('a', 0, 100), PhaseSpec('b', 150, 300)])

    def test_overlap_rejected(self):
        with pytest.raises(ValueError):
            PhaseClock(300, [PhaseSpec('a', 0, 200), PhaseSpec('b', 100, 300)])

    def test_must_start_at_zero(self):
        with pytest.raises(ValueError):
            PhaseClock(300, [PhaseSpec('a', 50, 300)])

    def test_must_end_at_duration(self):
        with pytest.raises(ValueError):
            PhaseClock(500, [PhaseSpec('a', 0, 300)])
