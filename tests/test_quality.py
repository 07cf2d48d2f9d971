"""
Tests for quality levels, caps and the lossy one-way truncation.
"""

import logging
import tracemalloc

import pytest

from lifestage.core.particles import Particle, ParticleField
from lifestage.core.performance import PerformanceMonitor
from lifestage.core.quality import QualityCaps, QualityController, QualityLevel


def field_of(name, count):
    f = ParticleField(name)
    f.spawn(count, lambda rng, i: Particle(x=0, y=0))
    return f


class TestQualityLevel:

    @pytest.mark.parametrize("value, level", [
        ('low', QualityLevel.LOW),
        ('Medium', QualityLevel.MEDIUM),
        (' HIGH ', QualityLevel.HIGH),
        (QualityLevel.LOW, QualityLevel.LOW),
    ])
    def test_parse(self, value, level):
        assert QualityLevel.parse(value) is level

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="ultra"):
            QualityLevel.parse('ultra')


class TestQualityCaps:

    def test_cap_for_levels(self):
        caps = QualityCaps(low=10, medium=15)
        assert caps.cap_for(QualityLevel.LOW) == 10
        assert caps.cap_for(QualityLevel.MEDIUM) == 15
        assert caps.cap_for(QualityLevel.HIGH) is None

    def test_from_dict(self):
        caps = QualityCaps.from_dict({'low': '3', 'medium': 6, 'high': 9})
        assert caps == QualityCaps(3, 6, 9)


class TestQualityController:

    def test_low_truncates_capped_fields_only(self):
        fields = {'hearts': field_of('hearts', 20), 'sparkles': field_of('sparkles', 30)}
        controller = QualityController({'hearts': QualityCaps(10, 15)})
        counts = controller.apply('low', fields)
        assert counts == {'hearts': 10, 'sparkles': 30}

    def test_medium_cap(self):
        fields = {'hearts': field_of('hearts', 20)}
        QualityController({'hearts': QualityCaps(10, 15)}).apply('medium', fields)
        assert len(fields['hearts']) == 15

    def test_high_keeps_everything(self):
        fields = {'hearts': field_of('hearts', 20)}
        QualityController({'hearts': QualityCaps(10, 15)}).apply('high', fields)
        assert len(fields['hearts']) == 20

    def test_truncation_is_lossy(self):
        fields = {'hearts': field_of('hearts', 20)}
        controller = QualityController({'hearts': QualityCaps(10, 15)})
        controller.apply('low', fields)
        controller.apply('high', fields)
        assert len(fields['hearts']) == 10
        assert controller.level is QualityLevel.HIGH

    def test_apply_twice_is_noop(self):
        fields = {'hearts': field_of('hearts', 20)}
        controller = QualityController({'hearts': QualityCaps(10, 15)})
        first = controller.apply('medium', fields)
        second = controller.apply('medium', fields)
        assert first == second

    def test_override_replaces_caps(self):
        fields = {'hearts': field_of('hearts', 20)}
        controller = QualityController({'hearts': QualityCaps(10, 15)})
        controller.override({'hearts': {'low': 2, 'medium': 4}})
        controller.apply('low', fields)
        assert len(fields['hearts']) == 2


class TestPerformanceMonitor:

    def test_no_samples_recommends_high(self):
        assert PerformanceMonitor().recommended_quality() is QualityLevel.HIGH

    def test_low_fps(self):
        monitor = PerformanceMonitor()
        for _ in range(5):
            monitor.record_fps(20)
        assert monitor.recommended_quality() is QualityLevel.LOW
        assert monitor.frame_drops == 5

    def test_medium_fps(self):
        monitor = PerformanceMonitor()
        monitor.record_fps(40)
        assert monitor.recommended_quality() is QualityLevel.MEDIUM

    def test_hysteresis_band_keeps_previous(self):
        monitor = PerformanceMonitor(history=1)
        monitor.record_fps(30)
        assert monitor.recommended_quality() is QualityLevel.MEDIUM
        monitor.record_fps(50)
        assert monitor.recommended_quality() is QualityLevel.MEDIUM
        monitor.record_fps(60)
        assert monitor.recommended_quality() is QualityLevel.HIGH

    def test_record_frame_converts_to_fps(self):
        monitor = PerformanceMonitor()
        monitor.record_frame(20)
        assert monitor.average_fps == pytest.approx(50)

    def test_rolling_history(self):
        monitor = PerformanceMonitor(history=2)
        for fps in (10, 60, 60):
            monitor.record_fps(fps)
        assert monitor.sample_count == 2
        assert monitor.average_fps == pytest.approx(60)

    def test_reset(self):
        monitor = PerformanceMonitor()
        monitor.record_fps(10)
        monitor.recommended_quality()
        monitor.reset()
        assert monitor.average_fps is None
        assert monitor.recommended_quality() is QualityLevel.HIGH

    def test_history_must_be_positive(self):
        with pytest.raises(ValueError):
            PerformanceMonitor(history=0)

    def test_memory_pressure_lowers_one_tier(self, caplog):
        monitor = PerformanceMonitor(memory_threshold_mb=100)
        monitor.record_fps(60)
        with caplog.at_level(logging.WARNING):
            monitor.record_memory(150)
        assert monitor.recommended_quality() is QualityLevel.MEDIUM
        assert 'High memory usage' in caplog.text

        monitor.record_fps(20)
        monitor.record_fps(20)
        assert monitor.recommended_quality() is QualityLevel.LOW

    def test_memory_below_threshold_ignored(self):
        monitor = PerformanceMonitor(memory_threshold_mb=100)
        monitor.record_memory(80)
        assert not monitor.memory_pressure
        assert monitor.recommended_quality() is QualityLevel.HIGH

    def test_memory_pressure_clears(self):
        monitor = PerformanceMonitor(memory_threshold_mb=100)
        monitor.record_memory(150)
        assert monitor.recommended_quality() is QualityLevel.MEDIUM
        monitor.record_memory(50)
        assert monitor.recommended_quality() is QualityLevel.HIGH

    def test_sample_memory_uses_tracemalloc(self):
        monitor = PerformanceMonitor()
        if tracemalloc.is_tracing():
            tracemalloc.stop()
        assert monitor.sample_memory() is None
        assert monitor.memory_mb is None

        tracemalloc.start()
        try:
            used = monitor.sample_memory()
        finally:
            tracemalloc.stop()
        assert used is not None and used >= 0
        assert monitor.memory_mb == used
