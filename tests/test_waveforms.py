"""Test waveform sampling and RMS-to-peak conversion."""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np
import pytest

from signal_processing.pq_parameters import rms, crest_factor
from signal_processing.waveform_generator import (
    Waveform,
    SignalParams,
    DEFAULT_VOLTAGE,
    rms_to_peak,
    sample,
    generate_signal_wave,
)


def _one_period(peak, freq, waveform, n=4000):
    t = np.arange(n) / (n * freq)
    return sample(t, peak, freq, 0.0, 0.0, waveform)


def test_crest_factors():
    assert abs(rms_to_peak(10.0, "sine") - 10.0 * np.sqrt(2.0)) < 1e-12
    assert rms_to_peak(10.0, "square") == 10.0
    assert abs(rms_to_peak(10.0, "triangle") - 10.0 * np.sqrt(3.0)) < 1e-12
    assert abs(rms_to_peak(10.0, Waveform.SAWTOOTH) - 10.0 * np.sqrt(3.0)) < 1e-12


@pytest.mark.parametrize("waveform", list(Waveform))
@pytest.mark.parametrize("target_rms", [0.0, 1.0, 5.0, 120.0])
def test_rms_peak_round_trip(waveform, target_rms):
    x = _one_period(rms_to_peak(target_rms, waveform), 60.0, waveform)
    measured = rms(x)
    print(f"{waveform.value} rms={target_rms}: measured {measured:.4f}")
    assert abs(measured - target_rms) <= 1e-2 * max(target_rms, 1.0)


@pytest.mark.parametrize("waveform", list(Waveform))
def test_origin_at_zero_phase(waveform):
    assert sample(0.0, 100.0, 60.0, 0.0, 0.0, waveform) == 0.0


def test_sampled_crest_factor_matches_table():
    for waveform in Waveform:
        x = _one_period(1.0, 50.0, waveform)
        cf = crest_factor(x)
        print(f"{waveform.value}: crest factor {cf:.3f}")
        assert abs(cf - rms_to_peak(1.0, waveform)) < 2e-2


def test_square_and_triangle_shape():
    f = 50.0
    quarter = 0.25 / f
    assert sample(quarter, 3.0, f, 0.0, 0.0, "square") == 3.0
    assert sample(3 * quarter, 3.0, f, 0.0, 0.0, "square") == -3.0
    assert abs(sample(quarter, 3.0, f, 0.0, 0.0, "triangle") - 3.0) < 1e-6
    # Linear ramp between the origin and the crest
    assert abs(sample(quarter / 2, 3.0, f, 0.0, 0.0, "triangle") - 1.5) < 1e-9


def test_sawtooth_ramp_and_phase_shift():
    f = 50.0
    period = 1.0 / f
    assert abs(sample(0.25 * period, 2.0, f, 0.0, 0.0, "sawtooth") - 1.0) < 1e-9
    # Wraps at half a period
    assert abs(sample(0.75 * period, 2.0, f, 0.0, 0.0, "sawtooth") - (-1.0)) < 1e-9
    # Negative times keep the same ramp (floor, not truncation)
    assert abs(sample(-0.25 * period, 2.0, f, 0.0, 0.0, "sawtooth") - (-1.0)) < 1e-9
    # 90 degrees shifts time by a quarter period
    assert abs(sample(0.0, 2.0, f, 90.0, 0.0, "sawtooth") - 1.0) < 1e-9


def test_dc_offset_added_after_ac():
    assert sample(0.0, 10.0, 60.0, 0.0, 2.5, "sine") == 2.5
    assert abs(sample(0.0, 10.0, 60.0, 90.0, 2.5, "sine") - 12.5) < 1e-9


def test_degenerate_frequency_does_not_raise():
    for waveform in Waveform:
        for f in (0.0, -5.0):
            value = sample(0.01, 10.0, f, 30.0, 1.0, waveform)
            assert np.isfinite(value)


def test_array_input_keeps_shape():
    t = np.linspace(0.0, 0.02, 11)
    x = sample(t, 1.0, 50.0, 0.0, 0.0, "sine")
    assert isinstance(x, np.ndarray)
    assert x.shape == t.shape
    assert isinstance(sample(0.001, 1.0, 50.0, 0.0), float)


def test_unknown_waveform_rejected():
    with pytest.raises(ValueError):
        rms_to_peak(1.0, "noise")
    with pytest.raises(ValueError):
        sample(0.0, 1.0, 50.0, 0.0, 0.0, "noise")
    with pytest.raises(ValueError):
        SignalParams(amplitude=1.0, frequency=50.0, phase=0.0, waveform="noise")


def test_signal_params_merge():
    p = DEFAULT_VOLTAGE.merged(phase=45.0, waveform="square")
    assert p.phase == 45.0
    assert p.waveform is Waveform.SQUARE
    assert p.amplitude == DEFAULT_VOLTAGE.amplitude
    assert DEFAULT_VOLTAGE.phase == 0.0
    assert p.peak == p.amplitude
    with pytest.raises(ValueError):
        DEFAULT_VOLTAGE.merged(volume=11)


def test_generate_signal_wave():
    t_ms, v = generate_signal_wave(DEFAULT_VOLTAGE, time_offset_s=0.0, time_window_ms=40.0, sample_count=200)
    assert len(t_ms) == 201
    assert t_ms[0] == 0.0
    assert t_ms[-1] == 40.0
    assert abs(np.max(np.abs(v)) - 120.0 * np.sqrt(2.0)) < 0.5

    _, shifted = generate_signal_wave(DEFAULT_VOLTAGE, time_offset_s=0.001, time_window_ms=40.0, sample_count=200)
    expected = sample(t_ms / 1000.0 + 0.001, DEFAULT_VOLTAGE.peak, 60.0, 0.0)
    np.testing.assert_allclose(shifted, expected)


if __name__ == "__main__":
    try:
        test_crest_factors()
        test_sampled_crest_factor_matches_table()
        test_square_and_triangle_shape()
        test_sawtooth_ramp_and_phase_shift()
        test_generate_signal_wave()
        print("ALL TESTS PASSED")
    except AssertionError as e:
        print(f"TEST FAILED: {e}")
        sys.exit(1)
