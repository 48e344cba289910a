import io

import numpy as np
import pytest
import soundfile as sf

from sound_filters import (
    AdaptiveConfig,
    BandpassConfig,
    ComputationError,
    ConfigurationError,
    NoiseDistribution,
    NoiseInjector,
    Pipeline,
    PipelineConfig,
    SampleBuffer,
    WienerConfig,
    decode_wave,
    design_bandpass,
)


class RecordingInjector(NoiseInjector):
    def __init__(self):
        super().__init__(seed=0)
        self.calls = 0

    def inject(self, buffer, snr_db):
        self.calls += 1
        return super().inject(buffer, snr_db)


def test_silence_end_to_end():
    silence = SampleBuffer.silence(16000, 16000)
    config = PipelineConfig(
        snr_db=20.0,
        filter=BandpassConfig(filter_length=127, low_freq_hz=300.0, high_freq_hz=3400.0),
    )
    result = Pipeline().run(silence, config)

    np.testing.assert_array_equal(result.noisy.data, 0.0)
    np.testing.assert_array_equal(result.filtered.data, 0.0)
    for data in (result.noisy_wav, result.filtered_wav):
        assert len(data) == 32044
        audio, sr = sf.read(io.BytesIO(data), dtype="int16")
        assert sr == 16000
        assert audio.shape == (16000,)
        assert not audio.any()


def test_impulse_end_to_end_recovers_taps():
    impulse = np.zeros(200)
    impulse[0] = 1.0
    config = PipelineConfig.from_dict({
        "snrDb": 100,
        "filterKind": "bandpass",
        "filterLength": 5,
        "lowFreqHz": 100,
        "highFreqHz": 1000,
        "seed": 0,
    })
    result = Pipeline().run(SampleBuffer(impulse, 8000), config)

    taps = design_bandpass(5, 100.0, 1000.0, 8000)
    np.testing.assert_allclose(result.filtered.channel(0)[:5], taps, atol=1e-5)
    assert len(result.filtered_wav) == 44 + 400


def test_encoded_outputs_match_buffers(sine_buffer):
    result = Pipeline().run(sine_buffer, PipelineConfig(snr_db=10.0, filter=WienerConfig(), seed=1))
    noisy = decode_wave(result.noisy_wav)
    filtered = decode_wave(result.filtered_wav)
    np.testing.assert_allclose(noisy.channel(0), np.clip(result.noisy.channel(0), -1, 1), atol=1 / 32767)
    np.testing.assert_allclose(filtered.channel(0), np.clip(result.filtered.channel(0), -1, 1), atol=1 / 32767)


@pytest.mark.parametrize("filter_config", [BandpassConfig(), AdaptiveConfig(filter_length=32, step_size=1e-3), WienerConfig()])
def test_every_filter_kind_runs(sine_buffer, filter_config):
    result = Pipeline().run(sine_buffer, PipelineConfig(snr_db=5.0, filter=filter_config, seed=2))
    assert result.noisy.length == sine_buffer.length
    assert result.filtered.length == sine_buffer.length
    assert result.filtered.is_finite()
    assert len(result.filtered_wav) == 44 + 2 * sine_buffer.length


def test_input_buffer_is_untouched(sine_buffer):
    before = sine_buffer.data.copy()
    result = Pipeline().run(sine_buffer, PipelineConfig(seed=3))
    np.testing.assert_array_equal(sine_buffer.data, before)
    assert result.noisy is not sine_buffer
    assert result.filtered is not result.noisy


def test_seeded_runs_are_reproducible(sine_buffer):
    config = PipelineConfig(snr_db=0.0, noise=NoiseDistribution.GAUSSIAN, seed=11)
    first = Pipeline().run(sine_buffer, config)
    second = Pipeline().run(sine_buffer, config)
    assert first.noisy_wav == second.noisy_wav
    assert first.filtered_wav == second.filtered_wav


def test_default_config(sine_buffer):
    result = Pipeline(injector=NoiseInjector(seed=4)).run(sine_buffer)
    assert result.filtered.length == sine_buffer.length


def test_configuration_errors_fail_before_processing(sine_buffer):
    injector = RecordingInjector()
    config = PipelineConfig(filter=BandpassConfig(low_freq_hz=5000.0, high_freq_hz=9000.0))
    with pytest.raises(ConfigurationError) as exc:
        Pipeline(injector=injector).run(sine_buffer, config)
    assert exc.value.field == "highFreqHz"
    assert injector.calls == 0


@pytest.mark.parametrize("snr_db", [4000.0, -4000.0])
def test_snr_outside_float_range_is_a_configuration_error(sine_buffer, snr_db):
    injector = RecordingInjector()
    config = PipelineConfig(snr_db=snr_db, filter=WienerConfig(), seed=0)
    with pytest.raises(ConfigurationError) as exc:
        Pipeline(injector=injector).run(sine_buffer, config)
    assert exc.value.field == "snrDb"
    assert injector.calls == 0


def test_injected_noise_source_is_used(sine_buffer):
    injector = RecordingInjector()
    Pipeline(injector=injector).run(sine_buffer, PipelineConfig(filter=WienerConfig()))
    assert injector.calls == 1


def test_diverging_adaptive_filter_raises(make_sine):
    loud = SampleBuffer(make_sine(amplitude=0.9, duration=0.25), 16000)
    config = PipelineConfig(snr_db=10.0, filter=AdaptiveConfig(filter_length=32, step_size=10.0), seed=5)
    with np.errstate(all="ignore"):
        with pytest.raises(ComputationError) as exc:
            Pipeline().run(loud, config)
    assert exc.value.stage == "adaptive"


def test_stereo_channels_are_processed_independently(make_sine):
    left = make_sine(freq=440.0)
    right = make_sine(freq=880.0, amplitude=0.2)
    stereo = SampleBuffer.from_channels([left, right], 16000)
    result = Pipeline().run(stereo, PipelineConfig(filter=WienerConfig(), seed=6))
    assert result.filtered.channels == 2
    audio, _ = sf.read(io.BytesIO(result.filtered_wav), dtype="int16")
    assert audio.shape == (stereo.length, 2)
