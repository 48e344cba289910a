import numpy as np
import pytest

from sound_filters import ConfigurationError, SampleBuffer


def test_mono_input_becomes_single_channel():
    buf = SampleBuffer([0.1, 0.2, 0.3], 8000)
    assert buf.channels == 1
    assert buf.length == 3
    assert len(buf) == 3
    assert buf.data.shape == (1, 3)
    assert buf.data.dtype == np.float64
    assert buf.duration == pytest.approx(3 / 8000)


def test_constructor_copies_and_freezes():
    source = np.array([0.1, 0.2, 0.3])
    buf = SampleBuffer(source, 8000)
    source[0] = 9.0
    assert buf.channel(0)[0] == pytest.approx(0.1)
    with pytest.raises(ValueError):
        buf.data[0, 0] = 1.0


def test_samples_are_not_clamped():
    buf = SampleBuffer([2.5, -3.0], 8000)
    np.testing.assert_array_equal(buf.channel(0), [2.5, -3.0])


@pytest.mark.parametrize("rate", [0, -8000, 44100.5, True, "fast"])
def test_invalid_sample_rate(rate):
    with pytest.raises(ConfigurationError) as exc:
        SampleBuffer([0.0], rate)
    assert exc.value.field == "sample_rate"


def test_rejects_3d_data():
    with pytest.raises(ValueError):
        SampleBuffer(np.zeros((1, 2, 3)), 8000)


def test_from_channels():
    buf = SampleBuffer.from_channels([[0.1, 0.2], [0.3, 0.4]], 22050)
    assert buf.channels == 2
    assert buf.length == 2
    np.testing.assert_array_equal(buf.channel(1), [0.3, 0.4])


def test_from_channels_requires_equal_lengths():
    with pytest.raises(ValueError):
        SampleBuffer.from_channels([[0.1, 0.2], [0.3]], 22050)


def test_silence_and_equality():
    a = SampleBuffer.silence(10, 8000)
    b = SampleBuffer(np.zeros(10), 8000)
    assert a == b
    assert a != SampleBuffer(np.zeros(10), 16000)
    assert a.is_finite()


def test_with_data_keeps_rate():
    buf = SampleBuffer([0.0, 0.0], 11025)
    other = buf.with_data([1.0, np.nan])
    assert other.sample_rate == 11025
    assert not other.is_finite()
    assert buf.is_finite()
