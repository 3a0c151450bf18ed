import numpy as np
import pytest
import soundfile as sf

from conftest import SAMPLE_RATE, tone
from matrix_decoder.config import DecoderConfig, OutputLayout, OutputMode
from matrix_decoder.decoder import DecodedChannels, decode
from matrix_decoder.dsp.utils import ChannelLengthError
from matrix_decoder.wavio import (
    WavFormatError,
    base_name,
    output_paths,
    read_stereo_wav,
    to_pcm16,
    write_decoded,
    write_wav,
)


def test_read_stereo_scales_by_32767(tmp_path):
    path = tmp_path / "in.wav"
    pcm = np.array([[32767, -32767], [0, 16384], [-32768, 1]], dtype=np.int16)
    sf.write(str(path), pcm, SAMPLE_RATE, subtype="PCM_16")

    stereo = read_stereo_wav(str(path))
    assert stereo.sample_rate == SAMPLE_RATE
    np.testing.assert_allclose(stereo.lt, pcm[:, 0] / 32767.0)
    np.testing.assert_allclose(stereo.rt, pcm[:, 1] / 32767.0)
    assert stereo.lt[0] == 1.0


def test_read_rejects_mono(tmp_path):
    path = tmp_path / "mono.wav"
    sf.write(str(path), np.zeros(100), SAMPLE_RATE, subtype="PCM_16")
    with pytest.raises(WavFormatError):
        read_stereo_wav(str(path))


def test_read_rejects_24_bit(write_stereo):
    path = write_stereo("deep.wav", np.zeros(100), np.zeros(100), subtype="PCM_24")
    with pytest.raises(WavFormatError):
        read_stereo_wav(str(path))


def test_read_missing_file(tmp_path):
    with pytest.raises((OSError, sf.LibsndfileError)):
        read_stereo_wav(str(tmp_path / "nope.wav"))


def test_to_pcm16_truncates_and_clips():
    out = to_pcm16(np.array([1.0, -1.0, 0.5, -0.5, 2.0, 0.0]))
    np.testing.assert_array_equal(out, [32767, -32767, 16383, -16383, 32767, 0])
    assert out.dtype == np.int16


def test_write_wav_header_sizes(tmp_path):
    path = tmp_path / "quad.wav"
    n = 1000
    channels = [np.full(n, 0.25 * (i + 1)) for i in range(4)]
    write_wav(str(path), channels, 48_000)

    info = sf.info(str(path))
    assert info.channels == 4
    assert info.samplerate == 48_000
    assert info.frames == n
    assert info.subtype == "PCM_16"

    raw = path.read_bytes()
    assert raw[:4] == b"RIFF" and raw[8:12] == b"WAVE"
    assert int.from_bytes(raw[4:8], "little") == len(raw) - 8
    data_at = raw.index(b"data")
    assert int.from_bytes(raw[data_at + 4:data_at + 8], "little") == n * 4 * 2


def test_write_wav_interleaves_in_order(tmp_path):
    path = tmp_path / "order.wav"
    channels = [np.full(10, v) for v in (0.1, 0.2, 0.3, 0.4, 0.5, 0.6)]
    write_wav(str(path), channels, SAMPLE_RATE)
    data, _ = sf.read(str(path), dtype="int16")
    np.testing.assert_array_equal(data[0], to_pcm16(np.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])))


def test_write_wav_length_mismatch_creates_nothing(tmp_path):
    path = tmp_path / "bad.wav"
    with pytest.raises(ChannelLengthError):
        write_wav(str(path), [np.zeros(10), np.zeros(11)], SAMPLE_RATE)
    assert not path.exists()


def test_output_paths():
    assert output_paths(OutputMode.PAIRS, "song", "out") == {
        "back": "out/output_back_song.wav",
        "front": "out/output_front_song.wav",
    }
    assert output_paths(OutputMode.QUAD, "song")["quad"].endswith("output_quad_song.wav")
    assert output_paths(OutputMode.SURROUND_51, "song")["51"].endswith("output_51_song.wav")


def test_base_name():
    assert base_name("/music/side A.wav") == "side A"


def _decoded(layout):
    n = 2048
    lt = tone(440.0, n)
    rt = tone(660.0, n)
    return decode(lt, rt, SAMPLE_RATE, DecoderConfig(layout=layout))


def test_write_pairs(tmp_path):
    decoded = _decoded(OutputLayout.QUAD)
    written = write_decoded(decoded, OutputMode.PAIRS, "rec", str(tmp_path))
    assert [p.split("/")[-1] for p in written] == ["output_back_rec.wav", "output_front_rec.wav"]

    front, sr = sf.read(str(tmp_path / "output_front_rec.wav"), dtype="int16")
    assert sr == SAMPLE_RATE
    assert front.shape == (2048, 2)
    np.testing.assert_array_equal(front[:, 0], to_pcm16(decoded.channels["FL"]))
    back, _ = sf.read(str(tmp_path / "output_back_rec.wav"), dtype="int16")
    np.testing.assert_array_equal(back[:, 1], to_pcm16(decoded.channels["BR"]))


def test_write_quad(tmp_path):
    decoded = _decoded(OutputLayout.QUAD)
    (path,) = write_decoded(decoded, OutputMode.QUAD, "rec", str(tmp_path))
    data, _ = sf.read(path, dtype="int16")
    assert data.shape == (2048, 4)
    for idx, name in enumerate(["FL", "FR", "BL", "BR"]):
        np.testing.assert_array_equal(data[:, idx], to_pcm16(decoded.channels[name]))


def test_write_51_smpte_order(tmp_path):
    decoded = _decoded(OutputLayout.SURROUND_51)
    (path,) = write_decoded(decoded, OutputMode.SURROUND_51, "rec", str(tmp_path / "sub"))
    info = sf.info(path)
    assert info.channels == 6
    data, _ = sf.read(path, dtype="int16")
    for idx, name in enumerate(["FL", "FR", "FC", "LFE", "BL", "BR"]):
        np.testing.assert_array_equal(data[:, idx], to_pcm16(decoded.channels[name]))


def test_write_51_needs_51_decode(tmp_path):
    with pytest.raises(ValueError):
        write_decoded(_decoded(OutputLayout.QUAD), OutputMode.SURROUND_51, "rec", str(tmp_path))


def test_write_decoded_length_mismatch(tmp_path):
    channels = {
        "FL": np.zeros(10), "FR": np.zeros(10),
        "BL": np.zeros(10), "BR": np.zeros(9),
    }
    decoded = DecodedChannels(channels, SAMPLE_RATE, OutputLayout.QUAD)
    with pytest.raises(ChannelLengthError):
        write_decoded(decoded, OutputMode.QUAD, "rec", str(tmp_path / "out"))
    assert not (tmp_path / "out").exists()
