import base64

import numpy as np
import pytest

from lyricsmith.services.media_codec import (
    decode_base64,
    decode_pcm16,
    encode_base64,
    encode_pcm16,
    split_data_url,
    strip_data_url_prefix,
    to_data_uri,
)


class TestDecodePcm16:
    def test_two_channel_values_and_frame_count(self):
        raw_ints = [1000, -1000, 32767, -32768, 0, 1]
        raw = np.array(raw_ints, dtype="<i2").tobytes()

        frames = decode_pcm16(raw, num_channels=2)

        assert frames.shape == (len(raw) // 2 // 2, 2)
        np.testing.assert_array_equal(
            frames, (np.array(raw_ints) / 32768.0).reshape(3, 2)
        )
        assert frames[1, 0] == 32767 / 32768.0
        assert frames[1, 1] == -1.0

    def test_little_endian_byte_order(self):
        # 0x0100 little-endian is 1, 0x00 0x80 is -32768
        frames = decode_pcm16(b"\x01\x00\x00\x80", num_channels=1)
        np.testing.assert_array_equal(frames[:, 0], [1 / 32768.0, -1.0])

    def test_partial_frame_is_dropped(self):
        raw = np.array([1, 2, 3], dtype="<i2").tobytes() + b"\x07"
        frames = decode_pcm16(raw, num_channels=2)
        assert frames.shape == (1, 2)

    def test_empty_input(self):
        assert decode_pcm16(b"").shape == (0, 1)

    def test_rejects_zero_channels(self):
        with pytest.raises(ValueError):
            decode_pcm16(b"\x00\x00", num_channels=0)

    def test_encode_inverts_decode(self):
        raw = np.array([0, 12345, -32768, 32767, -1], dtype="<i2").tobytes()
        assert encode_pcm16(decode_pcm16(raw)[:, 0]) == raw


class TestDataUrls:
    def test_strip_prefix(self):
        assert strip_data_url_prefix("data:audio/webm;base64,QUJD") == "QUJD"
        assert strip_data_url_prefix("data:audio/webm;codecs=opus;base64,QUJD") == "QUJD"

    def test_bare_base64_is_unchanged(self):
        assert strip_data_url_prefix("QUJD") == "QUJD"

    def test_split(self):
        assert split_data_url("data:image/png;base64,iVBOR") == ("image/png", "iVBOR")
        assert split_data_url("https://example.com/a.png") is None

    def test_to_data_uri(self):
        assert to_data_uri("image/jpeg", "AAAA") == "data:image/jpeg;base64,AAAA"

    def test_base64_helpers(self):
        assert encode_base64(b"ABC") == "QUJD"
        assert decode_base64("data:audio/wav;base64,QUJD") == b"ABC"
        assert decode_base64(base64.b64encode(b"\x00\xff").decode()) == b"\x00\xff"
