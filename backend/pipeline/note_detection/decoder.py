import base64
import binascii
import io
import re

import numpy as np
import soundfile as sf

from .errors import InputDecodeError

_DATA_URL_PREFIX = re.compile(r"^data:[\w.+-]+/[\w.+-]+(;[\w.+-]+=[\w.+-]+)*;base64,")


def strip_data_url(payload: str) -> str:
    """Remove a leading data-URL marker such as 'data:audio/ogg;base64,'."""
    match = _DATA_URL_PREFIX.match(payload)
    if match:
        return payload[match.end():]
    return payload


def decode_base64_audio(payload: str) -> tuple[np.ndarray, int]:
    """Decode a base64 audio blob to mono float32 samples.

    Only the first channel is kept. Returns (samples, sample_rate).
    """
    text = payload.strip()
    data = strip_data_url(text)
    if len(data) != len(text):
        print("[decoder] Removed data URL prefix")

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputDecodeError(f"Failed to decode base64: {e}") from e

    if not raw:
        raise InputDecodeError("Audio payload is empty")
    print(f"[decoder] Base64 decode completed, data size: {len(raw)} bytes")

    try:
        audio, sr = sf.read(io.BytesIO(raw), dtype="float32", always_2d=True)
    except RuntimeError as e:  # LibsndfileError
        raise InputDecodeError(f"Unsupported or corrupt audio stream: {e}") from e

    if audio.shape[0] == 0 or audio.shape[1] == 0:
        raise InputDecodeError("No audio frames found in stream")

    samples = np.ascontiguousarray(audio[:, 0], dtype=np.float32)
    print(f"[decoder] Decoded {len(samples)} samples @ {sr}Hz ({audio.shape[1]} channel(s))")
    return samples, int(sr)
