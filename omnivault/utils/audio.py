"""
Minimal PCM/WAV framing for synthesized speech.

Speech providers return raw little-endian 16-bit PCM; players need a RIFF
container around it.
"""

import struct

WAV_HEADER_SIZE = 44
DEFAULT_SAMPLE_RATE = 24000


def pcm_to_wav(
    pcm: bytes,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = 1,
    sample_width: int = 2,
) -> bytes:
    """
    Wrap raw PCM samples in a 44-byte RIFF/WAVE header.

    Args:
        pcm: Raw interleaved PCM frames
        sample_rate: Samples per second
        channels: Number of interleaved channels
        sample_width: Bytes per sample (2 for 16-bit)

    Returns:
        Complete WAV file bytes
    """
    byte_rate = sample_rate * channels * sample_width
    block_align = channels * sample_width
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + len(pcm),
        b"WAVE",
        b"fmt ",
        16,  # fmt chunk size
        1,  # PCM format
        channels,
        sample_rate,
        byte_rate,
        block_align,
        sample_width * 8,
        b"data",
        len(pcm),
    )
    return header + pcm
