"""Hardware acceleration detection and codec resolution.

Detection asks ffmpeg which hwaccel methods it was built with
(``ffmpeg -hide_banner -hwaccels``) and normalizes the reported method
names into acceleration classes. Resolution maps a software codec to the
matching hardware encoder for the best (or requested) class and reports
the -hwaccel value that goes with it.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - only for the TimeoutExpired type
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mediaforge.core.subprocess_utils import run_command
from mediaforge.domain.enums import HardwareAcceleration, enum_value

logger = logging.getLogger(__name__)

HWACCEL_PROBE_TIMEOUT = 10

Runner = Callable[..., tuple[str, str, int]]

# Value passed to -hwaccel for each acceleration class
HWACCEL_FLAGS: dict[str, str] = {
    "nvidia": "cuda",
    "intel": "qsv",
    "amd": "amf",
    "vaapi": "vaapi",
    "videotoolbox": "videotoolbox",
    "v4l2": "v4l2m2m",
}

# Auto-selection order when no class is requested
PRIORITY: tuple[HardwareAcceleration, ...] = (
    HardwareAcceleration.NVIDIA,
    HardwareAcceleration.INTEL,
    HardwareAcceleration.AMD,
    HardwareAcceleration.VAAPI,
    HardwareAcceleration.VIDEOTOOLBOX,
)

# Encoder-name substrings identifying each GPU class
GPU_CODEC_PATTERNS: dict[str, tuple[str, ...]] = {
    "nvidia": ("_nvenc", "_cuvid"),
    "intel": ("_qsv",),
    "amd": ("_amf",),
    "vaapi": ("_vaapi",),
    "videotoolbox": ("_videotoolbox",),
    "v4l2": ("_v4l2m2m",),
}

_NVIDIA_CODECS = {
    "h264": "h264_nvenc",
    "libx264": "h264_nvenc",
    "h265": "hevc_nvenc",
    "libx265": "hevc_nvenc",
    "hevc": "hevc_nvenc",
    "av1": "av1_nvenc",
}
_INTEL_CODECS = {
    "h264": "h264_qsv",
    "libx264": "h264_qsv",
    "h265": "hevc_qsv",
    "libx265": "hevc_qsv",
    "hevc": "hevc_qsv",
    "av1": "av1_qsv",
    "vp9": "vp9_qsv",
}
_AMD_CODECS = {
    "h264": "h264_amf",
    "libx264": "h264_amf",
    "h265": "hevc_amf",
    "libx265": "hevc_amf",
    "hevc": "hevc_amf",
}

# Software codec -> hardware encoder, keyed by class and its hwaccel aliases
HARDWARE_CODEC_MAP: dict[str, dict[str, str]] = {
    "nvidia": _NVIDIA_CODECS,
    "nvenc": _NVIDIA_CODECS,
    "cuda": _NVIDIA_CODECS,
    "intel": _INTEL_CODECS,
    "qsv": _INTEL_CODECS,
    "amd": _AMD_CODECS,
    "amf": _AMD_CODECS,
    "vaapi": {
        "h264": "h264_vaapi",
        "libx264": "h264_vaapi",
        "h265": "hevc_vaapi",
        "libx265": "hevc_vaapi",
        "hevc": "hevc_vaapi",
        "vp8": "vp8_vaapi",
        "vp9": "vp9_vaapi",
        "av1": "av1_vaapi",
    },
    "videotoolbox": {
        "h264": "h264_videotoolbox",
        "libx264": "h264_videotoolbox",
        "h265": "hevc_videotoolbox",
        "libx265": "hevc_videotoolbox",
        "hevc": "hevc_videotoolbox",
    },
}

AccelerationClass = HardwareAcceleration | str


@dataclass(frozen=True)
class HardwareSelection:
    """Outcome of resolving a codec against detected hardware.

    Attributes:
        codec: Codec to emit (hardware encoder, or the original codec).
        hwaccel: -hwaccel value matching the codec, None for software.
        acceleration: Selected class, None for software.
        is_hardware: True when codec was substituted.
    """

    codec: str
    hwaccel: str | None = None
    acceleration: AccelerationClass | None = None
    is_hardware: bool = False


def hwaccel_flag(acceleration: AccelerationClass) -> str:
    """Map an acceleration class to its -hwaccel value.

    Unknown names pass through so raw hwaccel methods ("dxva2") still work.
    """
    name = enum_value(acceleration)
    return HWACCEL_FLAGS.get(name, name)


def parse_hwaccels(output: str) -> list[AccelerationClass]:
    """Parse ``ffmpeg -hwaccels`` output into acceleration classes.

    Synonyms collapse into one entry per class, in first-seen order.
    Unrecognized methods (and the header line) are ignored.
    """
    found: list[AccelerationClass] = []

    def add(item: AccelerationClass) -> None:
        if item not in found:
            found.append(item)

    for line in output.splitlines():
        method = line.strip().lower()
        if method == "cuda" or "nvenc" in method:
            add(HardwareAcceleration.NVIDIA)
        elif method == "qsv":
            add(HardwareAcceleration.INTEL)
        elif method in ("amf", "d3d11va"):
            add(HardwareAcceleration.AMD)
        elif method == "vaapi":
            add(HardwareAcceleration.VAAPI)
        elif method == "videotoolbox":
            add(HardwareAcceleration.VIDEOTOOLBOX)
        elif method == "dxva2":
            add("dxva2")
    return found


def select_best(detected: Iterable[AccelerationClass]) -> AccelerationClass | None:
    """Pick the preferred class from a detected list."""
    detected = list(detected)
    for candidate in PRIORITY:
        if candidate in detected:
            return candidate
    return detected[0] if detected else None


def normalize_codec(codec: str) -> str:
    """Lowercase and strip the first "lib" (libx264 -> x264)."""
    return codec.lower().replace("lib", "", 1)


def hardware_codec_for(codec: str, acceleration: AccelerationClass) -> str | None:
    """Look up the hardware encoder for a codec under one class.

    Returns:
        Hardware encoder name, or None if the class has no mapping.
    """
    table = HARDWARE_CODEC_MAP.get(enum_value(acceleration))
    if not table:
        return None
    return table.get(normalize_codec(codec)) or table.get(codec.lower())


def is_gpu_codec(codec: str) -> bool:
    return any(
        pattern in codec
        for patterns in GPU_CODEC_PATTERNS.values()
        for pattern in patterns
    )


def detect_hardware_type(codec: str) -> str:
    """Return the acceleration class a codec name belongs to ("cpu" if none)."""
    for name, patterns in GPU_CODEC_PATTERNS.items():
        if any(pattern in codec for pattern in patterns):
            return name
    return HardwareAcceleration.CPU.value


def filter_codecs_by_acceleration(
    codecs: list[str], acceleration: AccelerationClass
) -> list[str]:
    """Keep the codecs belonging to an acceleration class.

    "any" keeps everything, "cpu" keeps non-GPU codecs, and unknown
    classes keep nothing.
    """
    name = enum_value(acceleration)
    if name == HardwareAcceleration.ANY.value:
        return list(codecs)
    if name == HardwareAcceleration.CPU.value:
        return [c for c in codecs if not is_gpu_codec(c)]
    patterns = GPU_CODEC_PATTERNS.get(name)
    if not patterns:
        return []
    return [c for c in codecs if any(p in c for p in patterns)]


class HardwareResolver:
    """Resolves software codecs to hardware encoders for one ffmpeg binary.

    The hwaccel probe runs at most once per resolver; later calls reuse
    the result. A failed probe counts as "no hardware".
    """

    def __init__(self, ffmpeg_path: str = "ffmpeg", runner: Runner | None = None):
        self.ffmpeg_path = ffmpeg_path
        self._runner = runner or run_command
        self._detected: list[AccelerationClass] | None = None
        self._lock = threading.Lock()

    def detect(self) -> list[AccelerationClass]:
        """Return detected acceleration classes, probing on first use."""
        with self._lock:
            if self._detected is None:
                self._detected = self._probe()
            return list(self._detected)

    def _probe(self) -> list[AccelerationClass]:
        args = [self.ffmpeg_path, "-hide_banner", "-hwaccels"]
        try:
            stdout, stderr, rc = self._runner(args, timeout=HWACCEL_PROBE_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Hardware acceleration probe failed: %s", e)
            return []
        if rc != 0:
            logger.warning(
                "Hardware acceleration probe exited with %d: %s", rc, stderr.strip()
            )
            return []
        detected = parse_hwaccels(stdout)
        logger.debug(
            "Detected hardware acceleration: %s",
            [enum_value(d) for d in detected],
        )
        return detected

    def best(self) -> AccelerationClass | None:
        return select_best(self.detect())

    def is_available(self, acceleration: AccelerationClass) -> bool:
        return enum_value(acceleration) in {enum_value(d) for d in self.detect()}

    def resolve(
        self,
        codec: str,
        preference: AccelerationClass | None = None,
    ) -> HardwareSelection:
        """Map codec to a hardware encoder.

        Args:
            codec: Desired software codec.
            preference: Requested class. None and "any" auto-select, "cpu"
                never substitutes, and a specific class is used only if
                detected.

        Returns:
            HardwareSelection. Never raises for a missing mapping; the
            original codec comes back with is_hardware False.
        """
        software = HardwareSelection(codec=codec)
        name = enum_value(preference) if preference is not None else None

        if name == HardwareAcceleration.CPU.value:
            return software
        if name in (None, HardwareAcceleration.ANY.value):
            acceleration = self.best()
        elif self.is_available(name):
            acceleration = next(
                d for d in self.detect() if enum_value(d) == name
            )
        else:
            logger.debug("Requested acceleration %s not detected", name)
            return software

        if acceleration is None:
            return software

        hw_codec = hardware_codec_for(codec, acceleration)
        if not hw_codec:
            logger.debug(
                "No %s encoder for codec %s", enum_value(acceleration), codec
            )
            return software

        return HardwareSelection(
            codec=hw_codec,
            hwaccel=hwaccel_flag(acceleration),
            acceleration=acceleration,
            is_hardware=True,
        )
