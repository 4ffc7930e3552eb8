"""Tests for command/filters.py."""

from mediaforge.command.filters import (
    build_audio_filters,
    build_color_filter,
    build_complex_filter,
    build_crop_filter,
    build_deinterlace_filter,
    build_downscale_filter,
    build_pitch_filter,
    build_scale_filter,
    build_text_filter,
    build_upscale_filter,
    build_video_filters,
    build_watermark_filter,
)
from mediaforge.domain.enums import ScalingAlgorithm
from mediaforge.domain.filters import (
    AudioFilters,
    ColorFilter,
    CropFilter,
    DeinterlaceFilter,
    DownscaleOptions,
    EqualizerFilter,
    FilterSpec,
    FlipFilter,
    PitchFilter,
    ScaleFilter,
    TempoFilter,
    TextFilter,
    UpscaleOptions,
    VideoDenoiseFilter,
    VideoFilters,
    VolumeFilter,
    WatermarkFilter,
)


class TestVideoFilterBuilders:
    """Tests for the individual video filter builders."""

    def test_scale_defaults_missing_dimension(self):
        assert build_scale_filter(ScaleFilter(width=1280)) == "scale=1280:-1"

    def test_scale_with_flags(self):
        scale = ScaleFilter(
            width=1920,
            height=1080,
            algorithm=ScalingAlgorithm.LANCZOS,
            force_original_aspect_ratio="decrease",
        )
        assert build_scale_filter(scale) == (
            "scale=1920:1080:flags=lanczos:force_original_aspect_ratio=decrease"
        )

    def test_crop_centers_by_default(self):
        assert build_crop_filter(CropFilter(width=640, height=480)) == (
            "crop=640:480:(iw-w)/2:(ih-h)/2"
        )

    def test_crop_explicit_offsets(self):
        assert build_crop_filter(CropFilter(width=640, height=480, x=0, y=10)) == (
            "crop=640:480:0:10"
        )

    def test_deinterlace_mode_only(self):
        assert build_deinterlace_filter(DeinterlaceFilter()) == "yadif"

    def test_deinterlace_parity_and_deint(self):
        deinterlace = DeinterlaceFilter(mode="bwdif", parity="tff", deint="interlaced")
        assert build_deinterlace_filter(deinterlace) == "bwdif=0:1"

    def test_color_only_set_fields(self):
        assert build_color_filter(ColorFilter(brightness=0.1, saturation=1.5)) == (
            "eq=brightness=0.1:saturation=1.5"
        )

    def test_text_escapes_quotes(self):
        text = TextFilter(text="it's", fontsize=24, fontcolor="white", x=10, y=10)
        assert build_text_filter(text) == (
            "drawtext=text='it\\'s':fontsize=24:fontcolor=white:x=10:y=10"
        )

    def test_watermark_opacity_form(self):
        watermark = WatermarkFilter(input="logo.png", x=10, y=10, opacity=0.5)
        assert build_watermark_filter(watermark) == (
            "overlay=x=10:y=10:format=auto:alpha=0.5"
        )

    def test_watermark_enable_expression(self):
        watermark = WatermarkFilter(input="logo.png", x=0, y=0, enable="gte(t,5)")
        assert build_watermark_filter(watermark) == (
            "overlay=x=0:y=0:enable='gte(t,5)'"
        )


class TestBuildVideoFilters:
    """Tests for the video chain order."""

    def test_empty_bag_is_empty_string(self):
        assert build_video_filters(VideoFilters()) == ""

    def test_fixed_order(self):
        filters = VideoFilters(
            flip=FlipFilter(horizontal=True),
            scale=ScaleFilter(width=1280, height=720),
            crop=CropFilter(width=1000, height=600, x=0, y=0),
            deinterlace=DeinterlaceFilter(),
            denoise=VideoDenoiseFilter(),
            custom=("format=yuv420p",),
        )
        assert build_video_filters(filters) == (
            "yadif,crop=1000:600:0:0,hqdn3d,scale=1280:720,hflip,format=yuv420p"
        )

    def test_watermark_left_out(self):
        filters = VideoFilters(watermark=WatermarkFilter(input="logo.png"))
        assert build_video_filters(filters) == ""

    def test_flip_without_direction_adds_nothing(self):
        assert build_video_filters(VideoFilters(flip=FlipFilter())) == ""


class TestBuildAudioFilters:
    """Tests for the audio chain."""

    def test_volume_last(self):
        filters = AudioFilters(
            volume=VolumeFilter(volume=1.5),
            tempo=TempoFilter(tempo=1.25),
            equalizer=(EqualizerFilter(frequency=1000, width_type="q", width=1, gain=3),),
        )
        assert build_audio_filters(filters) == (
            "equalizer=f=1000:t=q:w=1:g=3,atempo=1.25,volume=1.5"
        )

    def test_pitch_composite(self):
        assert build_pitch_filter(PitchFilter(pitch=2)) == (
            "asetrate=44100*2^(2/12),aresample=44100"
        )

    def test_empty_bag(self):
        assert build_audio_filters(AudioFilters()) == ""


class TestScaleStrategies:
    """Tests for upscale/downscale sub-chains."""

    def test_upscale_full(self):
        upscale = UpscaleOptions(
            algorithm=ScalingAlgorithm.LANCZOS,
            target_width=3840,
            target_height=2160,
            enhance_sharpness=True,
            denoise_before_scale=True,
        )
        assert build_upscale_filter(upscale) == [
            "hqdn3d=4:3:6:4.5",
            "scale=3840:2160:flags=lanczos",
            "unsharp=5:5:1:5:5:0.0",
        ]

    def test_downscale_preserve_details_forces_lanczos(self):
        downscale = DownscaleOptions(
            algorithm=ScalingAlgorithm.BICUBIC,
            target_width=1280,
            target_height=720,
            deinterlace=True,
            preserve_details=True,
        )
        assert build_downscale_filter(downscale) == [
            "yadif=0:-1:0",
            "scale=1280:720:flags=lanczos",
        ]


class TestBuildComplexFilter:
    def test_labels_and_options(self):
        specs = [
            FilterSpec(
                filter="scale",
                inputs=("0:v",),
                options={"w": 640, "h": 360},
                outputs=("small",),
            ),
            FilterSpec(
                filter="overlay", inputs=("small", "1:v"), outputs=("out",)
            ),
        ]
        assert build_complex_filter(specs) == (
            "[0:v]scale=w=640:h=360[small];[small][1:v]overlay[out]"
        )
