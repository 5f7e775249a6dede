import pyrealsense2 as rs

from multicam.errors import camera_call

# Distance range in meters, shared by the threshold filter and the colorizer
MIN_DISTANCE = 0.29
MAX_DISTANCE = 10.0

# Colorizer
COLOR_SCHEME = 9  # Index into the SDK's built-in color maps
HISTOGRAM_EQUALIZATION = 0  # Off, so colors follow MIN_DISTANCE..MAX_DISTANCE

# Spatial filter
SPATIAL_MAGNITUDE = 2.0
SPATIAL_SMOOTH_ALPHA = 0.5
SPATIAL_SMOOTH_DELTA = 20.0

# Temporal filter (hole filling and persistency left at SDK defaults)
TEMPORAL_SMOOTH_ALPHA = 0.4


class FilterChain:
    """Ordered post-processing blocks applied to every frame.

    The blocks are created once and shared by all pipelines. The temporal
    filter keeps per-stream history inside the SDK, so the chain must not be
    rebuilt between frames.
    """

    def __init__(self, stages):
        self.stages = tuple(stages)

    @property
    def names(self):
        return [name for name, _ in self.stages]

    def process(self, frame):
        for name, block in self.stages:
            frame = camera_call(f"{name}.process", block.process, frame)
        return frame


def set_options(name, block, options):
    for option, value in options:
        camera_call(f"{name}.set_option", block.set_option, option, value)
    return block


def build_filter_chain():
    """Threshold -> disparity -> spatial -> temporal -> colorizer."""
    threshold = set_options("threshold_filter", camera_call("threshold_filter", rs.threshold_filter), [
        (rs.option.min_distance, MIN_DISTANCE),
        (rs.option.max_distance, MAX_DISTANCE),
    ])

    to_disparity = camera_call("disparity_transform", rs.disparity_transform, True)

    spatial = set_options("spatial_filter", camera_call("spatial_filter", rs.spatial_filter), [
        (rs.option.filter_magnitude, SPATIAL_MAGNITUDE),
        (rs.option.filter_smooth_alpha, SPATIAL_SMOOTH_ALPHA),
        (rs.option.filter_smooth_delta, SPATIAL_SMOOTH_DELTA),
    ])

    temporal = set_options("temporal_filter", camera_call("temporal_filter", rs.temporal_filter), [
        (rs.option.filter_smooth_alpha, TEMPORAL_SMOOTH_ALPHA),
    ])

    colorizer = set_options("colorizer", camera_call("colorizer", rs.colorizer), [
        (rs.option.color_scheme, COLOR_SCHEME),
        (rs.option.histogram_equalization_enabled, HISTOGRAM_EQUALIZATION),
        (rs.option.min_distance, MIN_DISTANCE),
        (rs.option.max_distance, MAX_DISTANCE),
    ])

    return FilterChain([
        ("threshold_filter", threshold),
        ("disparity_transform", to_disparity),
        ("spatial_filter", spatial),
        ("temporal_filter", temporal),
        ("colorizer", colorizer),
    ])


def build_aligner():
    """Align depth frames to the color stream's viewpoint."""
    return camera_call("align", rs.align, rs.stream.color)
