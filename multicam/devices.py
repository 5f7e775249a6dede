import pyrealsense2 as rs

from multicam.errors import CameraError, camera_call

# Stream settings shared by every device
WIDTH = 848
HEIGHT = 480
FPS = 30


def list_devices(ctx):
    """Return (serial, name) for every connected RealSense device."""
    devices = camera_call("context.query_devices", ctx.query_devices)
    found = []
    for dev in devices:
        serial = camera_call("device.get_info", dev.get_info, rs.camera_info.serial_number)
        name = camera_call("device.get_info", dev.get_info, rs.camera_info.name)
        found.append((serial, name))
    return found


def start_pipeline(ctx, serial):
    """Start a color + depth pipeline pinned to one device."""
    pipe = camera_call("pipeline", rs.pipeline, ctx)
    cfg = camera_call("config", rs.config)
    camera_call("config.enable_device", cfg.enable_device, serial)
    camera_call("config.enable_stream", cfg.enable_stream, rs.stream.color, WIDTH, HEIGHT, rs.format.rgb8, FPS)
    camera_call("config.enable_stream", cfg.enable_stream, rs.stream.depth, WIDTH, HEIGHT, rs.format.z16, FPS)
    camera_call("pipeline.start", pipe.start, cfg)
    return pipe


def start_pipelines(ctx=None, pipelines=None):
    """Start one pipeline per connected device, in enumeration order.

    Started pipelines are appended to ``pipelines`` as they come up, so the
    caller can still stop them if a later device fails to start.
    """
    if pipelines is None:
        pipelines = []
    if ctx is None:
        ctx = camera_call("context", rs.context)

    for serial, name in list_devices(ctx):
        pipelines.append(start_pipeline(ctx, serial))
        print(f"Started {name} (serial {serial}) at {WIDTH}x{HEIGHT}@{FPS}fps")

    if not pipelines:
        print("No RealSense devices detected. Waiting with an empty window.")
    return pipelines


def stop_pipelines(pipelines):
    """Stop every pipeline and return the errors raised along the way."""
    errors = []
    for pipe in pipelines:
        try:
            camera_call("pipeline.stop", pipe.stop)
        except CameraError as e:
            errors.append(e)
    return errors
