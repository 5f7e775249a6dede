class CameraError(RuntimeError):
    """RealSense call that failed, with the function name and arguments it was called with."""

    def __init__(self, function, args, message):
        super().__init__(message)
        self.function = function
        self.failed_args = args

    def get_failed_function(self):
        return self.function

    def get_failed_args(self):
        return self.failed_args


def camera_call(function, call, *args):
    """Run a pyrealsense2 call, re-raising SDK failures as CameraError."""
    try:
        return call(*args)
    except CameraError:
        raise
    except RuntimeError as e:
        raise CameraError(function, ", ".join(repr(arg) for arg in args), str(e)) from e
