import sys

from multicam.devices import start_pipelines, stop_pipelines
from multicam.errors import CameraError
from multicam.filters import build_aligner, build_filter_chain
from multicam.process_frames import process_frames
from multicam.window import Window

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 960
WINDOW_TITLE = "RealSense Multi-Camera Align"


def run(app, pipelines, aligner, chain):
    """Refresh and show the latest frame of every stream until the window closes."""
    # Last frame of each stream, so streams without new data keep showing
    render_frames = {}
    while app:
        process_frames(pipelines, aligner, chain, render_frames)
        app.show(render_frames)
    return render_frames


def report_error(e):
    if isinstance(e, CameraError):
        print(f"RealSense error calling {e.get_failed_function()}({e.get_failed_args()}):\n    {e}",
              file=sys.stderr)
    else:
        print(e, file=sys.stderr)


def shutdown(app, pipelines):
    """Stop every pipeline and close the window, returning any errors raised."""
    errors = stop_pipelines(pipelines)
    if app is not None:
        try:
            app.close()
        except Exception as e:
            errors.append(e)
    return errors


def main():
    app = None
    pipelines = []
    errors = []
    try:
        app = Window(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
        chain = build_filter_chain()
        aligner = build_aligner()
        start_pipelines(pipelines=pipelines)
        run(app, pipelines, aligner, chain)
    except Exception as e:
        errors.append(e)

    # The error that ended the loop is reported before any teardown failure
    errors.extend(shutdown(app, pipelines))
    for e in errors:
        report_error(e)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
