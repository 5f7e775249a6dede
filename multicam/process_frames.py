from multicam.errors import camera_call


def poll_new_frames(pipelines, aligner):
    """Collect the newly-arrived frames from every pipeline, aligned to color."""
    new_frames = []
    for pipe in pipelines:
        frameset = camera_call("pipeline.poll_for_frames", pipe.poll_for_frames)
        if not frameset:
            continue  # Nothing new on this device, try again next iteration
        frameset = camera_call("align.process", aligner.process, frameset)
        for frame in frameset:
            new_frames.append(frame)
    return new_frames


def stream_id(frame):
    """Unique id of the stream a frame came from."""
    profile = camera_call("frame.get_profile", frame.get_profile)
    return profile.unique_id()


def update_render_frames(new_frames, chain, render_frames):
    """Filter each new frame and keep the latest one per stream."""
    for frame in new_frames:
        render_frames[stream_id(frame)] = chain.process(frame)
    return render_frames


def process_frames(pipelines, aligner, chain, render_frames):
    """Poll every pipeline once and refresh the render table."""
    new_frames = poll_new_frames(pipelines, aligner)
    return update_render_frames(new_frames, chain, render_frames)
