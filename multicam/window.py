import math
import time

import cv2
import numpy as np

FONT = cv2.FONT_HERSHEY_SIMPLEX
TEXT_COLOR = (255, 255, 255)
QUIT_KEYS = (ord('q'), 27)  # 'q' or Esc


def frame_to_image(frame):
    """Convert a RealSense frame into a BGR image OpenCV can display."""
    image = np.asanyarray(frame.get_data())
    if image.ndim == 2:
        return cv2.applyColorMap(cv2.convertScaleAbs(image, alpha=0.03), cv2.COLORMAP_JET)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2BGR)
    return cv2.cvtColor(image, cv2.COLOR_RGB2BGR)


def frame_caption(frame):
    profile = frame.get_profile()
    return f"{profile.stream_name()} #{profile.unique_id()}"


def grid_shape(count):
    """Rows and columns of the smallest near-square grid holding count tiles."""
    if count <= 0:
        return 0, 0
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    return rows, cols


def fit_to_tile(image, tile_w, tile_h):
    """Resize image into a tile keeping its aspect ratio, padding with black."""
    h, w = image.shape[:2]
    scale = min(tile_w / w, tile_h / h)
    new_w, new_h = max(1, int(w * scale)), max(1, int(h * scale))
    resized = cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)
    tile = np.zeros((tile_h, tile_w, 3), dtype=np.uint8)
    x, y = (tile_w - new_w) // 2, (tile_h - new_h) // 2
    tile[y:y + new_h, x:x + new_w] = resized
    return tile


def build_mosaic(tiles, width, height):
    """Lay out (caption, image) pairs on a width x height canvas."""
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    rows, cols = grid_shape(len(tiles))
    if not tiles:
        return canvas

    tile_w, tile_h = width // cols, height // rows
    for index, (caption, image) in enumerate(tiles):
        row, col = divmod(index, cols)
        x, y = col * tile_w, row * tile_h
        canvas[y:y + tile_h, x:x + tile_w] = fit_to_tile(image, tile_w, tile_h)
        cv2.putText(canvas, caption, (x + 10, y + 20), FONT, 0.5, TEXT_COLOR, 1)
    return canvas


class Window:
    """OpenCV window that shows the latest frame of every stream as a mosaic.

    The window is truthy while it is open. It closes when 'q' or Esc is
    pressed, when the user closes it, or when close() is called.
    """

    def __init__(self, width, height, title):
        self.width = width
        self.height = height
        self.title = title
        self.fps = 0.0
        self._open = True
        self._shown = False
        self._last_time = time.time()
        self._frame_count = 0
        cv2.namedWindow(title, cv2.WINDOW_AUTOSIZE)

    def __bool__(self):
        # Window property is only reliable once something has been drawn
        if self._open and self._shown and cv2.getWindowProperty(self.title, cv2.WND_PROP_VISIBLE) < 1:
            self._open = False
            print("Window closed.")
        return self._open

    def show(self, render_frames):
        tiles = [(frame_caption(frame), frame_to_image(frame))
                 for _, frame in sorted(render_frames.items())]
        mosaic = build_mosaic(tiles, self.width, self.height)

        self._update_fps()
        cv2.putText(mosaic, f"FPS: {self.fps:.1f}", (self.width - 150, 30), FONT, 0.6, TEXT_COLOR, 2)

        cv2.imshow(self.title, mosaic)
        self._shown = True
        if (cv2.waitKey(1) & 0xFF) in QUIT_KEYS:
            self.close()

    def _update_fps(self):
        self._frame_count += 1
        elapsed = time.time() - self._last_time
        if elapsed >= 1.0:
            self.fps = self._frame_count / elapsed
            self._frame_count = 0
            self._last_time = time.time()

    def close(self):
        if self._open:
            cv2.destroyWindow(self.title)
            self._open = False
