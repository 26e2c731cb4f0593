"""
Main application that orchestrates all components
"""

import argparse
import logging
import os
import time
from datetime import datetime
from typing import Optional

import cv2
import numpy as np

from doodle_ink.drawing_canvas import DrawingCanvas, save_image
from doodle_ink.errors import DoodleInkError
from doodle_ink.inputs.base_input import BaseInputHandler
from doodle_ink.inputs.mouse_input import MouseInputHandler

PALETTE = {
    ord("1"): (0, 0, 0),  # Black
    ord("2"): (40, 40, 220),  # Red
    ord("3"): (60, 160, 40),  # Green
    ord("4"): (200, 100, 30),  # Blue
}
PAPER_COLOR = (255, 255, 255)


class DoodleApp:
    """Main application controller"""

    def __init__(self, width: int = 640, height: int = 480, export_dir: str = "exports"):
        # Initialize components
        self.canvas = DrawingCanvas(width, height)
        self.input_handler: Optional[BaseInputHandler] = None
        self.export_dir = export_dir

        # UI settings
        self.window_name = "Doodle Ink"
        self.running = False

        # Clear transition state
        self.fade_from: Optional[np.ndarray] = None
        self.fade_started = 0.0
        self.fade_duration = 0.0
        self._last_frame: Optional[np.ndarray] = None

        self.canvas.add_callback("clear", self._on_canvas_clear)

    def _setup_input_callbacks(self):
        """Setup callbacks for input events"""
        self.input_handler.add_callback("stroke_start", self._on_stroke_start)
        self.input_handler.add_callback("stroke_continue", self._on_stroke_continue)
        self.input_handler.add_callback("stroke_end", self._on_stroke_end)

    def _on_stroke_start(self, data):
        """Handle stroke start event"""
        self.canvas.touch_began((data["x"], data["y"]), data["timestamp"])

    def _on_stroke_continue(self, data):
        """Handle stroke continue event"""
        self.canvas.touch_moved(data["to"], data["timestamp"])

    def _on_stroke_end(self, data):
        """Handle stroke end event"""
        stroke = self.canvas.touch_ended()
        if stroke is not None:
            print(f"Stroke completed with {len(stroke)} segments")

    def _on_canvas_clear(self, data):
        """Start the cross-dissolve from the last visible frame"""
        self.fade_from = self._last_frame
        self.fade_started = time.monotonic()
        self.fade_duration = data["duration"]

    def run(self):
        """Run the application"""
        cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
        self.input_handler = MouseInputHandler(
            self.window_name, (self.canvas.width, self.canvas.height)
        )
        self._setup_input_callbacks()
        self.input_handler.start_capture()
        self._last_frame = self._compose_frame()
        self.running = True

        print("Doodle Ink Started!")
        print("Controls:")
        print("- drag with the left mouse button to draw")
        print("- 'u' to undo the last stroke")
        print("- 'c' to clear canvas")
        print("- 'k' to toggle constant stroke width")
        print("- '1'-'4' to pick a color, '+'/'-' to change width")
        print("- 's' to export a PNG")
        print("- ESC to exit")

        while self.running:
            self._update_display()
            self._handle_keyboard()

        self._cleanup()

    def _compose_frame(self) -> np.ndarray:
        """Flatten the transparent canvas onto paper"""
        layer = self.canvas.get_canvas_copy().astype(np.float32)
        alpha = layer[:, :, 3:4] / 255.0
        paper = np.empty_like(layer[:, :, :3])
        paper[:] = PAPER_COLOR
        # Anti-aliased edges are already weighted by coverage
        frame = layer[:, :, :3] + paper * (1.0 - alpha)
        return np.clip(frame, 0, 255).astype(np.uint8)

    def _update_display(self):
        """Update the main display"""
        display = self._compose_frame()
        self._last_frame = display

        if self.fade_from is not None:
            progress = (time.monotonic() - self.fade_started) / max(self.fade_duration, 1e-6)
            if progress >= 1.0:
                self.fade_from = None
            else:
                display = cv2.addWeighted(self.fade_from, 1.0 - progress, display, progress, 0)

        stats = self.canvas.get_stroke_stats()
        mode = "constant" if self.canvas.is_stroke_width_constant else "variable"
        self.canvas.add_ui_text(
            display,
            f"Width: {self.canvas.stroke_width:.0f} ({mode}) | Strokes: {stats['num_strokes']} | Segments: {stats['num_segments']}",
            (10, 30),
            color=(100, 100, 100),
        )
        self.canvas.add_ui_text(
            display,
            "'u' undo, 'c' clear, 'k' width mode, 1-4 color, +/- width, 's' export, ESC exit",
            (10, self.canvas.height - 20),
            font_scale=0.45,
            color=(100, 100, 100),
        )

        cv2.imshow(self.window_name, display)

    def _handle_keyboard(self):
        """Handle keyboard input"""
        key = cv2.waitKey(1) & 0xFF

        if key == ord("u"):
            if self.canvas.undo_last_stroke() is None:
                print("Nothing to undo")
        elif key == ord("c"):
            self.canvas.clear_all()
            print("Canvas cleared!")
        elif key == ord("k"):
            self.canvas.is_stroke_width_constant = not self.canvas.is_stroke_width_constant
        elif key in PALETTE:
            self.canvas.stroke_color = PALETTE[key]
        elif key in (ord("+"), ord("=")):
            self.canvas.stroke_width = self.canvas.stroke_width + 2
        elif key == ord("-") and self.canvas.stroke_width > 2:
            self.canvas.stroke_width = self.canvas.stroke_width - 2
        elif key == ord("s"):
            self._export_drawing()
        elif key == 27:  # ESC
            self.running = False

    def _export_drawing(self):
        """Render the drawing on paper and save it"""
        os.makedirs(self.export_dir, exist_ok=True)
        timestamp_file = datetime.now().strftime("%H%M%S")
        path = os.path.join(self.export_dir, f"doodle_{timestamp_file}.png")
        try:
            save_image(path, self.canvas.render_on_color(PAPER_COLOR))
        except DoodleInkError as exc:
            print(f"Export failed: {exc}")
            return
        print(f"Drawing saved: {path}")

    def _cleanup(self):
        """Clean up resources"""
        if self.input_handler:
            self.input_handler.stop_capture()
        cv2.destroyAllWindows()
        print("Application closed.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Freehand drawing with smoothed strokes")
    parser.add_argument("--width", type=int, default=640)
    parser.add_argument("--height", type=int, default=480)
    parser.add_argument("--export-dir", default="exports")
    parser.add_argument("--debug", action="store_true", help="log fitted segments")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    app = DoodleApp(args.width, args.height, args.export_dir)
    app.run()


if __name__ == "__main__":
    main()
