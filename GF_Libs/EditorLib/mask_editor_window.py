import threading
from pathlib import Path
from typing import Any, Optional

from PyQt5.QtCore import QObject, QPointF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from GF_Libs.FillServiceLib.generation_session import GenerationResult, GenerationSession
from GF_Libs.ImageIOLib.image_codec import encode_png, load_source_image, save_result
from GF_Libs.MaskingLib.mask_compositor import erased_region
from GF_Libs.MaskingLib.masking_session import MaskingSession
from GF_Libs.constants import (
    BRUSH_SIZE_STEP,
    DEFAULT_RESULT_FILENAME,
    MAX_BRUSH_SIZE,
    MIN_BRUSH_SIZE,
    SOURCE_IMAGE_FILTER,
)


def pil_to_pixmap(image: Any) -> QPixmap:
    pixmap = QPixmap()
    pixmap.loadFromData(encode_png(image), "PNG")
    return pixmap


class MaskCanvas(QWidget):
    """Displays the overlay and forwards pointer events to the session."""

    strokes_changed = pyqtSignal()

    def __init__(self, session: MaskingSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self._pixmap: Optional[QPixmap] = None

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.BlankCursor)

    def refresh(self) -> None:
        overlay = self.session.render_overlay()
        self._pixmap = pil_to_pixmap(overlay) if overlay is not None else None

        width, height = self.session.display_size()
        self.setFixedSize(max(1, int(round(width))), max(1, int(round(height))))
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        if self._pixmap is None:
            painter.end()
            return

        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.drawPixmap(self.rect(), self._pixmap)

        cursor = self.session.brush_cursor()
        if cursor is not None:
            radius = cursor.diameter / 2.0
            painter.setRenderHint(QPainter.Antialiasing)
            painter.setPen(QPen(QColor(255, 255, 255), 2))
            painter.setBrush(QColor(239, 68, 68, 77))
            painter.drawEllipse(QPointF(cursor.x, cursor.y), radius, radius)
        painter.end()

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return
        if self.session.pointer_down(event.x(), event.y()):
            self.refresh()

    def mouseMoveEvent(self, event) -> None:
        self.session.pointer_move(event.x(), event.y())
        self.refresh()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return
        self._commit()

    def enterEvent(self, event) -> None:
        self.session.pointer_enter()
        self.update()

    def leaveEvent(self, event) -> None:
        committed = self.session.pointer_leave()
        self.refresh()
        if committed:
            self.strokes_changed.emit()

    def focusOutEvent(self, event) -> None:
        self._commit()
        super().focusOutEvent(event)

    def _commit(self) -> None:
        if self.session.pointer_up():
            self.refresh()
            self.strokes_changed.emit()


class _GenerationSignals(QObject):
    finished = pyqtSignal(object)


class MaskEditorWindow(QMainWindow):
    def __init__(self, generation: GenerationSession, source_path: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("Generative Fill")
        self.resize(1100, 850)

        self.generation = generation
        self.session = MaskingSession()
        self.generated_image: Optional[Any] = None
        self._signals = _GenerationSignals()

        self._build_ui()
        self._connect_signals()

        if source_path is not None:
            self._load_path(source_path)
        self._update_controls()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        toolbar = QHBoxLayout()
        canvas_row = QHBoxLayout()
        brush_row = QHBoxLayout()
        result_row = QHBoxLayout()

        self.btn_load_image = QPushButton("Upload Image")
        self.btn_undo = QPushButton("Undo")
        self.btn_clear = QPushButton("Clear Mask")
        self.btn_start_over = QPushButton("Start Over")
        self.btn_brush_down = QPushButton("-")
        self.btn_brush_up = QPushButton("+")
        self.btn_generate = QPushButton("Generate Fill")
        self.btn_continue = QPushButton("Continue Editing")
        self.btn_save_result = QPushButton("Download")

        self.brush_slider = QSlider(Qt.Horizontal)
        self.brush_slider.setRange(MIN_BRUSH_SIZE, MAX_BRUSH_SIZE)
        self.brush_slider.setValue(int(self.session.brush_size))
        self.label_brush = QLabel(f"{int(self.session.brush_size)}px")

        self.prompt_edit = QPlainTextEdit()
        self.prompt_edit.setPlaceholderText("Describe what you want to add in the painted area...")
        self.prompt_edit.setMaximumHeight(90)

        self.label_error = QLabel("")
        self.label_error.setStyleSheet("color: #fca5a5;")
        self.label_error.setWordWrap(True)
        self.label_status = QLabel("No image loaded")

        self.canvas = MaskCanvas(self.session)
        self.label_result = QLabel("")
        self.label_result.setAlignment(Qt.AlignCenter)

        toolbar.addWidget(self.btn_load_image)
        toolbar.addWidget(self.btn_undo)
        toolbar.addWidget(self.btn_clear)
        toolbar.addStretch(1)
        toolbar.addWidget(self.btn_start_over)

        canvas_row.addStretch(1)
        canvas_row.addWidget(self.canvas)
        canvas_row.addWidget(self.label_result)
        canvas_row.addStretch(1)

        brush_row.addWidget(QLabel("Brush Size"))
        brush_row.addWidget(self.btn_brush_down)
        brush_row.addWidget(self.brush_slider, stretch=1)
        brush_row.addWidget(self.btn_brush_up)
        brush_row.addWidget(self.label_brush)

        result_row.addWidget(self.btn_generate)
        result_row.addWidget(self.btn_continue)
        result_row.addWidget(self.btn_save_result)

        root.addLayout(toolbar)
        root.addWidget(self.label_error)
        root.addLayout(canvas_row, stretch=1)
        root.addWidget(self.label_status)
        root.addLayout(brush_row)
        root.addWidget(QLabel("What to generate"))
        root.addWidget(self.prompt_edit)
        root.addLayout(result_row)

    def _connect_signals(self) -> None:
        self.btn_load_image.clicked.connect(self.load_image)
        self.btn_undo.clicked.connect(self.undo)
        self.btn_clear.clicked.connect(self.clear_mask)
        self.btn_start_over.clicked.connect(self.start_over)
        self.btn_brush_down.clicked.connect(lambda: self.step_brush(-BRUSH_SIZE_STEP))
        self.btn_brush_up.clicked.connect(lambda: self.step_brush(BRUSH_SIZE_STEP))
        self.brush_slider.valueChanged.connect(self.on_brush_changed)
        self.btn_generate.clicked.connect(self.generate)
        self.btn_continue.clicked.connect(self.continue_editing)
        self.btn_save_result.clicked.connect(self.save_result)
        self.canvas.strokes_changed.connect(self.on_strokes_changed)
        self._signals.finished.connect(self.on_generation_finished)

    def load_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", SOURCE_IMAGE_FILTER)
        if file_path:
            self._load_path(Path(file_path))

    def _load_path(self, path: Path) -> None:
        try:
            image = load_source_image(path)
        except (OSError, ValueError) as e:
            self._show_error(str(e))
            return

        self._set_source(image)

    def _set_source(self, image: Any) -> None:
        self.session.set_viewport(self.width())
        self.session.load_image(image)
        self.generated_image = None
        self.label_result.clear()
        self._show_error("")
        self.canvas.refresh()
        self.on_strokes_changed()

    def undo(self) -> None:
        if self.session.undo():
            self.canvas.refresh()
            self.on_strokes_changed()

    def clear_mask(self) -> None:
        if self.session.clear():
            self.canvas.refresh()
            self.on_strokes_changed()

    def start_over(self) -> None:
        self.session.unload()
        self.generated_image = None
        self.prompt_edit.clear()
        self.label_result.clear()
        self._show_error("")
        self.canvas.refresh()
        self.on_strokes_changed()

    def step_brush(self, delta: int) -> None:
        self.brush_slider.setValue(int(self.session.adjust_brush_size(delta)))

    def on_brush_changed(self, value: int) -> None:
        self.session.set_brush_size(value)
        self.label_brush.setText(f"{int(self.session.brush_size)}px")
        self.canvas.update()

    def on_strokes_changed(self) -> None:
        mask = self.session.composite_mask()
        if mask is None:
            self.label_status.setText("No image loaded")
        else:
            masked = int(erased_region(mask).sum())
            self.label_status.setText(
                f"{len(self.session.history)} strokes, {masked} masked pixels"
            )
        self._update_controls()

    def generate(self) -> None:
        mask = self.session.composite_mask()
        prompt = self.prompt_edit.toPlainText()

        self._show_error("")
        self.btn_generate.setEnabled(False)
        self.btn_generate.setText("Generating...")

        worker = threading.Thread(
            target=lambda: self._signals.finished.emit(self.generation.generate(mask, prompt)),
            daemon=True,
        )
        worker.start()

    def on_generation_finished(self, result: GenerationResult) -> None:
        self.btn_generate.setText("Generate Fill")
        if result.success:
            self.generated_image = result.image
            self._show_result(result.image)
        else:
            self._show_error(result.error or "")
        self._update_controls()

    def continue_editing(self) -> None:
        if self.generated_image is None:
            return
        self._set_source(self.generated_image)

    def save_result(self) -> None:
        if self.generated_image is None:
            return

        save_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Generated Image",
            DEFAULT_RESULT_FILENAME,
            "PNG Images (*.png)",
        )
        if not save_path:
            return

        try:
            save_result(self.generated_image, save_path)
        except OSError as e:
            self._show_error(str(e))
            return
        QMessageBox.information(self, "Success", f"Image saved to {save_path}")

    def _show_result(self, image: Any) -> None:
        width, height = self.session.display_size()
        scaled = pil_to_pixmap(image).scaled(
            max(1, int(width)),
            max(1, int(height)),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.label_result.setPixmap(scaled)

    def _show_error(self, message: str) -> None:
        self.label_error.setText(message)

    def _update_controls(self) -> None:
        loaded = self.session.is_ready
        self.btn_undo.setEnabled(self.session.can_undo)
        self.btn_clear.setEnabled(self.session.can_undo)
        self.btn_start_over.setEnabled(loaded)
        self.btn_generate.setEnabled(loaded and not self.generation.is_busy)
        self.btn_continue.setEnabled(self.generated_image is not None)
        self.btn_save_result.setEnabled(self.generated_image is not None)
