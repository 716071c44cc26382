"""
Brick Canvas Module
PySide6 canvas hosting one forest: paints nested operator bricks, routes mouse
gestures into the drag controller and pans/zooms the camera.

The canvas is the forest's visual layer. Geometry questions go to the wrapped
HeadlessSurface; every command also schedules a repaint.
"""

import logging
from typing import Optional

from PySide6.QtCore import Qt, QPointF, QRectF, Signal
from PySide6.QtGui import (
    QBrush, QColor, QFont, QKeyEvent, QLinearGradient, QMouseEvent, QPainter,
    QPaintEvent, QPen, QWheelEvent,
)
from PySide6.QtWidgets import QWidget

from Forest.drag_session import DragController
from Forest.errors import ForestError
from Forest.geometry import Point, Rect
from Forest.node import is_operator_node
from Forest.registry import Forest
from Forest.sockets import Side, Socket
from Forest.surface import HeadlessSurface

from .brick_style import BORDER_RADIUS, DARK_THEME, ZONE_COLORS, operator_color
from .settings_manager import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class BrickCanvas(QWidget):
    """Editing surface for logic-operator bricks"""

    structure_changed = Signal(object)  # Emits ForestSnapshot after every attach/detach
    candidate_changed = Signal(object)  # Emits the highlighted Socket or None
    node_dropped = Signal(object, object)  # Emits (node, socket or None) on pointer-up

    def __init__(self, settings=None, parent=None):
        super().__init__(parent)
        self.setMinimumSize(800, 600)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)

        self.settings = settings if settings is not None else dict(DEFAULT_SETTINGS)
        self.surface = HeadlessSurface()
        self.forest = Forest(surface=self)
        self.drag = DragController(self.forest, self._setting('capture_radius'))

        # Camera
        self.camera_x = 0.0
        self.camera_y = 0.0
        self.camera_zoom = 1.0

        # Mouse interaction
        self.mouse_down = False
        self.last_mouse_x = 0.0
        self.last_mouse_y = 0.0
        self.dragging = False
        self.hovered_node = None

        self.setStyleSheet(f"""
            BrickCanvas {{
                background-color: {DARK_THEME['bg_primary']};
                border: 1px solid {DARK_THEME['border']};
                border-radius: 8px;
            }}
        """)

    def _setting(self, key: str):
        return self.settings.get(key, DEFAULT_SETTINGS[key])

    # ---------------------- Visual layer ----------------------

    def bind(self, forest) -> None:
        self.surface.bind(forest)

    def create_handle(self, node) -> None:
        self.surface.create_handle(node)
        self.update()

    def discard_handle(self, node) -> None:
        self.surface.discard_handle(node)
        if self.hovered_node is node:
            self.hovered_node = None
        self.update()

    def locate_node_at(self, point):
        return self.surface.locate_node_at(point)

    def visual_origin(self, node) -> Point:
        return self.surface.visual_origin(node)

    def visual_center(self, socket: Socket) -> Point:
        return self.surface.visual_center(socket)

    def bring_to_front(self, node) -> None:
        self.surface.bring_to_front(node)
        self.update()

    def nest_under(self, parent, side: Side, child) -> None:
        self.surface.nest_under(parent, side, child)
        self.update()

    def restore_independent_layout(self, node) -> None:
        self.surface.restore_independent_layout(node)
        self.update()

    def highlight_socket(self, socket: Optional[Socket]) -> None:
        changed = socket != self.surface.target_socket
        self.surface.highlight_socket(socket)
        if changed:
            self.candidate_changed.emit(socket)
            self.update()

    def on_structural_change(self, snapshot) -> None:
        target = self.surface.target_socket
        self.surface.on_structural_change(snapshot)
        self.structure_changed.emit(snapshot)
        if target is not None and self.surface.target_socket is None:
            # The highlighted socket was just filled or removed
            self.candidate_changed.emit(None)
        self.update()

    # ---------------------- Camera ----------------------

    def screen_to_world(self, x: float, y: float) -> Point:
        return Point((x - self.camera_x) / self.camera_zoom,
                     (y - self.camera_y) / self.camera_zoom)

    def zoom_at(self, mouse_x: float, mouse_y: float, factor: float) -> None:
        """Zoom towards the given screen position"""
        new_zoom = max(float(self._setting('zoom_min')),
                       min(float(self._setting('zoom_max')), self.camera_zoom * factor))
        world = self.screen_to_world(mouse_x, mouse_y)
        self.camera_x = mouse_x - world.x * new_zoom
        self.camera_y = mouse_y - world.y * new_zoom
        self.camera_zoom = new_zoom
        self.update()

    def reset_view(self) -> None:
        self.camera_x = 0.0
        self.camera_y = 0.0
        self.camera_zoom = 1.0
        self.update()

    def spawn_point(self) -> Point:
        """World position for a newly spawned brick: viewport centre, cascaded by count"""
        center = self.screen_to_world(self.width() / 2, self.height() / 2)
        step = 20.0 * (len(self.forest) % 10)
        return Point(center.x - 60 + step, center.y - 40 + step)

    # ---------------------- Gestures ----------------------

    def press_at(self, x: float, y: float) -> bool:
        """
        Pointer-down at a screen position.

        Returns:
            True when a drag session started, False when the press pans the camera
        """
        self.mouse_down = True
        self.last_mouse_x = x
        self.last_mouse_y = y
        try:
            session = self.drag.pointer_down(self.screen_to_world(x, y))
        except ForestError as e:
            logger.warning("Grab refused: %s", e)
            session = None
        if session is None:
            self.dragging = True
            self.setCursor(Qt.ClosedHandCursor)
            return False
        self.setCursor(Qt.SizeAllCursor)
        self.update()
        return True

    def move_to(self, x: float, y: float) -> Optional[Socket]:
        """Pointer-move at a screen position. Returns the candidate socket while dragging a brick."""
        candidate = None
        if self.drag.is_dragging():
            try:
                candidate = self.drag.pointer_move(self.screen_to_world(x, y))
            except ForestError as e:
                logger.warning("Drag step refused: %s", e)
        elif self.mouse_down and self.dragging:
            self.camera_x += x - self.last_mouse_x
            self.camera_y += y - self.last_mouse_y
            self.last_mouse_x = x
            self.last_mouse_y = y
        else:
            hovered = self.surface.locate_node_at(self.screen_to_world(x, y))
            if hovered is not self.hovered_node:
                self.hovered_node = hovered
                self.setCursor(Qt.OpenHandCursor if hovered is not None else Qt.ArrowCursor)
        self.update()
        return candidate

    def release_at(self, x: float, y: float) -> Optional[Socket]:
        """Pointer-up at a screen position. Returns the socket the brick was dropped into, if any."""
        self.mouse_down = False
        self.dragging = False
        self.setCursor(Qt.ArrowCursor)
        attached = None
        if self.drag.is_dragging():
            node = self.drag.session.dragged_node
            attached = self.drag.pointer_up(self.screen_to_world(x, y))
            self.node_dropped.emit(node, attached)
        self.update()
        return attached

    def remove_hovered(self) -> bool:
        node = self.hovered_node
        if node is None or node not in self.forest:
            return False
        try:
            self.forest.remove_node(node)
        except ForestError as e:
            logger.warning("Remove refused: %s", e)
            return False
        self.hovered_node = None
        return True

    # ---------------------- Qt events ----------------------

    def mousePressEvent(self, event: QMouseEvent):
        """Handle mouse press events"""
        if event.button() == Qt.LeftButton:
            self.press_at(event.position().x(), event.position().y())

    def mouseMoveEvent(self, event: QMouseEvent):
        """Handle mouse move events"""
        self.move_to(event.position().x(), event.position().y())

    def mouseReleaseEvent(self, event: QMouseEvent):
        """Handle mouse release events"""
        if event.button() == Qt.LeftButton:
            self.release_at(event.position().x(), event.position().y())

    def wheelEvent(self, event: QWheelEvent):
        """Handle wheel events for zooming"""
        factor = 1.2 if event.angleDelta().y() > 0 else 0.8
        self.zoom_at(event.position().x(), event.position().y(), factor)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace) and not self.drag.is_dragging():
            if self.remove_hovered():
                return
        elif event.key() == Qt.Key_Home:
            self.reset_view()
            return
        super().keyPressEvent(event)

    # ---------------------- Painting ----------------------

    def paintEvent(self, event: QPaintEvent):
        """Paint background, then every root back to front with its nested children"""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(DARK_THEME['bg_primary']))

        painter.save()
        try:
            painter.translate(self.camera_x, self.camera_y)
            painter.scale(self.camera_zoom, self.camera_zoom)
            self._draw_background_dots(painter)
            for root in self.surface.roots_back_to_front():
                self._draw_brick(painter, root)
        finally:
            painter.restore()
        painter.end()

    def _draw_background_dots(self, painter: QPainter):
        spacing = 32.0
        top_left = self.screen_to_world(0, 0)
        bottom_right = self.screen_to_world(self.width(), self.height())
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(255, 255, 255, 18)))
        x = (top_left.x // spacing) * spacing
        while x < bottom_right.x:
            y = (top_left.y // spacing) * spacing
            while y < bottom_right.y:
                painter.drawEllipse(QPointF(x, y), 1.2, 1.2)
                y += spacing
            x += spacing

    def _draw_brick(self, painter: QPainter, node):
        layout = self.surface.layout
        bounds = layout.bounds(node)
        dragged = self.drag.session.dragged_node if self.drag.session else None
        self._draw_3d_box(painter, bounds, operator_color(node),
                          selected=node is dragged, highlighted=node is self.hovered_node)

        label_rect = layout.label_rect(node) if is_operator_node(node) else bounds
        label = node.operator.upper() if is_operator_node(node) else "DRAG ME"
        font = QFont("Segoe UI", 11)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QPen(QColor(DARK_THEME['text_primary'])))
        painter.drawText(self._qrect(label_rect), Qt.AlignCenter, label)

        if not is_operator_node(node):
            return
        for side in Side:
            child = node.children[side]
            if child is not None:
                self._draw_brick(painter, child)
            else:
                self._draw_drop_zone(painter, Socket(node, side), layout.zone_rect(node, side))

    def _draw_drop_zone(self, painter: QPainter, socket: Socket, rect: Rect):
        is_target = socket == self.surface.target_socket
        decoration = self.surface.decorations.get(socket)
        if not is_target and not self._setting('show_available_sockets'):
            decoration = None
        fill = QColor(ZONE_COLORS.get(decoration, ZONE_COLORS[None]))
        border = QColor(DARK_THEME['accent']) if is_target else QColor(DARK_THEME['border'])
        painter.setBrush(QBrush(fill))
        painter.setPen(QPen(border, 2 if is_target else 1, Qt.DashLine))
        painter.drawRoundedRect(self._qrect(rect), 6, 6)

    def _draw_3d_box(self, painter: QPainter, bounds: Rect, color_str: str,
                     selected: bool = False, highlighted: bool = False):
        """Draw 3D inset box effect"""
        rect = self._qrect(bounds)
        x, y, width, height = bounds

        # Base shadow (drop shadow)
        shadow_rect = QRectF(x + 3, y + 6, width, height)
        painter.setBrush(QBrush(QColor(0, 0, 0, 100)))
        painter.setPen(Qt.NoPen)
        painter.drawRoundedRect(shadow_rect, BORDER_RADIUS, BORDER_RADIUS)

        gradient = QLinearGradient(x, y, x, y + height)
        gradient.setColorAt(0, QColor('#3a3d41'))
        gradient.setColorAt(1, QColor('#202124'))
        painter.setBrush(QBrush(gradient))
        painter.drawRoundedRect(rect, BORDER_RADIUS, BORDER_RADIUS)

        # Inner highlight (top-left inset)
        painter.save()
        painter.setClipRect(rect)
        highlight_gradient = QLinearGradient(x, y, x + width * 0.8, y + height * 0.8)
        highlight_gradient.setColorAt(0, QColor(255, 255, 255, 25))
        highlight_gradient.setColorAt(1, QColor(255, 255, 255, 0))
        painter.setBrush(QBrush(highlight_gradient))
        painter.setPen(Qt.NoPen)
        painter.drawRoundedRect(rect, BORDER_RADIUS, BORDER_RADIUS)
        painter.restore()

        # Border
        if selected:
            border_color, border_width = QColor(color_str), 2.5
        elif highlighted:
            border_color, border_width = QColor(color_str).lighter(150), 1.5
        else:
            border_color, border_width = QColor(color_str).darker(140), 1.0
        painter.setPen(QPen(border_color, border_width))
        painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(rect, BORDER_RADIUS, BORDER_RADIUS)

    @staticmethod
    def _qrect(rect: Rect) -> QRectF:
        return QRectF(rect.x, rect.y, rect.width, rect.height)
