"""Plot surface: raw trace curve plus replaceable line annotations."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pyqtgraph as pg
from PyQt5 import QtWidgets

from LYRA.src.core.types import LineShape
from LYRA.src.ui.theme import get_plot_colors

logger = logging.getLogger(__name__)


class SpectrumPlot(QtWidgets.QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        colors = get_plot_colors()
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground(colors["background"])
        self.plot = self.plot_widget.getPlotItem()
        self.plot.setTitle("Mass spectrometry data")
        self.plot.setLabel("left", "Intensity")
        self.plot.setLabel("bottom", "Mass")
        self.plot.showGrid(x=True, y=True, alpha=colors["grid"][3] / 255)
        for name in ("left", "bottom"):
            axis = self.plot.getAxis(name)
            axis.setPen(colors["axis"])
            axis.setTextPen(colors["text"])

        self.curve = self.plot.plot(pen=pg.mkPen(colors["trace"], width=1))
        self._shape_items: list = []

        layout.addWidget(self.plot_widget)

    def render_trace(self, x: Sequence[float], y: Sequence[float], title: str = "") -> None:
        self.replace_shapes(())
        self.curve.setData(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
        self.plot.setTitle(title or "Mass spectrometry data")
        self.plot.enableAutoRange()

    def replace_shapes(self, shapes: Sequence[LineShape]) -> None:
        """Drop every current annotation and draw ``shapes`` instead."""
        for item in self._shape_items:
            self.plot.removeItem(item)
        self._shape_items = []

        for shape in shapes:
            pen = pg.mkPen(shape.color, width=shape.width)
            if shape.yref == "paper" and shape.x0 == shape.x1:
                # Vertical, spanning the full view height.
                item = pg.InfiniteLine(pos=shape.x0, angle=90, pen=pen, movable=False)
                self.plot.addItem(item, ignoreBounds=True)
            else:
                if shape.yref == "paper":
                    (_, (y_min, y_max)) = self.plot.viewRange()
                    ys = [y_min + shape.y0 * (y_max - y_min), y_min + shape.y1 * (y_max - y_min)]
                else:
                    ys = [shape.y0, shape.y1]
                item = pg.PlotCurveItem(x=[shape.x0, shape.x1], y=ys, pen=pen)
                self.plot.addItem(item)
            self._shape_items.append(item)

        logger.debug("Plot annotations replaced: %d shapes", len(self._shape_items))

    def clear(self) -> None:
        self.replace_shapes(())
        self.curve.setData([], [])
        self.plot.setTitle("Mass spectrometry data")
