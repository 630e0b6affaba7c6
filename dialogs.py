"""UI dialogs for inspecting a load run."""
from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd
import pyqtgraph as pg
from PyQt6 import QtCore, QtGui, QtWidgets


class LoadTimesTable(QtWidgets.QTableWidget):
    HEADERS = ["Path", "Files", "Load Time (s)", "Average (s)", "Runs", "Last Run"]

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setColumnCount(len(self.HEADERS))
        self.setHorizontalHeaderLabels(self.HEADERS)
        self.horizontalHeader().setStretchLastSection(True)
        self.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
        self.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)

    def populate(self, frame: pd.DataFrame) -> None:
        self.setRowCount(len(frame))
        for row, rec in enumerate(frame.itertuples(index=False)):
            average = "" if pd.isna(rec.average) else f"{rec.average:.3f}"
            entries = [
                str(rec.path),
                str(rec.files),
                f"{rec.load_time:.3f}",
                average,
                "" if pd.isna(rec.load_count) else str(int(rec.load_count)),
                "" if pd.isna(rec.last_run) else str(rec.last_run),
            ]
            for col, val in enumerate(entries):
                self.setItem(row, col, QtWidgets.QTableWidgetItem(val))


class LoadStatsDialog(QtWidgets.QDialog):
    """Per-folder load times of the current run against their history."""

    def __init__(self, frame: pd.DataFrame, report: str = "", parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Proxy Loader - Loading Statistics")
        self.resize(900, 600)
        self.frame = frame
        layout = QtWidgets.QVBoxLayout(self)
        tabs = QtWidgets.QTabWidget()
        self.table = LoadTimesTable()
        self.table.populate(frame)
        tabs.addTab(self.table, "Folders")
        self.plot_widget = pg.PlotWidget()
        tabs.addTab(self.plot_widget, "Chart")
        self.report_view = QtWidgets.QPlainTextEdit(report)
        self.report_view.setReadOnly(True)
        self.report_view.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont))
        tabs.addTab(self.report_view, "Report")
        layout.addWidget(tabs, 1)
        btns = QtWidgets.QHBoxLayout()
        self.copy_btn = QtWidgets.QPushButton("Copy report")
        self.close_btn = QtWidgets.QPushButton("Close")
        btns.addStretch(1)
        btns.addWidget(self.copy_btn)
        btns.addWidget(self.close_btn)
        layout.addLayout(btns)
        self.copy_btn.clicked.connect(self._copy_report)
        self.close_btn.clicked.connect(self.accept)
        self.plot_times()

    def _labels(self) -> List[str]:
        return [str(p).replace("\\", "/").rstrip("/").rsplit("/", 1)[-1] for p in self.frame["path"]]

    def plot_times(self) -> None:
        self.plot_widget.clear()
        if self.frame.empty:
            return
        x = np.arange(len(self.frame), dtype=float)
        current = self.frame["load_time"].to_numpy(dtype=float)
        average = self.frame["average"].astype(float).fillna(0.0).to_numpy()
        width = 0.4
        self.plot_widget.addItem(pg.BarGraphItem(x=x - width / 2, height=current, width=width, brush="#4e79a7", name="Current"))
        self.plot_widget.addItem(pg.BarGraphItem(x=x + width / 2, height=average, width=width, brush="#f28e2b", name="Average"))
        axis = self.plot_widget.getAxis("bottom")
        axis.setTicks([list(zip(x.tolist(), self._labels()))])
        self.plot_widget.setLabel("left", "Load time", units="s")

    def _copy_report(self) -> None:
        clipboard = QtWidgets.QApplication.clipboard()
        if clipboard is not None:
            clipboard.setText(self.report_view.toPlainText())
        self.report_view.setFocus(QtCore.Qt.FocusReason.OtherFocusReason)
