"""MainWindow hosting one entity list page.

The window only binds widgets to `EntityListVM`; every filtering, sorting
and pagination decision is made by the view-model.
"""

from __future__ import annotations

from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableView,
    QTabBar,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.entity_list_vm import EntityListVM
from app.views.constants import ID_ROLE
from app.views.table_model_builder import build_model

SORT_LABELS = {"asc": "croissant", "desc": "décroissant"}


class MainWindow(QMainWindow):
    """Search box, filters, sort, tabs, table and pager for one entity list."""

    def __init__(self, vm: EntityListVM) -> None:
        super().__init__()
        self.vm = vm
        self.setWindowTitle(f"Console d'administration - {vm.kind.value}")
        self.resize(1100, 700)
        self._filter_boxes: dict[str, QComboBox] = {}
        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        toolbar = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Rechercher...")
        toolbar.addWidget(self.search_edit, 2)

        for name in self.vm.profile.filter_names:
            box = QComboBox()
            self._filter_boxes[name] = box
            toolbar.addWidget(box, 1)

        self.sort_box = QComboBox()
        for key in self.vm.profile.sort_fields:
            for direction in ("asc", "desc"):
                self.sort_box.addItem(f"{key.value} ({SORT_LABELS[direction]})", f"{key.value}-{direction}")
        current = f"{self.vm.query.sort_key.value}-{self.vm.query.sort_direction.value}"
        self.sort_box.setCurrentIndex(max(0, self.sort_box.findData(current)))
        toolbar.addWidget(self.sort_box, 1)
        layout.addLayout(toolbar)

        self.tab_bar = QTabBar()
        self.tab_bar.setVisible(bool(self.vm.profile.tabs))
        layout.addWidget(self.tab_bar)

        self.table = QTableView()
        self.table.setSelectionBehavior(QTableView.SelectRows)
        self.table.setSortingEnabled(False)
        layout.addWidget(self.table, 1)

        pager = QHBoxLayout()
        self.summary_label = QLabel()
        self.prev_button = QPushButton("Précédent")
        self.next_button = QPushButton("Suivant")
        self.toggle_button = QPushButton("Activer / Désactiver")
        self.toggle_button.setVisible(self.vm.profile.supports_status)
        self.delete_button = QPushButton("Supprimer")
        pager.addWidget(self.summary_label, 1)
        pager.addWidget(self.toggle_button)
        pager.addWidget(self.delete_button)
        pager.addWidget(self.prev_button)
        pager.addWidget(self.next_button)
        layout.addLayout(pager)

        self.setCentralWidget(central)

    def _connect_signals(self) -> None:
        self.search_edit.textChanged.connect(self._on_search)
        self.sort_box.currentIndexChanged.connect(self._on_sort)
        for name, box in self._filter_boxes.items():
            box.currentIndexChanged.connect(lambda _i, n=name: self._on_filter(n))
        self.tab_bar.currentChanged.connect(self._on_tab)
        self.prev_button.clicked.connect(lambda: self._run(self.vm.prev_page))
        self.next_button.clicked.connect(lambda: self._run(self.vm.next_page))
        self.delete_button.clicked.connect(self._on_delete)
        self.toggle_button.clicked.connect(self._on_toggle)

    def _selected_id(self) -> str | None:
        indexes = self.table.selectionModel().selectedRows() if self.table.selectionModel() else []
        if not indexes:
            return None
        return indexes[0].data(ID_ROLE)

    def _run(self, action, *args) -> None:
        action(*args)
        self.refresh()

    def _on_search(self, text: str) -> None:
        self._run(self.vm.set_search_term, text)

    def _on_sort(self, _index: int) -> None:
        option = self.sort_box.currentData()
        if option:
            self._run(self.vm.set_sort_option, option)

    def _on_filter(self, name: str) -> None:
        value = self._filter_boxes[name].currentData()
        if value is not None:
            self._run(self.vm.set_filter, name, value)

    def _on_tab(self, index: int) -> None:
        if 0 <= index < len(self.vm.profile.tabs):
            self._run(self.vm.set_tab, self.vm.profile.tabs[index].id)

    def _on_delete(self) -> None:
        record_id = self._selected_id()
        if record_id is None:
            return
        answer = QMessageBox.question(self, "Confirmation", "Supprimer cet élément ?")
        if answer == QMessageBox.Yes:
            self._run(self.vm.delete, record_id)

    def _on_toggle(self) -> None:
        record_id = self._selected_id()
        if record_id is not None:
            self._run(self.vm.toggle_status, record_id)

    def _refresh_filters(self) -> None:
        for name, box in self._filter_boxes.items():
            selected = self.vm.query.filter_value(name)
            box.blockSignals(True)
            box.clear()
            for value, label in self.vm.options(name):
                box.addItem(label, value)
            box.setCurrentIndex(max(0, box.findData(selected)))
            box.blockSignals(False)

    def _refresh_tabs(self) -> None:
        self.tab_bar.blockSignals(True)
        while self.tab_bar.count():
            self.tab_bar.removeTab(0)
        for i, tab in enumerate(self.vm.tabs()):
            self.tab_bar.addTab(tab.caption)
            if tab.is_active:
                self.tab_bar.setCurrentIndex(i)
        self.tab_bar.blockSignals(False)

    def refresh(self) -> None:
        """Re-render every bound widget from the view-model."""
        if self.vm.logged_out:
            self.close()
            return
        self._refresh_filters()
        self._refresh_tabs()
        self.table.setModel(build_model(self.vm.rows, self.vm.kind))
        self.summary_label.setText(self.vm.error or self.vm.summary)
        view = self.vm.visible
        self.prev_button.setEnabled(view.page > 1)
        self.next_button.setEnabled(view.page < view.page_count)
        while self.vm.notices:
            notice = self.vm.notices[0]
            if notice.level == "error":
                logger.info("Showing error notice: {}", notice.message)
                QMessageBox.warning(self, "Erreur", notice.message)
            else:
                self.statusBar().showMessage(notice.message, 3000)
            self.vm.dismiss_notice(notice)
