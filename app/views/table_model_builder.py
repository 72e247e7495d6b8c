from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtGui import QStandardItem, QStandardItemModel

from app.viewmodels.record_vm import RecordVM
from app.views.constants import ACTIVE_ROLE, COLUMNS, ID_ROLE, headers
from core.models import EntityKind


def build_model(rows: Iterable[RecordVM], kind: EntityKind) -> QStandardItemModel:
    """Builds a flat, read-only table model for one page of records.

    Rows arrive already filtered, sorted and paginated; the model never
    re-sorts them.
    """
    model = QStandardItemModel()
    model.setHorizontalHeaderLabels(headers(kind))
    columns = COLUMNS[kind]

    for vm in rows:
        items = [QStandardItem(column.text(vm)) for column in columns]
        for it in items:
            it.setEditable(False)
        items[0].setData(vm.id, ID_ROLE)
        items[0].setData(vm.is_active, ACTIVE_ROLE)
        model.appendRow(items)

    return model
