from __future__ import annotations

from typing import Any, Iterable, List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...database.repositories.catalog_repo import CatalogItem, InventoryCatalog
from ...utils.helpers import fmt_money


class CatalogTableModel(QAbstractTableModel):
    """Goods & prices list; ITEM_ROLE returns the CatalogItem behind a row."""

    HEADERS = ["Item", "Price"]

    ITEM_ROLE = Qt.UserRole + 1

    def __init__(self, items: Optional[Iterable[CatalogItem]] = None):
        super().__init__()
        self._rows: List[CatalogItem] = list(items or [])

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        it = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return it.name if c == 0 else fmt_money(it.price)
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c == 1 else (Qt.AlignLeft | Qt.AlignVCenter)
        if role == self.ITEM_ROLE:
            return it
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole and 0 <= section < len(self.HEADERS):
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def refresh(self, catalog: InventoryCatalog, query: str = "") -> None:
        self.beginResetModel()
        self._rows = list(catalog.search(query))
        self.endResetModel()

    def at(self, row: int) -> CatalogItem:
        return self._rows[row]
