from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...database.repositories.entries_repo import LedgerEntry
from ...utils.helpers import fmt_money
from .balances import CustomerSummary, filter_by_name_prefix, summarize, total_outstanding


class CustomerBalancesTableModel(QAbstractTableModel):
    """
    Customer balance list, biggest debt first.

    - refresh() re-derives the rows from the full entry list every time; the
      model never patches rows incrementally.
    - Negative balances are shown as a positive amount with "(Advance)".
    - SUMMARY_ROLE returns the CustomerSummary behind a row.
    """

    HEADERS = ["Customer", "Balance", "Last Entry"]

    SUMMARY_ROLE = Qt.UserRole + 1

    def __init__(self, summaries: Optional[Iterable[CustomerSummary]] = None):
        super().__init__()
        self._rows: List[CustomerSummary] = list(summaries or [])

    # --- Qt model basics ----------------------------------------------------

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None

        s = self._rows[index.row()]
        c = index.column()

        if role == Qt.DisplayRole:
            if c == 0:
                return s.customer_name
            if c == 1:
                text = fmt_money(abs(s.total_owed))
                return f"{text} (Advance)" if s.is_advance else text
            if c == 2:
                return s.last_entry_date.strftime("%Y-%m-%d %H:%M")
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c == 1 else (Qt.AlignLeft | Qt.AlignVCenter)
        if role == self.SUMMARY_ROLE:
            return s
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole and 0 <= section < len(self.HEADERS):
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    # --- helpers ------------------------------------------------------------

    def refresh(self, entries: Iterable[LedgerEntry], query: str = "") -> None:
        self.beginResetModel()
        self._rows = filter_by_name_prefix(summarize(entries), query)
        self.endResetModel()

    def at(self, row: int) -> CustomerSummary:
        return self._rows[row]

    def total_outstanding(self) -> Decimal:
        """Total of the rows currently shown."""
        return total_outstanding(self._rows)
