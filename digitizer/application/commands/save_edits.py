"""SaveEdits Command - applies user edits to extracted rows.

Edits target a single cell of a complete page, addressed by row index and
column name. Editing a column a row does not have yet adds it to that row.
"""
from dataclasses import dataclass
from typing import List, Union

from digitizer.domain.entities.page_record import PageRecord, Row
from digitizer.domain.exceptions import EntityNotFoundError, EntityValidationError
from digitizer.domain.repositories.session_repository import SessionRepository

CellValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class CellEdit:
    row_index: int
    column: str
    value: CellValue


@dataclass(frozen=True)
class SaveEditsCommand:
    page_id: str
    edits: List[CellEdit]


class SaveEditsHandler:
    """Handles SaveEdits commands."""

    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, command: SaveEditsCommand) -> PageRecord:
        updated = self._session.update_page(command.page_id, lambda page: self._apply_edits(page, command))
        if updated is None:
            raise EntityNotFoundError("PageRecord", command.page_id)
        return updated

    @staticmethod
    def _apply_edits(page: PageRecord, command: SaveEditsCommand) -> PageRecord:
        if not page.is_eligible():
            raise EntityValidationError(
                "PageRecord",
                {"status": f"Only complete pages can be edited, page is {page.status.state.value}"},
            )

        rows: List[Row] = [dict(row) for row in page.extracted_data or []]
        for edit in command.edits:
            if not 0 <= edit.row_index < len(rows):
                raise EntityNotFoundError("Row", f"page={command.page_id}, row={edit.row_index}")
            column = edit.column.strip()
            if not column:
                raise EntityValidationError("CellEdit", {"column": "Column name is required"})
            rows[edit.row_index][column] = edit.value
        return page.with_rows(rows)
