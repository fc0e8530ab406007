import openpyxl
from dataclasses import dataclass, field
from io import BytesIO
import logging
import re
from typing import Dict, List, Sequence
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter


# Configure logging
logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_FORMULA_LEADERS = ("=", "+", "-", "@")  # anything Excel may treat as a formula


def _clean_cell(v):
    """Return a version of v that Excel accepts, never as an accidental formula."""
    if v is None:
        return None
    if isinstance(v, (int, float)):
        return v
    s = str(v)
    s = _CONTROL_CHARS.sub("", s)[:32767]
    if s.startswith(_FORMULA_LEADERS):
        s = "'" + s
    return s


@dataclass
class SheetGrid:
    """One worksheet as plain data: a title, a 2-D grid of cells, and formatting hints."""
    title: str
    rows: List[List[object]] = field(default_factory=list)
    bold_rows: Sequence[int] = ()                                # 0-based row indexes
    column_widths: Dict[int, float] = field(default_factory=dict)  # 0-based column index -> width


class OpenPyXLFileHandler:
    """
    A file handler class that abstracts operations for building and reading Excel files using openpyxl.
    """

    def __init__(self, workbook=None):
        """
        Initialize the file handler with an existing workbook.
        """
        self.workbook = workbook

    @classmethod
    def from_bytes(cls, data, data_only=True):
        """
        Initialize the file handler from in-memory .xlsx bytes.

        :param data: The workbook contents
        :type data: bytes
        :param data_only: Whether to read the values instead of formulas
        :type data_only: bool
        :return: An initialized file handler
        :rtype: OpenPyXLFileHandler
        """
        workbook = openpyxl.load_workbook(BytesIO(data), data_only=data_only)
        return cls(workbook=workbook)

    @classmethod
    def from_sheet_grids(cls, grids):
        """
        Initialize the file handler with one worksheet per grid, in order.

        :param grids: Sheets to write. An empty list gives a workbook with no sheets.
        :type grids: list[SheetGrid]
        :return: An initialized file handler
        :rtype: OpenPyXLFileHandler
        """
        handler = cls()
        handler._create_excel_file(grids)
        return handler

    def get_sheet_names(self):
        """
        Get the names of all sheets in the workbook.

        :return: List of sheet names
        :rtype: list[str]
        """
        if self.workbook is None:
            raise ValueError("Workbook is not loaded.")
        return self.workbook.sheetnames

    def get_sheet(self, sheet_name):
        """
        Get a specific sheet by name.

        :param sheet_name: Name of the sheet
        :type sheet_name: str
        :return: The sheet object
        :rtype: openpyxl.worksheet.worksheet.Worksheet
        """
        if self.workbook is None:
            raise ValueError("Workbook is not loaded.")
        return self.workbook[sheet_name]

    def get_rows(self, sheet, start_row=1):
        """
        Get all rows starting from a specific row.

        :param sheet: The sheet object
        :type sheet: openpyxl.worksheet.worksheet.Worksheet
        :param start_row: The starting row number
        :type start_row: int
        :return: List of rows, where each row is a tuple of cell values
        :rtype: list[tuple]
        """
        return list(sheet.iter_rows(min_row=start_row, values_only=True))

    def _create_excel_file(self, grids):
        """
        Internal method to create a new Excel workbook with one sheet per grid.

        Blank cells ('' or None) are left unwritten so they stay truly empty.
        Text has control characters stripped and is never written as a formula.

        :param grids: Sheets to write
        :type grids: list[SheetGrid]
        """
        self.workbook = openpyxl.Workbook()
        # Start from nothing; openpyxl always hands us a default sheet.
        self.workbook.remove(self.workbook.active)

        bold = Font(bold=True)
        for grid in grids:
            sheet = self.workbook.create_sheet(title=grid.title)

            for row_idx, row in enumerate(grid.rows, start=1):
                for col_idx, value in enumerate(row, start=1):
                    value = _clean_cell(value)
                    if value is None or value == "":
                        continue
                    sheet.cell(row=row_idx, column=col_idx, value=value)

            for row_idx in grid.bold_rows:
                row = grid.rows[row_idx] if row_idx < len(grid.rows) else []
                for col_idx in range(1, len(row) + 1):
                    sheet.cell(row=row_idx + 1, column=col_idx).font = bold

            for col_idx, width in grid.column_widths.items():
                sheet.column_dimensions[get_column_letter(col_idx + 1)].width = width

    def to_bytes(self):
        """
        Serialise the workbook to .xlsx bytes.

        :return: The file contents, or None when the workbook has no sheets.
        :rtype: bytes | None
        """
        if self.workbook is None:
            raise ValueError("No workbook is loaded or created to save.")

        if not self.workbook.worksheets:
            logger.info("Workbook has no sheets. No file created.")
            return None

        out = BytesIO()
        self.workbook.save(out)
        logger.info(f"Workbook serialised with {len(self.workbook.worksheets)} sheet(s)")
        return out.getvalue()
