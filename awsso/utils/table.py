from typing import List, Optional, Sequence


class Table:
    """
    Plain-text table with named columns.

    Rows are sequences of strings in column order. Columns are padded to the
    widest cell (or header) and separated by a single space.
    """

    def __init__(self, columns: Sequence[str]):
        self.columns = list(columns)
        self.rows: List[List[str]] = []

    def add_row(self, *values: Optional[str]) -> None:
        """
        Append a row.

        Args:
            values: One value per column; None renders as an empty cell
        """
        if len(values) != len(self.columns):
            raise ValueError(
                f"Row has {len(values)} values but the table has {len(self.columns)} columns"
            )
        self.rows.append(["" if v is None else str(v) for v in values])

    def widths(self) -> List[int]:
        """Width of each column."""
        widths = [len(c) for c in self.columns]
        for row in self.rows:
            widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
        return widths

    def render(self) -> str:
        """
        Render the header and rows.

        Returns:
            str: The table, or an empty string when there are no rows
        """
        if not self.rows:
            return ""

        widths = self.widths()

        def fmt(cells):
            return " ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

        lines = [fmt([c.upper() for c in self.columns])]
        lines.extend(fmt(row) for row in self.rows)
        return "\n".join(lines)


def render_table(columns: Sequence[str], rows: Sequence[Sequence[Optional[str]]]) -> str:
    """
    Render rows as a table.

    Args:
        columns: Column names
        rows: Row values, one per column

    Returns:
        str: The rendered table
    """
    table = Table(columns)
    for row in rows:
        table.add_row(*row)
    return table.render()
