"""Tests for reportspec.table module."""

from datetime import date

import pytest

from reportspec.args import Command, DataName, Frequency, NamedCollection, Single
from reportspec.errors import CalcError, ExpansionMismatch
from reportspec.report import render_text
from reportspec.selection import Selection
from reportspec.table import Table, split_axes
from reportspec.timespan import TimeFrequency

WEEKLY = Frequency(TimeFrequency.WEEKLY)
MONTHLY = Frequency(TimeFrequency.MONTHLY)
QUARTERLY = Frequency(TimeFrequency.QUARTERLY)
CHANGE = Command("change")
TOTAL = Command("total")
AVG_FREQ = Command("avg_freq")
D = date(2022, 2, 4)


class TestTableRender:
    """Tests for Table.render against the reference engine."""

    def test_cross_section(self, engine):
        tbl = Table([CHANGE, AVG_FREQ], [WEEKLY, QUARTERLY], Selection(data_name="cat_purrs", date=D))
        assert tbl.render(Selection(), engine) == (
            "\n"
            "| _ | Weekly | Quarterly |\n"
            "| --- | --- | --- |\n"
            "| change | 25.0% | 233.3% |\n"
            "| avg_freq | 10.0 | 130.0 |\n"
        )

    def test_total_row(self, engine):
        tbl = Table([TOTAL], [WEEKLY, QUARTERLY], Selection(data_name="cat_purrs", date=D))
        lines = tbl.render(Selection(), engine).strip("\n").split("\n")
        assert lines[2] == "| total | 10.0 | 130.0 |"

    def test_ambient_fills_what_is_left(self, engine):
        tbl = Table([CHANGE], [WEEKLY], Selection(data_name="cat_purrs"))
        out = tbl.render(Selection(date=D), engine)
        assert "| change | 25.0% |" in out

    def test_cell_failure_aborts(self, engine):
        # no date anywhere
        tbl = Table([CHANGE], [WEEKLY], Selection(data_name="cat_purrs"))
        with pytest.raises(CalcError):
            tbl.render(Selection(), engine)


class TestTableShape:
    """Shape of the rendered grid."""

    @pytest.mark.parametrize("n_rows,n_cols", [(1, 1), (2, 3), (4, 2)])
    def test_shape(self, echo, n_rows, n_cols):
        rows = [Command(f"r{i}") for i in range(n_rows)]
        cols = [DataName(f"c{j}") for j in range(n_cols)]
        lines = Table(rows, cols).render(Selection(), echo).strip("\n").split("\n")
        header, body = lines[0], lines[1:]
        assert header.count("|") == n_cols + 2  # n_cols + 1 cells
        assert len(body) == n_rows + 1          # separator + one line per row
        assert body[0].count("---") == n_cols + 1
        assert len(echo.calls) == n_rows * n_cols

    def test_row_label_first(self, echo):
        out = Table([CHANGE], [WEEKLY], Selection()).render(Selection(), echo)
        assert out.strip("\n").split("\n")[2].startswith("| change |")

    def test_multi_argument_row_label(self, echo):
        out = Table([(CHANGE, WEEKLY)], [DataName("cat_purrs")]).render(Selection(), echo)
        assert out.strip("\n").split("\n")[2].startswith("| change Weekly |")


class TestCellMerge:
    """base ⊕ row ⊕ col precedence."""

    def test_row_beats_column(self):
        tbl = Table([WEEKLY], [QUARTERLY])
        sel = tbl.cell_selection(WEEKLY, QUARTERLY, Selection())
        assert sel.frequency is TimeFrequency.WEEKLY

    def test_column_fills_what_row_left(self):
        tbl = Table([CHANGE], [WEEKLY])
        sel = tbl.cell_selection(CHANGE, WEEKLY, Selection())
        assert (sel.command, sel.frequency) == ("change", TimeFrequency.WEEKLY)

    def test_base_beats_row(self):
        tbl = Table([TOTAL], [WEEKLY], Selection(command="change"))
        assert tbl.cell_selection(TOTAL, WEEKLY, Selection()).command == "change"

    def test_axes_beat_ambient(self):
        tbl = Table([CHANGE], [WEEKLY])
        sel = tbl.cell_selection(CHANGE, WEEKLY, Selection(frequency=TimeFrequency.DAILY, date=D))
        assert sel.frequency is TimeFrequency.WEEKLY
        assert sel.date == D

    def test_base_untouched(self):
        base = Selection(data_name="cat_purrs")
        Table([CHANGE], [WEEKLY], base).cell_selection(CHANGE, WEEKLY, Selection(date=D))
        assert base == Selection(data_name="cat_purrs")

    def test_multi_argument_row_fills_every_field(self):
        tbl = Table([(CHANGE, MONTHLY)], [(WEEKLY, DataName("cat_purrs"))])
        sel = tbl.cell_selection(tbl.rows[0], tbl.cols[0], Selection())
        assert sel == Selection("change", TimeFrequency.MONTHLY, "cat_purrs")


class TestSplitAxes:
    """Tests for split_axes."""

    def test_split(self):
        rows, cols, rest = split_axes([
            NamedCollection("rows", (CHANGE, TOTAL)),
            Single(DataName("cat_purrs")),
            NamedCollection("cols", (WEEKLY,)),
        ])
        assert rows == [(CHANGE,), (TOTAL,)]
        assert cols == [(WEEKLY,)]
        assert rest == [Single(DataName("cat_purrs"))]

    def test_repeated_axis_is_zipped(self):
        rows, cols, _ = split_axes([
            NamedCollection("rows", (CHANGE, TOTAL)),
            NamedCollection("rows", (WEEKLY, MONTHLY)),
            NamedCollection("cols", (DataName("cat_purrs"),)),
        ])
        assert rows == [(CHANGE, WEEKLY), (TOTAL, MONTHLY)]
        assert cols == [(DataName("cat_purrs"),)]

    def test_repeated_axis_length_mismatch(self):
        with pytest.raises(ExpansionMismatch, match="rows"):
            split_axes([
                NamedCollection("rows", (CHANGE, TOTAL)),
                NamedCollection("rows", (WEEKLY,)),
                NamedCollection("cols", (DataName("cat_purrs"),)),
            ])

    def test_missing_rows(self):
        with pytest.raises(ExpansionMismatch, match="rows"):
            split_axes([NamedCollection("cols", (WEEKLY,))])


class TestZippedAxesEndToEnd:
    """Repeated axes in template source."""

    def test_zipped_rows(self, registry, engine):
        src = "{{ table(rows: [change, total], rows: [Weekly, Quarterly], cols: [cat_purrs]) }}"
        assert render_text(src, registry, engine) == (
            "\n"
            "| _ | cat purrs |\n"
            "| --- | --- |\n"
            "| change Weekly | 25.0% |\n"
            "| total Quarterly | 130.0 |\n"
        )

    def test_zipped_rows_length_mismatch(self, registry, engine):
        src = "{{ table(rows: [change, total], rows: [Weekly], cols: [cat_purrs]) }}"
        with pytest.raises(ExpansionMismatch, match=r"in clause"):
            render_text(src, registry, engine)
