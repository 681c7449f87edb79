"""Tests for advisory line classification and the table state machine."""

import pytest

from agriadvisor.core.types import (
    BulletBlock,
    HeadingBlock,
    ParagraphBlock,
    SubHeadingBlock,
    TableBlock,
)
from agriadvisor.render.layout import LineClassifier, TableState, classify, split_row


class TestSplitRow:
    def test_outer_fields_dropped(self):
        assert split_row("| Crop | Yield |") == ["Crop", "Yield"]

    def test_cells_trimmed(self):
        assert split_row("|  Rice  |   4 t/ha|") == ["Rice", "4 t/ha"]

    def test_line_without_pipes_is_empty(self):
        assert split_row("Harvest in October") == []

    def test_single_pipe_prefix(self):
        assert split_row("| note") == []


class TestSingleLines:
    @pytest.mark.parametrize("line,level,text", [
        ("# Overview", 1, "Overview"),
        ("### Soil Preparation", 3, "Soil Preparation"),
        ("###### Deep", 6, "Deep"),
    ])
    def test_heading_levels(self, line, level, text):
        assert classify(line) == [HeadingBlock(text=text, level=level)]

    def test_seven_hashes_is_paragraph(self):
        assert classify("####### Too deep") == [ParagraphBlock(text="####### Too deep")]

    def test_hash_without_space_is_paragraph(self):
        assert classify("#hashtag") == [ParagraphBlock(text="#hashtag")]

    def test_subheading_drops_colon(self):
        assert classify("Recommended Crops:") == [SubHeadingBlock(text="Recommended Crops")]

    def test_lowercase_start_is_not_subheading(self):
        assert classify("recommended crops:") == [ParagraphBlock(text="recommended crops:")]

    def test_subheading_with_digits_is_paragraph(self):
        assert classify("Phase 1:") == [ParagraphBlock(text="Phase 1:")]

    @pytest.mark.parametrize("line", ["- Sow after rains", "* Sow after rains"])
    def test_bullets(self, line):
        assert classify(line) == [BulletBlock(text="Sow after rains")]

    def test_lines_are_trimmed(self):
        assert classify("   - indented bullet  ") == [BulletBlock(text="indented bullet")]

    def test_blank_outside_table_is_empty_paragraph(self):
        assert classify("") == [ParagraphBlock(text="")]


class TestTables:
    def test_table_closed_by_blank_line(self):
        text = "| Crop | Yield |\n| Rice | 4 t |\n| Maize | 6 t |\n\n## Next"
        blocks = classify(text)

        assert blocks == [
            TableBlock(rows=[["Crop", "Yield"], ["Rice", "4 t"], ["Maize", "6 t"]]),
            HeadingBlock(text="Next", level=2),
        ]

    def test_header_and_body(self):
        table = classify("| A | B |\n| 1 | 2 |\n| 3 | 4 |")[0]
        assert table.header == ["A", "B"]
        assert table.body == [["1", "2"], ["3", "4"]]

    def test_table_flushed_at_end_of_input(self):
        assert classify("| only | row |") == [TableBlock(rows=[["only", "row"]])]

    def test_separator_row_kept_as_row(self):
        table = classify("| A | B |\n|---|---|\n| 1 | 2 |")[0]
        assert table.rows[1] == ["---", "---"]

    def test_prose_inside_table_becomes_row(self):
        blocks = classify("| A | B |\nHarvest in October\n| C | D |")
        assert blocks == [TableBlock(rows=[["A", "B"], [], ["C", "D"]])]

    def test_heading_inside_table_does_not_close_it(self):
        blocks = classify("| A | B |\n## Mid\n| C | D |\n")
        assert blocks == [
            HeadingBlock(text="Mid", level=2),
            TableBlock(rows=[["A", "B"], ["C", "D"]]),
        ]

    def test_two_tables_separated_by_blank(self):
        blocks = classify("| A |\n\n| B |")
        assert blocks == [TableBlock(rows=[["A"]]), TableBlock(rows=[["B"]])]


class TestLineClassifier:
    def test_state_transitions(self):
        classifier = LineClassifier()
        assert classifier.state is TableState.OUTSIDE

        assert classifier.feed("| a | b |") == []
        assert classifier.state is TableState.INSIDE

        flushed = classifier.feed("")
        assert flushed == [TableBlock(rows=[["a", "b"]])]
        assert classifier.state is TableState.OUTSIDE
        assert classifier.rows == []

    def test_finish_with_nothing_open(self):
        classifier = LineClassifier()
        classifier.feed("plain text")
        assert classifier.finish() == []

    def test_mixed_advisory(self):
        text = "\n".join([
            "# Farm Advisory",
            "Soil Health:",
            "- Add compost",
            "Water twice a week.",
            "| Month | Task |",
            "| June | Sowing |",
            "",
            "Done",
        ])
        assert classify(text) == [
            HeadingBlock(text="Farm Advisory", level=1),
            SubHeadingBlock(text="Soil Health"),
            BulletBlock(text="Add compost"),
            ParagraphBlock(text="Water twice a week."),
            TableBlock(rows=[["Month", "Task"], ["June", "Sowing"]]),
            ParagraphBlock(text="Done"),
        ]
