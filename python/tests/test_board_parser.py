"""Tests for ksu.board.parser -- column headings and card links."""

from ksu.board.parser import columns, parse_board
from ksu.board.types import BoardCard


BOARD = (
    "---\n"
    "kanban-plugin: basic\n"
    "---\n"
    "\n"
    "## Todo\n"
    "\n"
    "- [ ] [[Task A]]\n"
    "- [ ] [[Task B]] see also [[Task C]]\n"
    "\n"
    "## in-progress\n"
    "\n"
    "## done\n"
    "\n"
    "- [x] [[Task D]]\n"
    "\n"
    "%% kanban:settings\n"
    "```\n"
    '{"kanban-plugin":"basic"}\n'
    "```\n"
    "%%\n"
)


def test_parse_board_basic():
    cards = parse_board(BOARD)
    assert cards == [
        BoardCard("Todo", "Task A"),
        BoardCard("Todo", "Task B"),
        BoardCard("done", "Task D"),
    ]


def test_only_first_link_per_line():
    cards = parse_board("## Todo\n- [[One]] and [[Two]]\n")
    assert [c.target for c in cards] == ["One"]


def test_lines_before_first_heading_ignored():
    cards = parse_board("- [[Orphan]]\n## Todo\n- [[Kept]]\n")
    assert cards == [BoardCard("Todo", "Kept")]


def test_empty_board_yields_nothing():
    assert parse_board("") == []
    assert parse_board("no headings here\n[[x]]\n") == []


def test_heading_text_is_trimmed():
    cards = parse_board("##   done  \n- [[A]]\n")
    assert cards == [BoardCard("done", "A")]


def test_deeper_headings_are_not_columns():
    cards = parse_board("## Todo\n### Notes\n- [[A]]\n")
    assert cards == [BoardCard("Todo", "A")]


def test_h1_is_not_a_column():
    assert parse_board("# Board\n- [[A]]\n") == []


def test_blank_heading_closes_nothing_useful():
    assert parse_board("##  \n- [[A]]\n") == []


def test_link_target_kept_verbatim():
    cards = parse_board("## Todo\n- [[projects/tasks/Task A|Alias]]\n")
    assert cards[0].target == "projects/tasks/Task A|Alias"


def test_crlf_line_endings():
    cards = parse_board("## done\r\n- [[A]]\r\n")
    assert cards == [BoardCard("done", "A")]


def test_quadrant_heading_kept_exactly():
    cards = parse_board("## \U0001f534 Do First (I & U)\n- [[Task A]]\n")
    assert cards == [BoardCard("\U0001f534 Do First (I & U)", "Task A")]


def test_duplicate_links_reemitted_in_order():
    cards = parse_board("## Todo\n- [[A]]\n## done\n- [[A]]\n")
    assert cards == [BoardCard("Todo", "A"), BoardCard("done", "A")]


def test_each_card_column_is_nearest_preceding_heading():
    text = "## one\n[[a]]\nplain\n## two\n## three\n[[b]]\n[[c]]\n"
    cards = parse_board(text)
    assert len(cards) <= text.count("[[")
    assert [(c.column, c.target) for c in cards] == [
        ("one", "a"), ("three", "b"), ("three", "c"),
    ]


def test_columns_lists_headings_in_order():
    assert columns(BOARD) == ["Todo", "in-progress", "done"]
