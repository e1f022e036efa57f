"""Tests for human input parsing."""

from dragonsolitaire.playtest.input import HumanPlayer
from dragonsolitaire.simulation.engine import Action, ActionKind


class TestParse:
    def test_place(self):
        result = HumanPlayer().parse("p 1 2")
        assert result.action == Action(ActionKind.PLACE, 1, 2)

    def test_resolve_long_form(self):
        result = HumanPlayer().parse("  Resolve 0 3 ")
        assert result.action == Action(ActionKind.RESOLVE, 0, 3)

    def test_quit(self):
        assert HumanPlayer().parse("q").quit
        assert HumanPlayer().parse("exit", choice_count=3).quit

    def test_bad_command(self):
        result = HumanPlayer().parse("x 1 1")
        assert result.action is None
        assert "Invalid input" in result.error

    def test_non_numeric_position(self):
        assert "must be numbers" in HumanPlayer().parse("p a b").error

    def test_empty_line_shows_usage(self):
        assert HumanPlayer().parse("").error

    def test_choice_is_one_indexed(self):
        result = HumanPlayer().parse("2", choice_count=3)
        assert result.action == Action(ActionKind.CHOOSE, index=1)

    def test_choice_out_of_range(self):
        assert "Enter 1-3" in HumanPlayer().parse("4", choice_count=3).error

    def test_board_commands_rejected_during_choice(self):
        assert HumanPlayer().parse("p 1 1", choice_count=3).error


class TestGetCommand:
    def test_reads_from_input_fn(self):
        player = HumanPlayer(input_fn=lambda prompt: "r 1 1")
        assert player.get_command().action == Action(ActionKind.RESOLVE, 1, 1)

    def test_eof_quits(self):
        def raise_eof(prompt):
            raise EOFError

        assert HumanPlayer(input_fn=raise_eof).get_command().quit
