"""Tests for dice CLI commands."""

from unittest.mock import patch

from typer.testing import CliRunner

from charforge.cli.main import app
from tests.factories import FixedRandomSource


runner = CliRunner()


def _source(*values):
    return patch(
        "charforge.cli.commands.dice.default_source",
        return_value=FixedRandomSource(values),
    )


class TestRollCommand:
    """Tests for the roll command."""

    def test_roll_formula(self):
        """Shows the total of a roll."""
        with _source(12):
            result = runner.invoke(app, ["roll", "1d20+5"])

        assert result.exit_code == 0
        assert "17" in result.output

    def test_natural_twenty(self):
        """Flags natural 20s."""
        with _source(20):
            result = runner.invoke(app, ["roll", "1d20"])

        assert result.exit_code == 0
        assert "natural 20" in result.output

    def test_drop_lowest(self):
        """4d6dl1 keeps the highest three."""
        with _source(3, 5, 1, 6):
            result = runner.invoke(app, ["roll", "4d6dl1"])

        assert result.exit_code == 0
        assert "14" in result.output

    def test_repeated_rolls_show_stats(self):
        """Rolling more than once prints statistics."""
        with _source(4, 5, 6):
            result = runner.invoke(app, ["roll", "1d6", "--times", "3"])

        assert result.exit_code == 0
        assert "3 rolls: mean 5.00, min 4, max 6" in result.output

    def test_malformed_formula(self):
        """Malformed formulas exit with an error."""
        result = runner.invoke(app, ["roll", "2x6"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_advantage(self):
        """Advantage keeps the higher d20."""
        with _source(5, 15):
            result = runner.invoke(app, ["roll", "1d20", "--advantage"])

        assert result.exit_code == 0
        assert "Advantage" in result.output
        assert "15" in result.output

    def test_disadvantage(self):
        """Disadvantage keeps the lower d20."""
        with _source(5, 15):
            result = runner.invoke(app, ["roll", "1d20", "-d"])

        assert result.exit_code == 0
        assert "Disadvantage" in result.output

    def test_advantage_needs_single_d20(self):
        """Advantage is rejected for other formulas."""
        with _source(1, 2, 3, 4):
            result = runner.invoke(app, ["roll", "2d6", "--advantage"])

        assert result.exit_code == 1

    def test_advantage_and_disadvantage(self):
        """Both flags together are rejected."""
        result = runner.invoke(app, ["roll", "1d20", "-a", "-d"])

        assert result.exit_code == 1
        assert "not both" in result.output


class TestAbilitiesCommand:
    """Tests for the abilities command."""

    def test_default_method(self):
        """Rolls 4d6 drop lowest six times."""
        with _source(*([6, 6, 6, 1] * 6)):
            result = runner.invoke(app, ["abilities"])

        assert result.exit_code == 0
        assert "Ability Scores" in result.output
        assert "Total: 108" in result.output

    def test_three_d6(self):
        """Alternate method."""
        with _source(*([3, 3, 3] * 6)):
            result = runner.invoke(app, ["abilities", "--method", "3d6"])

        assert result.exit_code == 0
        assert "Total: 54" in result.output
