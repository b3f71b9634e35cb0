"""End-to-end tests for the click command line."""

from click.testing import CliRunner

from ordering.infrastructure.cli.main import cli

_ITEMS = "Laptop:1200:1,Mouse:25:4,Keyboard:75:1,Monitor:300:1"


class TestQuoteCommand:

    def test_quote_prints_totals(self):
        result = CliRunner().invoke(cli, ["order", "quote", "--items", _ITEMS])
        assert result.exit_code == 0, result.output
        assert "$1675.00" in result.output
        assert "$167.50" in result.output
        assert "$1507.50" in result.output
        assert "status=DRAFT" in result.output

    def test_quote_with_coupon_and_submit(self):
        result = CliRunner().invoke(
            cli, ["order", "quote", "--items", _ITEMS, "--coupon", "SAVE20", "--submit"]
        )
        assert result.exit_code == 0, result.output
        assert "Coupon:   SAVE20" in result.output
        assert "$1172.50" in result.output
        assert "status=SUBMITTED" in result.output

    def test_malformed_item_rejected(self):
        result = CliRunner().invoke(cli, ["order", "quote", "--items", "Laptop:1200"])
        assert result.exit_code == 2
        assert "Invalid item format" in result.output

    def test_non_integer_quantity_rejected(self):
        result = CliRunner().invoke(cli, ["order", "quote", "--items", "Laptop:1200:one"])
        assert result.exit_code == 2
        assert "Invalid quantity" in result.output

    def test_domain_error_reported(self):
        result = CliRunner().invoke(cli, ["order", "quote", "--items", "Laptop:0:1"])
        assert result.exit_code == 1
        assert "Unit price must be positive" in result.output


class TestDemoCommand:

    def test_demo_walks_the_lifecycle(self):
        result = CliRunner().invoke(cli, ["order", "demo"])
        assert result.exit_code == 0, result.output
        assert "Items in order: 3" in result.output
        assert "Total:    $1172.50" in result.output
        assert "Status: SHIPPED" in result.output
        assert "Cannot modify a non-draft order" in result.output
        assert "Cannot cancel a shipped order" in result.output

    def test_verbose_flag_accepted(self):
        result = CliRunner().invoke(cli, ["-v", "order", "demo"])
        assert result.exit_code == 0, result.output
