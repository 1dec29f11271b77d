"""Tests for the foodcost command line."""

import json

import pytest

from foodcost.cli import main


def _run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr()


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
    assert "usage" in capsys.readouterr().out.lower()


class TestUnits:
    def test_lists_categories(self, capsys):
        out = _run(capsys, "units").out
        assert "Weight:" in out
        assert "Volume (US):" in out
        assert "Volume (metric):" in out
        assert "tbsp" in out
        assert "kilograms" in out

    def test_convert(self, capsys):
        assert _run(capsys, "convert", "lb", "oz").out.strip() == "1 lb = 16 oz"
        assert _run(capsys, "convert", "gal", "cup").out.strip() == "1 gal = 16 cup"

    def test_convert_incompatible(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert", "lb", "gal"])
        assert exc_info.value.code == 1
        assert "not convertible" in capsys.readouterr().err

    def test_convert_unknown_unit(self, capsys):
        with pytest.raises(SystemExit):
            main(["convert", "stone", "lb"])
        assert "Unknown unit: stone" in capsys.readouterr().err


class TestRecipe:
    def test_json_ranked(self, capsys, week_file):
        payload = json.loads(_run(capsys, "recipe", str(week_file), "--json").out)
        assert [row["id"] for row in payload] == ["quesadilla", "taco", "water"]

        taco = payload[1]
        assert taco["total_cost"] == pytest.approx(0.9063, abs=1e-4)
        assert taco["food_cost_percentage"] == pytest.approx(30.21, abs=0.01)

    def test_single_menu_item(self, capsys, week_file):
        out = _run(capsys, "recipe", str(week_file), "--menu-item", "quesadilla").out
        assert "Quesadilla (quesadilla)" in out
        assert "Cheddar" in out
        assert "5.00%" in out
        assert "Beef Taco" not in out

    def test_unknown_menu_item(self, capsys, week_file):
        with pytest.raises(SystemExit):
            main(["recipe", str(week_file), "--menu-item", "nachos"])
        assert "Menu item not found" in capsys.readouterr().err


class TestReport:
    def test_text(self, capsys, week_file):
        out = _run(capsys, "report", str(week_file)).out
        assert "Week 2025-W05" in out
        assert "47.50" in out
        assert "18.96%  [excellent]" in out
        assert "81.04%  [excellent]" in out
        assert "Ground Beef" in out

    def test_json(self, capsys, week_file):
        payload = json.loads(_run(capsys, "report", str(week_file), "--json").out)
        assert payload["summary"]["totals"]["total_cost_of_sales"] == 47.5
        assert payload["sales"]["net_sales"] == 218.15
        assert payload["gross_profit"] == 203.0
        assert "cost_snapshot" not in payload

    def test_finalize(self, capsys, week_file):
        payload = json.loads(
            _run(capsys, "report", str(week_file), "--finalize", "--by", "manager", "--json").out
        )
        snapshot = {row["ingredient_id"]: row for row in payload["cost_snapshot"]}
        assert snapshot["beef"]["unit_cost"] == 2.5
        assert snapshot["beef"]["source_version_id"] == "1735689600000"
        assert payload["summary"]["totals"]["total_cost_of_sales"] == 47.5

    def test_finalize_already_finalized(self, capsys, tmp_path, week_payload):
        week_payload["week"]["status"] = "finalized"
        path = tmp_path / "final.json"
        path.write_text(json.dumps(week_payload), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["report", str(path), "--finalize"])
        assert exc_info.value.code == 1
        assert "already finalized" in capsys.readouterr().err

    def test_missing_file(self, capsys, tmp_path):
        with pytest.raises(SystemExit):
            main(["report", str(tmp_path / "nope.json")])
        assert "Error:" in capsys.readouterr().err

    def test_currency_from_config(self, capsys, tmp_path, week_file):
        config = tmp_path / "foodcost.toml"
        config.write_text('[report]\ncurrency_symbol = "£"\n', encoding="utf-8")
        out = _run(capsys, "-c", str(config), "report", str(week_file)).out
        assert "£" in out

    def test_pdf(self, capsys, tmp_path, week_file):
        pytest.importorskip("reportlab")
        output = tmp_path / "report.pdf"
        _run(capsys, "report", str(week_file), "--pdf", str(output))
        assert output.read_bytes()[:4] == b"%PDF"
