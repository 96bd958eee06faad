#!/usr/bin/env python3
"""
Integration tests for samla-search.
"""
import pytest
from click.testing import CliRunner

from samla.database import SamlaDB
from samla.search.cli import cli


@pytest.fixture
def home(tmp_path):
    db = SamlaDB(tmp_path / "Data" / "samla.db")
    with db.session_scope():
        location = db.locations.create({"name": "L1"})
        box = db.boxes.create(location.id, "B1")
        set_id = db.sets.create_bag_with_set(box.id, "0001", "Castle Set", "Acme")
        db.tags.set_tags(set_id, ["castle"])
    db.close()
    return tmp_path


class TestSearchCLI:

    def test_prints_results(self, home):
        result = CliRunner().invoke(cli, ["--home", str(home), "cas"])

        assert result.exit_code == 0, result.output
        assert "B1/0001  Castle Set  (Acme, L1, #castle)" in result.output
        assert "1 result(s)" in result.output

    def test_multi_word_query_is_joined(self, home):
        result = CliRunner().invoke(cli, ["--home", str(home), "@box", "b1", "--sort", "box"])

        assert result.exit_code == 0
        assert "Castle Set" in result.output

    def test_no_results(self, home):
        result = CliRunner().invoke(cli, ["--home", str(home), "nomatch"])

        assert result.exit_code == 0
        assert "No results" in result.output

    def test_invalid_sort(self, home):
        result = CliRunner().invoke(cli, ["--home", str(home), "--sort", "price", "x"])
        assert result.exit_code == 2
