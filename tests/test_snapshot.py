# -*- coding: utf-8 -*-
"""Tests for reference snapshots, the snapshot store and file loading."""

import json
import threading

import pytest
import yaml

from nprint.config import NPrintConfig, set_config
from nprint.exceptions import HeaderMismatchError, SnapshotError
from nprint.normalizer import TableName
from nprint.snapshot import ReferenceTables, SnapshotStore, load_reference_tables


class TestReferenceTables:
    """Tests for ReferenceTables."""

    def test_empty_snapshot(self):
        tables = ReferenceTables()
        assert not tables.is_populated
        assert all(tables[name] == () for name in TableName)
        assert len(tables) == len(TableName)

    def test_from_raw_accepts_sheet_and_logical_names(self):
        tables = ReferenceTables.from_raw({
            "sewage_ratings": [["Income", "N_removal_rating"], ["Low-income countries", "0"]],
            "country_income": [["Country", "iso_a3", "Income"], ["Testland", "TST", "High income"]],
        })
        assert tables.is_populated
        assert tables[TableName.SEWAGE_REMOVAL][0]["income"] == "Low-income countries"
        assert tables.get(TableName.COUNTRY_INCOME)[0]["iso3"] == "TST"
        assert tables[TableName.PRODUCTION_FACTOR] == ()

    def test_header_only_tables_are_not_populated(self):
        tables = ReferenceTables.from_raw({"GDP": [["Country", "iso_a3", "Income"]]})
        assert not tables.is_populated

    def test_records_are_read_only(self, reference_tables):
        record = reference_tables[TableName.COUNTRY_INCOME][0]
        with pytest.raises(TypeError):
            record["income"] = "Low income"

    def test_source_rows_are_copied(self):
        raw = {"sewage_ratings": [["Income", "N_removal_rating"], ["Low-income countries", "0"]]}
        tables = ReferenceTables.from_raw(raw)
        raw["sewage_ratings"][1][1] = "0.9"
        assert tables[TableName.SEWAGE_REMOVAL][0]["removal_fraction"] == "0"

    def test_unknown_table(self):
        with pytest.raises(SnapshotError) as exc_info:
            ReferenceTables.from_raw({"GDP_2019": []})
        assert exc_info.value.context["table"] == "GDP_2019"

    @pytest.mark.parametrize("rows", [5, "Country,iso_a3,Income", {"Country": "Testland"}])
    def test_rows_must_be_a_list(self, rows):
        with pytest.raises(SnapshotError) as exc_info:
            ReferenceTables.from_raw({"GDP": rows})
        assert exc_info.value.context["table"] == "GDP"

    @pytest.mark.parametrize("row", ["Testland,TST", {"Country": "Testland"}, 7])
    def test_each_row_must_be_a_list(self, row):
        raw = {"GDP": [["Country", "iso_a3", "Income"], row]}
        with pytest.raises(SnapshotError) as exc_info:
            ReferenceTables.from_raw(raw)
        assert exc_info.value.context == {"table": "GDP", "row": 1}

    def test_blank_rows_are_accepted(self):
        raw = {"GDP": [["Country", "iso_a3", "Income"], None, []]}
        assert len(ReferenceTables.from_raw(raw)[TableName.COUNTRY_INCOME]) == 2

    def test_strict_header_policy_from_config(self):
        raw = {"GDP": [["Land", "iso", "Income"], ["Testland", "TST", "High income"]]}
        with pytest.raises(HeaderMismatchError):
            ReferenceTables.from_raw(raw)

    def test_warn_header_policy_from_config(self):
        set_config(NPrintConfig(header_policy="warn"))
        raw = {"GDP": [["Land", "iso", "Income"], ["Testland", "TST", "High income"]]}
        tables = ReferenceTables.from_raw(raw)
        assert tables[TableName.COUNTRY_INCOME][0]["country"] == "Testland"

    def test_explicit_policy_overrides_config(self):
        raw = {"GDP": [["Land", "iso", "Income"], ["Testland", "TST", "High income"]]}
        tables = ReferenceTables.from_raw(raw, header_policy="warn")
        assert tables.is_populated

    def test_row_counts(self, reference_tables):
        counts = reference_tables.row_counts()
        assert counts["country_energy_profile"] == 3
        assert counts["sewage_removal"] == 3


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_starts_empty(self):
        store = SnapshotStore()
        assert not store.current().is_populated
        assert store.version == 0

    def test_replace(self, reference_tables):
        store = SnapshotStore()
        store.replace(reference_tables)
        assert store.current() is reference_tables
        assert store.version == 1

    def test_replace_rejects_other_types(self):
        with pytest.raises(TypeError):
            SnapshotStore().replace({"GDP": []})

    def test_failed_refresh_keeps_current_snapshot(self, reference_tables):
        store = SnapshotStore(reference_tables)
        with pytest.raises(HeaderMismatchError):
            store.refresh_from_raw({"GDP": [["bad", "header", "row"]]})
        assert store.current() is reference_tables
        assert store.version == 0

    def test_refresh_from_raw(self, raw_tables):
        store = SnapshotStore()
        snapshot = store.refresh_from_raw(raw_tables)
        assert store.current() is snapshot
        assert snapshot.is_populated

    def test_readers_see_whole_snapshots(self, raw_tables):
        first = ReferenceTables.from_raw(raw_tables)
        second = ReferenceTables()
        store = SnapshotStore(first)
        seen = []

        def reader():
            for _ in range(200):
                seen.append(store.current())

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(50):
            store.replace(second if i % 2 == 0 else first)
        for t in threads:
            t.join()

        assert all(snapshot is first or snapshot is second for snapshot in seen)


class TestLoadReferenceTables:
    """Tests for load_reference_tables."""

    def test_load_json(self, tables_file):
        tables = load_reference_tables(tables_file)
        assert len(tables[TableName.FOOD_ATTRIBUTE]) == 3

    def test_load_yaml(self, tmp_path, raw_tables):
        path = tmp_path / "tables.yaml"
        path.write_text(yaml.safe_dump(raw_tables), encoding="utf-8")
        tables = load_reference_tables(path)
        assert len(tables[TableName.SERVING_SIZE]) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError) as exc_info:
            load_reference_tables(tmp_path / "missing.json")
        assert "not found" in exc_info.value.message

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError):
            load_reference_tables(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps([["Income"]]), encoding="utf-8")
        with pytest.raises(SnapshotError):
            load_reference_tables(path)

    def test_directory_path(self, tmp_path):
        with pytest.raises(SnapshotError) as exc_info:
            load_reference_tables(tmp_path)
        assert exc_info.value.context["source"] == str(tmp_path)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "tables.yaml"
        path.write_bytes(b"\xff\xfe GDP: []")
        with pytest.raises(SnapshotError) as exc_info:
            load_reference_tables(path)
        assert exc_info.value.context["source"] == str(path)

    def test_table_rows_not_a_list(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"GDP": 5}), encoding="utf-8")
        with pytest.raises(SnapshotError) as exc_info:
            load_reference_tables(path)
        assert exc_info.value.context["table"] == "GDP"
