"""
test_futures_catalog.py - Tests for the futures contract table

- find_by_code / search over synthetic catalogs
- record loading (built-in table and local JSON file)
- data integrity of the built-in table
"""

import json

import pytest

from futures_catalog import (
    FUTURES_RECORDS, FutureContract, FuturesCatalog, MarginRatio, load_catalog,
)


# ============================================================================
# LOOKUP
# ============================================================================

class TestFindByCode:
    def test_found(self, synthetic_catalog, abc_contract):
        assert synthetic_catalog.find_by_code("ABC") is abc_contract

    def test_missing(self, synthetic_catalog):
        assert synthetic_catalog.find_by_code("NOPE") is None

    def test_exact_match_only(self, synthetic_catalog):
        assert synthetic_catalog.find_by_code("abc") is None
        assert synthetic_catalog.find_by_code("") is None


# ============================================================================
# SEARCH
# ============================================================================

class TestSearch:
    def test_by_code_case_insensitive(self, synthetic_catalog):
        assert [c.code for c in synthetic_catalog.search("abc")] == ["ABC"]
        assert [c.code for c in synthetic_catalog.search("ABC")] == ["ABC"]

    def test_by_name_case_insensitive(self, synthetic_catalog):
        assert [c.code for c in synthetic_catalog.search("mini")] == ["XYZ"]
        assert [c.code for c in synthetic_catalog.search("WIDGET")] == ["XYZ"]

    def test_by_chinese_name_substring(self, synthetic_catalog):
        assert [c.code for c in synthetic_catalog.search("測試")] == ["ABC", "QQF"]

    def test_by_stock_code_preserves_order(self, synthetic_catalog):
        assert [c.code for c in synthetic_catalog.search("9999")] == ["ABC", "QQF"]

    def test_partial_stock_code(self, synthetic_catalog):
        assert [c.code for c in synthetic_catalog.search("23")] == ["XYZ"]

    def test_empty_term_returns_all_in_order(self, synthetic_catalog):
        assert synthetic_catalog.search("") == list(synthetic_catalog.contracts)

    def test_no_match_returns_empty(self, synthetic_catalog):
        assert synthetic_catalog.search("zzz-not-there") == []

    def test_search_has_no_side_effects(self, synthetic_catalog):
        before = synthetic_catalog.contracts
        synthetic_catalog.search("abc")
        assert synthetic_catalog.contracts == before


# ============================================================================
# CONSTRUCTION
# ============================================================================

class TestCatalogConstruction:
    def test_duplicate_code_rejected(self, abc_contract):
        with pytest.raises(ValueError, match="ABC"):
            FuturesCatalog([abc_contract, abc_contract])

    def test_contracts_immutable(self, abc_contract):
        with pytest.raises(AttributeError):
            abc_contract.code = "DEF"

    def test_from_records(self):
        catalog = FuturesCatalog.from_records([{
            "code": "ABC", "name": "測試", "stockCode": "9999",
            "ratio": {"s": 0.0675, "m": 0.075, "i": 0.09}, "sharesPerContract": 2000,
        }])
        contract = catalog.find_by_code("ABC")
        assert contract.ratio == MarginRatio(s=0.0675, m=0.075, i=0.09)
        assert contract.shares_per_contract == 2000
        assert contract.stock_code == "9999"

    def test_label(self, abc_contract):
        assert abc_contract.label == "測試電子 (9999)"

    def test_len_and_iter(self, synthetic_catalog):
        assert len(synthetic_catalog) == 3
        assert [c.code for c in synthetic_catalog] == ["ABC", "XYZ", "QQF"]

    def test_to_frame(self, synthetic_catalog):
        df = synthetic_catalog.to_frame()
        assert list(df["期貨代號"]) == ["ABC", "XYZ", "QQF"]
        assert df.loc[0, "原始保證金比例"] == 0.09
        assert df.loc[1, "每口股數"] == 100


# ============================================================================
# LOADING
# ============================================================================

class TestLoadCatalog:
    def test_builtin(self):
        catalog = load_catalog()
        assert len(catalog) == len(FUTURES_RECORDS)
        assert catalog.find_by_code("CDF").stock_code == "2330"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{
            "code": "ABC", "name": "測試", "stockCode": "9999",
            "ratio": {"s": 0.0675, "m": 0.075, "i": 0.09}, "sharesPerContract": 2000,
        }], ensure_ascii=False), encoding="utf-8")
        catalog = load_catalog(path)
        assert [c.code for c in catalog] == ["ABC"]


class TestBuiltinDataIntegrity:
    @pytest.mark.parametrize("record", FUTURES_RECORDS, ids=lambda r: r["code"])
    def test_ratios_in_range(self, record):
        for key in ("s", "m", "i"):
            assert 0 < record["ratio"][key] <= 1

    @pytest.mark.parametrize("record", FUTURES_RECORDS, ids=lambda r: r["code"])
    def test_shares_per_contract(self, record):
        assert record["sharesPerContract"] in (100, 2000)

    def test_codes_unique(self):
        codes = [r["code"] for r in FUTURES_RECORDS]
        assert len(codes) == len(set(codes))
