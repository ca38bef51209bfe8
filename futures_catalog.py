"""
股票期貨合約資料表

- 內建臺灣期貨交易所個股期貨合約（標準型 2000 股、小型 100 股）
- 保證金比例依證交所公告之三個級距設定
- 資料表於啟動時建立一次，之後唯讀
"""

import json
import logging
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)

CATALOG_VERSION = "2024-12"

# ============================================================
# 保證金級距（結算 s / 維持 m / 原始 i）
# ============================================================

LEVEL_1 = {"s": 0.10, "m": 0.1035, "i": 0.135}
LEVEL_2 = {"s": 0.12, "m": 0.1242, "i": 0.162}
LEVEL_3 = {"s": 0.15, "m": 0.1553, "i": 0.2025}

STANDARD_SHARES = 2000
MINI_SHARES = 100

FUTURES_RECORDS = [
    {"code": "CDF", "name": "台積電", "stockCode": "2330", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "QFF", "name": "小型台積電", "stockCode": "2330", "ratio": LEVEL_1, "sharesPerContract": MINI_SHARES},
    {"code": "DHF", "name": "鴻海", "stockCode": "2317", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "DVF", "name": "聯發科", "stockCode": "2454", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "PUF", "name": "小型聯發科", "stockCode": "2454", "ratio": LEVEL_1, "sharesPerContract": MINI_SHARES},
    {"code": "CCF", "name": "聯電", "stockCode": "2303", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "DKF", "name": "廣達", "stockCode": "2382", "ratio": LEVEL_2, "sharesPerContract": STANDARD_SHARES},
    {"code": "DXF", "name": "緯創", "stockCode": "3231", "ratio": LEVEL_3, "sharesPerContract": STANDARD_SHARES},
    {"code": "CAF", "name": "台塑", "stockCode": "1301", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "CBF", "name": "中鋼", "stockCode": "2002", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "CZF", "name": "長榮", "stockCode": "2603", "ratio": LEVEL_2, "sharesPerContract": STANDARD_SHARES},
    {"code": "FZF", "name": "陽明", "stockCode": "2609", "ratio": LEVEL_2, "sharesPerContract": STANDARD_SHARES},
    {"code": "CKF", "name": "富邦金", "stockCode": "2881", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "CLF", "name": "國泰金", "stockCode": "2882", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "DFF", "name": "中華電", "stockCode": "2412", "ratio": LEVEL_1, "sharesPerContract": STANDARD_SHARES},
    {"code": "IRF", "name": "世芯-KY", "stockCode": "3661", "ratio": LEVEL_3, "sharesPerContract": STANDARD_SHARES},
]


# ============================================================
# 資料型別
# ============================================================

@dataclass(frozen=True)
class MarginRatio:
    """保證金比例（占合約價值之比例）"""
    s: float  # 結算保證金
    m: float  # 維持保證金
    i: float  # 原始保證金


@dataclass(frozen=True)
class FutureContract:
    code: str
    name: str
    stock_code: str
    ratio: MarginRatio
    shares_per_contract: int

    @property
    def label(self):
        return f"{self.name} ({self.stock_code})"

    @classmethod
    def from_record(cls, record):
        """由外部資料格式 {code, name, stockCode, ratio, sharesPerContract} 建立"""
        ratio = record["ratio"]
        return cls(
            code=str(record["code"]),
            name=str(record["name"]),
            stock_code=str(record["stockCode"]),
            ratio=MarginRatio(s=float(ratio["s"]), m=float(ratio["m"]), i=float(ratio["i"])),
            shares_per_contract=int(record["sharesPerContract"]),
        )


# ============================================================
# 合約資料表
# ============================================================

class FuturesCatalog:
    """唯讀合約資料表，依期貨代號識別，保留原始排序"""

    def __init__(self, contracts):
        self._contracts = tuple(contracts)
        self._by_code = {}
        for contract in self._contracts:
            if contract.code in self._by_code:
                raise ValueError(f"期貨代號重複：{contract.code}")
            self._by_code[contract.code] = contract

    @classmethod
    def from_records(cls, records):
        return cls(FutureContract.from_record(r) for r in records)

    def __len__(self):
        return len(self._contracts)

    def __iter__(self):
        return iter(self._contracts)

    @property
    def contracts(self):
        return self._contracts

    def find_by_code(self, code):
        """依期貨代號查詢，查無則回傳 None"""
        return self._by_code.get(code)

    def search(self, term):
        """
        名稱、股票代碼、期貨代號任一包含關鍵字即符合（不分大小寫）。
        空字串符合全部合約。
        """
        term = term.lower()
        return [
            c for c in self._contracts
            if term in c.name.lower() or term in c.stock_code.lower() or term in c.code.lower()
        ]

    def to_frame(self):
        """轉為 DataFrame 供列表顯示"""
        return pd.DataFrame([{
            "期貨代號": c.code,
            "名稱": c.name,
            "股票代碼": c.stock_code,
            "每口股數": c.shares_per_contract,
            "結算保證金比例": c.ratio.s,
            "維持保證金比例": c.ratio.m,
            "原始保證金比例": c.ratio.i,
        } for c in self._contracts], columns=[
            "期貨代號", "名稱", "股票代碼", "每口股數",
            "結算保證金比例", "維持保證金比例", "原始保證金比例",
        ])


def load_catalog(path=None):
    """
    建立合約資料表：
    - 未指定路徑：使用內建 FUTURES_RECORDS
    - 指定路徑：讀取本機 JSON 檔（格式同 FUTURES_RECORDS）
    """
    if path is None:
        records = FUTURES_RECORDS
    else:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    catalog = FuturesCatalog.from_records(records)
    logger.info("載入 %d 筆期貨合約（%s）", len(catalog), path or f"內建 {CATALOG_VERSION}")
    return catalog
