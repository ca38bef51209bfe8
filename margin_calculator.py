"""
股票期貨保證金試算

calculate() 為純函數，只接受已驗證的價格與口數；
文字輸入的驗證由 parse_price / parse_quantity / compute_margins 負責，
無效輸入一律回傳 None，不進行試算。
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class CalculationResult:
    contract_value: float
    initial: float
    maintenance: float
    settlement: float
    leverage: float

    def price_move_pnl(self, pct=0.01):
        """標的價格變動 pct 時的部位盈虧"""
        return self.contract_value * pct


def calculate(contract, price, quantity):
    """合約價值與三個保證金階層；槓桿倍數只取決於原始保證金比例"""
    contract_value = price * contract.shares_per_contract * quantity
    return CalculationResult(
        contract_value=contract_value,
        initial=contract_value * contract.ratio.i,
        maintenance=contract_value * contract.ratio.m,
        settlement=contract_value * contract.ratio.s,
        leverage=1 / contract.ratio.i,
    )


# ============================================================
# 輸入驗證
# ============================================================

def _to_float(text):
    if text is None:
        return None
    try:
        value = float(str(text).strip().replace(",", ""))
    except (TypeError, ValueError):
        return None
    return value if np.isfinite(value) else None


def parse_price(text):
    """股價：必須為正數"""
    value = _to_float(text)
    if value is None or value <= 0:
        return None
    return value


def parse_quantity(text):
    """口數：必須為正整數（"3" 與 "3.0" 皆可）"""
    value = _to_float(text)
    if value is None or value <= 0 or not value.is_integer():
        return None
    return int(value)


def compute_margins(contract, price_text, quantity_text):
    """未選合約或輸入無效時回傳 None"""
    if contract is None:
        return None
    price = parse_price(price_text)
    quantity = parse_quantity(quantity_text)
    if price is None or quantity is None:
        return None
    return calculate(contract, price, quantity)


# ============================================================
# 顯示格式
# ============================================================

TIER_LABELS = [
    ("initial", "i", "原始保證金", "Initial"),
    ("maintenance", "m", "維持保證金", "Maintenance"),
    ("settlement", "s", "結算保證金", "Settlement"),
]


def margin_tiers_frame(contract, result):
    """三個保證金階層：名稱、比例、金額"""
    return pd.DataFrame([{
        "階層": label,
        "Tier": tier,
        "比例": getattr(contract.ratio, ratio_key),
        "金額": getattr(result, field),
    } for field, ratio_key, label, tier in TIER_LABELS])


def format_twd(value):
    """新台幣金額，無小數"""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return "N/A"
    return f"NT$ {value:,.0f}"


def format_ratio(ratio):
    return f"{ratio * 100:.2f}%"


def format_leverage(leverage):
    return f"{leverage:.2f}x"


def format_large_number(value):
    """大數字格式化（兆/億/百萬）"""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return "N/A"
    try:
        value = float(value)
        abs_v = abs(value)
        sign = "-" if value < 0 else ""
        if abs_v >= 1e12:
            return f"{sign}{abs_v/1e12:.2f}兆"
        elif abs_v >= 1e8:
            return f"{sign}{abs_v/1e8:.2f}億"
        elif abs_v >= 1e6:
            return f"{sign}{abs_v/1e6:.2f}百萬"
        else:
            return f"{sign}{abs_v:,.0f}"
    except (TypeError, ValueError):
        return "N/A"
