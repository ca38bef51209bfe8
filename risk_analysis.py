"""
AI 風險分析

呼叫 OpenAI（client.chat.completions.create）以 JSON Schema 取得三段式風險分析；
任何失敗（金鑰、網路、逾時、格式不符）皆改用本地固定模板，analyze_risk() 不會拋出例外。
AI 文字僅供參考，不影響保證金試算數值。
"""

import json
import logging
from dataclasses import dataclass

from openai import OpenAI

logger = logging.getLogger(__name__)

AI_MODELS = ["gpt-4.1-nano", "gpt-5-mini"]
DEFAULT_MODEL = AI_MODELS[0]
REQUEST_TIMEOUT = 60  # 秒
MAX_COMPLETION_TOKENS = 1500

RISK_FIELDS = ("leverageRisk", "marginCallRisk", "recommendation")


@dataclass(frozen=True)
class RiskAnalysis:
    leverage_risk: str
    margin_call_risk: str
    recommendation: str

    def to_dict(self):
        return {
            "leverageRisk": self.leverage_risk,
            "marginCallRisk": self.margin_call_risk,
            "recommendation": self.recommendation,
        }


# ============================================================
# 提示語與回應格式
# ============================================================

SYSTEM_INSTRUCTION = (
    "你是專精臺灣期貨交易所（TAIFEX）個股期貨市場的資深風險分析師。"
    "請依據提供的合約參數，深入分析該股票期貨的交易風險，"
    "考量臺股個股的歷史波動度、維持保證金不足時的追繳門檻，以及槓桿帶來的風險。"
    "請一律使用繁體中文（zh-TW）回答。"
)

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "leverageRisk": {"type": "string", "description": "Risk associated with current leverage levels."},
        "marginCallRisk": {"type": "string", "description": "Likelihood and distance to a margin call."},
        "recommendation": {"type": "string", "description": "Professional trading recommendation."},
    },
    "required": list(RISK_FIELDS),
    "additionalProperties": False,
}


def build_prompt(contract_name, stock_code, leverage, margin_requirement, price):
    return f"""
分析以下股票期貨合約的交易風險：
- 合約名稱: {contract_name} ({stock_code})
- 當前股價: {price} TWD
- 使用槓桿: {leverage:.2f}x
- 原始保證金需求: {margin_requirement:,.0f} TWD

請針對以下三個維度提供簡潔專業的分析：
1. 槓桿風險：解釋此槓桿倍數下的資產波動放大效應。
2. 追繳風險：預估股價向不利方向變動多少百分比可能觸發維持保證金不足。
3. 專業建議：提供針對此標的特性的具體資金管理或止損建議。
"""


def build_request(model, prompt):
    """chat.completions.create 參數（strict JSON Schema）"""
    return {
        "model": model,
        "max_completion_tokens": MAX_COMPLETION_TOKENS,
        "messages": [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": "risk_analysis", "strict": True, "schema": RESPONSE_SCHEMA},
        },
    }


def parse_risk_payload(text):
    """解析 AI 回傳 JSON；三個欄位皆須為非空字串，否則 ValueError"""
    if not text:
        raise ValueError("AI 回應內容為空")
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError(f"AI 回應不是 JSON 物件：{type(payload).__name__}")
    values = []
    for field in RISK_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"AI 回應缺少欄位：{field}")
        values.append(value.strip())
    return RiskAnalysis(*values)


# ============================================================
# 預設分析（AI 失敗時使用）
# ============================================================

def fallback_analysis(leverage, margin_requirement):
    # margin_requirement 保留於介面，模板僅使用固定的追繳區間與資金緩衝建議
    return RiskAnalysis(
        leverage_risk=(
            f"當前槓桿約為 {leverage:.1f} 倍。這意味著底層股票 1% 的波動將放大為"
            f"保證金帳戶約 {leverage:.1f}% 的盈虧變動。"
        ),
        margin_call_risk="若股價朝不利方向變動超過約 15-20%，帳戶淨值可能低於維持保證金水平，面臨追繳風險。",
        recommendation="建議至少準備合約價值 30% 以上的資金作為緩衝，避免在極端波動中被強制平倉。",
    )


# ============================================================
# AI 分析
# ============================================================

def analyze_risk(contract_name, stock_code, leverage, margin_requirement, price,
                 api_key=None, model=DEFAULT_MODEL, client=None):
    """
    單次呼叫、不重試；失敗時回傳 fallback_analysis()。
    client 可注入（測試用），未提供時以 api_key 建立 OpenAI 客戶端。
    """
    try:
        if client is None:
            client = OpenAI(api_key=api_key, timeout=REQUEST_TIMEOUT, max_retries=0)
        prompt = build_prompt(contract_name, stock_code, leverage, margin_requirement, price)
        response = client.chat.completions.create(**build_request(model, prompt))
        return parse_risk_payload(response.choices[0].message.content)
    except Exception as e:
        logger.warning("AI 風險分析失敗（%s %s，模型 %s），改用預設分析：%s",
                       contract_name, stock_code, model, e)
        return fallback_analysis(leverage, margin_requirement)
