"""
股票期貨保證金試算 - Streamlit 介面

- 搜尋合約（名稱、股票代碼、期貨代號）
- 輸入股價與口數即時試算原始 / 維持 / 結算保證金
- 按下按鈕才呼叫 AI 風險分析，結果存於 session_state
"""

import logging
import os

import streamlit as st

from futures_catalog import CATALOG_VERSION, load_catalog
from margin_calculator import (
    compute_margins, format_large_number, format_leverage, format_ratio, format_twd,
    margin_tiers_frame, parse_price, parse_quantity,
)
from margin_charts import margin_tiers_chart
from risk_analysis import AI_MODELS, analyze_risk

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ============================================================
# 頁面設定
# ============================================================
st.set_page_config(
    page_title="股票期貨保證金試算",
    page_icon="📐",
    layout="wide",
    initial_sidebar_state="expanded"
)

# ============================================================
# session_state 初始化
# ============================================================
if "selected_code" not in st.session_state:
    st.session_state.selected_code = ""
if "search_term" not in st.session_state:
    st.session_state.search_term = ""
if "risk_cache" not in st.session_state:
    st.session_state.risk_cache = {}
if "analyzing" not in st.session_state:
    st.session_state.analyzing = False


@st.cache_resource
def get_catalog():
    return load_catalog(os.environ.get("FUTURES_CATALOG_PATH") or None)


# ============================================================
# 回呼函數（在重跑前更新 session_state）
# ============================================================

def select_contract(contract):
    st.session_state.selected_code = contract.code
    st.session_state.search_term = contract.label


def clear_selection():
    st.session_state.selected_code = ""
    st.session_state.search_term = ""
    st.session_state.risk_cache = {}


def analysis_key(contract, price, quantity, model):
    return f"{contract.code}_{price}_{quantity}_{model}"


# ============================================================
# 渲染
# ============================================================

def render_search(catalog):
    st.text_input("🔎 搜尋期貨合約", key="search_term", placeholder="輸入名稱、代號或股票代碼...")
    selected = catalog.find_by_code(st.session_state.selected_code)

    if selected is not None:
        st.button("✖️ 清除選擇", on_click=clear_selection, use_container_width=True)
        return selected

    term = st.session_state.search_term
    if term:
        matches = catalog.search(term)
        if not matches:
            st.caption("找不到符合的期貨合約")
        for c in matches:
            st.button(f"{c.code}｜{c.label}｜每口 {c.shares_per_contract:,} 股",
                      key=f"pick_{c.code}", on_click=select_contract, args=(c,),
                      use_container_width=True)
    return None


def render_contract_info(contract):
    c1, c2, c3, c4 = st.columns(4)
    c1.write(f"**期貨代號**：{contract.code}")
    c2.write(f"**每口股數**：{contract.shares_per_contract:,}")
    c3.write(f"**原始保證金比例**：{format_ratio(contract.ratio.i)}")
    c4.write(f"**維持保證金比例**：{format_ratio(contract.ratio.m)}")


def render_results(contract, result):
    tiers = margin_tiers_frame(contract, result)
    cols = st.columns(3)
    for col, (_, row) in zip(cols, tiers.iterrows()):
        col.metric(f"{row['階層']}（{row['Tier']}）", format_twd(row["金額"]), f"比例 {format_ratio(row['比例'])}",
                   delta_color="off")

    c1, c2 = st.columns(2)
    with c1:
        st.metric("合約總價值", format_twd(result.contract_value))
        st.caption(f"約 {format_large_number(result.contract_value)} 元｜"
                   f"1% 價格變動盈虧：{format_twd(result.price_move_pnl(0.01))}")
    with c2:
        st.metric("資金槓桿倍數", format_leverage(result.leverage))
        st.caption("高槓桿具備顯著風險")

    st.plotly_chart(margin_tiers_chart(tiers, f"{contract.label} 保證金階層"), use_container_width=True)


def render_risk(contract, result, price, quantity, openai_key, ai_model):
    st.subheader(f"🤖 AI 風險分析（模型：{ai_model}）")
    cache_key = analysis_key(contract, price, quantity, ai_model)

    if cache_key in st.session_state.risk_cache:
        analysis = st.session_state.risk_cache[cache_key]
        st.markdown("#### 槓桿風險")
        st.write(analysis.leverage_risk)
        st.markdown("#### 追繳風險")
        st.write(analysis.margin_call_risk)
        st.markdown("#### 專業交易建議")
        st.info(analysis.recommendation)
        if st.button("🔄 重新生成分析", key=f"rerun_{cache_key}"):
            del st.session_state.risk_cache[cache_key]
            st.rerun()
        return

    if not openai_key:
        st.caption("未填入 OpenAI 金鑰時將顯示預設風險說明。")
    if st.button("🚀 開始 AI 風險分析", type="primary", key=f"start_{cache_key}",
                 disabled=st.session_state.analyzing):
        st.session_state.analyzing = True
        try:
            with st.spinner("正在演算風險模型..."):
                analysis = analyze_risk(contract.name, contract.stock_code, result.leverage,
                                        result.initial, price, api_key=openai_key or None, model=ai_model)
            st.session_state.risk_cache[cache_key] = analysis
        finally:
            st.session_state.analyzing = False
        st.rerun()


# ============================================================
# 主程式
# ============================================================

def main():
    catalog = get_catalog()

    st.title("📐 股票期貨保證金試算")
    st.markdown("精確計算臺灣市場個股期貨保證金階層，結合 AI 技術深度剖析交易風險。")
    st.markdown("<hr style='border: 2px solid #1a237e; margin: 0 0 1rem 0;'>", unsafe_allow_html=True)

    # ── 側邊欄 ──
    with st.sidebar:
        st.markdown("## ⚙️ 設定")
        openai_key = st.text_input("🤖 OpenAI API 金鑰", type="password",
                                   value=os.environ.get("OPENAI_API_KEY", ""))
        ai_model = st.selectbox("🧠 AI 模型", options=AI_MODELS, index=0)
        st.markdown("---")
        st.markdown("**使用說明**\n1. 搜尋並選擇期貨合約\n2. 輸入股價與口數\n3. 查看保證金試算\n4. 點擊「開始 AI 風險分析」")
        st.caption(f"合約資料版本：{CATALOG_VERSION}｜共 {len(catalog)} 檔")

    # ── 交易參數 ──
    st.subheader("交易參數設定")
    contract = render_search(catalog)
    col_p, col_q = st.columns(2)
    with col_p:
        price_text = st.text_input("💹 標的股價（TWD）", placeholder="0.00")
    with col_q:
        quantity_text = st.text_input("📦 口數", value="1")

    if contract is not None:
        render_contract_info(contract)

    st.markdown("---")

    # ── 試算結果 ──
    st.subheader("資產試算回報")
    result = compute_margins(contract, price_text, quantity_text)
    if result is None:
        st.info("等待輸入參數：請選擇合約並輸入有效的股價與口數。")
    else:
        render_results(contract, result)
        st.markdown("---")
        render_risk(contract, result, parse_price(price_text), parse_quantity(quantity_text),
                    openai_key, ai_model)

    with st.expander(f"📋 全部期貨合約（{len(catalog)} 檔）", expanded=False):
        st.dataframe(catalog.to_frame(), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
