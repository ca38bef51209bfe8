import plotly.graph_objects as go

from margin_calculator import format_ratio, format_twd

C = {
    "rose": "#BE123C", "amber": "#B45309",
    "steel_blue": "#1565C0", "indigo": "#4338CA",
}

TIER_COLORS = {"Initial": C["rose"], "Maintenance": C["amber"], "Settlement": C["steel_blue"]}


def margin_tiers_chart(tiers, title, height=380):
    """tiers: margin_tiers_frame() 的 DataFrame"""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=tiers["階層"].tolist(), y=tiers["金額"].tolist(),
        marker_color=[TIER_COLORS[t] for t in tiers["Tier"]],
        text=[f"{format_twd(v)}<br>{format_ratio(r)}" for v, r in zip(tiers["金額"], tiers["比例"])],
        textposition="outside",
        hovertemplate="<b>%{x}</b><br>NT$ %{y:,.0f}<extra></extra>"))
    fig.update_layout(title=dict(text=title, font=dict(size=16, color="#1a1a2e")),
                      yaxis=dict(title="金額（元）"),
                      template="plotly_white", height=height, margin=dict(t=60, b=40, l=60, r=20))
    return fig
