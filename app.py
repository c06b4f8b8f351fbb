"""
Recruiter Productivity Ranking - Global Leaderboard Dashboard
Ranks every recruiter on the platform by a productivity index.

Productivity Index:
- Index = (closed requisitions / average days to close) × 100
- More closures and fewer days both raise the index
- No closures → 0; closures without usable days → closures × 10,000
- Ties: more closures first, then fewer days, then input order
"""

import json
import logging
from datetime import timedelta
import streamlit as st

from src.config import (
    TODAY, ROLLING_WINDOW_DAYS, PODIUM_SIZE, LOG_LEVEL, LOG_FORMAT,
    SAMPLE_REQUISITIONS_PATH, SAMPLE_RECRUITERS_PATH
)
from src.data_loader import (
    load_data, parse_uploaded_data, validate_data, aggregate_requisitions, parse_ranking_export
)
from src.ranking import build_ranking
from src.analysis import (
    SORTABLE_COLUMNS, mask_display_name, format_position_badge, find_position,
    sort_ranking, ranking_to_dataframe, summarize_ranking
)

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format=LOG_FORMAT)
logger = logging.getLogger("recruiter_ranking.app")

COLUMN_LABELS = {
    "score": "Productivity Index",
    "closed_count": "Closed Requisitions",
    "average_days_to_close": "Avg Days to Close"
}

# =============================================================================
# DATA LOADING
# =============================================================================

@st.cache_data
def load_sample_data():
    return load_data(SAMPLE_REQUISITIONS_PATH, SAMPLE_RECRUITERS_PATH)

# =============================================================================
# STREAMLIT APP
# =============================================================================

st.set_page_config(
    page_title="Global Recruiter Ranking",
    page_icon="🏆",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;600;700&family=DM+Sans:wght@400;500;600;700&display=swap');

    .stApp {
        background: linear-gradient(135deg, #0f172a 0%, #1e1b4b 50%, #0f172a 100%);
    }

    .main-header {
        text-align: center;
        padding: 2rem 0;
        border-bottom: 1px solid rgba(255,255,255,0.1);
        margin-bottom: 2rem;
    }

    .main-header h1 {
        font-family: 'DM Sans', sans-serif;
        font-size: 2.75rem;
        font-weight: 700;
        background: linear-gradient(135deg, #f1f5f9 0%, #facc15 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        margin-bottom: 0.5rem;
    }

    .podium-card {
        background: rgba(30, 41, 59, 0.6);
        border: 1px solid rgba(255,255,255,0.1);
        border-radius: 16px;
        padding: 1.5rem;
        text-align: center;
    }

    .podium-card.p1 { border-top: 4px solid #eab308; }
    .podium-card.p2 { border-top: 4px solid #94a3b8; }
    .podium-card.p3 { border-top: 4px solid #f97316; }

    .podium-card .badge {
        font-size: 2.5rem;
    }

    .podium-card .score {
        font-family: 'JetBrains Mono', monospace;
        font-size: 1.75rem;
        font-weight: 700;
        color: #f1f5f9;
    }

    .explanation-box {
        background: rgba(250, 204, 21, 0.08);
        border: 1px solid rgba(250, 204, 21, 0.3);
        border-radius: 12px;
        padding: 1.25rem;
        margin: 1rem 0;
    }

    .explanation-box h4 {
        color: #facc15;
        margin: 0 0 0.5rem 0;
        font-size: 1rem;
    }

    .explanation-box p {
        color: #cbd5e1;
        margin: 0;
        font-size: 0.9rem;
        line-height: 1.6;
    }

    .section-header {
        font-family: 'DM Sans', sans-serif;
        font-size: 1.5rem;
        font-weight: 600;
        color: #f1f5f9;
        padding-bottom: 0.75rem;
        border-bottom: 1px solid rgba(255,255,255,0.1);
        margin-bottom: 1.5rem;
    }
</style>
""", unsafe_allow_html=True)

# Sidebar: data source and window
with st.sidebar:
    st.markdown("### 📂 Data")
    ranking_file = st.file_uploader("Ranking export, aggregated per recruiter (JSON)", type="json")
    requisitions_file = st.file_uploader("Requisitions export (JSON)", type="json")
    recruiters_file = st.file_uploader("Recruiters export (JSON)", type="json")

    st.markdown("---")
    st.markdown("### ⚙️ Window")
    use_window = st.checkbox("Rolling window", value=True, disabled=ranking_file is not None)
    window_days = st.number_input("Days", min_value=1, max_value=365, value=ROLLING_WINDOW_DAYS, disabled=not use_window)
    reference_date = st.date_input("Up to", value=TODAY, disabled=not use_window)

if ranking_file is not None:
    # Rows were already aggregated by the backend, so the window does not apply
    use_window = False
    try:
        aggregates, row_errors = parse_ranking_export(ranking_file.getvalue().decode("utf-8"))
    except (json.JSONDecodeError, ValueError) as e:
        logger.error("Could not load ranking export: %s", e)
        st.error(f"Could not load ranking export: {e}")
        st.stop()

    if row_errors:
        st.warning(f"Skipped {len(row_errors)} row(s) that cannot be ranked:\n\n" + "\n\n".join(row_errors))
    if not aggregates:
        st.error("No rankable recruiters found in the ranking export")
        st.stop()

    recruiter_names = {a.identifier: a.display_name for a in aggregates}
    message = f"✅ Loaded {len(aggregates)} ranked recruiters"
else:
    try:
        if requisitions_file is not None and recruiters_file is not None:
            recruiters, requisitions = parse_uploaded_data(
                requisitions_file.getvalue().decode("utf-8"),
                recruiters_file.getvalue().decode("utf-8")
            )
        else:
            recruiters, requisitions = load_sample_data()
    except (json.JSONDecodeError, KeyError, ValueError) as e:
        logger.error("Could not load leaderboard data: %s", e)
        st.error(f"Could not load data: {e}")
        st.stop()

    is_valid, message = validate_data(recruiters, requisitions)
    if not is_valid:
        st.error(message)
        st.stop()

    aggregates = aggregate_requisitions(
        recruiters,
        requisitions,
        reference_date=reference_date if use_window else None,
        window_days=int(window_days) if use_window else None
    )
    recruiter_names = {rec_id: rec.name for rec_id, rec in recruiters.items()}

ranking = build_ranking(aggregates)
summary = summarize_ranking(ranking)

if use_window:
    period = f"{(reference_date - timedelta(days=int(window_days))).strftime('%b %d')} – {reference_date.strftime('%b %d, %Y')}"
else:
    period = "All time"

# Header
st.markdown("""
<div class="main-header">
    <h1>Global Recruiter Ranking</h1>
    <p style="color: #94a3b8; font-size: 1.1rem;">Productivity index across every recruiter on the platform</p>
    <div style="display: inline-block; margin-top: 1rem; padding: 0.5rem 1.25rem; background: rgba(30, 41, 59, 0.8); border: 1px solid rgba(255,255,255,0.1); border-radius: 9999px; font-family: 'JetBrains Mono', monospace; font-size: 0.85rem; color: #94a3b8;">
        📅 {} | 👥 {} Recruiters
    </div>
</div>
""".format(period, summary['recruiters']), unsafe_allow_html=True)

with st.sidebar:
    st.markdown("---")
    st.markdown("### 👤 Viewer")
    viewer_id = st.selectbox(
        "View as",
        options=list(recruiter_names.keys()),
        format_func=lambda rec_id: recruiter_names[rec_id]
    )
    st.success(message)

# =============================================================================
# TABS
# =============================================================================

tab1, tab2 = st.tabs(["🏆 Leaderboard", "👤 My Position"])

# =============================================================================
# TAB 1: LEADERBOARD
# =============================================================================

with tab1:
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Recruiters", summary['recruiters'], delta=f"{summary['active_recruiters']} active")
    with col2:
        st.metric("Closed Requisitions", summary['total_closed'])
    with col3:
        st.metric("Median Index", f"{summary['median_score']:.2f}")
    with col4:
        median_days = summary['median_days']
        st.metric("Median Days to Close", f"{median_days:.1f}" if median_days is not None else "—")

    st.markdown("---")

    # Podium
    st.markdown('<div class="section-header">🏅 Podium</div>', unsafe_allow_html=True)

    podium = [r for r in ranking if r.is_podium]
    if not podium:
        st.info("No recruiters to rank yet.")
    else:
        podium_cols = st.columns(PODIUM_SIZE)
        for col, entry in zip(podium_cols, podium):
            with col:
                name = mask_display_name(entry.display_name, reveal=entry.identifier == viewer_id)
                st.markdown(f"""
                <div class="podium-card p{entry.position}">
                    <div class="badge">{format_position_badge(entry.position)}</div>
                    <h4 style="color: #f1f5f9; margin: 0.5rem 0;">{name}</h4>
                    <div class="score">{entry.score:,.2f}</div>
                    <p style="color: #94a3b8; margin: 0; font-size: 0.85rem;">
                        {entry.closed_count} closed | {f"{entry.average_days_to_close:.1f} days" if entry.average_days_to_close else "no day data"}
                    </p>
                </div>
                """, unsafe_allow_html=True)

    st.markdown("---")

    # Full table
    st.markdown('<div class="section-header">📋 Full Ranking</div>', unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        sort_column = st.selectbox(
            "Sort by",
            options=list(SORTABLE_COLUMNS),
            format_func=lambda c: COLUMN_LABELS[c],
            key="leaderboard_sort"
        )
    with col2:
        default_direction = "Ascending" if sort_column == "average_days_to_close" else "Descending"
        direction = st.radio(
            "Direction",
            ["Descending", "Ascending"],
            index=["Descending", "Ascending"].index(default_direction),
            horizontal=True,
            key="leaderboard_direction"
        )

    ordered = sort_ranking(ranking, sort_column, ascending=direction == "Ascending")
    ranking_df = ranking_to_dataframe(ordered, viewer_id=viewer_id)

    st.dataframe(
        ranking_df.drop(columns=['recruiter_id']),
        use_container_width=True,
        hide_index=True,
        column_config={
            'Position': st.column_config.NumberColumn('Pos', format="%d"),
            'Badge': st.column_config.TextColumn(''),
            'Avg Days': st.column_config.NumberColumn('Avg Days', format="%.1f"),
            'Score': st.column_config.NumberColumn('Index', format="%.2f"),
            'Percentile': st.column_config.ProgressColumn('Percentile', format="%.0f", min_value=0, max_value=100),
            'You': st.column_config.CheckboxColumn('You')
        }
    )

    st.caption(f"Showing {len(ranking_df)} recruiters")

    with st.expander("📖 How is the index calculated?"):
        st.markdown("""
        | Case | Index |
        |------|-------|
        | No closed requisitions | 0 |
        | Closed requisitions, no usable days | closed × 10,000 |
        | Otherwise | (closed ÷ avg days) × 100, 2 decimals |

        Same-day closures count as one day. Closed requisitions without a close date
        count towards the total but not the average. Ties go to more closures, then
        fewer days. Positions are never shared.
        """)

# =============================================================================
# TAB 2: MY POSITION
# =============================================================================

with tab2:
    entry = find_position(ranking, viewer_id)

    st.markdown("""
    <div class="explanation-box">
        <h4>📖 About Your Position</h4>
        <p>
            Your position compares your closures and closing speed against every recruiter on the platform.
            Close more requisitions in fewer days to climb the ranking.
        </p>
    </div>
    """, unsafe_allow_html=True)

    if entry is None:
        st.warning("You are not part of the ranking.")
    else:
        percentile = ranking_df.loc[ranking_df['recruiter_id'] == viewer_id, 'Percentile']

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Position", f"{format_position_badge(entry.position)}", delta=f"of {len(ranking)}")
        with col2:
            st.metric("Productivity Index", f"{entry.score:,.2f}")
        with col3:
            st.metric("Closed Requisitions", entry.closed_count)
        with col4:
            days = entry.average_days_to_close
            st.metric("Avg Days to Close", f"{days:.1f}" if days else "—")

        if not percentile.empty:
            st.progress(min(float(percentile.iloc[0]) / 100, 1.0))
            st.caption(f"At or above {percentile.iloc[0]:.0f}% of recruiters")

        if entry.position > 1:
            ahead = ranking[entry.position - 2]
            gap = ahead.score - entry.score
            st.markdown(f"**{gap:,.2f}** index points behind position #{ahead.position}")

        neighbours = ranking[max(entry.position - 3, 0):entry.position + 2]
        st.markdown("#### Around You")
        st.dataframe(
            ranking_to_dataframe(neighbours, viewer_id=viewer_id).drop(columns=['recruiter_id', 'Percentile']),
            use_container_width=True,
            hide_index=True
        )
