import html
from datetime import datetime, timezone

import streamlit as st
import pandas as pd
import plotly.express as px

from src.config import AUTO_REFRESH_SECONDS, LICHESS_API_BASE, load_config
from src.pipeline import run_once
from src.scoring.ranking import PODIUM_TITLES, PodiumKey, leaderboard_frame, podium_frame, rank_leaderboard

# --- Page Configuration ---
st.set_page_config(
    page_title="WAF-FLED Leaderboard",
    page_icon="🧇",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --- Design System ---
# Static accent colors (theme-independent)
ACCENT_COLORS = {
    "primary": "#F5A524",       # Waffle amber - primary accent
    "success": "#10B981",       # Green - positive changes
    "danger": "#EF4444",        # Red - negative changes
    "muted": "#9CA3AF",
}

# --- Leaderboard Flourishes ---
RANK_ICONS = {
    1: {"icon": "🥇", "color": "#FFD700", "label": "Champion"},
    2: {"icon": "🥈", "color": "#C0C0C0", "label": "Runner-up"},
    3: {"icon": "🥉", "color": "#CD7F32", "label": "Third Place"},
}

PODIUM_ICONS = {
    PodiumKey.WAFFLE_WINS: "🧇",
    PodiumKey.WAFFLE_LOSSES: "💥",
    PodiumKey.GAMES_PLAYED: "♟️",
}

CARD_STYLE = "border:1px solid rgba(255,255,255,0.2);border-radius:12px;padding:1rem;margin-bottom:0.75rem;background:linear-gradient(135deg, var(--secondary-background-color) 0%, rgba(245,165,36,0.15) 100%);"
LABEL_STYLE = "font-size:0.8rem;text-transform:uppercase;color:var(--text-color);font-weight:500;"
VALUE_STYLE = "font-size:1.4rem;font-weight:700;color:var(--text-color);"


def format_score(value):
    """Half points are shown as .5, whole points without decimals."""
    if pd.isna(value):
        return "—"
    return f"{value:g}"


def get_rank_badge_html(rank):
    """Generate HTML for a rank badge with icon and styling."""
    rank = int(rank)
    if rank not in RANK_ICONS:
        return f'<span style="font-weight:600;">#{rank}</span>'
    info = RANK_ICONS[rank]
    return f'<span style="font-weight:700;color:{info["color"]};"><span style="font-size:1.2rem;">{info["icon"]}</span>#{rank}</span>'


def get_delta_html(delta):
    if pd.isna(delta):
        return f'<span style="color:{ACCENT_COLORS["muted"]};">--</span>'
    if delta > 0:
        return f'<span style="color:{ACCENT_COLORS["success"]};">▲ {delta:g}</span>'
    if delta < 0:
        return f'<span style="color:{ACCENT_COLORS["danger"]};">▼ {abs(delta):g}</span>'
    return f'<span style="color:{ACCENT_COLORS["muted"]};">0</span>'


def generate_leaderboard_cards(df):
    """HTML cards for the score leaderboard (mobile layout)."""
    if df.empty:
        return '<div class="loading">No data yet</div>'

    cards = []
    for _, row in df.iterrows():
        name = html.escape(str(row['player_name']))
        stats = [
            ("Score", format_score(row['score'])),
            ("🧇", str(int(row['waffle_wins']))),
            ("💥", str(int(row['waffle_losses']))),
            ("Games", str(int(row['games_played']))),
        ]
        stats_html = "".join(
            f'<div style="display:flex;flex-direction:column;align-items:center;"><span style="{LABEL_STYLE}">{label}</span><span style="{VALUE_STYLE}">{value}</span></div>'
            for label, value in stats
        )
        cards.append(
            f'<div style="{CARD_STYLE}"><div style="display:flex;gap:0.75rem;align-items:center;">'
            f'{get_rank_badge_html(row["rank"])}<span style="font-weight:600;">{name}</span>'
            f'<span style="margin-left:auto;">{get_delta_html(row["score_delta"])}</span></div>'
            f'<div style="display:grid;grid-template-columns:repeat(4,1fr);margin-top:0.5rem;">{stats_html}</div></div>'
        )
    return "".join(cards)


def generate_podium_html(df, key):
    """One achievement podium: up to three slots with medal, name and value."""
    if df.empty:
        return "<p class='loading'>No data yet</p>"

    suffix = " games" if key == PodiumKey.GAMES_PLAYED else ""
    slots = []
    for _, row in df.iterrows():
        place = int(row["place"])
        medal = RANK_ICONS.get(place, {}).get("icon", f"#{place}")
        slots.append(
            f'<div style="{CARD_STYLE}text-align:center;">'
            f'<div style="font-size:2rem;">{medal}</div>'
            f'<div style="font-weight:600;">{html.escape(str(row["player_name"]))}</div>'
            f'<div style="{VALUE_STYLE}">{int(row["value"])}{suffix}</div></div>'
        )
    return "".join(slots)


def generate_tournament_cards(tournaments, now=None):
    """Tournament list, newest first, labelled Finished or Upcoming."""
    if not tournaments:
        return "<p class='loading'>No tournaments found</p>"

    now = now or datetime.now(timezone.utc)
    cards = []
    for t in sorted(tournaments, key=lambda t: t.starts_at, reverse=True):
        is_past = t.is_past(now)
        status_text = "Finished" if is_past else "Upcoming"
        status_color = ACCENT_COLORS["muted"] if is_past else ACCENT_COLORS["success"]
        when_label = "Ended" if is_past else "Starts"
        when = (t.end_time if is_past else t.starts_at).strftime('%Y-%m-%d %H:%M UTC')
        url = f"{LICHESS_API_BASE}/tournament/{html.escape(t.id)}"
        cards.append(
            f'<div style="{CARD_STYLE}"><a href="{url}" target="_blank">{html.escape(t.name)}</a> '
            f'<span style="color:{status_color};font-weight:600;">{status_text}</span> '
            f'<span>{when_label}: {when}</span></div>'
        )
    return "".join(cards)


def apply_plotly_style(fig):
    """Apply consistent styling to Plotly figures."""
    grid_color = "rgba(128, 128, 128, 0.4)"
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor=grid_color, zeroline=False),
        yaxis=dict(gridcolor=grid_color, zeroline=True, zerolinecolor=grid_color),
        showlegend=False,
        margin=dict(l=20, r=20, t=30, b=20),
        dragmode=False,  # Disable pan/zoom to prevent scroll hijacking on mobile
    )
    return fig


# --- Data Loading Functions ---
@st.cache_data(ttl=AUTO_REFRESH_SECONDS, show_spinner="Fetching tournament games...")
def load_standings():
    """Run the pipeline; cached for one refresh interval."""
    return run_once(load_config())


def leaderboard_with_deltas(standings):
    """
    Re-rank with deltas against the scores shown before the last refresh.

    Scores from the previous distinct run are kept in the session state.
    """
    state = st.session_state
    if state.get("standings_at") != standings.generated_at:
        state["previous_scores"] = state.get("current_scores")
        state["current_scores"] = standings.scores
        state["standings_at"] = standings.generated_at

    players = [entry.player for entry in standings.leaderboard]
    return rank_leaderboard(players, state.get("previous_scores"))


# --- Main App ---
def main():
    st.title("🧇 WAF-FLED Leaderboard")

    with st.sidebar:
        st.header("🔄 Refresh")
        if st.button("Refresh now"):
            load_standings.clear()
        st.caption(f"Data refreshes every {AUTO_REFRESH_SECONDS // 60} minutes.")

    standings = load_standings()
    entries = leaderboard_with_deltas(standings)
    df = leaderboard_frame(entries)

    with st.sidebar:
        st.caption(f"Tournaments counted: {len(standings.tournament_ids)}")
        st.caption(f"Games counted: {standings.games}")
        if standings.skipped_games:
            st.caption(f"Unreadable games skipped: {standings.skipped_games}")
        st.markdown("---")
        st.caption("Last updated: " + standings.generated_at.strftime('%Y-%m-%d %H:%M:%S UTC'))

    tab_leaderboard, tab_achievements, tab_tournaments = st.tabs(["🏆 Leaderboard", "🎖️ Achievements", "📅 Tournaments"])

    with tab_leaderboard:
        if df.empty:
            st.info("No games found yet. Check back once the next arena has started.")
        else:
            st.dataframe(
                df.rename(columns={
                    'rank': 'Rank', 'player_name': 'Player', 'score': 'Score', 'score_delta': 'Change',
                    'waffle_wins': '🧇 Waffles', 'waffle_losses': '💥 Waffled', 'games_played': 'Games',
                }),
                hide_index=True,
                use_container_width=True,
            )

            with st.expander("📊 Score Distribution", expanded=False):
                fig = px.bar(
                    df.head(20),
                    x='player_name',
                    y='score',
                    labels={'player_name': 'Player', 'score': 'Score'},
                    color_discrete_sequence=[ACCENT_COLORS["primary"]]
                )
                apply_plotly_style(fig)
                st.plotly_chart(fig, use_container_width=True, config={'displayModeBar': False, 'scrollZoom': False})

            with st.expander("📱 Card View", expanded=False):
                st.html(generate_leaderboard_cards(df))

    with tab_achievements:
        columns = st.columns(len(PodiumKey))
        for col, key in zip(columns, PodiumKey):
            with col:
                st.subheader(f"{PODIUM_ICONS[key]} {PODIUM_TITLES[key]}")
                st.html(generate_podium_html(podium_frame(standings.podiums.get(key, [])), key))

    with tab_tournaments:
        st.html(generate_tournament_cards(standings.tournaments))


if __name__ == "__main__":
    main()
