# app.py
import logging
from typing import Optional

import numpy as np
import streamlit as st

from roast_rotation.config import ensure_assets_exist, load_config_file, ui_css
from roast_rotation.assignment import find_assignment, swap_cells
from roast_rotation.engine import display_labels
from roast_rotation.fairness import local_today
from roast_rotation.io import (
    DataStore,
    assignment_grid_df,
    grid_to_csv_bytes,
    history_to_dataframe,
    member_load_df,
)
from roast_rotation.export_pdf import render_board_pdf
from roast_rotation.models import AppData
from roast_rotation.roster import (
    add_member,
    add_task_label,
    add_team,
    delete_member,
    delete_task_label,
    delete_team,
    ordered,
    set_excluded,
)
from roast_rotation.scheduler import commit_shuffle, gate_error, schedule_shuffle
from roast_rotation.validation import validate_snapshot

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ---------- Page & Theme ----------
st.set_page_config(page_title="Roastery Duty Board", layout="wide")
st.markdown(ui_css(), unsafe_allow_html=True)

ensure_assets_exist()
config = load_config_file()
store = DataStore(config.data_dir)


# ---------- Session State ----------
def _init_state():
    ss = st.session_state
    ss.setdefault("user_key", "default")
    ss.setdefault("selected_cell", None)   # (team_id, label_id)
    ss.setdefault("developer_mode", False)
    ss.setdefault("rng", np.random.default_rng(config.random_seed))

_init_state()
ss = st.session_state


def _load() -> AppData:
    return store.load(ss["user_key"])


def _save(data: AppData):
    try:
        store.save(ss["user_key"], data)
    except OSError as e:
        st.error(f"Could not save: {e}")
        return
    st.rerun()


# ---------- Sidebar ----------
with st.sidebar:
    st.header("⚙️ Settings")
    ss["user_key"] = st.text_input("Workspace key", value=ss["user_key"])
    ss["developer_mode"] = st.checkbox(
        "Developer mode", value=ss["developer_mode"],
        help="Allows re-shuffling on weekends or after today's shuffle.",
    )
    st.caption(f"Look-back: {config.lookback_days} days · Timezone: {config.timezone}")

try:
    data = _load()
except ValueError as e:
    st.error(str(e))
    st.stop()

today = local_today(config.timezone)
st.title("☕ Roastery Duty Board")
st.caption(f"Today: {today}")

# ---------- Board ----------
teams = ordered(data.teams)
labels = display_labels(ordered(data.task_labels), data.assignments)
members = data.member_by_id()

if not teams or not labels:
    st.info("Add teams and task labels below to start.")
else:
    header = st.columns([2] + [3] * len(teams))
    header[0].markdown("**Task**")
    for col, team in zip(header[1:], teams):
        col.markdown(f"**{team.name}**")

    for lbl in labels:
        row = st.columns([2] + [3] * len(teams))
        row[0].write(lbl.display or "—")
        for col, team in zip(row[1:], teams):
            cell = (team.id, lbl.id)
            a = find_assignment(data.assignments, *cell)
            mid: Optional[str] = a.member_id if a else None
            name = members[mid].name if mid in members else "—"
            marker = "▶ " if ss["selected_cell"] == cell else ""
            if col.button(f"{marker}{name}", key=f"cell-{team.id}-{lbl.id}", use_container_width=True):
                sel = ss["selected_cell"]
                if sel is None:
                    ss["selected_cell"] = cell
                    st.rerun()
                ss["selected_cell"] = None
                if sel != cell and sel[0] == cell[0]:
                    _save(data.model_copy(update={
                        "assignments": swap_cells(data.assignments, sel, cell, today),
                    }))
                st.rerun()

    st.caption("Click two cells of the same team to swap them.")

blocked = gate_error(data, today, config)
c1, c2, c3 = st.columns(3)
if c1.button("🎲 Shuffle", type="primary", disabled=bool(blocked) and not ss["developer_mode"]):
    result = schedule_shuffle(data, config, rng=ss["rng"], today=today, force=ss["developer_mode"])
    if result.ok:
        _save(commit_shuffle(data, result))
    else:
        st.warning(result.error)
if blocked and not ss["developer_mode"]:
    c1.caption(blocked)

grid = assignment_grid_df(data)
c2.download_button("Download CSV", grid_to_csv_bytes(grid), file_name=f"duty-{today}.csv", mime="text/csv")
c3.download_button("Download PDF", render_board_pdf(today, grid), file_name=f"duty-{today}.pdf", mime="application/pdf")

for msg in validate_snapshot(data):
    st.warning(msg)

# ---------- Roster management ----------
with st.expander("Teams & members"):
    with st.form("add_team", clear_on_submit=True):
        name = st.text_input("New team")
        if st.form_submit_button("Add team"):
            try:
                _save(add_team(data, name))
            except ValueError as e:
                st.error(str(e))

    for team in teams:
        st.subheader(team.name)
        for m in ordered(data.members_of(team.id)):
            cols = st.columns([3, 5, 1])
            cols[0].write(m.name)
            excluded = cols[1].multiselect(
                "Never assign to", options=[lbl.id for lbl in ordered(data.task_labels)],
                default=[x for x in m.excluded_task_label_ids if x in data.label_by_id()],
                format_func=lambda lid: data.label_by_id()[lid].display,
                key=f"excl-{m.id}",
            )
            if set(excluded) != set(m.excluded_task_label_ids):
                updated = data
                for lid in set(excluded) ^ set(m.excluded_task_label_ids):
                    updated = set_excluded(updated, m.id, lid, lid in excluded)
                _save(updated)
            if cols[2].button("🗑", key=f"del-member-{m.id}"):
                _save(delete_member(data, m.id))
        with st.form(f"add_member_{team.id}", clear_on_submit=True):
            mname = st.text_input("New member", key=f"new-member-{team.id}")
            if st.form_submit_button("Add member"):
                try:
                    _save(add_member(data, mname, team.id))
                except ValueError as e:
                    st.error(str(e))
        if st.button(f"Delete team {team.name}", key=f"del-team-{team.id}"):
            _save(delete_team(data, team.id))

with st.expander("Task labels"):
    for lbl in ordered(data.task_labels):
        cols = st.columns([6, 1])
        cols[0].write(lbl.display)
        if cols[1].button("🗑", key=f"del-label-{lbl.id}"):
            _save(delete_task_label(data, lbl.id))
    with st.form("add_label", clear_on_submit=True):
        left = st.text_input("Left label")
        right = st.text_input("Right label (optional)")
        if st.form_submit_button("Add label"):
            try:
                _save(add_task_label(data, left, right))
            except ValueError as e:
                st.error(str(e))

with st.expander("History"):
    st.dataframe(history_to_dataframe(data), use_container_width=True)
    load = member_load_df(data)
    if not load.empty:
        st.caption("Times each member held each task")
        st.dataframe(load, use_container_width=True)
