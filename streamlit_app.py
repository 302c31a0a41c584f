"""Streamlit dashboard for evaluating and ranking CVs."""
from __future__ import annotations

import logging
from typing import Iterable, List

import streamlit as st
from streamlit.runtime.uploaded_file_manager import UploadedFile

from cv_ranker import analytics, evaluation, exports, filtering, ranking
from cv_ranker.candidate import Candidate, POPULAR_IT_ROLES, active_popular_roles
from cv_ranker.config import load_settings
from cv_ranker.pdf_export import export_pdf
from cv_ranker.text_extraction import UploadedDocument, is_supported

logger = logging.getLogger("cv_ranker.streamlit_app")

_STATE_DEFAULTS = {
    "candidates": [],
    "required_skills": [],
    "chart_selection": filtering.ChartSelection(),
    "sort_state": ranking.SortState(),
    "selected_for_removal": [],
}


def _init_state() -> None:
    for key, value in _STATE_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = list(value) if isinstance(value, list) else value


def _reset_state() -> None:
    for key in [key for key in st.session_state if str(key).startswith("remove_")]:
        del st.session_state[key]
    for key, value in _STATE_DEFAULTS.items():
        st.session_state[key] = list(value) if isinstance(value, list) else value


def _to_documents(uploaded_files: Iterable[UploadedFile]) -> List[UploadedDocument]:
    """Keep the supported uploads and read them into memory."""

    documents: List[UploadedDocument] = []
    for uploaded_file in uploaded_files:
        if not is_supported(uploaded_file.name, uploaded_file.type):
            st.warning(f"Skipping {uploaded_file.name}: upload Word (.doc/.docx) or PDF (.pdf) files.")
            continue
        documents.append(
            UploadedDocument(
                name=uploaded_file.name,
                data=uploaded_file.getvalue(),
                content_type=uploaded_file.type,
            )
        )
    return documents


def _run_evaluation(documents: List[UploadedDocument]) -> bool:
    progress_bar = st.progress(0, text="Preparing files...")
    status = st.empty()

    def _update(processed: int, total: int, file_name: str) -> None:
        progress_bar.progress(processed / total if total else 1.0, text=f"Processing {file_name}")
        status.caption(f"{processed} of {total} files processed")

    try:
        result = evaluation.evaluate_cvs(documents, _update)
    except evaluation.EvaluationError as exc:
        st.error(f"Error processing files: {exc}")
        st.session_state["candidates"] = []
        return False
    finally:
        progress_bar.progress(1.0, text="Done")

    if result.partial:
        unprocessed = len(result.unprocessed)
        st.warning(
            f"Partial processing ({result.processed_count}/{result.total_files}): "
            f"{unprocessed} file(s) could not be processed correctly."
        )
    st.session_state["candidates"] = result.candidates
    return not result.partial


def _sidebar(candidates: List[Candidate]) -> List[Candidate]:
    """Render skill and chart filters; return the candidates they let through."""

    st.sidebar.header("Search filters")
    st.sidebar.caption("Refine your talent search.")

    with st.sidebar.form("skill_form", clear_on_submit=True):
        skill_input = st.text_input("Add a criterion (e.g. React)")
        if st.form_submit_button("Add") and skill_input.strip():
            st.session_state["required_skills"] = filtering.add_required_skill(
                st.session_state["required_skills"], skill_input
            )

    required_skills = st.session_state["required_skills"]
    for skill in required_skills:
        if st.sidebar.button(f"✕ {skill}", key=f"remove_skill_{skill}"):
            st.session_state["required_skills"] = filtering.remove_required_skill(required_skills, skill)
            st.rerun()
    if required_skills and st.sidebar.button("Clear skills"):
        st.session_state["required_skills"] = []
        st.rerun()

    by_skills = filtering.filter_candidates_by_skills(candidates, st.session_state["required_skills"])

    if not candidates:
        return by_skills

    st.sidebar.subheader("Roles by seniority")
    rows = analytics.role_seniority_counts(by_skills)
    if not rows:
        st.sidebar.caption("No role data to chart.")
        return by_skills

    keys = analytics.seniority_keys(rows)
    st.sidebar.bar_chart(
        rows,
        x="role",
        y=keys,
        color=[analytics.seniority_color(key) for key in keys],
    )

    selection: filtering.ChartSelection = st.session_state["chart_selection"]
    roles = [str(row["role"]) for row in rows]
    role_choice = st.sidebar.selectbox("Role", ["All", *roles])
    seniority_choice = st.sidebar.selectbox("Seniority", ["All", *keys])
    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("Apply chart filter"):
            role = None if role_choice == "All" else role_choice
            seniority = None if seniority_choice == "All" else seniority_choice
            if role is None and seniority is not None:
                selection = selection.toggle_seniority(seniority)
            else:
                selection = selection.toggle(role, seniority)
    with col2:
        if st.button("Clear chart filter"):
            selection = filtering.ChartSelection()
    st.session_state["chart_selection"] = selection

    if selection.is_active:
        st.sidebar.caption(
            f"Showing role: {selection.role or 'any'} / seniority: {selection.seniority or 'any'}"
        )

    return selection.apply(by_skills)


def _candidate_detail(candidate: Candidate) -> None:
    st.markdown(f"**Suggested role:** {candidate.suggested_role} ({candidate.seniority})")
    st.markdown(f"**Experience:** {candidate.experience:g} years · **Education:** {candidate.education}")
    if candidate.suggestion_reasoning:
        st.info(f"AI reasoning: {candidate.suggestion_reasoning}")
    st.markdown("**Experience summary**")
    st.write(candidate.experience_summary)
    st.markdown("**Education and certifications**")
    st.write(candidate.education_summary)
    st.markdown("**Highlighted skills**")
    st.write(", ".join(candidate.matched_skills) or "N/A")
    st.markdown("**Other skills**")
    st.write(candidate.other_skills)
    st.caption(f"File: {candidate.file_name}")


def _ranking_tab(candidates: List[Candidate]) -> None:
    if not candidates:
        st.info("No candidates to show in the ranking. Upload some CVs or adjust your filters.")
        return

    for position, candidate in enumerate(ranking.rank_candidates(candidates), start=1):
        percent = ranking.round_percent(candidate.score)
        medal = {1: "🥇", 2: "🥈", 3: "🥉"}.get(position, f"#{position}")
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            with col1:
                st.markdown(f"### {medal} {candidate.name}")
                st.caption(f"{candidate.experience:g} years • {candidate.education.split(' ')[0]}")
            with col2:
                st.metric("Compatibility", f"{percent}%")
                st.caption(f"{candidate.suggested_role} · {candidate.seniority}")
            st.progress(min(max(percent, 0), 100) / 100)
            if candidate.matched_skills:
                shown = ", ".join(candidate.matched_skills[:4])
                extra = len(candidate.matched_skills) - 4
                st.caption(shown + (f" +{extra}" if extra > 0 else ""))
            with st.expander("Details"):
                _candidate_detail(candidate)


def _table_tab(candidates: List[Candidate], required_skills: List[str]) -> None:
    if not candidates:
        st.info("No candidates to show in the table. Upload some CVs or adjust your filters.")
        return

    sort_state: ranking.SortState = st.session_state["sort_state"]
    st.caption("Sort by")
    for column, key in zip(st.columns(len(ranking.SORTABLE_FIELDS)), ranking.SORTABLE_FIELDS):
        label = key.replace("_", " ").capitalize()
        if sort_state.key == key:
            label += " ▼" if sort_state.descending else " ▲"
        if column.button(label, key=f"sort_{key}", use_container_width=True):
            st.session_state["sort_state"] = ranking.next_sort_state(sort_state, key)
            st.rerun()

    ordered = ranking.sort_candidates(candidates, sort_state.key, descending=sort_state.descending)
    rows = []
    for candidate in ordered:
        row = {
            "Name": candidate.name,
            "Score": ranking.round_percent(candidate.score),
            "Band": ranking.score_band(candidate.score),
            "Experience (years)": candidate.experience,
            "Education": candidate.education,
            "Suggested Role": candidate.suggested_role,
            "Seniority": candidate.seniority,
        }
        matched = set(filtering.matching_required_skills(candidate, required_skills))
        for skill in required_skills:
            row[skill] = "✓" if skill in matched else "✗"
        row["File"] = candidate.file_name
        rows.append(row)

    st.dataframe(rows, use_container_width=True, hide_index=True)


def _export_buttons(candidates: List[Candidate], required_skills: List[str]) -> None:
    ranked = ranking.rank_candidates(candidates)
    col1, col2, col3 = st.columns(3)
    csv_file = exports.export_csv(ranked, required_skills)
    with col1:
        st.download_button("Export CSV", data=csv_file.data, file_name=csv_file.file_name, mime=csv_file.mime_type)
    with col2:
        if st.button("Prepare PDF"):
            pdf_file = export_pdf(ranked, required_skills)
            st.download_button(
                "Download PDF", data=pdf_file.data, file_name=pdf_file.file_name, mime=pdf_file.mime_type
            )
    with col3:
        if ranked:
            md_file = exports.export_ats_markdown(ranked, required_skills)
            st.download_button(
                "Export for ATS (Markdown)",
                data=md_file.data,
                file_name=md_file.file_name,
                mime=md_file.mime_type,
            )


def _statistics(candidates: List[Candidate]) -> None:
    stats = analytics.summarise_candidates(candidates)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Candidates", stats.total)
    col2.metric("Processed", f"{stats.processed}/{stats.total}")
    col3.metric("Average score", f"{stats.mean_score:.0f}%")
    col4.metric("Average experience", f"{stats.mean_experience:.1f} years")


def _toggle_removal(file_name: str) -> None:
    st.session_state["selected_for_removal"] = filtering.toggle_selection(
        st.session_state["selected_for_removal"], file_name
    )


def _removal_controls(visible: List[Candidate]) -> None:
    st.subheader("Remove candidates")
    selected: List[str] = st.session_state["selected_for_removal"]
    for candidate in visible:
        st.checkbox(
            f"{candidate.name} ({candidate.file_name})",
            value=candidate.file_name in selected,
            key=f"remove_{candidate.file_name}",
            on_change=_toggle_removal,
            args=(candidate.file_name,),
        )
    if selected and st.button(f"Remove {len(selected)} candidate(s)", type="secondary"):
        st.session_state["candidates"] = filtering.remove_candidates(st.session_state["candidates"], selected)
        st.session_state["selected_for_removal"] = []
        for file_name in selected:
            st.session_state.pop(f"remove_{file_name}", None)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="CV Profile Ranker", page_icon="📄", layout="wide")
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    _init_state()

    st.title("CV Profile Ranker")
    st.write("Upload CVs in Word or PDF format to extract, score and rank IT candidate profiles.")

    if not settings.is_configured:
        st.error("Azure OpenAI is not configured. Set AZURE_OPENAI_KEY and AZURE_OPENAI_ENDPOINT in your .env file.")

    candidates: List[Candidate] = st.session_state["candidates"]

    if not candidates:
        uploaded_files = st.file_uploader(
            "CV files",
            type=["pdf", "doc", "docx"],
            accept_multiple_files=True,
        )
        if st.button("Evaluate CVs", type="primary"):
            if not uploaded_files:
                st.error("Select at least one file to evaluate.")
                return
            documents = _to_documents(uploaded_files)
            if not documents:
                st.error("None of the uploaded files is a Word or PDF document.")
                return
            if any(document.name.lower().endswith(".pdf") for document in documents):
                st.info("Some PDFs may have a complex structure; unreadable files will be reported and left out.")
            if _run_evaluation(documents):
                st.rerun()
            if st.session_state["candidates"]:
                st.button("Show results")
        return

    visible = _sidebar(candidates)
    required_skills = st.session_state["required_skills"]

    _statistics(visible)

    popular = active_popular_roles(candidates)
    st.caption(
        "Popular IT roles: "
        + " · ".join(f"**{role}**" if role in popular else role for role in POPULAR_IT_ROLES)
    )

    ranking_tab, table_tab = st.tabs(["Ranking", "Table"])
    with ranking_tab:
        _ranking_tab(visible)
    with table_tab:
        _table_tab(visible, required_skills)

    _export_buttons(visible, required_skills)
    _removal_controls(visible)

    if st.button("New evaluation"):
        _reset_state()
        st.rerun()


if __name__ == "__main__":  # pragma: no cover - Streamlit entry point
    main()
