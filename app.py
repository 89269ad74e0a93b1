import logging
from contextlib import contextmanager
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

from freedom_core.charts import region_count_chart, rights_comparison_chart, status_pie_chart, yearly_trend_chart
from freedom_core.data import prepare_context, records_to_frame
from freedom_core.errors import IngestionError
from freedom_core.filters import ALL, AnalysisSettings, DashboardFilters
from freedom_core.metrics_distribution import compute_region_summary, compute_status_distribution
from freedom_core.metrics_overview import compute_headline_stats
from freedom_core.metrics_table import paginate, sort_records
from freedom_core.metrics_trends import compute_yearly_series
from freedom_core.records import CANONICAL_FIELDS, CANONICAL_STATUSES
from freedom_core.session import DatasetStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
alt.data_transformers.disable_max_rows()

COLUMN_LABELS = {
    "country": "Pays",
    "region": "Région",
    "year": "Année",
    "status": "Statut",
    "political_rights": "Droits politiques",
    "civil_liberties": "Libertés civiles",
    "total_score": "Score total",
}
TREND_LABELS = {"improving": "En amélioration", "declining": "En déclin", "stable": "Stable"}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(filters: DashboardFilters) -> str:
    chips = [
        f"Recherche: {filters.search}" if filters.search else "Recherche: -",
        "Région: toutes" if filters.region == ALL else f"Région: {filters.region}",
        "Statut: tous" if filters.status == ALL else f"Statut: {filters.status}",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def get_store() -> DatasetStore:
    if "dataset_store" not in st.session_state:
        st.session_state["dataset_store"] = DatasetStore()
    return st.session_state["dataset_store"]


def handle_upload(store: DatasetStore, uploaded) -> None:
    # Streamlit reruns the script on every interaction; ingest each file once.
    upload_key = (uploaded.name, uploaded.size)
    if st.session_state.get("_last_upload") == upload_key:
        return
    st.session_state["_last_upload"] = upload_key
    try:
        dataset = store.ingest(uploaded.getvalue(), uploaded.name)
    except IngestionError as exc:
        st.error(f"Le fichier n'a pas pu être traité ({type(exc).__name__}): {exc}")
        return
    st.session_state["table_page"] = 1
    st.success(f"Fichier importé avec succès : {len(dataset.records)} enregistrements ont été chargés.")


# ---------- Pages ----------
def render_stats_cards(filtered, settings: AnalysisSettings):
    stats = compute_headline_stats(filtered, settings)
    if stats is None:
        st.info("Aucune donnée pour les filtres sélectionnés.")
        return
    cols = st.columns(4)
    cols[0].metric("Total des pays", f"{stats.total_records}", help=f"{stats.unique_regions} régions • {stats.unique_years} années")
    cols[1].metric("Pays libres", f"{stats.free_count}", delta=f"{stats.free_percentage}%", delta_color="off")
    cols[2].metric("Droits politiques", stats.avg_political_rights, help="Moyenne sur 7")
    cols[3].metric("Tendance", stats.avg_total_score, delta=TREND_LABELS[stats.trend], delta_color="off")

    with card("Répartition détaillée"):
        dist_cols = st.columns(3)
        dist_cols[0].metric("Pays libres", stats.free_count, delta=f"{stats.free_percentage}%", delta_color="off")
        dist_cols[1].metric("Partiellement libres", stats.partly_free_count, delta=f"{stats.partly_free_percentage}%", delta_color="off")
        dist_cols[2].metric("Pas libres", stats.not_free_count, delta=f"{stats.not_free_percentage}%", delta_color="off")


def render_table_page(filtered, settings: AnalysisSettings):
    with card("Données détaillées"):
        c1, c2 = st.columns([3, 1])
        sort_column: Optional[str] = c1.selectbox(
            "Trier par",
            options=[None] + list(CANONICAL_FIELDS),
            format_func=lambda c: "Ordre du fichier" if c is None else COLUMN_LABELS[c],
        )
        direction = c2.radio("Ordre", ["asc", "desc"], horizontal=True)
        ordered = sort_records(filtered, sort_column, direction)

        total_pages = max(1, -(-len(ordered) // settings.page_size))
        page_no = st.number_input("Page", min_value=1, max_value=total_pages, value=min(st.session_state.get("table_page", 1), total_pages), step=1)
        st.session_state["table_page"] = int(page_no)
        page = paginate(ordered, int(page_no), settings.page_size)

        display = pd.DataFrame(page.rows, columns=list(CANONICAL_FIELDS)).rename(columns=COLUMN_LABELS)
        st.dataframe(display, use_container_width=True, hide_index=True)
        st.caption(
            f"{page.total_records} enregistrements au total • Page {page.page} sur {page.total_pages} • "
            f"Affichage de {page.start_index} à {page.end_index}"
        )


def render_charts_page(filtered, settings: AnalysisSettings):
    if not filtered:
        st.info("Aucune donnée pour les filtres sélectionnés.")
        return
    distribution = compute_status_distribution(filtered)
    regions = compute_region_summary(filtered, top_n=settings.region_top_n, label_max_length=settings.label_max_length)
    series = compute_yearly_series(filtered)

    top = st.columns(2)
    with top[0]:
        with card("Répartition par statut de liberté"):
            st.altair_chart(status_pie_chart(distribution), use_container_width=True)
    with top[1]:
        with card("Répartition par région"):
            st.altair_chart(region_count_chart(regions), use_container_width=True)

    bottom = st.columns(2)
    with bottom[0]:
        with card("Comparaison des droits par région"):
            st.altair_chart(rights_comparison_chart(regions), use_container_width=True)
    if len(series) > 1:
        with bottom[1]:
            with card("Évolution temporelle"):
                st.altair_chart(yearly_trend_chart(series), use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Freedom Analytics", layout="wide")
inject_base_styles()
st.title("Freedom Analytics")
st.caption("Tableau de bord des données de liberté mondiale")

store = get_store()
uploaded = st.file_uploader("Importez votre fichier Excel (.xlsx, .xls) ou CSV", type=["xlsx", "xls", "csv"])
if uploaded is not None:
    handle_upload(store, uploaded)

records = store.records
if not records:
    st.info("Commencez votre analyse : importez un fichier contenant les données de liberté mondiale.")
    st.stop()

# ----- Sidebar: navigation + filters -----
regions_all = prepare_context({}, records)["regions"]
with st.sidebar:
    st.markdown(f"**{len(records)} enregistrements chargés**")
    view = st.radio("Vue", ["Tableau", "Graphiques"], index=0)
    st.markdown("---")
    st.markdown("### Filtres et recherche")
    search = st.text_input("Rechercher un pays...", "")
    region = st.selectbox("Région", [ALL] + regions_all, format_func=lambda r: "Toutes les régions" if r == ALL else r)
    status = st.selectbox("Statut", [ALL] + list(CANONICAL_STATUSES), format_func=lambda s: "Tous les statuts" if s == ALL else s)
    with st.expander("Paramètres avancés", expanded=False):
        page_size = st.slider("Lignes par page", min_value=5, max_value=50, value=10, step=5)
        region_top_n = st.slider("Nombre de régions affichées", min_value=3, max_value=30, value=10)
        trend_margin = st.slider("Seuil de tendance", 0.0, 3.0, 0.5, 0.1)

filters = {
    "search": search,
    "region": region,
    "status": status,
    "settings": {"region_top_n": region_top_n, "trend_margin": trend_margin, "page_size": page_size},
}
ctx = prepare_context(filters, records)
filtered = ctx["filtered"]
settings = ctx["filters"].settings

st.markdown(f"<div class='chip-row'>{format_filter_summary(ctx['filters'])}</div>", unsafe_allow_html=True)
export_df = records_to_frame(filtered, include_extras=True)
if not export_df.empty:
    st.download_button("Exporter CSV", data=export_df.to_csv(index=False).encode("utf-8"), file_name="freedom_data.csv", mime="text/csv")

render_stats_cards(filtered, settings)
if view == "Tableau":
    render_table_page(filtered, settings)
else:
    render_charts_page(filtered, settings)
