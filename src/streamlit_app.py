import streamlit as st
import pandas as pd

from config import configure_logging, load_config
from core.errors import ValidationError
from core.models import Anywhere, Cabin, Provider, SortBy
from core.query_builder import parse_iso_date
from core.selection import cheapest_offer
from search_session import SearchSession
from services.offer_bridge import format_brl, offers_to_rows, segments_summary, baggage_label
from services.search_client import SearchApiClient

BR_AIRPORTS = ["GRU", "GIG", "BSB", "SSA", "REC", "FOR", "POA", "CWB", "CNF", "BEL"]
POPULAR_DESTINATIONS = ["LIS", "MAD", "BCN", "MIA", "JFK", "CDG", "EZE", "SCL", "MEX", "NRT"]
ANYWHERE_LABEL = "Anywhere"

CABIN_LABELS = {
    Cabin.ECONOMY: "Economy",
    Cabin.PREMIUM_ECONOMY: "Premium economy",
    Cabin.BUSINESS: "Business",
    Cabin.FIRST: "First",
}
PROVIDER_LABELS = {
    Provider.AMADEUS: "Amadeus (exact route)",
    Provider.TEQUILA: "Kiwi Tequila (anywhere)",
}
STOPS_LABELS = {0: "Nonstop", 1: "Up to 1 stop", 2: "Up to 2 stops"}

st.set_page_config(
    page_title="Flight Offer Search",
    layout="wide",
)


@st.cache_resource
def _load_config():
    cfg = load_config()
    configure_logging(cfg.log_level)
    return cfg


def _get_session() -> SearchSession:
    """One controller per browser session; survives Streamlit reruns."""
    if "search_session" not in st.session_state:
        cfg = _load_config()
        st.session_state["search_session"] = SearchSession(
            client=SearchApiClient.from_config(cfg),
            config=cfg,
        )
    return st.session_state["search_session"]


def _index_of(options, value, default=0):
    return options.index(value) if value in options else default


session = _get_session()
session.activate()
query = session.query

st.title("✈️ Flight Offer Search: Brazil → World")
st.caption(f"Backed by `/api/search` · provider: **{query.provider.value.upper()}**")

with st.sidebar:
    st.header("Search flights")

    with st.form("search_form"):
        origin = st.selectbox("Origin", BR_AIRPORTS, index=_index_of(BR_AIRPORTS, query.origin))

        dest_options = [ANYWHERE_LABEL] + POPULAR_DESTINATIONS
        current_dest = ANYWHERE_LABEL if query.is_anywhere else query.destination_code
        destination = st.selectbox("Destination", dest_options, index=_index_of(dest_options, current_dest, 1))

        departure_date = st.date_input("Departure date", value=parse_iso_date(query.departure_date))
        adults = st.number_input("Passengers", min_value=1, max_value=9, value=query.adults, step=1)

        cabins = list(CABIN_LABELS)
        cabin = st.selectbox(
            "Cabin", cabins, index=cabins.index(query.cabin), format_func=CABIN_LABELS.get
        )

        st.markdown("---")

        providers = list(PROVIDER_LABELS)
        provider = st.selectbox(
            "Provider", providers, index=providers.index(query.provider), format_func=PROVIDER_LABELS.get
        )
        max_stops = st.selectbox(
            "Max stops", list(STOPS_LABELS), index=session.max_stops, format_func=STOPS_LABELS.get
        )
        sort_by = st.radio(
            "Sort by",
            [SortBy.PRICE, SortBy.DURATION],
            index=0 if session.sort_by is SortBy.PRICE else 1,
            format_func=lambda s: s.value.capitalize(),
        )

        search_clicked = st.form_submit_button("Search", disabled=session.loading)

if search_clicked:
    try:
        session.update_query(
            origin=origin,
            destination=None if destination == ANYWHERE_LABEL else destination,
            departure_date=departure_date,
            adults=adults,
            cabin=cabin,
            provider=provider,
        )
        session.set_filters(max_stops=max_stops, sort_by=sort_by)
    except ValidationError as exc:
        st.error(f"Error: {exc.message}")
    else:
        with st.spinner("Searching…"):
            session.search()
        query = session.query

# Date matrix (±3 days), indicative prices only
st.markdown("##### Nearby dates (±3 days)")
matrix_cols = st.columns(7)
for col, entry in zip(matrix_cols, session.date_matrix()):
    with col:
        is_anchor = entry.date.isoformat() == query.departure_date
        label = f"{entry.date.strftime('%a %d/%m')}\n\n{format_brl(entry.indicative_price)}"
        if st.button(label, key=f"matrix-{entry.date.isoformat()}", type="primary" if is_anchor else "secondary"):
            session.pick_date(entry.date)
            st.rerun()

st.markdown("---")

offers = session.offers
dest_text = "Anywhere" if isinstance(query.destination, Anywhere) else query.destination_code
summary_col, count_col = st.columns([4, 1])
with summary_col:
    st.caption(f"{query.origin} → {dest_text} • {query.departure_date} • {query.adults} adult(s)")
with count_col:
    st.caption(f"Results: {len(offers)}")

if session.error:
    st.error(f"Error: {session.error}")

if session.loading:
    st.info("Searching…")
elif not offers:
    st.info("No offers (try another date, origin or provider).")
else:
    best = cheapest_offer(offers)
    if best is not None:
        st.metric(
            label=f"Cheapest fare · {query.origin} → {best.destination}",
            value=format_brl(best.total_price),
            help=baggage_label(best),
        )

    for o in offers:
        with st.container(border=True):
            left, right = st.columns([3, 1])
            with left:
                st.markdown(f"**{query.origin} → {o.destination}**")
                st.caption(segments_summary(o) or "No segment details")
            with right:
                st.markdown(f"### {format_brl(o.total_price)}")
                st.caption(baggage_label(o))

    with st.expander("Results table"):
        st.dataframe(pd.DataFrame(offers_to_rows(offers, query.origin)), width="stretch")

st.caption(
    "Nearby-date prices are client-side estimates for orientation only, not quotes. "
    "If results stay empty, check that the /api/search backend has its provider keys configured."
)
