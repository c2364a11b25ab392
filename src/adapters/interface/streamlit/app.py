"""Streamlit dashboard entry point."""

import asyncio
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from pathlib import Path

import altair as alt
import streamlit as st

from src.application.ports.errors import PortError
from src.application.use_cases.get_parties import GetPartiesUseCase
from src.application.use_cases.load_party_ledgers import (
    LedgerAggregator,
    PartyLedgerRow,
)
from src.application.use_cases.party_ledger_view import (
    PartyLedgerView,
    default_window,
)
from src.application.use_cases.payment_index import PaymentIndex
from src.application.use_cases.record_payment import (
    FlowState,
    PaymentReconciliationFlow,
)
from src.domain.constants import FLOORS, OFFICIAL
from src.domain.models import LedgerOrder, Party, PaymentStats
from src.domain.services.formatting import format_rupees
from src.domain.services.ledger import payable_dues
from src.infrastructure.container import (
    build_ledger_aggregator,
    build_party_ledger_view,
    build_party_repository,
    build_payment_index,
    build_payment_stats_use_case,
    build_reconciliation_flow,
)
from src.utils.utils import get_project_root

EXPORT_DIR = get_project_root() / "exports"


def _run(coroutine):
    """Drive a coroutine to completion from a Streamlit script run."""
    return asyncio.run(coroutine)


def _fetch_parties() -> list[Party]:
    """Fetch parties from the API."""
    use_case = GetPartiesUseCase(build_party_repository())
    return _run(use_case.execute())


@st.cache_data(show_spinner=False, ttl=300)
def _load_parties() -> list[Party]:
    """Cached wrapper around _fetch_parties for Streamlit sessions."""
    return _fetch_parties()


def _fetch_payment_stats(floor: str) -> PaymentStats:
    """Fetch overdue and outstanding figures for a floor."""
    return _run(build_payment_stats_use_case().execute(floor))


@st.cache_data(show_spinner=False, ttl=300)
def _load_payment_stats(floor: str) -> PaymentStats:
    return _fetch_payment_stats(floor)


def _render_payment_stats(floor: str) -> None:
    try:
        stats = _load_payment_stats(floor)
    except PortError:
        st.sidebar.caption("Payment stats unavailable.")
        return
    st.sidebar.metric(
        "Overdue",
        format_rupees(stats.overdue_amount),
        f"{stats.overdue_count} payments",
        delta_color="inverse",
    )
    st.sidebar.metric("Due Soon", f"{stats.due_soon_count} payments")
    st.sidebar.metric("Outstanding", format_rupees(stats.total_outstanding))


def _row_status(row: PartyLedgerRow) -> str:
    if row.loading:
        return "Loading"
    if row.error:
        return "Error"
    return "Loaded"


def _rows_table(rows: Sequence[PartyLedgerRow]) -> list[dict[str, str]]:
    """Build the per-party table shown on the ledgers page."""
    data = []
    for row in rows:
        ledger = row.ledger
        data.append(
            {
                "Party": row.party.name,
                "Status": _row_status(row),
                "Official": format_rupees(ledger.total_official_amount)
                if ledger
                else "-",
                "Offline": format_rupees(ledger.total_offline_amount)
                if ledger
                else "-",
                "Received": format_rupees(ledger.total_received_amount)
                if ledger
                else "-",
                "Remaining": format_rupees(ledger.total_remaining_amount)
                if ledger
                else "-",
            }
        )
    return data


def _remaining_chart_data(
    rows: Sequence[PartyLedgerRow],
    max_parties: int = 10,
) -> list[dict[str, str | float]]:
    """Return the parties with the largest remaining dues for charting."""
    loaded = [
        row
        for row in rows
        if row.ledger is not None
        and row.ledger.total_remaining_amount > 0
    ]
    loaded.sort(
        key=lambda row: row.ledger.total_remaining_amount,
        reverse=True,
    )
    return [
        {
            "party": row.party.name,
            "remaining": float(row.ledger.total_remaining_amount),
            "remaining_label": format_rupees(
                row.ledger.total_remaining_amount
            ),
        }
        for row in loaded[:max_parties]
    ]


def _render_remaining_chart(rows: Sequence[PartyLedgerRow]) -> None:
    data = _remaining_chart_data(rows)
    if not data:
        st.info("No outstanding dues for the selected dates.")
        return
    chart = alt.Chart(alt.Data(values=data)).mark_bar(
        cornerRadiusEnd=4,
        color="#e76f51",
    ).encode(
        x=alt.X("remaining:Q", title="Remaining (₹)"),
        y=alt.Y("party:N", sort="-x", title=None),
        tooltip=[
            alt.Tooltip("party:N"),
            alt.Tooltip("remaining_label:N", title="Remaining"),
        ],
    ).properties(height=36 * len(data))
    st.subheader("Largest Remaining Dues")
    st.altair_chart(chart, width="stretch")


def _render_totals(aggregator: LedgerAggregator) -> None:
    totals = aggregator.totals()
    official_col, offline_col, received_col, remaining_col = st.columns(4)
    official_col.metric("Total Official", format_rupees(totals.official))
    offline_col.metric("Total Offline", format_rupees(totals.offline))
    received_col.metric("Total Received", format_rupees(totals.received))
    remaining_col.metric("Total Remaining", format_rupees(totals.remaining))
    pending = sum(1 for row in aggregator.rows if row.loading)
    failed = sum(1 for row in aggregator.rows if row.error)
    if pending:
        st.caption(f"Provisional: {pending} ledgers still loading.")
    if failed:
        st.warning(
            f"{failed} ledgers failed to load and are excluded from totals."
        )


async def _stream_ledgers(
    aggregator: LedgerAggregator,
    parties: Sequence[Party],
    start_date: date,
    end_date: date,
    placeholder,
) -> None:
    async for rows in aggregator.load_all(parties, start_date, end_date):
        with placeholder.container():
            _render_totals(aggregator)
            st.dataframe(_rows_table(rows), width="stretch", hide_index=True)


def _render_ledgers_page(
    parties: Sequence[Party],
    start_date: date,
    end_date: date,
) -> None:
    """Render combined totals for every party, refreshing as rows load."""
    st.subheader("Party Ledgers")
    aggregator = st.session_state.get("ledger_aggregator")
    if aggregator is None:
        aggregator = build_ledger_aggregator()
        st.session_state["ledger_aggregator"] = aggregator

    placeholder = st.empty()
    if (
        aggregator.window != (start_date, end_date)
        or aggregator.needs_reload
        or st.button("Reload")
    ):
        _run(
            _stream_ledgers(
                aggregator,
                parties,
                start_date,
                end_date,
                placeholder,
            )
        )
    else:
        with placeholder.container():
            _render_totals(aggregator)
            st.dataframe(
                _rows_table(aggregator.rows),
                width="stretch",
                hide_index=True,
            )
    _render_remaining_chart(aggregator.rows)


def _get_payment_index(floor: str) -> PaymentIndex:
    """Return the floor's payment index, building it on first use."""
    key = f"payment_index:{floor}"
    index = st.session_state.get(key)
    if index is None:
        index = build_payment_index(floor=floor)
        with st.spinner("Loading payments..."):
            _run(index.rebuild())
        st.session_state[key] = index
    return index


def _get_ledger_view(party: Party, floor: str) -> PartyLedgerView:
    """Return the ledger view for the selected party, replacing stale ones."""
    view = st.session_state.get("ledger_view")
    floor_changed = st.session_state.get("ledger_floor") != floor
    if view is None or view.party != party or floor_changed:
        if view is not None:
            view.close()
        view = build_party_ledger_view(party)
        _run(view.refresh())
        st.session_state["ledger_view"] = view
        st.session_state["ledger_floor"] = floor
        st.session_state["reconciliation_flow"] = build_reconciliation_flow(
            _get_payment_index(floor),
            view,
        )
    return view


def _render_errors(
    view: PartyLedgerView,
    flow: PaymentReconciliationFlow,
) -> None:
    message = view.fetch_error or view.download_error or flow.message
    if not message:
        return
    st.error(message)
    if st.button("Dismiss", key="dismiss_errors"):
        view.dismiss_errors()
        flow.dismiss_message()
        st.rerun()


def _render_order(
    order: LedgerOrder,
    flow: PaymentReconciliationFlow,
    index: PaymentIndex,
) -> None:
    order_day = (
        order.order_date.strftime("%d/%m/%Y") if order.order_date else "-"
    )
    title = f"Order #{order.order_id} · {order_day}"
    with st.expander(title, expanded=False):
        for action in payable_dues(order):
            label = "Official" if action.mode == OFFICIAL else "Offline"
            if st.button(
                f"{label} Due: {format_rupees(action.due_amount)}",
                key=f"record:{order.order_id}:{action.mode}",
                disabled=not index.loaded,
            ):
                flow.request_record_payment(order.order_id, action.mode)
                st.rerun()
        if order.products:
            st.dataframe(
                [
                    {
                        "Product": product.product_name,
                        "Qty (Kg)": str(product.quantity_kg or "-"),
                        "Qty (Pc)": str(product.quantity_pc or "-"),
                        "Market Rate": format_rupees(product.market_rate),
                        "Rate Diff": format_rupees(product.rate_difference),
                        "Total": format_rupees(product.total_amount),
                    }
                    for product in order.products
                ],
                width="stretch",
                hide_index=True,
            )
        bill = order.bill_summary
        if bill is not None:
            st.caption(
                f"Bill {bill.bill_percentage or '-'}% · without GST "
                f"{format_rupees(bill.amount_without_gst)} · GST "
                f"{format_rupees(bill.gst_amount)} · bill total "
                f"{format_rupees(bill.bill_total_amount)}"
            )
        st.caption(
            "Official grand total "
            f"{format_rupees(order.official_grand_total)} · Offline grand "
            f"total {format_rupees(order.offline_grand_total)}"
        )


def _render_capture_form(flow: PaymentReconciliationFlow) -> None:
    form_state = flow.form
    if flow.state is not FlowState.CAPTURING or form_state is None:
        return
    payment = form_state.payment
    st.subheader(f"Record Payment · Order #{payment.order_id}")
    total_col, received_col, remaining_col = st.columns(3)
    total_col.metric("Total Amount", format_rupees(payment.total_amount))
    received_col.metric(
        "Already Received",
        format_rupees(form_state.received_amount),
    )
    remaining_col.metric(
        "Remaining Balance",
        format_rupees(form_state.remaining_amount),
    )
    with st.form("record_payment"):
        amount = st.number_input(
            "New Received Amount",
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        received_date = st.date_input(
            "Date of Receipt",
            value=form_state.received_date,
        )
        submitted = st.form_submit_button("Record Payment")
    if form_state.error:
        st.error(form_state.error)
    if submitted:
        with st.spinner("Processing..."):
            _run(flow.submit(Decimal(str(amount)), received_date))
        st.rerun()
    if st.button("Cancel", key="cancel_payment"):
        flow.cancel()
        st.rerun()


def _render_ledger_page(parties: Sequence[Party], floor: str) -> None:
    """Render one party's ledger with record-payment actions."""
    party = st.selectbox(
        "Party",
        options=list(parties),
        format_func=lambda item: item.name,
    )
    view = _get_ledger_view(party, floor)
    index = _get_payment_index(floor)
    flow = st.session_state["reconciliation_flow"]

    start_col, end_col, apply_col = st.columns([2, 2, 1])
    current_start, current_end = view.window
    start_date = start_col.date_input("Start Date", value=current_start)
    end_date = end_col.date_input(
        "End Date",
        value=current_end,
        max_value=date.today(),
    )
    if apply_col.button("Apply", disabled=view.fetching):
        if start_date > end_date:
            st.error("Start date must not be after end date.")
        else:
            with st.spinner("Loading..."):
                _run(view.apply_filter(start_date, end_date))

    if st.button("Download PDF", disabled=view.downloading):
        saved = _run(view.download_pdf(EXPORT_DIR))
        if saved is not None:
            st.download_button(
                "Save PDF",
                data=Path(saved).read_bytes(),
                file_name=saved.name,
                mime="application/pdf",
            )

    _render_errors(view, flow)
    if index.fetch_failed:
        st.warning("Payments are unavailable; recording payments is disabled.")

    ledger = view.ledger
    if ledger is None:
        return
    official_col, offline_col, received_col, remaining_col = st.columns(4)
    official_col.metric(
        "Total Official",
        format_rupees(ledger.total_official_amount),
    )
    offline_col.metric(
        "Total Offline",
        format_rupees(ledger.total_offline_amount),
    )
    received_col.metric(
        "Total Received",
        format_rupees(ledger.total_received_amount),
    )
    remaining_col.metric(
        "Total Remaining",
        format_rupees(ledger.total_remaining_amount),
    )
    _render_capture_form(flow)
    if not ledger.orders:
        st.info("No orders found for the selected date range.")
        return
    for order in ledger.orders:
        _render_order(order, flow, index)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Party Ledger Dashboard", layout="wide")
    st.title("Party Ledger Dashboard")

    page = st.sidebar.selectbox("Page", ["Party Ledgers", "Ledger"])
    floor = st.sidebar.selectbox("Floor", list(FLOORS))
    _render_payment_stats(floor)

    try:
        parties = _load_parties()
    except PortError as exc:
        st.error(f"Failed to load parties: {exc}")
        return
    if not parties:
        st.warning("No parties found.")
        return

    if page == "Party Ledgers":
        default_start, default_end = default_window(date.today())
        start_date = st.sidebar.date_input("Start Date", value=default_start)
        end_date = st.sidebar.date_input("End Date", value=default_end)
        if start_date > end_date:
            st.error("Start date must not be after end date.")
            return
        _render_ledgers_page(parties, start_date, end_date)
    else:
        _render_ledger_page(parties, floor)


if __name__ == "__main__":  # pragma: no cover
    main()
