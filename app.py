"""Streamlit entry point for the Clarity finance tracker."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import streamlit as st
from clarity import features, insights, pagination, reports, sources, utils, viz
from clarity.config import Settings
from clarity.logging_setup import configure_logging


@st.cache_resource(show_spinner=False)
def _load_settings() -> Settings:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


def _source(settings: Settings) -> sources.TransactionSource:
    if "source" not in st.session_state:
        st.session_state["source"] = sources.make_source(settings)
    return st.session_state["source"]


def _render_add_form(source: sources.TransactionSource) -> None:
    st.sidebar.subheader("Add transaction")
    # Outside the form so the category options follow the chosen type.
    txn_type = st.sidebar.radio("Type", features.TRANSACTION_TYPES, horizontal=True)
    with st.sidebar.form("add_transaction", clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox("Category", features.suggested_categories(txn_type))
        description = st.text_input("Description")
        when = st.date_input("Date", value=datetime.now().date())
        if st.form_submit_button("Save transaction"):
            if amount <= 0:
                st.warning("Enter an amount above zero.")
                return
            source.add_transaction(
                {
                    "type": txn_type,
                    "amount": amount,
                    "category": category,
                    "description": description,
                    "date": pd.Timestamp(when).isoformat(),
                }
            )
            st.success("Saved transaction")
            st.rerun()


def _render_transaction_list(
    transactions: pd.DataFrame, settings: Settings, source: sources.TransactionSource
) -> None:
    state = st.session_state
    view = pagination.TransactionListView(
        transactions,
        page_size=settings.page_size,
        category=state.get("active_category"),
        page=state.get("transaction_page", 1),
    )
    chips = pagination.CategoryChips(page_size=settings.category_page_size)
    chips.go_to(state.get("chip_page", 1))

    chip_cols = st.columns(chips.page_size + 2)
    if chip_cols[0].button("‹", key="chips_prev", disabled=not chips.has_previous):
        state["chip_page"] = chips.page - 1
        st.rerun()
    for col, label in zip(chip_cols[1:-1], chips.current, strict=False):
        active = (view.category or pagination.ALL_CATEGORIES) == label
        if col.button(label, key=f"chip_{label}", type="primary" if active else "secondary"):
            view.select_category(None if label == pagination.ALL_CATEGORIES else label)
            state["active_category"] = view.category
            state["transaction_page"] = view.page
            st.rerun()
    if chip_cols[-1].button("›", key="chips_next", disabled=not chips.has_next):
        state["chip_page"] = chips.page + 1
        st.rerun()

    page_rows = view.current
    if page_rows.empty:
        st.caption("No transactions yet. Add your first transaction from the sidebar.")
        return

    table = page_rows.assign(
        date=page_rows["date"].dt.strftime("%Y-%m-%d"),
        amount=[
            ("+" if txn_type == "income" else "-") + utils.format_currency(value)
            for txn_type, value in zip(page_rows["type"], page_rows["amount"], strict=False)
        ],
    )[["date", "description", "category", "amount"]]
    st.dataframe(table, hide_index=True, use_container_width=True)

    delete_col, button_col = st.columns([4, 1])
    labels = {
        txn_id: f"{day} {category} {amount}".strip()
        for txn_id, day, category, amount in zip(
            page_rows["id"], table["date"].fillna(""), table["category"], table["amount"], strict=False
        )
    }
    target = delete_col.selectbox(
        "Transaction", list(labels), format_func=labels.get, label_visibility="collapsed"
    )
    if button_col.button("Delete", key="delete_transaction") and target is not None:
        source.delete_transaction(target)
        st.rerun()

    prev_col, label_col, next_col = st.columns([1, 3, 1])
    if prev_col.button("Previous", disabled=view.page <= 1):
        state["transaction_page"] = view.page - 1
        st.rerun()
    label_col.caption(f"Page {view.page} of {view.total_pages}")
    if next_col.button("Next", disabled=view.page >= view.total_pages):
        state["transaction_page"] = view.page + 1
        st.rerun()


def _render_analytics(transactions: pd.DataFrame, settings: Settings) -> None:
    payload = insights.calculate_kpis(transactions, window=settings.activity_window_days)

    st.markdown(f"### Last {settings.activity_window_days} days activity")
    st.plotly_chart(
        viz.plot_daily_activity(payload["daily_activity"]),
        use_container_width=True,
        config={"displayModeBar": False},
    )

    breakdown_col, savings_col = st.columns(2)
    with breakdown_col:
        txn_type = st.radio(
            "Breakdown",
            features.TRANSACTION_TYPES[::-1],
            format_func=lambda value: "Exp" if value == "expense" else "Inc",
            horizontal=True,
        )
        st.plotly_chart(
            viz.plot_category_breakdown(payload["categories"][txn_type], txn_type),
            use_container_width=True,
            config={"displayModeBar": False},
        )
    with savings_col:
        st.plotly_chart(
            viz.plot_savings_rate(payload["savings_rate"]),
            use_container_width=True,
            config={"displayModeBar": False},
        )
        st.caption(payload["savings_health"]["message"])


def _render_reports(transactions: pd.DataFrame) -> None:
    groups = reports.monthly_reports(transactions)
    if not groups:
        st.caption("No transaction data available to generate reports.")
        return
    for group in groups:
        info_col, download_col = st.columns([4, 1])
        info_col.markdown(f"**{group['month_label']}**")
        info_col.caption(f"{group['size_label']} • {group['count']} Transactions • {group['status']}")
        download_col.download_button(
            "Download CSV",
            data=reports.export_csv(group["transactions"]),
            file_name=reports.report_filename(group["month_label"]),
            mime="text/csv",
            key=f"report_{group['month']}",
        )


def main() -> None:
    """Render the Clarity dashboard."""

    st.set_page_config(page_title="Clarity", page_icon="💸", layout="wide")

    settings = _load_settings()
    source = _source(settings)
    transactions = source.fetch_transactions()

    st.title("Clarity")
    if settings.demo_mode:
        st.caption("Demo mode: changes are kept in memory only.")

    summary = insights.summarize(transactions)
    metric_cols = st.columns(3)
    metric_cols[0].metric("Balance", utils.format_currency(summary["balance"]))
    metric_cols[1].metric("Income", utils.format_currency(summary["income"]))
    metric_cols[2].metric("Expense", utils.format_currency(summary["expense"]))

    _render_add_form(source)

    overview_tab, analytics_tab, reports_tab = st.tabs(["Transactions", "Analytics", "Reports"])
    with overview_tab:
        _render_transaction_list(transactions, settings, source)
    with analytics_tab:
        _render_analytics(transactions, settings)
    with reports_tab:
        _render_reports(transactions)


if __name__ == "__main__":
    main()
