"""
Streamlit Frontend for MoodSpend

This is the page the user keeps open while logging expenses.

DESIGN PRINCIPLES:
1. Every render starts from the persisted records and the current filters
2. The page lays out a DashboardView; it never aggregates by itself
3. Every mutation (add, delete, import, reset) is followed by a full rerun
4. Destructive actions need an explicit confirmation
"""

from datetime import date

import altair as alt
import pandas as pd
import streamlit as st

from moodspend.audit import configure_logging
from moodspend.config import get_settings, validate_all_settings
from moodspend.models.expense import (
    MAX_AMOUNT,
    ExpenseForm,
    FilterCriteria,
    Mood,
    PaymentMethod,
)
from moodspend.presentation import ChartSeries, DashboardView
from moodspend.services.storage import StorageError
from moodspend.tracker import ExpenseTracker, create_tracker


# Page configuration
st.set_page_config(
    page_title="MoodSpend",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

ALL_MOODS = "All moods"
ALL_MONTHS = "All months"


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Get or create the tracker (cached for the server process)."""
    settings = get_settings()
    configure_logging(settings.app.log_level)
    return create_tracker(settings)


def init_state():
    """Initialize session state keys used across reruns."""
    st.session_state.setdefault("filter_text", "")
    st.session_state.setdefault("filter_mood", ALL_MOODS)
    st.session_state.setdefault("filter_month", ALL_MONTHS)
    st.session_state.setdefault("import_generation", 0)
    st.session_state.setdefault("notice", None)


def clear_filters():
    st.session_state.filter_text = ""
    st.session_state.filter_mood = ALL_MOODS
    st.session_state.filter_month = ALL_MONTHS


def current_criteria() -> FilterCriteria:
    """Read the filter widgets into FilterCriteria."""
    mood = st.session_state.filter_mood
    month = st.session_state.filter_month
    return FilterCriteria(
        text_query=st.session_state.filter_text,
        mood=None if mood == ALL_MOODS else mood,
        year_month=None if month == ALL_MONTHS else month,
    )


def main():
    """Main application entry point."""
    tracker = get_tracker()
    init_state()

    st.sidebar.title("💸 MoodSpend")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")

    if page == "📊 Dashboard":
        render_dashboard_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def render_filters(records) -> FilterCriteria:
    """Render the sidebar filters and return the criteria they describe."""
    st.sidebar.markdown("### Filters")

    moods = sorted({record.mood for record in records} | {m.value for m in Mood})
    months = sorted({record.year_month for record in records}, reverse=True)

    # A filter value can vanish after a delete, import or reset
    if st.session_state.filter_mood not in moods:
        st.session_state.filter_mood = ALL_MOODS
    if st.session_state.filter_month not in months:
        st.session_state.filter_month = ALL_MONTHS

    st.sidebar.text_input(
        "Search description or category",
        key="filter_text",
        placeholder="e.g. coffee",
    )
    st.sidebar.selectbox("Mood", [ALL_MOODS] + moods, key="filter_mood")
    st.sidebar.selectbox("Month", [ALL_MONTHS] + months, key="filter_month")
    st.sidebar.button("Clear filters", on_click=clear_filters)

    return current_criteria()


def render_add_form(tracker: ExpenseTracker):
    """Render the add-expense form."""
    with st.form("expense-form", clear_on_submit=True):
        st.markdown("### ➕ Add Expense")
        col1, col2, col3 = st.columns(3)

        with col1:
            amount = st.number_input(
                f"Amount ({tracker.settings.currency_symbol})",
                min_value=0.0,
                max_value=float(MAX_AMOUNT),
                step=1.0,
                value=None,
                format="%.2f",
            )
            spent_on = st.date_input("Date", value=date.today())

        with col2:
            category = st.text_input("Category", placeholder="e.g. Food")
            description = st.text_input("Description", placeholder="e.g. Late-night pizza")

        with col3:
            payment = st.selectbox(
                "Payment",
                options=[""] + [p.value for p in PaymentMethod],
                format_func=lambda x: "Select payment" if x == "" else x,
            )
            mood = st.selectbox(
                "Mood",
                options=[""] + [m.value for m in Mood],
                format_func=lambda x: "How did you feel?" if x == "" else x,
            )

        submitted = st.form_submit_button("Save expense", type="primary")

    if submitted:
        form = ExpenseForm(
            amount=amount,
            date=spent_on,
            category=category,
            description=description,
            payment=payment,
            mood=mood,
        )
        try:
            record = tracker.add_expense(form)
        except StorageError as e:
            st.error(f"Could not save the expense: {e}")
            return
        # Incomplete submissions are ignored without a message
        if record is not None:
            st.rerun()


def render_stats(view: DashboardView):
    col1, col2, col3 = st.columns(3)
    col1.metric("Total spend", view.total_label)
    col2.metric("Transactions", view.count)
    col3.metric("Top mood", view.top_mood_label)

    st.info("💡 " + " ".join(view.insights))


def _frame(series: ChartSeries, label: str, value: str = "Spend") -> pd.DataFrame:
    return pd.DataFrame({label: series.labels, value: series.values})


def render_charts(view: DashboardView):
    """Render spend by mood, spend over time and the category breakdown."""
    col1, col2, col3 = st.columns(3)

    with col1:
        st.markdown("#### Spend by Mood")
        if view.mood_chart.is_empty:
            st.caption("No data")
        else:
            st.bar_chart(_frame(view.mood_chart, "Mood"), x="Mood", y="Spend")

    with col2:
        st.markdown("#### Spend over Time")
        if view.time_chart.is_empty:
            st.caption("No data")
        else:
            st.line_chart(_frame(view.time_chart, "Date"), x="Date", y="Spend")

    with col3:
        st.markdown("#### Categories")
        if view.category_chart.is_empty:
            st.caption("No data")
        else:
            chart = alt.Chart(_frame(view.category_chart, "Category")).mark_arc(
                innerRadius=50
            ).encode(
                theta=alt.Theta("Spend:Q"),
                color=alt.Color("Category:N"),
                tooltip=["Category", "Spend"],
            )
            st.altair_chart(chart, use_container_width=True)


def render_table(tracker: ExpenseTracker, view: DashboardView):
    """Render the filtered expenses, most recent first, with delete buttons."""
    st.markdown("### 🧾 Expenses")

    if not view.rows:
        st.info("No expenses match. Add one above or clear the filters.")
        return

    widths = [2, 2, 2, 3, 2, 2, 1]
    header = st.columns(widths)
    for col, title in zip(header, ["Date", "Amount", "Category", "Description", "Payment", "Mood", ""]):
        col.markdown(f"**{title}**")

    for row in view.rows:
        cols = st.columns(widths)
        cols[0].write(row.date)
        cols[1].write(row.amount)
        cols[2].write(row.category)
        cols[3].write(row.description)
        cols[4].write(row.payment)
        cols[5].write(row.mood)
        if cols[6].button("Delete", key=f"delete_{row.id}"):
            try:
                tracker.delete_expense(row.id)
            except StorageError as e:
                st.error(f"Could not delete the expense: {e}")
                return
            st.rerun()


def render_data_section(tracker: ExpenseTracker, records):
    """Render export, import and reset."""
    st.markdown("### 🗂️ Your Data")
    col1, col2, col3 = st.columns(3)

    with col1:
        st.download_button(
            "⬇️ Export CSV",
            data=tracker.export_csv(records),
            file_name=tracker.settings.export_filename,
            mime="text/csv",
            on_click=tracker.record_export,
            args=(len(records),),
        )

    with col2:
        uploaded = st.file_uploader(
            "Import JSON (replaces all data)",
            type=["json"],
            key=f"import_file_{st.session_state.import_generation}",
        )
        if uploaded is not None and st.button("⬆️ Import"):
            outcome = tracker.import_json(uploaded.getvalue())
            # Forget the uploaded file whatever the outcome
            st.session_state.import_generation += 1
            st.session_state.notice = ("success" if outcome.success else "error", outcome.message)
            st.rerun()

    with col3:
        confirm = st.checkbox("Yes, clear all saved expenses")
        if st.button("🗑️ Reset all data", disabled=not confirm):
            try:
                tracker.reset()
            except StorageError as e:
                st.error(f"Could not reset: {e}")
                return
            st.session_state.notice = ("success", "All expenses cleared.")
            st.rerun()


def render_notice():
    """Show the one-shot notice left by the previous action."""
    notice = st.session_state.notice
    if notice:
        kind, message = notice
        if kind == "success":
            st.success(message)
        else:
            st.error(message)
        st.session_state.notice = None


def render_dashboard_page(tracker: ExpenseTracker):
    """Render the main dashboard page."""
    st.title("💸 Emotional Expense Tracker")
    st.markdown("Log what you spend and how you felt. Patterns show up after a few entries.")

    render_notice()

    try:
        records = tracker.load_expenses()
    except StorageError as e:
        st.error(f"Could not read your expenses: {e}")
        return
    criteria = render_filters(records)
    view = tracker.dashboard(criteria, records)

    render_add_form(tracker)
    st.markdown("---")
    render_stats(view)
    render_charts(view)
    st.markdown("---")
    render_table(tracker, view)
    st.markdown("---")
    render_data_section(tracker, records)


def render_settings_page(tracker: ExpenseTracker):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    storage_settings = get_settings().storage
    app_settings = tracker.settings

    st.markdown("### Storage")
    if storage_settings.backend == "file":
        st.markdown(f"Data file: `{storage_settings.slot_path}`")
    else:
        st.markdown("In-memory storage: data is lost when the server stops.")

    st.markdown("### Policies")
    st.markdown(
        f"- Unparseable amounts: **{app_settings.amount_fallback.value}**\n"
        f"- Recover from corrupt data: **{app_settings.recover_corrupt_data}**\n"
        f"- Expenses needed for insights: **{app_settings.min_records_for_insights}**"
    )

    st.markdown("### Recent Activity")
    history = tracker.audit_logger.history
    if not history:
        st.caption("Nothing yet in this session.")
    for event in reversed(history[-10:]):
        st.markdown(f"- `{event.timestamp:%H:%M:%S}` {event.description}")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
