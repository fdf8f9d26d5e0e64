"""
Streamlit Frontend for Super Tracker

This is the calendar and analysis view for one person's super contributions.

DESIGN PRINCIPLES:
1. All numbers come from the session; this file only draws them
2. Imports are all-or-nothing and say exactly what was wrong
3. Settings are saved only when the user presses Save

The page shows:
- Sidebar: income, super rate, payment cycle, year, save
- Import box for a JSON array of {date, amount}
- A 12-month calendar marking contribution days and expected payment days
- Analysis: headline numbers, monthly and yearly variance tables
"""

import calendar
from decimal import Decimal

import streamlit as st

from supertracker.analysis import round_money
from supertracker.audit import create_correlation_id
from supertracker.models.analysis import CalendarPayload
from supertracker.models.contribution import format_day_month_key
from supertracker.models.tracker import PaymentCycle
from supertracker.orchestrator import TrackerSession, create_session
from supertracker.schedule import cycle_day_keys
from supertracker.services.storage import StorageError
from supertracker.validation import IMPORT_FORMAT_EXAMPLE, ValidationError


# Page configuration
st.set_page_config(
    page_title="Super Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Calendar styling
st.markdown("""
<style>
    .month { margin-bottom: 18px; }
    .month-title { font-weight: bold; margin-bottom: 6px; }
    .weekdays, .days {
        display: grid;
        grid-template-columns: repeat(7, 1fr);
        gap: 2px;
        font-size: 0.8em;
        text-align: center;
    }
    .weekdays div { color: #6c757d; }
    .day { min-height: 38px; padding: 2px; border-radius: 4px; }
    .employer-contribution { background-color: #d4edda; }
    .low-income-benefit { background-color: #fff3cd; }
    .payment-cycle { border: 2px solid #004085; }
    .amount { font-size: 0.75em; }
    .positive { color: #28a745; }
    .negative { color: #dc3545; }
</style>
""", unsafe_allow_html=True)


WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@st.cache_resource
def get_session() -> TrackerSession:
    """Get or create the tracker session (cached)."""
    try:
        return create_session(use_storage=True)
    except (StorageError, ValueError) as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_session(use_storage=False)


def format_money(value: Decimal) -> str:
    return f"${round_money(value):,.2f}"


def format_variance(value: Decimal) -> str:
    rounded = round_money(value)
    sign = "+" if rounded > 0 else "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def main():
    """Main application entry point."""
    session = get_session()

    render_sidebar(session)

    st.title("💰 Super Contribution Tracker")

    render_import(session)

    payload = session.calendar_payload()

    col1, col2 = st.columns([3, 2])
    with col1:
        render_calendar(payload)
    with col2:
        render_analysis(payload)


def render_sidebar(session: TrackerSession):
    """Settings form."""
    settings = session.settings
    cycles = list(PaymentCycle)

    st.sidebar.title("⚙️ Settings")

    annual_income = st.sidebar.number_input(
        "Annual income ($)",
        value=float(settings.annual_income),
        min_value=0.0,
        step=1000.0,
        format="%.2f",
    )
    super_rate = st.sidebar.number_input(
        "Super rate (%)",
        value=float(settings.super_rate),
        min_value=0.0,
        max_value=100.0,
        step=0.5,
        format="%.2f",
    )
    cycle = st.sidebar.selectbox(
        "Payment cycle",
        options=cycles,
        index=cycles.index(settings.payment_cycle),
        format_func=lambda c: c.label,
    )

    if st.sidebar.button("Apply", type="primary"):
        session.set_payment_cycle(
            cycle,
            annual_income=annual_income,
            super_rate=super_rate,
            correlation_id=create_correlation_id(),
        )
        st.rerun()

    st.sidebar.markdown("---")

    year_options = sorted(set(session.store.years) | {settings.selected_year})
    year = st.sidebar.selectbox(
        "Year",
        options=year_options,
        index=year_options.index(settings.selected_year),
    )
    if year != settings.selected_year:
        session.select_year(year, correlation_id=create_correlation_id())
        st.rerun()

    st.sidebar.markdown("---")

    if st.sidebar.button("💾 Save settings"):
        try:
            session.save_settings(correlation_id=create_correlation_id())
            st.sidebar.success("Settings saved")
        except StorageError as e:
            st.sidebar.error(f"Failed to save: {e}")


def render_import(session: TrackerSession):
    """JSON import box."""
    with st.expander("📥 Import contributions", expanded=session.store.is_empty):
        text = st.text_area(
            "Paste a JSON array",
            placeholder=IMPORT_FORMAT_EXAMPLE,
            height=150,
        )
        if st.button("Import") and text:
            try:
                summary = session.import_data(text, correlation_id=create_correlation_id())
            except ValidationError as e:
                st.error(str(e))
                return
            st.success(
                f"Imported {summary.record_count} records "
                f"({summary.stored_count} days across {len(summary.years)} year(s))"
            )
            if summary.overwritten_count:
                st.info(f"{summary.overwritten_count} record(s) replaced an earlier record for the same day")


def render_calendar(payload: CalendarPayload):
    """Twelve month grids, three per row."""
    st.subheader(f"📅 {payload.year}")

    cycle_keys = cycle_day_keys(payload.cycle_dates)
    month_calendar = calendar.Calendar(firstweekday=6)  # Sunday first

    for row_start in range(1, 13, 3):
        columns = st.columns(3)
        for offset, column in enumerate(columns):
            month = row_start + offset
            with column:
                st.markdown(
                    render_month(payload, month_calendar, month, cycle_keys),
                    unsafe_allow_html=True,
                )

    st.caption(
        f"Green: above {format_money(payload.high_threshold)} · "
        "Yellow: smaller contributions · Outlined: expected payment day"
    )


def render_month(
    payload: CalendarPayload,
    month_calendar: calendar.Calendar,
    month: int,
    cycle_keys: set[str],
) -> str:
    cells = []
    for day in month_calendar.itermonthdays(payload.year, month):
        if day == 0:
            cells.append('<div class="day"></div>')
            continue

        key = format_day_month_key(day, month)
        classes = ["day"]
        amount_html = ""

        amount = payload.contributions.get(key)
        if amount:
            if amount > payload.high_threshold:
                classes.append("employer-contribution")
            else:
                classes.append("low-income-benefit")
            amount_html = f'<div class="amount">{format_money(amount)}</div>'

        if key in cycle_keys:
            classes.append("payment-cycle")

        cells.append(f'<div class="{" ".join(classes)}">{day}{amount_html}</div>')

    weekdays = "".join(f"<div>{name}</div>" for name in WEEKDAYS)
    return (
        f'<div class="month">'
        f'<div class="month-title">{calendar.month_name[month]} {payload.year}</div>'
        f'<div class="weekdays">{weekdays}</div>'
        f'<div class="days">{"".join(cells)}</div>'
        f'</div>'
    )


def render_analysis(payload: CalendarPayload):
    """Headline numbers and variance tables."""
    summary = payload.report.summary

    st.subheader("📊 Analysis")
    st.markdown(f"""
    - **Annual income:** {format_money(summary.annual_income)}
    - **Super rate:** {summary.super_rate}%
    - **Expected annual super:** {format_money(summary.expected_annual)}
    - **Expected {summary.payment_cycle.label.lower()} contribution:** {format_money(summary.expected_per_payment)}
    - **Total contributions to date:** {format_money(summary.total_to_date)}
    """)

    st.markdown("#### Monthly analysis")
    if not payload.report.monthly:
        st.info("No contributions for this year yet.")
    else:
        st.markdown(variance_table(
            "Month",
            [
                (m.month_name, m.total, m.expected, m.variance)
                for m in payload.report.monthly
            ],
        ), unsafe_allow_html=True)

    if payload.report.yearly:
        st.markdown("#### Yearly analysis")
        st.markdown(variance_table(
            "Year",
            [
                (str(y.year), y.total, y.expected, y.variance)
                for y in payload.report.yearly
            ],
        ), unsafe_allow_html=True)


def variance_table(label: str, rows: list[tuple[str, Decimal, Decimal, Decimal]]) -> str:
    html = [f"<table><tr><th>{label}</th><th>Total</th><th>Expected</th><th>Variance</th></tr>"]
    for name, total, expected, variance in rows:
        css = "negative" if variance < 0 else "positive"
        html.append(
            f"<tr><td>{name}</td><td>{format_money(total)}</td>"
            f"<td>{format_money(expected)}</td>"
            f'<td class="{css}">{format_variance(variance)}</td></tr>'
        )
    html.append("</table>")
    return "".join(html)


if __name__ == "__main__":
    main()
