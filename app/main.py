"""
Streamlit Frontend for Expense Tracker

This is the interface the user works with every day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Voice input only SUGGESTS a transaction; the user confirms it
3. Clear error messages in simple language
4. Visual feedback for all operations

This module is also the ONE place where the theme is applied to the page.
The services only resolve which theme to use.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st
from pydantic import ValidationError

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.log import configure_logging
from expense_tracker.models import (
    SUPPORTED_CURRENCIES,
    BudgetPeriod,
    Category,
    ChatRole,
    DateFormat,
    Frequency,
    Theme,
    TransactionCreate,
    TransactionKind,
)
from expense_tracker.orchestrator import ExpenseTrackerApp, create_app_components
from expense_tracker.services import format_money, resolve_theme
from expense_tracker.services.storage import CorruptDataError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button { width: 100%; }
    .alert-box { padding: 14px; border-radius: 10px; margin: 8px 0; }
    .alert-warning { background-color: #fff3cd; border-left: 5px solid #ffc107; }
    .alert-danger { background-color: #ffe5d0; border-left: 5px solid #fd7e14; }
    .alert-critical { background-color: #f8d7da; border-left: 5px solid #dc3545; }
</style>
"""

DARK_CSS = """
<style>
    .stApp { background-color: #0e1117; color: #fafafa; }
    .stButton>button { width: 100%; }
    .alert-box { padding: 14px; border-radius: 10px; margin: 8px 0; color: #fafafa; }
    .alert-warning { background-color: #3d3310; border-left: 5px solid #ffc107; }
    .alert-danger { background-color: #402812; border-left: 5px solid #fd7e14; }
    .alert-critical { background-color: #40161a; border-left: 5px solid #dc3545; }
</style>
"""


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_app() -> ExpenseTrackerApp:
    """Get or create the application (cached for the server lifetime)."""
    configure_logging(get_settings().app.log_level)
    return ExpenseTrackerApp(create_app_components())


def label(value: str) -> str:
    return value.replace("_", " ").title()


def apply_theme(app: ExpenseTrackerApp) -> None:
    """Inject the stylesheet for the resolved theme."""
    prefers_dark = st.session_state.get("prefers_dark", False)
    resolved = resolve_theme(app.services.theme.get_theme(), prefers_dark)
    st.markdown(DARK_CSS if resolved == "dark" else LIGHT_CSS, unsafe_allow_html=True)


def main():
    """Main application entry point."""
    app = get_app()

    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "➕ Add Transaction",
            "📋 Transactions",
            "🎯 Budgets",
            "🤖 Assistant",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    st.session_state.prefers_dark = st.sidebar.checkbox(
        "My device uses dark mode",
        value=st.session_state.get("prefers_dark", False),
        help="Used when the theme is set to 'system'",
    )
    current_theme = app.services.theme.get_theme()
    if st.sidebar.button(f"🌓 Theme: {label(current_theme.value)}"):
        app.services.theme.toggle_theme()
        st.rerun()

    apply_theme(app)

    try:
        if page == "📊 Dashboard":
            render_dashboard_page(app)
        elif page == "➕ Add Transaction":
            render_add_page(app)
        elif page == "📋 Transactions":
            render_transactions_page(app)
        elif page == "🎯 Budgets":
            render_budgets_page(app)
        elif page == "🤖 Assistant":
            render_assistant_page(app)
        elif page == "⚙️ Settings":
            render_settings_page(app)
    except CorruptDataError as e:
        st.error(
            f"Stored data under '{e.key}' could not be read. "
            "Import a backup or clear the data from the Settings page."
        )


def render_alerts(app: ExpenseTrackerApp, alerts) -> None:
    """Show the current alerts. Dismissed ones return on the next evaluation."""
    if st.button("Clear all alerts", key="clear-alerts"):
        app.services.alerts.clear_all()
        return
    for alert in alerts:
        col1, col2 = st.columns([6, 1])
        # The button is read first so a dismissed alert is not drawn this run
        if col2.button("Dismiss", key=f"dismiss-{alert.id}"):
            app.services.alerts.dismiss(alert.id)
            continue
        col1.markdown(
            f'<div class="alert-box alert-{alert.severity.value}">{alert.message}</div>',
            unsafe_allow_html=True,
        )


def render_dashboard_page(app: ExpenseTrackerApp):
    """Render totals, trend, alerts and suggestions."""
    st.title("📊 Dashboard")

    snapshot = app.refresh()
    summary = snapshot.summary
    symbol = snapshot.context.currency_symbol

    col1, col2, col3 = st.columns(3)
    col1.metric("Expenses this month", format_money(summary.total_expenses, symbol))
    col2.metric("Income this month", format_money(summary.total_income, symbol))
    col3.metric("Net", format_money(summary.net_amount, symbol))

    if snapshot.alerts:
        st.markdown("### 🔔 Budget Alerts")
        render_alerts(app, snapshot.alerts)

    st.markdown("### 📈 Six-Month Trend")
    st.bar_chart(
        {
            "Expenses": {p.month: float(p.expenses) for p in summary.monthly_trend},
            "Income": {p.month: float(p.income) for p in summary.monthly_trend},
        }
    )

    if summary.expenses_by_category:
        st.markdown("### 🧾 Spending by Category")
        st.bar_chart({label(c.value): float(v) for c, v in summary.expenses_by_category.items()})

    if snapshot.suggestions:
        st.markdown("### 💡 Saving Suggestions")
        for suggestion in snapshot.suggestions:
            st.info(
                f"**{suggestion.title}** ({suggestion.difficulty.value}): "
                f"{suggestion.description} Potential saving: "
                f"{format_money(suggestion.potential_saving, symbol)}"
            )

    if snapshot.upcoming_recurring:
        st.markdown("### ⏰ Upcoming Payments")
        for expense in snapshot.upcoming_recurring:
            st.markdown(
                f"- **{expense.description}**: {format_money(expense.amount, symbol)} "
                f"due {expense.next_due.isoformat()}"
            )


def render_add_page(app: ExpenseTrackerApp):
    """Render the manual form and the voice transcript entry."""
    st.title("➕ Add Transaction")

    with st.form("add-transaction", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            kind = st.selectbox(
                "Type",
                options=list(TransactionKind),
                format_func=lambda k: label(k.value),
            )
            category = st.selectbox(
                "Category *",
                options=list(Category),
                format_func=lambda c: label(c.value),
            )
        with col2:
            occurred = st.date_input("Date *", value=date.today())
            description = st.text_input("Description", placeholder="e.g., Lunch with friends")
            tags = st.text_input("Tags (comma separated)")

        if st.form_submit_button("💾 Save", type="primary"):
            try:
                record = app.services.records.add(TransactionCreate(
                    amount=Decimal(str(amount)),
                    description=description,
                    category=category,
                    kind=kind,
                    date=occurred,
                    tags=[t.strip() for t in tags.split(",") if t.strip()],
                ))
                st.success(f"✅ Saved {record.description or label(record.category.value)}")
            except ValidationError as e:
                st.error(f"Please check the form: {e.errors()[0]['msg']}")

    st.markdown("---")
    st.subheader("🎤 Voice Entry")
    st.markdown("Paste or dictate what you spent, e.g. *'I spent $25 on lunch'*.")

    transcript = st.text_input("Transcript", key="voice-transcript")
    if st.button("🔍 Understand") and transcript:
        st.session_state.voice_result = app.parse_voice(transcript)

    result = st.session_state.get("voice_result")
    if result is not None:
        st.markdown(f"""
        **Amount:** {result.amount if result.amount is not None else "not found"}
        **Category:** {label(result.category.value) if result.category else "not found"}
        **Description:** {result.description}
        """)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✅ Add as Expense", type="primary"):
                try:
                    app.add_from_voice(result)
                    st.session_state.voice_result = None
                    st.success("✅ Added")
                except ValueError as e:
                    st.error(str(e))
        with col2:
            if st.button("❌ Discard"):
                st.session_state.voice_result = None
                st.rerun()


def render_transactions_page(app: ExpenseTrackerApp):
    """Render the record list with delete, export and import."""
    st.title("📋 Transactions")

    records = sorted(app.services.records.get_all(), key=lambda r: r.date, reverse=True)
    symbol = app.services.settings.get_settings().currency.symbol

    if not records:
        st.info("No transactions yet. Use 'Add Transaction' to record your first one.")

    for record in records:
        col1, col2, col3, col4 = st.columns([2, 4, 2, 1])
        col1.write(record.date.isoformat())
        col2.write(f"{record.description or '-'} ({label(record.category.value)})")
        sign = "+" if record.is_income else "-"
        col3.write(f"{sign}{format_money(record.amount, symbol)}")
        if col4.button("🗑️", key=f"delete-{record.id}"):
            app.services.records.delete(record.id)
            st.rerun()

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "⬇️ Export JSON",
            data=app.services.records.export_all(),
            file_name=app.services.records.export_filename(),
            mime="application/json",
        )
    with col2:
        uploaded = st.file_uploader("Import JSON (replaces all records)", type=["json"])
        if uploaded is not None and st.button("⬆️ Import"):
            if app.services.records.import_all(uploaded.read().decode("utf-8")):
                st.success("✅ Records imported")
                st.rerun()
            else:
                st.error("That file is not a valid export.")


def render_budgets_page(app: ExpenseTrackerApp):
    """Render default monthly budgets and user budget limits."""
    st.title("🎯 Budgets")

    snapshot = app.refresh()
    symbol = snapshot.context.currency_symbol

    if snapshot.alerts:
        render_alerts(app, snapshot.alerts)

    st.markdown("### This Month")
    for budget in snapshot.monthly_budgets:
        st.markdown(
            f"**{label(budget.category.value)}**: {format_money(budget.spent, symbol)} "
            f"of {format_money(budget.limit, symbol)}"
        )
        st.progress(min(budget.percentage / 100, 1.0))

    st.markdown("### Your Limits")
    user_settings = app.services.settings.get_settings()
    for limit in user_settings.budget_limits:
        col1, col2 = st.columns([5, 1])
        col1.write(
            f"{label(limit.category.value)}: {format_money(limit.limit, symbol)} "
            f"({limit.period.value}, alert at {limit.notification_threshold}%)"
        )
        if col2.button("🗑️", key=f"limit-{limit.id}"):
            app.services.settings.delete_budget_limit(limit.id)
            st.rerun()

    with st.form("add-limit", clear_on_submit=True):
        category = st.selectbox("Category", list(Category), format_func=lambda c: label(c.value))
        amount = st.number_input("Limit", min_value=0.0, step=10.0)
        period = st.selectbox("Period", list(BudgetPeriod), index=1, format_func=lambda p: label(p.value))
        threshold = st.slider("Alert at % of limit", 0, 150, 80)
        if st.form_submit_button("Add Limit"):
            try:
                app.services.settings.add_budget_limit({
                    "category": category,
                    "limit": Decimal(str(amount)),
                    "period": period,
                    "notification_threshold": Decimal(threshold),
                })
                st.rerun()
            except ValidationError as e:
                st.error(f"Invalid limit: {e.errors()[0]['msg']}")


def render_assistant_page(app: ExpenseTrackerApp):
    """Render the chat assistant."""
    st.title("🤖 Assistant")

    general = st.toggle("General questions (no finance context)", value=False)
    chatbot = app.services.chatbot

    col1, col2 = st.columns(2)
    if col1.button("🆕 New Chat"):
        chatbot.create_new_session()
    if col2.button("🧹 Clear Chat"):
        chatbot.clear_current_session()

    session = chatbot.current_session()
    for message in session.messages:
        role = "assistant" if message.role == ChatRole.ASSISTANT else "user"
        with st.chat_message(role):
            st.markdown(message.content)

    prompt = st.chat_input("Ask about budgeting, saving, or anything else")
    if prompt:
        with st.spinner("Thinking..."):
            run_async(app.ask(prompt, general=general))
        st.rerun()

    if not app.services.ai.is_configured:
        st.caption("Gemini is not configured; replies are built-in suggestions.")


def render_settings_page(app: ExpenseTrackerApp):
    """Render user preferences, recurring expenses and connection status."""
    st.title("⚙️ Settings")
    service = app.services.settings
    user_settings = service.get_settings()

    st.markdown("### Preferences")
    codes = [c.code for c in SUPPORTED_CURRENCIES]
    code = st.selectbox("Currency", codes, index=codes.index(user_settings.currency.code))
    if code != user_settings.currency.code:
        service.update_setting("currency", SUPPORTED_CURRENCIES[codes.index(code)])
        st.rerun()

    theme = st.selectbox(
        "Theme", list(Theme), index=list(Theme).index(app.services.theme.get_theme()),
        format_func=lambda t: label(t.value),
    )
    if theme != app.services.theme.get_theme():
        app.services.theme.set_theme(theme)
        st.rerun()

    date_format = st.selectbox(
        "Date format", list(DateFormat), index=list(DateFormat).index(user_settings.date_format),
        format_func=lambda d: d.value,
    )
    reminders = st.checkbox("Budget reminders", value=user_settings.budget_reminders)
    suggestions = st.checkbox("Saving suggestions", value=user_settings.savings_suggestions)
    if st.button("💾 Save Preferences"):
        service.update_setting("date_format", date_format)
        service.update_setting("budget_reminders", reminders)
        service.update_setting("savings_suggestions", suggestions)
        st.success("✅ Saved")

    st.markdown("### Recurring Expenses")
    for expense in user_settings.recurring_expenses:
        col1, col2 = st.columns([5, 1])
        col1.write(
            f"{expense.description}: {service.format_currency(expense.amount)} "
            f"{expense.frequency.value}, next {expense.next_due.isoformat()}"
        )
        if col2.button("🗑️", key=f"recurring-{expense.id}"):
            service.delete_recurring_expense(expense.id)
            st.rerun()

    with st.form("add-recurring", clear_on_submit=True):
        description = st.text_input("Description")
        amount = st.number_input("Amount", min_value=0.0, step=1.0)
        category = st.selectbox("Category", list(Category), index=3, format_func=lambda c: label(c.value))
        frequency = st.selectbox("Frequency", list(Frequency), index=2, format_func=lambda f: label(f.value))
        if st.form_submit_button("Add Recurring Expense"):
            try:
                service.add_recurring_expense({
                    "description": description,
                    "amount": Decimal(str(amount)),
                    "category": category,
                    "frequency": frequency,
                })
                st.rerun()
            except ValidationError as e:
                st.error(f"Invalid recurring expense: {e.errors()[0]['msg']}")

    st.markdown("---")
    st.markdown("### Data")
    if st.button("🗑️ Delete All Transactions"):
        app.services.records.clear_all()
        st.success("All transactions deleted")

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Local storage", "storage"),
        ("Gemini (AI assistant)", "gemini"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
