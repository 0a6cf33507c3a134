import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

import pandas as pd
import plotly.express as px
import streamlit as st

from moneyflow.config import ensure_data_directory, load_settings
from moneyflow.formatting import format_currency, format_date, format_datetime
from moneyflow.ledger import AlertLevel, parse_masked_amount
from moneyflow.logger import configure_logging
from moneyflow.session import BudgetSession
from moneyflow.storage import JsonStore
from moneyflow.transforms import match_suggestions

st.set_page_config(page_title="MoneyFlow", page_icon="💸", layout="wide")

settings = load_settings()
configure_logging(settings.log_level)
locale = settings.locale
tz = settings.tz

if "session" not in st.session_state:
    ensure_data_directory(settings)
    st.session_state.session = BudgetSession(JsonStore(settings.data_dir), settings)

session: BudgetSession = st.session_state.session


def money(value):
    return format_currency(value, locale)


def _fill_description(text):
    st.session_state.desc_input = text


def _submit_expense():
    added = session.add_expense(st.session_state.amount_input, st.session_state.desc_input)
    if added:
        st.session_state.desc_input = ""
        st.session_state.amount_input = ""
        st.session_state.flash = f"✅ {added.description} · {money(added.amount)}"


def _delete_expense(expense_id):
    session.delete_expense(expense_id)


def _select_month(key):
    session.select_month(key)
    session.advice = None


# --- header: year and month selection
title_col, year_col = st.columns([4, 1])
with title_col:
    st.title("💸 MoneyFlow")
with year_col:
    year = st.selectbox(
        "Year",
        options=session.years,
        index=session.years.index(session.selected_year),
    )
    if year != session.selected_year:
        session.select_year(year)
        session.advice = None
        st.rerun()

month_cols = st.columns(12)
for col, m in zip(month_cols, session.months()):
    with col:
        st.button(
            m.short,
            key=f"month_{m.key}",
            help=m.name,
            type="primary" if m.key == session.selected_period else "secondary",
            on_click=_select_month,
            args=(m.key,),
            use_container_width=True,
        )

for alert in session.alerts:
    st.toast(alert, icon="⚠️")
session.alerts.clear()

if "flash" in st.session_state:
    st.toast(st.session_state.pop("flash"))

# --- budget header
report = session.summary()
result = report["result"]
status = result["status"]

st.subheader(f"📅 {session.selected_period}")
k1, k2, k3, k4 = st.columns(4)
with k1:
    st.metric("Budget", money(result["limit"]))
with k2:
    st.metric("Spent", money(result["total_spent"]))
with k3:
    st.metric("Balance", money(result["balance"]))
with k4:
    st.metric("Used", f"{status.percent:.0f}%" if result["limit"] > 0 else "—")
st.progress(float(status.progress) / 100)

if status.show_alert:
    if status.level is AlertLevel.CRITICAL:
        st.error(f"🚨 Critical: {status.percent:.0f}% of the budget is already spent.")
    elif status.extreme:
        st.warning(f"🔥 **Almost there: {status.percent:.0f}% of the budget is spent.**")
    else:
        st.warning(f"⚠️ Attention: {status.percent:.0f}% of the budget is spent.")

with st.expander(f"✏️ Budget for {session.selected_period}"):
    with st.form("budget_form"):
        budget_text = st.text_input(
            f"Amount ({locale.currency_symbol})",
            value=session.budget_input_value(),
            placeholder="0,00",
            help="Digits only are read, as cents: 123456 → 1.234,56",
        )
        if st.form_submit_button("Save"):
            stored = session.set_budget(budget_text)
            st.success(f"Budget saved: {money(stored)}")
            st.rerun()

# --- advisory
if session.advice:
    st.info(f"💡 **Smart advice** · {session.advice}")

period_expenses = session.period_expenses()

left, right = st.columns([5, 7])

with left:
    st.subheader("➕ New expense")
    desc = st.text_input("Description", key="desc_input", placeholder="Ex: Uber, Almoço, Mercado...")
    for suggestion in match_suggestions(session.suggestions(), desc)[:5]:
        st.button(f"🔍 {suggestion}", key=f"sugg_{suggestion}", on_click=_fill_description, args=(suggestion,))
    amount_text = st.text_input(f"Amount ({locale.currency_symbol})", key="amount_input", placeholder="0,00")
    if amount_text:
        st.caption(money(parse_masked_amount(amount_text)))
    st.button("Register expense", type="primary", on_click=_submit_expense, use_container_width=True)

    st.divider()
    st.subheader("⚡ Insight")
    st.caption(f"Analyse the spending of {session.selected_period}.")
    if st.button(
        "Analyse period",
        disabled=session.advice_pending or not period_expenses,
        key="btn_advice",
    ):
        with st.spinner(f"Analysing {session.selected_period}..."):
            asyncio.run(session.request_advice())
        st.rerun()

    st.divider()
    consolidated = result["consolidated"]
    if consolidated:
        st.subheader("📊 Consolidated")
        df_groups = pd.DataFrame(
            [{"Description": g.description, "Count": g.count, "Total": float(g.total)} for g in consolidated]
        )
        fig = px.bar(
            df_groups,
            x="Description",
            y="Total",
            title=f"Spending by description · {session.selected_period}",
            template="plotly_dark",
        )
        st.plotly_chart(fig, use_container_width=True)
        for g in consolidated:
            with st.expander(f"{g.description} · {g.count}x · {money(g.total)}"):
                for item in session.group_details(g.key):
                    st.write(f"{format_datetime(item.date, tz)} — {money(item.amount)}")

with right:
    st.subheader("🧾 Expenses")
    if not period_expenses:
        st.info("No expenses in this month yet.")
    for e in period_expenses:
        c1, c2, c3, c4 = st.columns([4, 2, 2, 1])
        c1.write(e.description)
        c2.caption(format_date(e.date, tz))
        c3.write(money(e.amount))
        c4.button("🗑️", key=f"del_{e.id}", on_click=_delete_expense, args=(e.id,), help="Delete")

    if period_expenses:
        disp = pd.DataFrame(
            [{"date": format_date(e.date, tz), "description": e.description, "amount": float(e.amount)} for e in period_expenses]
        )
        csv = disp.to_csv(index=False)
        st.download_button("⬇ Download CSV", csv, file_name=f"expenses_{session.selected_period.replace('/', '-')}.csv")
