import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd
import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from ledger.alerts import AlertLevel
from ledger.config import configure_logging, load_settings
from ledger.services import LedgerService

st.set_page_config(page_title="Budget Ledger", layout="wide")

if "ledger" not in st.session_state:
    settings = load_settings()
    configure_logging(settings.log_level)
    st.session_state.ledger = LedgerService(settings)

ledger: LedgerService = st.session_state.ledger


def show_outcome(outcome):
    if outcome.is_left():
        st.error(str(outcome.get_error()))
        return
    accepted = outcome.get_or_else(None)
    st.success(accepted.description)
    for alert in accepted.alerts:
        (st.error if alert.level is AlertLevel.OVER_LIMIT else st.warning)(alert.message())


def transactions_df(transactions) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"date": t.date, "category": t.category, "amount": float(t.amount)} for t in transactions],
        columns=["date", "category", "amount"],
    )
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Record", "📅 Weekly", "📊 Summary", "💰 Savings", "📂 Files"]
)

snap = ledger.snapshot

if menu == "🏠 Overview":
    summary = ledger.spending_summary()
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Transactions", len(snap.transactions))
    with k2:
        st.metric("Budgets", len(snap.budgets))
    with k3:
        st.metric("Savings goals", len(snap.savings_goals))
    with k4:
        st.metric("Total spent", f"{summary.total_spent:,.2f}")

    for alert in ledger.alerts():
        (st.error if alert.level is AlertLevel.OVER_LIMIT else st.warning)(alert.message())

    if snap.budgets:
        budgets = pd.DataFrame([
            {"Category": b.category, "Limit": float(b.limit), "Spent": float(b.spent),
             "Status": ledger.budget_status(b.category).value.replace("_", " ")}
            for b in snap.budgets
        ])
        fig = go.Figure()
        fig.add_trace(go.Bar(x=budgets["Category"], y=budgets["Limit"], name="Limit"))
        fig.add_trace(go.Bar(x=budgets["Category"], y=budgets["Spent"], name="Spent"))
        fig.update_layout(barmode="group", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)
        st.table(budgets)
    else:
        st.info("No budgets set yet.")

elif menu == "🧾 Record":
    st.title("🧾 Record")
    c1, c2 = st.columns(2)
    with c1:
        with st.form("transaction"):
            st.subheader("Add transaction")
            date = st.text_input("Date (yyyy-MM-dd)")
            category = st.text_input("Category")
            amount = st.text_input("Amount")
            if st.form_submit_button("Add"):
                show_outcome(ledger.add_transaction(date, category, amount))
        with st.form("budget"):
            st.subheader("Set budget")
            category = st.text_input("Category", key="budget_category")
            limit = st.text_input("Limit")
            if st.form_submit_button("Set"):
                show_outcome(ledger.set_budget(category, limit))
    with c2:
        with st.form("income"):
            st.subheader("Add income")
            source = st.text_input("Source")
            amount = st.text_input("Amount", key="income_amount")
            if st.form_submit_button("Add"):
                show_outcome(ledger.add_income(source, amount))
        with st.form("goal"):
            st.subheader("Set savings goal")
            goal = st.text_input("Goal")
            target = st.text_input("Target amount")
            if st.form_submit_button("Set"):
                show_outcome(ledger.set_savings_goal(goal, target))

    st.subheader("Daily transactions")
    day = st.text_input("Date", key="daily_date")
    if day:
        result = ledger.daily_transactions(day)
        if result.is_left():
            st.error(str(result.get_error()))
        elif not result.get_or_else(()):
            st.info(f"No transactions found for {day}.")
        else:
            st.table(transactions_df(result.get_or_else(())).assign(
                date=lambda x: x["date"].dt.strftime("%Y-%m-%d")
            ))

elif menu == "📅 Weekly":
    st.title("📅 Weekly spending")
    weeks = ledger.weekly_report()
    if weeks.is_none():
        st.info("No weekly spending data available.")
    else:
        df = pd.DataFrame(
            [{"Week": w.week, "Total": float(w.total)} for w in weeks.get_or_else(())]
        ).sort_values("Week")
        df["Cumulative"] = np.cumsum(df["Total"].to_numpy())
        fig = px.bar(df, x="Week", y="Total", title="Spending per week (0 = most recent)",
                     template="plotly_dark")
        fig.add_trace(go.Scatter(x=df["Week"], y=df["Cumulative"], mode="lines+markers", name="Cumulative"))
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(df.reset_index(drop=True), use_container_width=True)

elif menu == "📊 Summary":
    st.title("📊 Spending summary")
    summary = ledger.spending_summary()
    st.metric("Total spent", f"{summary.total_spent:,.2f}")
    if summary.by_category:
        df_cat = pd.DataFrame(
            [{"Category": c, "Total": float(v)} for c, v in summary.by_category.items()]
        )
        st.plotly_chart(px.pie(df_cat, values="Total", names="Category", title="By category"),
                        use_container_width=True)
    df = transactions_df(snap.transactions)
    if not df.empty:
        st.dataframe(df.assign(date=lambda x: x["date"].dt.strftime("%Y-%m-%d")), use_container_width=True)

elif menu == "💰 Savings":
    st.title("💰 Savings")
    rec = ledger.savings_recommendation()
    if rec.is_none():
        st.success("You have already met your savings goals.")
    else:
        r = rec.get_or_else(None)
        c1, c2 = st.columns(2)
        c1.metric("Weekly income", f"{r.weekly_income:,.2f}")
        c2.metric("Recommended weekly savings", f"{r.weekly_recommendation:,.2f}")
    if snap.savings_goals:
        st.table(pd.DataFrame([
            {"Goal": g.name, "Target": float(g.target_amount), "Saved": float(g.saved_amount)}
            for g in snap.savings_goals
        ]))

elif menu == "📂 Files":
    st.title("📂 Import / export")
    import_path = st.text_input("Import transactions from", value=ledger.settings.transactions_path)
    if st.button("Import"):
        show_outcome(ledger.import_file(import_path))
    export_path = st.text_input("Export report to", value=ledger.settings.report_path)
    if st.button("Export report", key="export_report"):
        show_outcome(ledger.export_file(export_path))
    tx_export_path = st.text_input("Export transactions to", value=ledger.settings.transactions_path,
                                   key="tx_export_path")
    if st.button("Export transactions", key="export_transactions"):
        show_outcome(ledger.export_transactions(tx_export_path))

    st.subheader("Report preview")
    if st.button("Load report", key="load_report"):
        loaded = ledger.load_report(export_path)
        if loaded.is_left():
            st.error(str(loaded.get_error()))
        else:
            report = loaded.get_or_else(None)
            st.markdown("**Budgets**")
            st.table(pd.DataFrame(
                [{"Category": b.category, "Limit": float(b.limit), "Spent": float(b.spent)} for b in report.budgets],
                columns=["Category", "Limit", "Spent"],
            ))
            st.markdown("**Savings goals**")
            st.table(pd.DataFrame(
                [{"Goal": g.name, "Target": float(g.target_amount), "Saved": float(g.saved_amount)}
                 for g in report.savings_goals],
                columns=["Goal", "Target", "Saved"],
            ))
            st.markdown("**Weekly spending**")
            st.table(pd.DataFrame(
                [{"Week": w.week, "Total": float(w.total)} for w in report.weekly_spending],
                columns=["Week", "Total"],
            ))
