import asyncio

import pandas as pd
import streamlit as st

from sunny_auto.models.booking import ReportPeriod
from sunny_auto.models.customer import CustomerCohort
from sunny_auto.services.db_service import db_service
from sunny_auto.views.customers import CustomersController
from sunny_auto.views.finances import FinancesController

# Page Config
st.set_page_config(
    page_title="Sunny Auto Admin",
    page_icon="🔧",
    layout="wide"
)

st.title("Sunny Auto - Admin Panel")


def load_customers():
    # Each asyncio.run gets its own loop, the cached Supabase client cannot be reused
    db_service._client = None
    controller = CustomersController()
    asyncio.run(controller.load())
    return controller


def load_finances():
    db_service._client = None
    controller = FinancesController()
    asyncio.run(controller.load())
    return controller


if st.button("Refresh data"):
    st.rerun()

customers_tab, finances_tab = st.tabs(["Customers", "Finances"])

with customers_tab:
    controller = load_customers()
    query = st.text_input("Search by name, email or phone")
    cohort = st.radio("Show", [c.value for c in CustomerCohort], horizontal=True)
    controller.search(query)
    state = controller.show_cohort(CustomerCohort(cohort))

    col1, col2 = st.columns(2)
    col1.metric("Customers", len(state.customers))
    col2.metric("Shown", len(state.visible))

    if state.visible:
        df = pd.DataFrame([
            {
                "name": c.name,
                "email": c.email,
                "phone": c.phone,
                "services": c.total_services,
                "first": c.first_service,
                "last": c.last_service,
                "tier": c.loyalty_tier.value,
            }
            for c in state.visible
        ])
        st.dataframe(df, use_container_width=True)
    else:
        st.info("No customers match.")

with finances_tab:
    finances = load_finances()
    period = st.selectbox("Report period", [p.value for p in ReportPeriod])
    report = finances.report(ReportPeriod(period))

    col1, col2, col3 = st.columns(3)
    col1.metric("Revenue", f"${report.total_revenue:,.2f}")
    col2.metric("Services", report.total_services)
    col3.metric("Average ticket", f"${report.average_ticket:,.2f}")

    if report.payments:
        df = pd.DataFrame([p.model_dump(mode="json") for p in report.payments])
        st.dataframe(
            df[["invoice_number", "name", "service_type", "amount", "payment_method", "payment_date"]],
            use_container_width=True,
            column_config={
                "invoice_number": "Invoice #",
                "name": "Customer",
                "service_type": "Service",
                "amount": st.column_config.NumberColumn("Amount", format="$%.2f"),
                "payment_method": "Method",
                "payment_date": "Paid on",
            }
        )
    else:
        st.info("No completed payments in this period.")

# Footer
st.markdown("---")
st.caption("Sunny Auto • Admin dashboard")
