"""Admin finances screen."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from sunny_auto.core.cancellation import CancellationToken
from sunny_auto.core.errors import Cancelled, NotFound
from sunny_auto.core.logger import logger
from sunny_auto.models.booking import FinanceRecord, PaymentMethod, PaymentReport, ReportPeriod
from sunny_auto.services import booking_store
from sunny_auto.services.finance_service import apply_payment, completed_only, enrich, generate_report


class FinancesViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    loading: bool = False
    records: List[FinanceRecord] = []
    completed: List[FinanceRecord] = []
    report_period: ReportPeriod = ReportPeriod.WEEKLY
    report: Optional[PaymentReport] = None


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class Loaded:
    records: List[FinanceRecord]


@dataclass(frozen=True)
class ReportRequested:
    period: ReportPeriod
    now: datetime


FinancesEvent = Union[LoadStarted, Loaded, ReportRequested]


def reduce_finances(state: FinancesViewState, event: FinancesEvent) -> FinancesViewState:
    if isinstance(event, LoadStarted):
        return state.model_copy(update={"loading": True})
    if isinstance(event, Loaded):
        return state.model_copy(update={
            "loading": False,
            "records": event.records,
            "completed": completed_only(event.records),
        })
    if isinstance(event, ReportRequested):
        return state.model_copy(update={
            "report_period": event.period,
            "report": generate_report(event.period, state.records, event.now),
        })
    raise TypeError(f"Unknown finances event: {event!r}")


class FinancesController:
    def __init__(self):
        self.state = FinancesViewState()

    def dispatch(self, event: FinancesEvent) -> FinancesViewState:
        self.state = reduce_finances(self.state, event)
        return self.state

    async def refresh(self, token: CancellationToken) -> FinancesViewState:
        """Re-fetch and commit. Raises Cancelled instead of committing a stale fetch."""
        self.dispatch(LoadStarted())
        records = enrich(await booking_store.load_bookings(token))
        return self.dispatch(Loaded(records))

    async def load(self, token: Optional[CancellationToken] = None) -> FinancesViewState:
        try:
            return await self.refresh(token or CancellationToken())
        except Cancelled as e:
            logger.info(f"Finance load discarded: {e}")
            return self.state

    def report(self, period: ReportPeriod, now: Optional[datetime] = None) -> PaymentReport:
        return self.dispatch(ReportRequested(period, now or datetime.now())).report

    def find(self, record_id: str) -> FinanceRecord:
        for record in self.state.records:
            if record.id == record_id:
                return record
        raise NotFound(f"Appointment {record_id} not found")

    async def process_payment(self, record_id: str, method: PaymentMethod,
                              today: Optional[date] = None,
                              token: Optional[CancellationToken] = None) -> FinanceRecord:
        """
        pending -> completed for one appointment, then a full re-fetch.
        No optimistic update: the returned record is what the store holds afterwards.
        Raises Cancelled when either fetch is cancelled, so a stale record is never returned.
        """
        token = token or CancellationToken()
        if not self.state.records:
            await self.refresh(token)

        # NotFound / InvalidTransition before anything is written
        apply_payment(self.state.records, record_id, method, today)

        await booking_store.mark_paid(record_id, method, today)
        await self.refresh(token)
        return self.find(record_id)
