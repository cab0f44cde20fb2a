"""Admin customers screen: state, transitions and the controller that loads it."""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from sunny_auto.core.cancellation import CancellationToken
from sunny_auto.core.errors import Cancelled
from sunny_auto.core.logger import logger
from sunny_auto.models.customer import CustomerAggregate, CustomerCohort
from sunny_auto.services import booking_store
from sunny_auto.services.customer_service import CustomerAggregator, customer_aggregator, filter_customers


class CustomersViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    loading: bool = False
    customers: List[CustomerAggregate] = []
    query: str = ""
    cohort: CustomerCohort = CustomerCohort.ALL
    visible: List[CustomerAggregate] = []
    selected_email: Optional[str] = None


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class Loaded:
    customers: List[CustomerAggregate]
    now: datetime


@dataclass(frozen=True)
class QueryChanged:
    query: str
    now: datetime


@dataclass(frozen=True)
class CohortChanged:
    cohort: CustomerCohort
    now: datetime


@dataclass(frozen=True)
class CustomerSelected:
    email: Optional[str]


CustomersEvent = Union[LoadStarted, Loaded, QueryChanged, CohortChanged, CustomerSelected]


def _refilter(state: CustomersViewState, now: datetime, **changes) -> CustomersViewState:
    draft = state.model_copy(update=changes)
    return draft.model_copy(update={"visible": filter_customers(draft.customers, draft.query, draft.cohort, now)})


def reduce_customers(state: CustomersViewState, event: CustomersEvent) -> CustomersViewState:
    if isinstance(event, LoadStarted):
        return state.model_copy(update={"loading": True})
    if isinstance(event, Loaded):
        return _refilter(state, event.now, customers=event.customers, loading=False)
    if isinstance(event, QueryChanged):
        return _refilter(state, event.now, query=event.query)
    if isinstance(event, CohortChanged):
        return _refilter(state, event.now, cohort=event.cohort)
    if isinstance(event, CustomerSelected):
        return state.model_copy(update={"selected_email": event.email})
    raise TypeError(f"Unknown customers event: {event!r}")


class CustomersController:
    def __init__(self, aggregator: CustomerAggregator = customer_aggregator):
        self.aggregator = aggregator
        self.state = CustomersViewState()

    def dispatch(self, event: CustomersEvent) -> CustomersViewState:
        self.state = reduce_customers(self.state, event)
        return self.state

    async def load(self, token: Optional[CancellationToken] = None,
                   now: Optional[datetime] = None) -> CustomersViewState:
        token = token or CancellationToken()
        self.dispatch(LoadStarted())
        try:
            records = await booking_store.load_bookings(token)
            customers = self.aggregator(records)
            await token.check()
        except Cancelled as e:
            logger.info(f"Customer load discarded: {e}")
            return self.state
        return self.dispatch(Loaded(customers, now or datetime.now()))

    def search(self, query: str, now: Optional[datetime] = None) -> CustomersViewState:
        return self.dispatch(QueryChanged(query, now or datetime.now()))

    def show_cohort(self, cohort: CustomerCohort, now: Optional[datetime] = None) -> CustomersViewState:
        return self.dispatch(CohortChanged(cohort, now or datetime.now()))

    def select(self, email: Optional[str]) -> CustomersViewState:
        return self.dispatch(CustomerSelected(email))

    def selected(self) -> Optional[CustomerAggregate]:
        return next((c for c in self.state.customers if c.email == self.state.selected_email), None)
