from fastapi import APIRouter, Depends, HTTPException

from sunny_auto.core.cancellation import CancellationToken, request_token
from sunny_auto.core.security import verify_admin_secret
from sunny_auto.models.customer import CustomerAggregate, CustomerCohort
from sunny_auto.views.customers import CustomersController

router = APIRouter(prefix="/api/admin/customers", dependencies=[Depends(verify_admin_secret)])


async def loaded_controller(token: CancellationToken) -> CustomersController:
    controller = CustomersController()
    await controller.load(token)
    # The screen keeps its old state on cancel, the request has nobody left to answer
    token.raise_if_cancelled()
    return controller


@router.get("")
async def list_customers(q: str = "", cohort: CustomerCohort = CustomerCohort.ALL,
                         token: CancellationToken = Depends(request_token)):
    controller = await loaded_controller(token)
    controller.search(q)
    state = controller.show_cohort(cohort)
    return {
        "customers": state.visible,
        "count": len(state.visible),
        "total": len(state.customers),
    }


@router.get("/{email}", response_model=CustomerAggregate)
async def get_customer(email: str, token: CancellationToken = Depends(request_token)):
    controller = await loaded_controller(token)
    controller.select(email)
    customer = controller.selected()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer
