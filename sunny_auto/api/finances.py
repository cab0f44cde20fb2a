from fastapi import APIRouter, BackgroundTasks, Depends

from sunny_auto.core.cancellation import CancellationToken, request_token
from sunny_auto.core.security import verify_admin_secret
from sunny_auto.models.booking import BusinessSummary, PaymentReport, PaymentRequest, ReportPeriod
from sunny_auto.services.finance_service import business_summary
from sunny_auto.services.notification_service import send_payment_receipt
from sunny_auto.views.finances import FinancesController

router = APIRouter(prefix="/api/admin/finances", dependencies=[Depends(verify_admin_secret)])


@router.get("")
async def list_finances(token: CancellationToken = Depends(request_token)):
    state = await FinancesController().refresh(token)
    return {"appointments": state.records, "completed": state.completed}


@router.get("/report", response_model=PaymentReport)
async def payment_report(period: ReportPeriod = ReportPeriod.WEEKLY,
                         token: CancellationToken = Depends(request_token)):
    controller = FinancesController()
    await controller.refresh(token)
    return controller.report(period)


@router.get("/summary", response_model=BusinessSummary)
async def summary(token: CancellationToken = Depends(request_token)):
    state = await FinancesController().refresh(token)
    return business_summary(state.records)


@router.post("/{appointment_id}/payment")
async def process_payment(appointment_id: str, req: PaymentRequest, background_tasks: BackgroundTasks,
                          token: CancellationToken = Depends(request_token)):
    # Cancelled propagates, so the receipt is only queued for a freshly re-read record
    record = await FinancesController().process_payment(appointment_id, req.payment_method, token=token)
    background_tasks.add_task(send_payment_receipt, record)
    return {"message": "Payment processed successfully!", "appointment": record}
