"""
Spins API Endpoints.

Endpoints for submitting a spin and for the read-only spin reports.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_spin_repository, get_spin_service
from api.models import SpinRecordResponse, SpinRequestBody, SpinResponse
from repositories.spin_repository import SpinRepository
from services.csv_export_service import generate_spins_csv, sort_newest_first
from services.spin_service import SpinOutcome, SpinRequest, SpinService

router = APIRouter()

_STATUS_CODES = {
    SpinOutcome.ACCEPTED: 200,
    SpinOutcome.ALREADY_PARTICIPATED: 200,
    SpinOutcome.MISSING_FIELDS: 400,
    SpinOutcome.INTERNAL_ERROR: 500,
}


@router.post(
    "/spin",
    response_model=SpinResponse,
    response_model_exclude_none=True,
    summary="Submit Spin",
    description="Record a spin for a participant and send the won coupon by email and SMS.",
    responses={
        400: {"model": SpinResponse, "description": "Missing required fields"},
        500: {"model": SpinResponse, "description": "Internal server error"},
    },
)
def submit_spin(
    body: SpinRequestBody,
    response: Response,
    service: SpinService = Depends(get_spin_service),
):
    """
    Submit the winning wheel segment for a participant.

    **Process:**
    1. Validates that name, email, phone, domain, discount and couponCode are present
    2. Rejects the request if the email has already spun
    3. Records the spin
    4. Sends the coupon by email and SMS (delivery failures do not affect the response)

    **Example request:**
    ```json
    {
      "name": "Asha",
      "email": "asha@example.com",
      "phone": "+91 98765 43210",
      "domain": "Websites",
      "discount": 10,
      "couponCode": "ZTX-WEB10"
    }
    ```

    **Accepted:**
    ```json
    {"allowed": true, "success": true, "message": "Coupon sent successfully!", "couponCode": "ZTX-WEB10"}
    ```

    **Already spun (status 200):**
    ```json
    {"allowed": false, "success": false, "message": "You have already spun the wheel."}
    ```
    """
    result = service.spin(
        SpinRequest(
            name=body.name,
            email=body.email,
            phone=body.phone,
            domain=body.domain,
            discount=body.discount,
            coupon_code=body.coupon_code,
        )
    )

    response.status_code = _STATUS_CODES[result.outcome]
    return SpinResponse(
        allowed=result.allowed,
        success=result.success,
        message=result.message,
        coupon_code=result.coupon_code,
    )


@router.get(
    "/spins",
    response_model=List[SpinRecordResponse],
    summary="List Spins",
    description="All recorded spins, newest first. Intended for admins; not access controlled.",
)
def list_spins(repository: SpinRepository = Depends(get_spin_repository)):
    records = sort_newest_first(repository.load_all())
    return [SpinRecordResponse.model_validate(record.to_dict()) for record in records]


@router.get(
    "/export",
    summary="Export Spins CSV",
    description="Download all recorded spins as a CSV file.",
    response_class=Response,
)
def export_spins(repository: SpinRepository = Depends(get_spin_repository)):
    """
    Download the CSV report of all spins.

    **Columns:** ID, Name, Email, Phone, Domain, Discount, CouponCode, CreatedAt

    **Response:**
    CSV file download with filename: `spins.csv`
    """
    csv_content = generate_spins_csv(repository.load_all())

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=spins.csv"},
    )
