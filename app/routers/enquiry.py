import logging
from fastapi import APIRouter, Depends, HTTPException

from app.config import Settings, get_settings
from app.schemas.enquiry import EnquiryRequest, EnquiryResponse
from app.services.enquiry import EnquiryDeliveryError, ResendMailer, relay_enquiry

router = APIRouter(prefix="/api/enquiry", tags=["enquiry"])
logger = logging.getLogger(__name__)


def get_mailer(settings: Settings = Depends(get_settings)):
    mailer = ResendMailer.from_settings(settings)
    try:
        yield mailer
    finally:
        mailer.client.close()


@router.post("", response_model=EnquiryResponse)
def send_enquiry(
    enquiry: EnquiryRequest,
    settings: Settings = Depends(get_settings),
    mailer: ResendMailer = Depends(get_mailer)
):
    """Forward a contact form submission by email"""
    if not enquiry.email:
        raise HTTPException(status_code=400, detail="A valid email is required.")
    if not enquiry.message:
        raise HTTPException(status_code=400, detail="Please include a message.")

    if not settings.enquiry_to_email or not settings.resend_api_key:
        logger.error("Enquiry relay misconfigured: missing ENQUIRY_TO_EMAIL or RESEND_API_KEY")
        raise HTTPException(status_code=500, detail="Server misconfigured.")

    try:
        relay_enquiry(enquiry, mailer, settings)
    except EnquiryDeliveryError as e:
        logger.error(f"Enquiry delivery failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to send enquiry. Please try again later.")

    return EnquiryResponse(message="Your enquiry has been sent. We'll be in touch soon.")
