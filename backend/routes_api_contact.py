from flask import Blueprint, request, jsonify, current_app

from auth import get_services, require_permission
from email_config import NOT_CONFIGURED_MESSAGE
from schemas import (
    ContactInquiry, WelcomeEmailRequest, SponsorshipInquiry, VolunteerInquiry, DonationReceiptRequest,
    CheckDonationNotice, VolunteerLetterRequest, RaffleRegistration
)

contact_bp = Blueprint("contact_api", __name__, url_prefix="/api")


def flow_response(result: dict):
    """Turn an email flow result into an HTTP response"""
    if result.get("success"):
        return jsonify(result), 200
    if result.get("message") == NOT_CONFIGURED_MESSAGE:
        return jsonify(result), 503
    return jsonify(result), 500


@contact_bp.route("/contact", methods=["POST"])
def submit_contact():
    """
    Handle contact form submissions.

    Expects JSON:
      - name (required)
      - email (required)
      - subject (required)
      - message (required)

    Forwards the message to the admin inbox and sends an auto-reply.
    """
    inquiry = ContactInquiry.model_validate(request.get_json(silent=True) or {})
    result = get_services().email_flows.send_contact_inquiry(inquiry)
    if not result["success"]:
        current_app.logger.error(f"Contact API: {result['message']}")
    return flow_response(result)


@contact_bp.route("/newsletter/subscribe", methods=["POST"])
def subscribe_newsletter():
    """
    Subscribe to the mailing list.

    Expects JSON: email (required), name, phone, sms_consent.
    Subscribing twice is not an error; the second call reports
    already_subscribed and sends nothing.
    """
    payload = WelcomeEmailRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().email_flows.send_welcome_email(payload)
    return flow_response(result)


@contact_bp.route("/sponsorship/inquiry", methods=["POST"])
def sponsorship_inquiry():
    inquiry = SponsorshipInquiry.model_validate(request.get_json(silent=True) or {})
    return flow_response(get_services().email_flows.send_sponsorship_inquiry(inquiry))


@contact_bp.route("/volunteer/inquiry", methods=["POST"])
def volunteer_inquiry():
    inquiry = VolunteerInquiry.model_validate(request.get_json(silent=True) or {})
    return flow_response(get_services().email_flows.send_volunteer_inquiry(inquiry))


@contact_bp.route("/donations/receipt", methods=["POST"])
def donation_receipt():
    """Email a receipt to a donor after the donation form is submitted"""
    donation = DonationReceiptRequest.model_validate(request.get_json(silent=True) or {})
    return flow_response(get_services().email_flows.send_donation_receipt(donation))


@contact_bp.route("/donations/check-notification", methods=["POST"])
def check_donation_notification():
    """Let the admins know a check is in the mail"""
    notice = CheckDonationNotice.model_validate(request.get_json(silent=True) or {})
    return flow_response(get_services().email_flows.send_check_notification(notice))


@contact_bp.route("/volunteer/letter", methods=["POST"])
@require_permission("volunteer:portal")
def volunteer_letter(principal):
    """
    Email a volunteer hours confirmation letter.

    Expects JSON: volunteer_name, volunteer_email, event_name,
    date_of_service, hours_volunteered, duties_description (optional).
    """
    letter = VolunteerLetterRequest.model_validate(request.get_json(silent=True) or {})
    result = get_services().email_flows.send_volunteer_letter(letter)
    current_app.logger.info(f"Volunteer letter for {letter.volunteer_email} requested by {principal['id']}")
    return flow_response(result)


@contact_bp.route("/raffle/register", methods=["POST"])
def raffle_register():
    registration = RaffleRegistration.model_validate(request.get_json(silent=True) or {})
    if not registration.sms_consent:
        return jsonify({
            "success": False,
            "errors": {"sms_consent": ["You must check this box to receive your raffle ticket via SMS."]}
        }), 400
    return flow_response(get_services().email_flows.send_raffle_registration(registration))
