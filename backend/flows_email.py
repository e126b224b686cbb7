"""
PDSCC Email Flows
Public form submissions that end in one or more transactional emails.

Every flow returns a {'success': bool, 'message': str} result dict and never
raises for provider problems. AI-drafted bodies fall back to static text when
generation fails.
"""

import logging
from urllib.parse import quote

from markupsafe import Markup, escape
from sqlalchemy.exc import SQLAlchemyError

from email_config import NOT_CONFIGURED_MESSAGE, render_email_template, with_display_name
from errors import ConfigurationError, EmailSendError, ExternalProviderError
from services_subscribers import normalize_email

logger = logging.getLogger(__name__)

DRAFT_SYSTEM_PROMPT = (
    "You write short, warm, professional emails on behalf of PDSCC (Phoenix Desi Sports and "
    "Cultural Club), a non-profit serving the Phoenix Indian community. Reply with the email body "
    "only: no subject line, no placeholders, no markdown."
)

QR_CODE_SERVICE = 'https://api.qrserver.com/v1/create-qr-code/?size=200x200&data='
ORG_ADDRESS = '2259 S Hughes Drive, Buckeye, AZ 85326'


def text_to_html(text: str) -> Markup:
    """Escape plain text and keep its line breaks"""
    return escape(text).replace('\n', Markup('<br>'))


def _result(success: bool, message: str, **extra) -> dict:
    return {'success': success, 'message': message, **extra}


class EmailFlows:
    def __init__(self, ai_client, email_service, subscriber_service=None, vendor_service=None,
                 performance_service=None, event_service=None,
                 site_base_url: str = 'https://www.azpdscc.org'):
        self.ai = ai_client
        self.email = email_service
        self.subscribers = subscriber_service
        self.vendors = vendor_service
        self.performances = performance_service
        self.events = event_service
        self.site_base_url = site_base_url.rstrip('/')

    # ----- Helpers -----

    def _sender(self, display_name: str = None) -> str:
        return with_display_name(self.email.default_sender, display_name)

    def _bot(self, display_name: str) -> str:
        """Sender for admin notifications"""
        return with_display_name(self.email.noreply_sender, display_name)

    def _draft(self, flow_name: str, prompt: str, fallback: str) -> str:
        """AI-drafted email body, or `fallback` when the model is unavailable or misbehaves"""
        try:
            return self.ai.complete_text(flow_name, DRAFT_SYSTEM_PROMPT, prompt, temperature=0.7)
        except (ConfigurationError, ExternalProviderError) as e:
            logger.warning(f"{flow_name}: AI draft failed, using fallback text ({e})")
            return fallback

    def _notify_admin(self, flow_name: str, subject: str, text: str, sender: str, reply_to: str = None,
                      html: str = None) -> bool:
        """Admin notifications are best effort; the user-facing result does not depend on them"""
        try:
            self.email.send_admin_notification(subject, text=text, html=html, reply_to=reply_to,
                                               from_email=sender)
            return True
        except EmailSendError as e:
            logger.error(f"{flow_name}: admin notification failed: {e}")
            return False

    # ----- Newsletter -----

    def send_welcome_email(self, request) -> dict:
        """
        Subscribe an email address and send the welcome email.

        The subscriber is stored before any email goes out; a failed welcome
        email is reported to the caller but the subscription is kept.
        """
        if not self.email.is_configured():
            logger.error("Welcome email requested but the email service is not configured")
            return _result(False, NOT_CONFIGURED_MESSAGE)

        email = normalize_email(request.email)
        try:
            if self.subscribers.is_subscribed(email):
                return _result(True, "This email is already on our mailing list. Thank you!",
                               already_subscribed=True)
            created = self.subscribers.add_subscriber(email, name=request.name, phone=request.phone,
                                                      sms_consent=request.sms_consent)
        except SQLAlchemyError as e:
            logger.error(f"Error adding subscriber {email}: {e}")
            return _result(False, "An error occurred while subscribing. Please try again later.")

        if not created:
            return _result(True, "This email is already on our mailing list. Thank you!",
                           already_subscribed=True)

        greeting = f"Welcome to the community, {request.name}!" if request.name else "Welcome to the community!"
        sms_line = ("Also, thank them for providing their phone number and mention that they will receive "
                    "their electronic raffle tickets via SMS for upcoming events.\n") if request.phone else ""
        prompt = (
            "Generate a warm and friendly welcome email body for a new subscriber to the PDSCC mailing list. "
            "The tone should be celebratory and inviting.\n"
            f"Start the email with a big, friendly \"{greeting}\".\n"
            "Thank them for subscribing and let them know they'll now be the first to hear about upcoming "
            "festivals, events, and community news. Encourage them to connect on social media (without "
            "providing links).\n"
            f"{sms_line}"
            "End with \"Warmly,\" followed by \"The PDSCC Team\"."
        )
        fallback = (
            f"{greeting}\n\nThank you for subscribing to the PDSCC mailing list. You'll now be the first to "
            "hear about upcoming festivals, events, and community news.\n\nWarmly,\nThe PDSCC Team"
        )
        body = self._draft('welcome_email', prompt, fallback)

        try:
            self.email.send_email(
                to=email,
                subject='🎉 Welcome to the PDSCC Community!',
                html=str(text_to_html(body)),
                from_email=self._sender()
            )
        except ExternalProviderError as e:
            logger.error(f"Welcome email to {email} failed: {e}")
            return _result(False, f"An error occurred while subscribing: {e}")

        self._notify_admin(
            'welcome_email',
            'New Newsletter Subscriber',
            f"A new user has subscribed to the newsletter:\n\n"
            f"Name: {request.name or 'Not provided'}\n"
            f"Email: {email}\n"
            f"Phone: {request.phone or 'Not provided'}\n"
            f"SMS Consent: {'Yes' if request.sms_consent else 'No'}",
            self._bot('Newsletter Bot')
        )
        return _result(True, "Subscription successful! A welcome email has been sent.")

    # ----- Contact -----

    def send_contact_inquiry(self, inquiry) -> dict:
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        prompt = (
            "Generate a polite confirmation auto-reply for someone who contacted PDSCC through the website.\n"
            f"Name: {inquiry.name}\nSubject: {inquiry.subject}\n"
            f"Start with \"Dear {inquiry.name},\". Confirm the message was received and that the team will "
            "get back to them shortly. End with \"Sincerely,\" followed by \"The PDSCC Team\"."
        )
        fallback = (
            f"Dear {inquiry.name},\n\nThank you for contacting PDSCC. We have received your message and will "
            "get back to you shortly.\n\nSincerely,\nThe PDSCC Team"
        )
        body = self._draft('contact_inquiry', prompt, fallback)

        try:
            self.email.send_email(
                to=str(inquiry.email),
                subject="We've Received Your Message | PDSCC",
                html=str(text_to_html(body)),
                from_email=self._sender()
            )
        except ExternalProviderError as e:
            logger.error(f"Contact confirmation to {inquiry.email} failed: {e}")
            return _result(False, f"An error occurred while sending your message: {e}")

        self._notify_admin(
            'contact_inquiry',
            f"New Inquiry: {inquiry.subject}",
            f"You have a new contact form submission from the PDSCC website.\n\n"
            f"Name: {inquiry.name}\nEmail: {inquiry.email}\nSubject: {inquiry.subject}\n\n"
            f"Message:\n{inquiry.message}",
            self._bot('Contact Form Bot'),
            reply_to=str(inquiry.email)
        )
        return _result(True, "Thank you for your message! A confirmation has been sent to your email.")

    # ----- Vendors -----

    def ticket_url(self, application_id: str) -> str:
        return f"{self.site_base_url}/verify-ticket?ticketId={application_id}"

    def qr_code_url(self, application_id: str) -> str:
        return QR_CODE_SERVICE + quote(self.ticket_url(application_id), safe='')

    def send_vendor_application(self, application) -> dict:
        """Store a pending vendor application and email the vendor their check-in ticket"""
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        try:
            record = self.vendors.create_application(application)
            event_name = self.events.next_event_name() if self.events else 'our upcoming PDSCC event'
        except SQLAlchemyError as e:
            logger.error(f"Error saving vendor application: {e}")
            return _result(False, 'An error occurred while processing your application.')

        prompt = (
            f"Write a short, welcoming paragraph confirming {application.name}'s vendor booth registration "
            f"for the upcoming {event_name}. Booth: {application.booth_type}. Do not include a greeting "
            "or sign-off."
        )
        fallback = (
            f"Thank you for registering as a vendor for the upcoming {event_name}! We've received your "
            "application and are excited to have you."
        )
        intro = self._draft('vendor_ticket', prompt, fallback)

        html = render_email_template(
            'emails/vendor_ticket.html',
            site_base_url=self.site_base_url,
            intro=text_to_html(intro),
            name=application.name,
            organization=application.organization,
            booth_type=application.booth_type,
            total_price=f"{application.total_price:.2f}",
            event_name=event_name,
            qr_code_url=self.qr_code_url(record['id']),
            ticket_id=record['id']
        )

        try:
            self.email.send_email(
                to=str(application.email),
                subject=f"Your Vendor Booth Confirmation for {event_name}",
                html=html,
                from_email=self._sender('PDSCC Vendors')
            )
        except ExternalProviderError as e:
            logger.error(f"Vendor ticket email for {record['id']} failed: {e}")
            return _result(False, 'Your application was saved, but we could not send your ticket email. '
                                  'Please contact us.', application_id=record['id'])

        self._notify_admin(
            'vendor_application',
            f"New Paid Vendor Application for {event_name}!",
            f"A new vendor application has been submitted and paid for the event: {event_name}.\n\n"
            f"Contact Information:\n"
            f"- Full Name: {application.name}\n"
            f"- Organization: {application.organization or 'N/A'}\n"
            f"- Email: {application.email}\n"
            f"- Phone Number: {application.phone}\n\n"
            f"Booth Details:\n"
            f"- Booth Type: {application.booth_type}\n"
            f"- Product/Service Description: {application.product_description}\n\n"
            f"Payment Information:\n"
            f"- Total Price: ${application.total_price:.2f}\n"
            f"- Zelle Sender Name: {application.zelle_sender_name}\n"
            f"- Date Sent: {application.zelle_date_sent}\n"
            f"- Payment Confirmed by Vendor: {'Yes' if application.payment_confirmed else 'No'}\n"
            f"- Ticket ID: {record['id']}\n\n"
            f"Please verify the Zelle payment and update records accordingly.",
            self._bot('Vendor Bot')
        )
        return _result(True, "Application submitted! A confirmation ticket has been sent to your email.",
                       application_id=record['id'])

    def send_general_registration(self, registration) -> dict:
        """Add a business to the general vendor list (no booth, no payment) and confirm by email"""
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        prompt = (
            "Generate a warm and welcoming confirmation email body for a business that has just registered "
            "with the PDSCC Vendor Network.\n"
            f"Contact Name: {registration.contact_name}\nBusiness Name: {registration.business_name}\n"
            f"Start with \"Dear {registration.contact_name},\". Thank them for registering "
            f"\"{registration.business_name}\" with the PDSCC Vendor Network. Let them know they are now on "
            "the priority list and will be among the first to hear when vendor booth registration opens for "
            "upcoming events. End with \"Welcome aboard,\" followed by \"The PDSCC Team\"."
        )
        fallback = (
            f"Dear {registration.contact_name},\n\nThank you for registering \"{registration.business_name}\" "
            "with the PDSCC Vendor Network! You are now on our priority list and will be among the first to "
            "hear when vendor booth registration opens for upcoming events.\n\nWelcome aboard,\nThe PDSCC Team"
        )
        body = self._draft('general_registration', prompt, fallback)

        try:
            self.email.send_email(
                to=str(registration.email),
                subject='Welcome to the PDSCC Vendor Network!',
                html=str(text_to_html(body)),
                from_email=self._sender('PDSCC Vendors')
            )
        except ExternalProviderError as e:
            logger.error(f"Vendor network confirmation to {registration.email} failed: {e}")
            return _result(False, f"An error occurred during registration: {e}")

        self._notify_admin(
            'general_registration',
            'New General Vendor Registration',
            f"A new business has registered for the general vendor network.\n\n"
            f"Business Details:\n"
            f"- Business Name: {registration.business_name}\n"
            f"- Contact Name: {registration.contact_name}\n"
            f"- Email: {registration.email}\n"
            f"- Phone: {registration.phone}\n"
            f"- Category: {registration.category}\n"
            f"- Description: {registration.description}\n\n"
            f"No action is required. They have been added to the general vendor list.",
            self._bot('Vendor Bot'),
            reply_to=str(registration.email)
        )
        return _result(True, "Registration successful! A confirmation has been sent to your email.")

    # ----- Raffle -----

    def send_raffle_registration(self, registration) -> dict:
        """Forward a raffle sign-up to the admin inbox; tickets are issued from the raffle system by SMS"""
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        try:
            self.email.send_admin_notification(
                f"New Raffle Registration: {registration.name}",
                text=(
                    f"A new user has registered for a raffle ticket.\n\n"
                    f"Name: {registration.name}\n"
                    f"Phone: {registration.phone}\n"
                    f"SMS Consent: {'Yes' if registration.sms_consent else 'No'}\n\n"
                    f"Action Required: Please process this registration in the Honest Raffles system."
                ),
                from_email=self._bot('Raffle Bot')
            )
        except ExternalProviderError as e:
            logger.error(f"Raffle registration for {registration.name} failed: {e}")
            return _result(False, 'An error occurred while sending your registration.')

        return _result(True, "Thank you! Your raffle ticket information will be sent to your phone shortly.")

    # ----- Performances -----

    def send_performance_application(self, application) -> dict:
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        try:
            record = self.performances.create_application(application)
        except SQLAlchemyError as e:
            logger.error(f"Error saving performance application: {e}")
            return _result(False, 'An error occurred while saving your application.')

        prompt = (
            "Generate a polite and professional confirmation email body for a group that has applied to "
            "perform at a PDSCC event.\n"
            f"Contact Name: {application.contact_name}\nGroup Name: {application.group_name}\n"
            f"Event: {application.event}\n"
            f"Start with \"Dear {application.contact_name},\". Thank them for applying to perform with "
            f"\"{application.group_name}\" at the upcoming {application.event}. Say the cultural team will "
            "review it and contact them if their performance is selected. End with \"Sincerely,\" followed "
            "by \"The PDSCC Cultural Team\"."
        )
        fallback = (
            f"Dear {application.contact_name},\n\nThank you for applying to perform with "
            f"\"{application.group_name}\" at the upcoming {application.event}. Our cultural team will review "
            "your application and contact you if your performance is selected.\n\n"
            "Sincerely,\nThe PDSCC Cultural Team"
        )
        body = self._draft('performance_application', prompt, fallback)

        try:
            self.email.send_email(
                to=str(application.email),
                subject=f"Your Performance Application for {application.event} has been Received!",
                html=str(text_to_html(body)),
                from_email=self._sender('PDSCC Cultural Team')
            )
        except ExternalProviderError as e:
            logger.error(f"Performance confirmation for {record['id']} failed: {e}")
            return _result(False, f"Your application was saved, but the confirmation email failed: {e}",
                           application_id=record['id'])

        self._notify_admin(
            'performance_application',
            f"New Performance Application: {application.group_name} for {application.event}",
            f"A new performance application has been submitted.\n\n"
            f"Group Name: {application.group_name}\n"
            f"Contact: {application.contact_name}\n"
            f"Email: {application.email}\n"
            f"Phone: {application.phone}\n"
            f"Event: {application.event}\n"
            f"Performance Type: {application.performance_type}\n"
            f"Participants: {application.participants}\n"
            f"Audition Link: {application.audition_link or 'Not provided'}\n"
            f"Special Requests: {application.special_requests or 'None'}",
            self._bot('Performers Bot'),
            reply_to=str(application.email)
        )
        return _result(True, "Thank you for your application! A confirmation has been sent to your email.",
                       application_id=record['id'])

    # ----- Sponsorship -----

    def send_sponsorship_inquiry(self, inquiry) -> dict:
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        prompt = (
            "Generate a polite and professional confirmation email body for a company that has expressed "
            "interest in sponsoring PDSCC.\n"
            f"Contact Name: {inquiry.contact_name}\nLevel of Interest: {inquiry.sponsorship_level}\n"
            f"Start with \"Dear {inquiry.contact_name},\". Thank them for their interest in sponsoring PDSCC at "
            f"the {inquiry.sponsorship_level} level. Say the partnership team will get back to them within "
            "2-3 business days. End with \"Sincerely,\" followed by \"The PDSCC Partnership Team\"."
        )
        fallback = (
            f"Dear {inquiry.contact_name},\n\nThank you for your interest in sponsoring PDSCC at the "
            f"{inquiry.sponsorship_level} level. Our partnership team will review your inquiry and get back "
            "to you within 2-3 business days.\n\nSincerely,\nThe PDSCC Partnership Team"
        )
        body = self._draft('sponsorship_inquiry', prompt, fallback)

        try:
            self.email.send_email(
                to=str(inquiry.email),
                subject='Thank You for Your Interest in Sponsoring PDSCC!',
                html=str(text_to_html(body)),
                from_email=self._sender('PDSCC Partnerships')
            )
        except ExternalProviderError as e:
            logger.error(f"Sponsorship confirmation to {inquiry.email} failed: {e}")
            return _result(False, f"An error occurred while sending your inquiry: {e}")

        self._notify_admin(
            'sponsorship_inquiry',
            f"New Sponsorship Inquiry: {inquiry.company_name} ({inquiry.sponsorship_level})",
            f"A new sponsorship inquiry has been received from the PDSCC website.\n\n"
            f"Company Details:\n"
            f"- Company Name: {inquiry.company_name}\n"
            f"- Contact Name: {inquiry.contact_name}\n"
            f"- Email: {inquiry.email}\n"
            f"- Phone: {inquiry.phone}\n"
            f"- SMS Consent: {'Yes' if inquiry.sms_consent else 'No'}\n\n"
            f"Inquiry Details:\n"
            f"- Sponsorship Level of Interest: {inquiry.sponsorship_level}\n"
            f"- Message: {inquiry.message or 'No message provided.'}\n\n"
            f"Action Required: Please follow up with this lead within 2-3 business days.",
            self._bot('Sponsorship Bot'),
            reply_to=str(inquiry.email)
        )
        return _result(True, "Thank you for your interest! A confirmation has been sent to your email.")

    # ----- Volunteers -----

    def send_volunteer_inquiry(self, inquiry) -> dict:
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        prompt = (
            "Generate a simple, polite confirmation email body for a user who has just signed up to "
            "volunteer with PDSCC. The tone should be warm, appreciative, and professional.\n"
            f"Start with \"Dear {inquiry.name},\". Thank them for their interest in volunteering with PDSCC. "
            "Let them know their submission has been received and the team will get back to them soon with "
            "potential opportunities. End with \"Sincerely,\" followed by \"The PDSCC Team\"."
        )
        fallback = (
            f"Dear {inquiry.name},\n\nThank you for your interest in volunteering! We have received your "
            "submission and will be in touch soon.\n\nSincerely,\nThe PDSCC Team"
        )
        body = self._draft('volunteer_inquiry', prompt, fallback)

        try:
            self.email.send_email(
                to=str(inquiry.email),
                subject='Thank You for Your Interest in Volunteering! | PDSCC',
                html=str(text_to_html(body)),
                from_email=self._sender('PDSCC Volunteers')
            )
        except ExternalProviderError as e:
            logger.error(f"Volunteer confirmation to {inquiry.email} failed: {e}")
            return _result(False, f"An error occurred while sending your submission: {e}")

        interests = '\n- '.join(inquiry.interests)
        self._notify_admin(
            'volunteer_inquiry',
            f"New Volunteer Sign-Up: {inquiry.name}",
            f"You have a new volunteer sign-up from the PDSCC website.\n\n"
            f"Name: {inquiry.name}\n"
            f"Email: {inquiry.email}\n"
            f"Phone: {inquiry.phone or 'Not provided'}\n"
            f"SMS Consent: {'Yes' if inquiry.sms_consent else 'No'}\n\n"
            f"Areas of Interest:\n- {interests}\n\n"
            f"Message: {inquiry.message or 'No message provided.'}",
            self._bot('Volunteer Form Bot'),
            reply_to=str(inquiry.email)
        )
        return _result(True, "Thank you for volunteering! A confirmation has been sent to your email.")

    def send_volunteer_letter(self, letter) -> dict:
        """
        Email a volunteer their service confirmation letter (used for school
        and employer hour requirements) and copy the admin inbox.

        The opening paragraph is AI-drafted; the letterhead, service details
        and sign-off come from the template.
        """
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        service_date = letter.date_of_service.strftime('%B %d, %Y')
        hours = f"{letter.hours_volunteered:g}"
        prompt = (
            "Write the opening paragraph of a formal volunteer service confirmation letter from PDSCC "
            "(Phoenix Desi Sports and Cultural Club), a registered 501(c)(3) non-profit organization.\n"
            f"Volunteer: {letter.volunteer_name}\nEvent: {letter.event_name}\nDate of Service: {service_date}\n"
            f"Hours: {hours}\nDuties: {letter.duties_description or 'General event support'}\n"
            "Certify that the volunteer contributed their time and effort and thank them for their dedication. "
            "Do not include a greeting, the service details list, or a sign-off."
        )
        fallback = (
            "This letter is to certify that you have generously contributed your time and effort as a "
            "volunteer for the Phoenix Desi Sports and Cultural Club (PDSCC), a registered 501(c)(3) "
            "non-profit organization. We are immensely grateful for your dedication."
        )
        body = self._draft('volunteer_letter', prompt, fallback)

        html = render_email_template(
            'emails/volunteer_letter.html',
            site_base_url=self.site_base_url,
            org_address=ORG_ADDRESS,
            volunteer_name=letter.volunteer_name,
            body=text_to_html(body),
            event_name=letter.event_name,
            date_of_service=service_date,
            hours=hours,
            duties=letter.duties_description
        )

        try:
            self.email.send_email(
                to=str(letter.volunteer_email),
                subject='PDSCC Volunteer Service Confirmation',
                html=html,
                from_email=self._sender('PDSCC Volunteers')
            )
        except ExternalProviderError as e:
            logger.error(f"Volunteer letter to {letter.volunteer_email} failed: {e}")
            return _result(False, f"An error occurred while sending the letter: {e}")

        self._notify_admin(
            'volunteer_letter',
            f"Copy of Volunteer Letter for {letter.volunteer_name}",
            f"A volunteer confirmation letter was sent to {letter.volunteer_name} ({letter.volunteer_email}).",
            self._bot('Volunteer Bot'),
            html=(f"<p>A volunteer confirmation letter was sent to {escape(letter.volunteer_name)} "
                  f"({escape(str(letter.volunteer_email))}).</p><hr>{html}")
        )
        return _result(True, f"Confirmation letter successfully sent to {letter.volunteer_email}.")

    # ----- Donations -----

    def send_donation_receipt(self, donation) -> dict:
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        kind = 'monthly' if donation.is_monthly else 'one-time'
        amount = f"${donation.amount:.2f}"
        date_text = donation.date.strftime('%B %d, %Y')
        prompt = (
            "Generate a heartfelt thank you email body for a donation to PDSCC, suitable for a tax receipt.\n"
            f"Donor's Name: {donation.donor_name}\nDonation Amount: {amount}\nDonation Date: {date_text}\n"
            f"Donation Type: {'Recurring Monthly' if donation.is_monthly else 'One-Time'}\n"
            f"Start with \"Dear {donation.donor_name},\". Thank them for their generous {kind} donation of "
            f"{amount}. Mention that their support helps PDSCC continue its mission of celebrating North "
            "Indian culture through sports and festivals in the Phoenix community. Include the line "
            "\"This email serves as your official receipt.\" End with \"With heartfelt gratitude,\" followed "
            "by \"The PDSCC Team\"."
        )
        fallback = (
            f"Dear {donation.donor_name},\n\nThank you for your generous {kind} donation of {amount} on "
            f"{date_text}. Your support helps PDSCC continue its mission of celebrating North Indian culture "
            "through sports and festivals in the Phoenix community.\n\n"
            "This email serves as your official receipt.\n\nWith heartfelt gratitude,\nThe PDSCC Team"
        )
        body = self._draft('donation_receipt', prompt, fallback)

        try:
            self.email.send_email(
                to=str(donation.donor_email),
                subject='Thank You for Your Donation to PDSCC!',
                html=str(text_to_html(body)),
                from_email=self._sender('PDSCC Donations')
            )
        except ExternalProviderError as e:
            logger.error(f"Donation receipt to {donation.donor_email} failed: {e}")
            return _result(False, 'Failed to send email.')

        return _result(True, 'Donation receipt sent successfully.')

    def send_check_notification(self, notice) -> dict:
        """Tell the admin inbox a donor is mailing a check; the receipt goes out once it is deposited"""
        if not self.email.is_configured():
            return _result(False, NOT_CONFIGURED_MESSAGE)

        try:
            self.email.send_admin_notification(
                f"Incoming Check Donation from {notice.donor_name}",
                text=(
                    f"A donor has indicated they will be sending a check.\n\n"
                    f"Donor Details:\n"
                    f"- Name: {notice.donor_name}\n"
                    f"- Email: {notice.donor_email}\n"
                    f"- Amount: ${notice.amount:.2f}\n"
                    f"- Check Number: {notice.check_number or 'Not provided'}\n\n"
                    f"Action Required: Once the check is received, please deposit it and send a formal "
                    f"receipt to the donor's email address."
                ),
                reply_to=str(notice.donor_email),
                from_email=self._bot('Donation Bot')
            )
        except ExternalProviderError as e:
            logger.error(f"Check donation notification for {notice.donor_email} failed: {e}")
            return _result(False, 'Failed to send notification.')

        return _result(True, 'Notification sent successfully.')
