"""Outgoing mail for the visitor chain, sent through Django's e-mail backend"""
import logging
from smtplib import SMTPException
from django.conf import settings
from django.core.mail import send_mail
from django.utils.crypto import get_random_string

logger = logging.getLogger('depot.visitors')

OTP_LENGTH = 6


def generate_one_time_password():
    return get_random_string(OTP_LENGTH, allowed_chars='0123456789')


def send(email_to, subject, message):
    """Send a plain-text mail; returns False when the transport fails"""
    try:
        send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [email_to], fail_silently=False)
    except (SMTPException, OSError) as e:
        logger.error(f"Failed to send e-mail to {email_to}: {str(e)}", exc_info=True)
        return False
    logger.info(f"E-mail '{subject}' sent to {email_to}")
    return True


def send_one_time_password(email_to, one_time_password):
    return send(email_to, 'Confirmation code', f'Hello. Your one-time confirmation code: {one_time_password}')


def send_reset_password(email_to, new_password):
    return send(email_to, 'Password reset', f'Hello. Your password has been reset. New password: {new_password}')
