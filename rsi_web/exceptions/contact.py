from fastapi import status

from .api_exception import APIException


class ContactError(Exception):
    """Base class for failures of a contact form submission."""

    message: str


class InvalidSubmissionError(ContactError):
    message = "Please correct the highlighted fields and try again."

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__(field_errors)
        self.field_errors = field_errors


class SpamDetectedError(ContactError):
    message = "Spam detected. If this is an error, please contact us by phone."


class RecaptchaFailedError(ContactError):
    message = "reCAPTCHA verification failed. Please try again."


class DeliveryError(ContactError):
    message = "There was an error sending your message. Please try again later."


class ConfigurationError(ContactError):
    message = DeliveryError.message


class SpamRejectedError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    detail = SpamDetectedError.message
    description = "The honeypot field has been filled in."


class RecaptchaError(APIException):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    detail = RecaptchaFailedError.message
    description = "The ReCaptcha response is invalid."


class CouldNotSendMessageError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = DeliveryError.message
    description = "The message could not be sent."


class TooManyRequestsError(APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    detail = "Too many requests"
    description = "Too many contact form submissions from this address. Try again in a minute."
