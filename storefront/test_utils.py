"""Testing utils"""
import hashlib
import hmac


def drf_datetime(dt):
    """
    Returns a datetime formatted as a DRF DateTimeField formats it

    Args:
        dt(datetime): datetime to format

    Returns:
        str: ISO 8601 formatted datetime
    """
    return dt.isoformat().replace("+00:00", "Z")


def sign_webhook_body(body, secret):
    """
    Sign a webhook request body the way the entity store does

    Args:
        body (bytes): The raw request body
        secret (str): The shared webhook secret

    Returns:
        str: The hex encoded HMAC-SHA256 signature
    """
    return hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()
