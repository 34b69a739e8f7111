"""storefront utilities"""
import csv
import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal

import pytz
from django.http import HttpResponse


log = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def now_in_utc():
    """
    Get the current time in UTC
    Returns:
        datetime.datetime: A datetime object for the current time
    """
    return datetime.datetime.now(tz=pytz.UTC)


def first_or_none(iterable):
    """
    Returns the first item in an iterable, or None if the iterable is empty

    Args:
        iterable (iterable): Some iterable
    Returns:
        first item or None
    """
    return next((x for x in iterable), None)


def case_insensitive_equal(str1, str2):
    """
    Compares two strings to determine if they are case insensitively equal

    Args:
        str1 (str):
        str2 (str):

    Returns:
        bool: True if the strings are equal, ignoring case
    """
    return str1.lower() == str2.lower()


def round_half_up(number):
    """
    Round a decimal number to cents using the ROUND_HALF_UP rule

    Args:
        number (decimal.Decimal): A decimal number

    Returns:
        decimal.Decimal:
            A rounded decimal number
    """
    return Decimal(number).quantize(CENTS, rounding=ROUND_HALF_UP)


def positive_or_zero(number):
    """
    Return 0 if a number is negative otherwise return number

    Args:
        number (decimal.Decimal): A number

    Returns:
        decimal.Decimal: The number, or zero if it was negative
    """
    return number if number > 0 else Decimal(0)


def format_price(amount):
    """
    Format a decimal value as currency with two decimal places

    Args:
        amount (decimal.Decimal): A decimal value

    Returns:
        str: A currency string
    """
    return f"{round_half_up(amount):.2f}"


def format_datetime_for_filename(datetime_object, include_time=False, include_ms=False):
    """
    Formats a datetime object for use in a filename

    Args:
        datetime_object (datetime.datetime): A datetime
        include_time (bool): True if the formatted string should include the time
        include_ms (bool): True if the formatted string should include microseconds as well as time

    Returns:
        str: The formatted datetime
    """
    format_parts = ["%Y%m%d"]
    if include_time or include_ms:
        format_parts.append("_%H-%M-%S")
    if include_ms:
        format_parts.append(".%f")
    return datetime_object.strftime("".join(format_parts))


def make_csv_http_response(*, csv_rows, filename, fieldnames=None):
    """
    Create a HttpResponse for a CSV file with the given rows

    Args:
        csv_rows (iterable of dict): An iterable of dicts with identical keys. Unless fieldnames
            is passed, the keys of the first row are used as the header
        filename (str): The filename to use in the Content-Disposition header
        fieldnames (list of str): If passed, the header is written even when there are no rows

    Returns:
        HttpResponse: A response with a CSV attachment
    """
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'

    csv_rows = iter(csv_rows)
    first_row = next(csv_rows, None)
    if first_row is None and fieldnames is None:
        return response

    writer = csv.DictWriter(
        response, fieldnames=fieldnames or list(first_row.keys())
    )
    writer.writeheader()
    if first_row is not None:
        writer.writerow(first_row)
    for row in csv_rows:
        writer.writerow(row)
    return response
