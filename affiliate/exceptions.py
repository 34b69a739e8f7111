"""
Exceptions for affiliates
"""


class LedgerError(Exception):  # noqa: N818
    """
    Neither the remote entity store nor the local database could complete a ledger operation
    """
