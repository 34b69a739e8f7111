"""
Exceptions for the remote entity store
"""


class EntityStoreError(Exception):  # noqa: N818
    """
    General exception regarding the remote entity store
    """


class EntityStoreUnavailable(EntityStoreError):
    """
    The entity store could not be reached, timed out or failed with a server error
    """


class EntityStoreNotSupported(EntityStoreError):
    """
    The entity store does not know about the requested entity type
    """
