from . import service
from ..remote import NsgClient


def registerServices(testing: bool = False) -> None:
    """
    Register the default service implementations.

    Args:
        testing: If True, clear services for testing
    """
    if testing:
        service().clear(thisIsATest=testing)

    # Client class used for every remote call; called as
    # client(credentials, base_url=..., timeout=...)
    service().register("remote.client", NsgClient)
