"""Access guard: the single authorization check every operation makes."""

from custody.contract.errors import Unauthorized


def verify(caller: str, expected, role: str) -> None:
    """Raise ``Unauthorized`` unless ``caller`` holds the ``expected`` identity.

    ``expected`` is an ``Identity`` value object, or ``None`` when the role
    has not been assigned yet (e.g. the supplier before ``init_contract``).
    """
    if expected is None or not expected.credential or str(caller) != str(expected.credential):
        raise Unauthorized(f"Only the {role} can perform this operation")
