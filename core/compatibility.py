"""
core/compatibility.py

ABO/Rh red-cell compatibility between a recipient's blood type and the
blood types of units that may be transfused to them.

O- is the universal donor; AB+ is the universal recipient.
"""

from .enums import BloodType

B = BloodType

# recipient -> donor types whose units the recipient can receive
COMPATIBLE_DONORS: dict[str, frozenset[str]] = {
    B.O_NEGATIVE:  frozenset({B.O_NEGATIVE}),
    B.O_POSITIVE:  frozenset({B.O_NEGATIVE, B.O_POSITIVE}),
    B.A_NEGATIVE:  frozenset({B.O_NEGATIVE, B.A_NEGATIVE}),
    B.A_POSITIVE:  frozenset({B.O_NEGATIVE, B.O_POSITIVE, B.A_NEGATIVE, B.A_POSITIVE}),
    B.B_NEGATIVE:  frozenset({B.O_NEGATIVE, B.B_NEGATIVE}),
    B.B_POSITIVE:  frozenset({B.O_NEGATIVE, B.O_POSITIVE, B.B_NEGATIVE, B.B_POSITIVE}),
    B.AB_NEGATIVE: frozenset({B.O_NEGATIVE, B.A_NEGATIVE, B.B_NEGATIVE, B.AB_NEGATIVE}),
    B.AB_POSITIVE: frozenset(BloodType.values),
}


def compatible_donor_types(recipient: str) -> frozenset[str]:
    """Blood types a recipient of `recipient` can safely receive. Unknown types get nothing."""
    return COMPATIBLE_DONORS.get(recipient, frozenset())


def is_compatible(donor: str, recipient: str) -> bool:
    return donor in compatible_donor_types(recipient)
