"""
Short, human-legible identifiers for orders and payments.

These are demo tokens (``ORD-4K2Q9Z``, ``PAY-7TQ3M1XA``): random, not
cryptographic, and with no uniqueness guarantee under adversarial or
massive-scale concurrent use. Collisions are negligible at demo scale. They
carry no security meaning.
"""

import random
import string

_ALPHABET = string.ascii_uppercase + string.digits


def new_token(prefix: str, length: int, rng: random.Random | None = None) -> str:
    chooser = rng or random
    return f"{prefix}-" + "".join(chooser.choices(_ALPHABET, k=length))  # noqa: S311
