"""ID and value generators (CUID row ids, redemption codes)."""

import secrets
from collections.abc import Callable

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# Uppercase alphanumerics without look-alikes (0/O, 1/I) so codes survive being read aloud.
REDEMPTION_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_REDEMPTION_CODE_LENGTH = 8

CodeGenerator = Callable[[], str]


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_redemption_code(
    length: int = DEFAULT_REDEMPTION_CODE_LENGTH,
    alphabet: str = REDEMPTION_CODE_ALPHABET,
) -> str:
    """Generate a random redemption code from a cryptographic source.

    Collisions are unlikely but possible; uniqueness is enforced by the code
    store, not here.

    Args:
        length: Number of characters.
        alphabet: Characters to draw from.

    Returns:
        A new code string.
    """
    if length < 1:
        raise ValueError("length must be at least 1")
    if not alphabet:
        raise ValueError("alphabet must be non-empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def redemption_code_generator(
    length: int = DEFAULT_REDEMPTION_CODE_LENGTH,
) -> CodeGenerator:
    """Return a zero-argument generator producing codes of the given length."""

    def _generate() -> str:
        return generate_redemption_code(length)

    return _generate
