"""
Common exception classes.

Verification never raises: a wrong or malformed proof makes the verifying function return
``False``. The exceptions below signal caller errors or broken parameters.
"""


class ParameterError(ValueError):
    """Malformed or non-prime group parameters."""


class ParameterGenerationFailed(ParameterError):
    """The safe-prime search exhausted its attempt budget."""


class InvalidWitness(ValueError):
    """Secret, randomness, or committed value outside of its allowed range."""


class NonInvertibleError(ArithmeticError):
    """Modular inverse does not exist."""


class ProtocolStateError(RuntimeError):
    """Interactive prover or verifier used out of order."""


class DeserializationError(ValueError):
    """Byte string is not a valid encoding."""
