class QuorumError(ValueError):
    """Base class for every recoverable failure raised by quorum."""


class ParseError(QuorumError):
    """Invalid digit character, empty number or radix out of range."""


class InvalidConfiguration(QuorumError):
    """Sharing parameters that cannot describe a valid scheme."""


class InsufficientShares(QuorumError):
    """Fewer shares than the threshold were supplied."""


class NoInverseFound(QuorumError):
    """The element has no multiplicative inverse modulo the field prime."""
