"""
ZK Error Types
==============

Exception hierarchy for proof generation and verification.

Precondition errors (missing assets, bad witness shape, missing toolchain)
always surface to the caller. They are never turned into a false or null
result.
"""


class ZKError(Exception):
    """Base class for proof system errors."""


class MissingAssetError(ZKError, FileNotFoundError):
    """A compiled circuit, proving key or verification key is not provisioned."""


class ProvingError(ZKError, ValueError):
    """The witness does not fit the circuit's input schema, or proving failed."""


class MalformedProofError(ZKError, ValueError):
    """A proof or its public signals are structurally invalid."""


class ToolchainError(ZKError, RuntimeError):
    """snarkjs could not be run or produced output that cannot be interpreted."""
