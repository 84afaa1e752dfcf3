"""
Error types reported by TLE parsing and SGP4/SDP4 propagation.

Numeric propagation failures are described by :class:`SGP4Error` codes, which
the pure JAX functions return as integers and the satellite record stores.
Parse failures are never numeric codes: they are raised as
:class:`TLEParseError` at the parser boundary.
"""

from __future__ import annotations

from enum import IntEnum


class SGP4Error(IntEnum):
    """Numeric error codes of the SGP4/SDP4 propagator."""

    NONE = 0
    MEAN_ECCENTRICITY = 1
    MEAN_MOTION = 2
    PERTURBED_ECCENTRICITY = 3
    SEMI_LATUS_RECTUM = 4
    EPOCH_ELEMENTS = 5
    DECAYED = 6

    @property
    def message(self) -> str:
        """Human-readable description of the code."""
        return _MESSAGES[self]


_MESSAGES = {
    SGP4Error.NONE: "no error",
    SGP4Error.MEAN_ECCENTRICITY: "mean eccentricity is outside the range 0 <= e < 1",
    SGP4Error.MEAN_MOTION: "mean motion has fallen below zero",
    SGP4Error.PERTURBED_ECCENTRICITY: "perturbed eccentricity is outside the range 0 <= e <= 1",
    SGP4Error.SEMI_LATUS_RECTUM: "length of the orbit's semi-latus rectum has fallen below zero",
    SGP4Error.EPOCH_ELEMENTS: "epoch elements do not describe a valid orbit",
    SGP4Error.DECAYED: "satellite has decayed below the Earth's surface",
}


class TLEParseError(ValueError):
    """Raised when TLE text fails format, field, or checksum validation.

    Attributes:
        line_number: TLE line (1 or 2) holding the offending text, or ``None``
            when the failure involves both lines.
        field: Name of the offending field.
    """

    def __init__(self, message: str, line_number: int | None = None, field: str | None = None):
        super().__init__(message)
        self.line_number = line_number
        self.field = field


class PropagationError(RuntimeError):
    """Raised when a satellite record cannot produce a state vector.

    Attributes:
        code: The :class:`SGP4Error` describing the failure.
        satnum: Catalog number of the satellite.
        tsince: Requested time since epoch [min].
    """

    def __init__(self, code: SGP4Error, satnum: str = "", tsince: float | None = None):
        code = SGP4Error(code)
        when = "" if tsince is None else f" at tsince={tsince} min"
        super().__init__(f"Satellite {satnum.strip() or '?'}{when}: {code.message} (error {int(code)})")
        self.code = code
        self.satnum = satnum
        self.tsince = tsince
