"""
The colour-vision model: conversions between colour spaces, confusion lines
and simulation of colour vision deficiencies.
"""
from enum import Enum


class Deficiency(Enum):
    """
    A dichromatic colour vision deficiency, named after the cone type which is missing.
    """

    PROTAN = "protan"
    """Missing L (long wavelength, "red") cones."""
    DEUTAN = "deutan"
    """Missing M (medium wavelength, "green") cones."""
    TRITAN = "tritan"
    """Missing S (short wavelength, "blue") cones."""

    @staticmethod
    def parse(value) -> "Deficiency":
        """
        Accepts either a `Deficiency` or its (case-insensitive) name or value, e.g. ``"protan"``.
        """
        if isinstance(value, Deficiency):
            return value
        if isinstance(value, str):
            for deficiency in Deficiency:
                if value.lower() in (deficiency.value, deficiency.name.lower()):
                    return deficiency
        raise ValueError(f"Unknown colour vision deficiency {value!r}")
