class KundaliError(Exception):
    """
    Base exception for all kundali-related domain errors.
    """
    pass


class InvalidBirthDataError(KundaliError):
    """
    Raised when birth inputs are invalid or inconsistent.
    """
    pass


class UnsupportedAyanamsaError(KundaliError):
    """
    Raised when an unsupported ayanamsa is requested.
    """
    pass


class PartitionViolationError(KundaliError):
    """
    Raised when a dasha tree does not partition its span exactly.

    Carries every violation found so callers can report them together.
    """

    def __init__(self, violations):
        self.violations = list(violations)
        summary = "; ".join(self.violations[:5])
        if len(self.violations) > 5:
            summary += f" (+{len(self.violations) - 5} more)"
        super().__init__(f"Dasha partition violated: {summary}")


class UnsupportedDashaSystemError(KundaliError):
    """
    Raised when an unknown dasha system or Yogini start rule is requested.
    """
    pass
