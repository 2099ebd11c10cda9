"""Domain exceptions. The HTTP layer maps these to status codes."""


class EasyScheduleError(Exception):
    """Base for all domain errors."""


class ScheduleError(EasyScheduleError, ValueError):
    """Schedule cannot be generated from the given input."""


class ProfileNotFoundError(EasyScheduleError):
    """No baby profile with the given id."""

    def __init__(self, baby_id: str) -> None:
        super().__init__(f"Baby profile {baby_id!r} not found")
        self.baby_id = baby_id


class FormulaNotFoundError(EasyScheduleError):
    """No formula rule visible to the caller with the given id."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Formula rule {rule_id!r} not found")
        self.rule_id = rule_id


class ForbiddenRuleChangeError(EasyScheduleError):
    """Attempt to modify or delete a predefined formula."""


class InvalidAdjustmentError(EasyScheduleError, ValueError):
    """Phase adjustment does not describe a valid change."""
