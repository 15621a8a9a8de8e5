"""Domain errors raised below the route layer.

Routes translate these into HTTP responses; see ``api/endpoints``.
"""


class MealPlannerError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(MealPlannerError):
    pass


class PermissionDeniedError(MealPlannerError):
    pass


class StoreError(MealPlannerError):
    """The remote store rejected or failed a request."""


class MealNotFoundError(MealPlannerError):
    pass


class MealValidationError(MealPlannerError):
    pass


class IncompleteCatalogError(MealPlannerError):
    def __init__(self, missing):
        super().__init__("Please add at least one breakfast, lunch, and dinner meal first.")
        self.missing = list(missing)


class PlanExistsError(MealPlannerError):
    def __init__(self, week_start: str):
        super().__init__("A plan already exists for this week. Do you want to replace it?")
        self.week_start = week_start


class GenerationInProgressError(MealPlannerError):
    def __init__(self):
        super().__init__("A weekly plan is already being generated.")
