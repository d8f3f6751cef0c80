"""
Domain exceptions for analytics app.

Exception Hierarchy:
    AnalyticsServiceError (base)
    └── InvalidPeriodError
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics errors.

    Views catch it to answer with a 400:

        try:
            data = DashboardQueries.revenue_series(months=36)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a requested period is out of range.

    Example:
        raise InvalidPeriodError("Months must be between 1 and 24")
    """

    pass
