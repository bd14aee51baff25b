"""
Domain exceptions and their HTTP mapping.

Services raise the domain exceptions below; routes translate them with
`BusinessError`, which logs every failure before building the response.
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class CatchbookError(Exception):
    """Base class for all domain failures."""


class NotFoundError(CatchbookError):
    """An identifier does not refer to a stored record."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with id {identifier} not found")


class StoreError(CatchbookError):
    """The backing record store could not complete a read or write."""


class AnalysisFailed(CatchbookError):
    """
    The external model call failed: transport error, timeout, empty reply
    or a reply that does not match the expected schema.

    The message carries the upstream error text unchanged.
    """


class BusinessError:
    """HTTPException factories. Each one logs before returning."""

    @staticmethod
    def not_found(resource: str = "Resource", reason: str = "") -> HTTPException:
        """
        404 for unknown identifiers.

        Example:
            except NotFoundError as e:
                raise BusinessError.not_found("Inventory item", str(e))
        """
        if reason:
            logger.warning(f"Not found: {resource} - {reason}")

        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """
        400 for input validation errors.

        OK to include specific details here since the caller caused the issue.
        """
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def upstream_failure(context: str, original_error: Exception) -> HTTPException:
        """
        500 for failures of the external model. The upstream message is
        passed through so the client can show it and offer a retry.
        """
        logger.error(f"{context}: {original_error}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{context}: {original_error}",
        )

    @staticmethod
    def server_error(context: str, original_error: Exception = None) -> HTTPException:
        """
        Generic 500 - logs actual error internally, hides it from the user.
        """
        if original_error:
            logger.error(
                f"{context}: {type(original_error).__name__}: {str(original_error)}",
                exc_info=True
            )
        else:
            logger.error(context, exc_info=True)

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=context,
        )
