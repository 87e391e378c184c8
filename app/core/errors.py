from typing import Optional

from fastapi import status


class GatewayError(Exception):
    """Base error for failures the router turns into an HTTP response"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CredentialsError(GatewayError):
    """A named credential preset could not be resolved"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ChatProxyError(GatewayError):
    """The language-model API answered with an error object"""


class ClientDisconnectedError(GatewayError):
    """The caller went away before the query finished"""

    status_code = 499


class StatementSubmissionError(GatewayError):
    """The warehouse accepted the statement but returned no statement id"""
