"""Translation of boto3/botocore exceptions into provider exceptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
)

from quickssm.providers.aws.constants import CREDENTIALS_ERROR_CODES
from quickssm.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)

logger = logging.getLogger(__name__)


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Convert AWS SDK exceptions raised inside the block.

    Yields
    ------
    None
        Control to the wrapped block

    Raises
    ------
    ProviderCredentialsError
        If credentials are missing, partial, invalid or expired
    ProviderConnectionError
        If the AWS endpoint cannot be reached or the request times out
    ProviderAPIError
        For any other AWS API or SDK error, carrying the AWS error code
    ValueError
        If the region is missing or the named profile does not exist
    """
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError) as e:
        raise ProviderCredentialsError(str(e)) from e
    except NoRegionError as e:
        raise ValueError(
            "No AWS region configured. Pass --region or set AWS_DEFAULT_REGION."
        ) from e
    except ProfileNotFound as e:
        raise ValueError(str(e)) from e
    except (BotoConnectionError, HTTPClientError) as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        error_code = error.get("Code", "")
        operation = getattr(e, "operation_name", None)
        logger.debug("AWS API error in %s: %s", operation, error_code)

        if error_code in CREDENTIALS_ERROR_CODES:
            raise ProviderCredentialsError(str(e)) from e

        raise ProviderAPIError(
            message=error.get("Message") or str(e),
            error_code=error_code,
            operation=operation,
        ) from e
    except BotoCoreError as e:
        logger.debug("AWS SDK error: %s", e)
        raise ProviderAPIError(message=str(e), error_code=type(e).__name__) from e
