"""
DynamoDB service for single item table operations.
"""
import threading
from typing import Any, Dict, Optional, TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import AWSCredentials, Config
from logger_config import get_logger
from utils.decorators import get_process_lock, serialized, traced

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBServiceResource
else:
    DynamoDBServiceResource = Any

logger = get_logger(__name__)


class DynamoDBService:
    """Service for DynamoDB operations on tables keyed by one attribute."""

    def __init__(
        self,
        credentials: Optional[AWSCredentials] = None,
        lock: Optional[threading.Lock] = None,
        resource: Optional[DynamoDBServiceResource] = None
    ) -> None:
        """Initialize DynamoDB service."""
        self.credentials = credentials or AWSCredentials()
        self.lock = lock or get_process_lock()
        self._resource: Optional[DynamoDBServiceResource] = resource

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "DynamoDBService":
        """Build a service from the environment configuration."""
        return cls(config.credentials(), **kwargs)

    @property
    def resource(self) -> DynamoDBServiceResource:
        """Lazy initialization of DynamoDB resource."""
        if self._resource is None:
            self._resource = boto3.resource('dynamodb', **self.credentials.client_kwargs())
        return self._resource

    def table(self, table_name: str):
        return self.resource.Table(table_name)

    @traced
    @serialized
    def put_item(
        self,
        table_name: str,
        primary_key: str,
        primary_key_value: Any,
        rest_key: str,
        rest_key_values: Dict[str, Any]
    ) -> bool:
        """
        Put an item made of a primary key and one map attribute.

        Args:
            table_name: Name of the DynamoDB table
            primary_key: Primary key attribute name
            primary_key_value: Primary key value
            rest_key: Name of the map attribute holding the remaining data
            rest_key_values: Map stored under ``rest_key``

        Returns:
            True if DynamoDB acknowledged the write

        Raises:
            ClientError: If DynamoDB operation fails
        """
        item = {primary_key: primary_key_value, rest_key: rest_key_values}
        try:
            response = self.table(table_name).put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'DynamoDB put_item failed for table {table_name}: {str(e)}')
            raise

        status = response.get('ResponseMetadata', {}).get('HTTPStatusCode')
        logger.info(f'Put item {primary_key}={primary_key_value} to DynamoDB table {table_name}')
        return status == 200

    @traced
    @serialized
    def get_item(
        self,
        table_name: str,
        primary_key: str,
        primary_key_value: Any
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item by primary key.

        Returns:
            Item dictionary if found, None otherwise

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.table(table_name).get_item(Key={primary_key: primary_key_value})
        except (ClientError, BotoCoreError) as e:
            logger.error(f'DynamoDB get_item failed for table {table_name}: {str(e)}')
            raise
        return response.get('Item')

    @traced
    @serialized
    def delete_item(
        self,
        table_name: str,
        primary_key: str,
        primary_key_value: Any
    ) -> bool:
        """
        Delete an item by primary key. Deleting a missing item succeeds.

        Returns:
            True once DynamoDB has answered

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.table(table_name).delete_item(Key={primary_key: primary_key_value})
        except (ClientError, BotoCoreError) as e:
            logger.error(f'DynamoDB delete_item failed for table {table_name}: {str(e)}')
            raise

        logger.info(f'Deleted item {primary_key}={primary_key_value} from DynamoDB table {table_name}')
        return response is not None
