"""DynamoDB client wrapper exposing the three calls the loader needs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from open311_loader.common.config_loader import AwsConfig, CapacityConfig
from open311_loader.common.errors import StoreError, TableAlreadyExistsError, TableNotFoundError


@dataclass(frozen=True)
class TableDescription:
    name: str
    status: str
    hash_key: str | None


def _aws_error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


def _describe_from_response(table: dict[str, Any]) -> TableDescription:
    hash_key = None
    for element in table.get("KeySchema", []):
        if element.get("KeyType") == "HASH":
            hash_key = element.get("AttributeName")
    return TableDescription(
        name=table.get("TableName", ""),
        status=table.get("TableStatus", ""),
        hash_key=hash_key,
    )


class DynamoStore:
    def __init__(self, client) -> None:
        self.client = client

    @property
    def region(self) -> str:
        return self.client.meta.region_name

    def create_table(self, table_name: str, key_field: str, capacity: CapacityConfig) -> TableDescription:
        try:
            response = self.client.create_table(
                TableName=table_name,
                AttributeDefinitions=[{"AttributeName": key_field, "AttributeType": "S"}],
                KeySchema=[{"AttributeName": key_field, "KeyType": "HASH"}],
                ProvisionedThroughput={
                    "ReadCapacityUnits": capacity.read_units,
                    "WriteCapacityUnits": capacity.write_units,
                },
            )
        except ClientError as exc:
            code = _aws_error_code(exc)
            # DynamoDB answers CreateTable for an existing table with ResourceInUseException.
            if code == "ResourceInUseException":
                raise TableAlreadyExistsError(f"Table already exists: {table_name}", aws_code=code) from exc
            raise StoreError(f"CreateTable failed for {table_name}: {exc}", aws_code=code) from exc
        except BotoCoreError as exc:
            raise StoreError(f"CreateTable failed for {table_name}: {exc}") from exc
        return _describe_from_response(response.get("TableDescription", {}))

    def describe_table(self, table_name: str) -> TableDescription:
        try:
            response = self.client.describe_table(TableName=table_name)
        except ClientError as exc:
            code = _aws_error_code(exc)
            if code == "ResourceNotFoundException":
                raise TableNotFoundError(f"Table not found: {table_name}", aws_code=code) from exc
            raise StoreError(f"DescribeTable failed for {table_name}: {exc}", aws_code=code) from exc
        except BotoCoreError as exc:
            raise StoreError(f"DescribeTable failed for {table_name}: {exc}") from exc
        return _describe_from_response(response.get("Table", {}))

    def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        try:
            self.client.put_item(TableName=table_name, Item=item)
        except ClientError as exc:
            raise StoreError(f"PutItem failed for {table_name}: {exc}", aws_code=_aws_error_code(exc)) from exc
        except BotoCoreError as exc:
            raise StoreError(f"PutItem failed for {table_name}: {exc}") from exc


def build_store(aws: AwsConfig | None = None) -> DynamoStore:
    """Create a store backed by a low-level boto3 DynamoDB client.

    Credentials come from the standard boto3 chain (environment, shared
    credentials file, instance role).
    """
    aws = aws or AwsConfig()
    client_config = Config(
        connect_timeout=aws.connect_timeout,
        read_timeout=aws.read_timeout,
        retries={"max_attempts": aws.max_attempts, "mode": "standard"},
    )
    try:
        client = boto3.client(
            "dynamodb",
            region_name=aws.region,
            endpoint_url=aws.endpoint_url,
            config=client_config,
        )
    except BotoCoreError as exc:
        raise StoreError(f"Unable to create DynamoDB client in {aws.region}: {exc}") from exc
    return DynamoStore(client)
