import logging
from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from rokthona.models.content import Blog
from rokthona.models.donation import DONOR_FIELDS, DonationRequest
from rokthona.models.funding import FundingEntry
from rokthona.models.geo import District, Upazila
from rokthona.models.user import User

logger = logging.getLogger(__name__)

USER_PREFIX = "USER#"
REQUEST_PREFIX = "REQUEST#"
BLOG_PREFIX = "BLOG#"
FUND_PREFIX = "FUND#"
DISTRICT_PREFIX = "DISTRICT#"
UPAZILA_PREFIX = "UPAZILA#"
PROFILE_SK = "PROFILE"
DETAILS_SK = "DETAILS"
TOTALS_PK = "TOTALS"
FUNDING_SUM_SK = "FUNDING_SUM"

ENTITY_INDEX = "EntityIndex"
USER_ENTITY = "USER"
REQUEST_ENTITY = "REQUEST"
BLOG_ENTITY = "BLOG"
FUND_ENTITY = "FUND"
DISTRICT_ENTITY = "DISTRICT"
UPAZILA_ENTITY = "UPAZILA"

_STORAGE_ATTRIBUTES = ("PK", "SK", "entity", "sort_key")

_serializer = TypeSerializer()


def create_table(dynamodb_resource, table_name: str):
    """Create the single table and its entity index. Used by local setups and tests."""
    table = dynamodb_resource.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "entity", "AttributeType": "S"},
            {"AttributeName": "sort_key", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": ENTITY_INDEX,
                "KeySchema": [
                    {"AttributeName": "entity", "KeyType": "HASH"},
                    {"AttributeName": "sort_key", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


def _is_condition_failure(error: ClientError) -> bool:
    return error.response['Error']['Code'] == 'ConditionalCheckFailedException'


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _from_item(item: dict | None) -> dict | None:
    if item is None:
        return None
    return {k: _plain(v) for k, v in item.items() if k not in _STORAGE_ATTRIBUTES}


def _to_item(record, **storage_keys) -> dict:
    item = record.model_dump(mode="json", exclude_none=True)
    item.update(storage_keys)
    return item


def _all_of(conditions: Iterable) -> Any:
    combined = None
    for condition in conditions:
        combined = condition if combined is None else combined & condition
    return combined


def _sortable_id(identifier: str) -> str:
    # Numeric seed ids order numerically once padded.
    return identifier.zfill(8) if identifier.isdigit() else identifier


class DynamoDataAccess:
    def __init__(self, table):
        self.table = table

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _query_entity(self, entity: str, filter_expression=None, newest_first: bool = False) -> list[dict]:
        kwargs = {
            "IndexName": ENTITY_INDEX,
            "KeyConditionExpression": Key("entity").eq(entity),
            "ScanIndexForward": not newest_first,
        }
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        return [_from_item(item) for item in self._query_pages(**kwargs)]

    def _query_pages(self, **kwargs) -> list[dict]:
        items = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return items

    def _count_entity(self, entity: str) -> int:
        kwargs = {
            "IndexName": ENTITY_INDEX,
            "KeyConditionExpression": Key("entity").eq(entity),
            "Select": "COUNT",
        }
        total = 0
        while True:
            response = self.table.query(**kwargs)
            total += response.get("Count", 0)
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return total

    def _get(self, pk: str, sk: str) -> dict | None:
        response = self.table.get_item(Key={"PK": pk, "SK": sk})
        return _from_item(response.get("Item"))

    def _conditional_update(self, key: dict, update_expression: str, condition: str,
                            names: dict, values: dict | None = None) -> dict | None:
        kwargs = {
            "Key": key,
            "UpdateExpression": update_expression,
            "ConditionExpression": condition,
            "ExpressionAttributeNames": names,
            "ReturnValues": "ALL_NEW",
        }
        if values:
            kwargs["ExpressionAttributeValues"] = values
        try:
            response = self.table.update_item(**kwargs)
            return _from_item(response.get("Attributes", {}))
        except ClientError as e:
            if _is_condition_failure(e):
                logger.info(f"Conditional update skipped for {key['PK']}: condition not met.")
                return None
            logger.error(f"Error updating {key['PK']}: {e}")
            raise

    def _put_new(self, item: dict) -> dict | None:
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(PK)"
            )
            return _from_item(item)
        except ClientError as e:
            if _is_condition_failure(e):
                logger.info(f"Item {item['PK']} already exists.")
                return None
            raise

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> dict | None:
        """Insert a user record; returns None when the email is already registered."""
        item = _to_item(
            user,
            PK=f"{USER_PREFIX}{user.email}",
            SK=PROFILE_SK,
            entity=USER_ENTITY,
            sort_key=user.created_at.isoformat(),
        )
        return self._put_new(item)

    def get_user(self, email: str) -> dict | None:
        return self._get(f"{USER_PREFIX}{email}", PROFILE_SK)

    def get_user_role(self, email: str) -> str | None:
        response = self.table.get_item(
            Key={"PK": f"{USER_PREFIX}{email}", "SK": PROFILE_SK},
            ProjectionExpression="#role",
            ExpressionAttributeNames={"#role": "role"},
        )
        item = response.get("Item")
        return item.get("role") if item else None

    def list_users(self, role: str | None = None, status: str | None = None) -> list[dict]:
        conditions = []
        if role:
            conditions.append(Attr("role").eq(role))
        if status:
            conditions.append(Attr("status").eq(status))
        return self._query_entity(USER_ENTITY, _all_of(conditions), newest_first=True)

    def search_donors(self, blood_group: str | None = None, district: str | None = None,
                      upazila: str | None = None) -> list[dict]:
        conditions = [Attr("role").eq("donor")]
        if blood_group:
            conditions.append(Attr("blood_group").eq(blood_group))
        if district:
            conditions.append(Attr("district").eq(district))
        if upazila:
            conditions.append(Attr("upazila").eq(upazila))
        return self._query_entity(USER_ENTITY, _all_of(conditions), newest_first=True)

    def update_user(self, email: str, fields: dict[str, Any]) -> dict | None:
        """Set the given attributes on an existing user; returns None when the user is absent."""
        if not fields:
            return self.get_user(email)

        names = {}
        values = {}
        assignments = []
        for position, (field, value) in enumerate(fields.items()):
            names[f"#f{position}"] = field
            values[f":v{position}"] = value
            assignments.append(f"#f{position} = :v{position}")

        return self._conditional_update(
            key={"PK": f"{USER_PREFIX}{email}", "SK": PROFILE_SK},
            update_expression="SET " + ", ".join(assignments),
            condition="attribute_exists(PK)",
            names=names,
            values=values,
        )

    def count_users(self) -> int:
        return self._count_entity(USER_ENTITY)

    # ------------------------------------------------------------------
    # Donation requests
    # ------------------------------------------------------------------

    def create_donation_request(self, request: DonationRequest) -> dict:
        item = _to_item(
            request,
            PK=f"{REQUEST_PREFIX}{request.id}",
            SK=DETAILS_SK,
            entity=REQUEST_ENTITY,
            sort_key=f"{request.donation_date.isoformat()}#{request.id}",
        )
        self.table.put_item(Item=item)
        return _from_item(item)

    def get_donation_request(self, request_id: str) -> dict | None:
        return self._get(f"{REQUEST_PREFIX}{request_id}", DETAILS_SK)

    def list_donation_requests(self, requester_email: str | None = None, donor_email: str | None = None,
                               status: str | None = None) -> list[dict]:
        """Donation requests ordered by donation date, latest first."""
        conditions = []
        if requester_email:
            conditions.append(Attr("requester_email").eq(requester_email))
        if donor_email:
            conditions.append(Attr("donor_email").eq(donor_email))
        if status:
            conditions.append(Attr("status").eq(status))
        return self._query_entity(REQUEST_ENTITY, _all_of(conditions), newest_first=True)

    def count_donation_requests(self) -> int:
        return self._count_entity(REQUEST_ENTITY)

    def confirm_donation_request(self, request_id: str, donor_name: str, donor_email: str,
                                 donor_id: str, confirmed_at: datetime) -> dict | None:
        """
        Compare-and-swap from pending to inprogress, stamping the donor.
        Returns None when the request is missing or no longer pending.
        """
        return self._conditional_update(
            key={"PK": f"{REQUEST_PREFIX}{request_id}", "SK": DETAILS_SK},
            update_expression=(
                "SET #status = :inprogress, donor_name = :dn, donor_email = :de, "
                "donor_id = :di, confirmed_at = :ca"
            ),
            condition="#status = :pending",
            names={"#status": "status"},
            values={
                ":pending": "pending",
                ":inprogress": "inprogress",
                ":dn": donor_name,
                ":de": donor_email,
                ":di": donor_id,
                ":ca": confirmed_at.isoformat(),
            },
        )

    def finish_donation_request(self, request_id: str, status: str) -> dict | None:
        """Move an inprogress request to done or canceled. None when it is not inprogress."""
        update_expression = "SET #status = :s"
        if status == "canceled":
            update_expression += " REMOVE " + ", ".join(DONOR_FIELDS)
        return self._conditional_update(
            key={"PK": f"{REQUEST_PREFIX}{request_id}", "SK": DETAILS_SK},
            update_expression=update_expression,
            condition="#status = :inprogress",
            names={"#status": "status"},
            values={":s": status, ":inprogress": "inprogress"},
        )

    def override_donation_status(self, request_id: str, status: str) -> dict | None:
        """
        Set any status directly. pending and canceled drop the donor fields;
        inprogress and done only apply to a request that already has a donor.
        Returns None when the condition fails.
        """
        if status in ("pending", "canceled"):
            update_expression = "SET #status = :s REMOVE " + ", ".join(DONOR_FIELDS)
            condition = "attribute_exists(PK)"
        else:
            update_expression = "SET #status = :s"
            condition = "attribute_exists(PK) AND attribute_exists(donor_email)"
        return self._conditional_update(
            key={"PK": f"{REQUEST_PREFIX}{request_id}", "SK": DETAILS_SK},
            update_expression=update_expression,
            condition=condition,
            names={"#status": "status"},
            values={":s": status},
        )

    # ------------------------------------------------------------------
    # Blogs
    # ------------------------------------------------------------------

    def create_blog(self, blog: Blog) -> dict:
        item = _to_item(
            blog,
            PK=f"{BLOG_PREFIX}{blog.id}",
            SK=DETAILS_SK,
            entity=BLOG_ENTITY,
            sort_key=f"{blog.created_at.isoformat()}#{blog.id}",
        )
        self.table.put_item(Item=item)
        return _from_item(item)

    def get_blog(self, blog_id: str) -> dict | None:
        return self._get(f"{BLOG_PREFIX}{blog_id}", DETAILS_SK)

    def list_blogs(self, status: str | None = None) -> list[dict]:
        condition = Attr("status").eq(status) if status else None
        return self._query_entity(BLOG_ENTITY, condition, newest_first=True)

    def update_blog_status(self, blog_id: str, status: str) -> dict | None:
        return self._conditional_update(
            key={"PK": f"{BLOG_PREFIX}{blog_id}", "SK": DETAILS_SK},
            update_expression="SET #status = :s",
            condition="attribute_exists(PK)",
            names={"#status": "status"},
            values={":s": status},
        )

    def delete_blog(self, blog_id: str) -> bool:
        try:
            self.table.delete_item(
                Key={"PK": f"{BLOG_PREFIX}{blog_id}", "SK": DETAILS_SK},
                ConditionExpression="attribute_exists(PK)",
            )
            return True
        except ClientError as e:
            if _is_condition_failure(e):
                return False
            logger.error(f"Error deleting blog {blog_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    def create_funding_entry(self, entry: FundingEntry) -> dict:
        """Store the entry and bump the running total in one transaction; neither lands alone."""
        item = _to_item(
            entry,
            PK=f"{FUND_PREFIX}{entry.id}",
            SK=DETAILS_SK,
            entity=FUND_ENTITY,
            sort_key=f"{entry.date.isoformat()}#{entry.id}",
        )
        try:
            self.table.meta.client.transact_write_items(TransactItems=[
                {
                    "Put": {
                        "TableName": self.table.name,
                        "Item": {key: _serializer.serialize(value) for key, value in item.items()},
                        "ConditionExpression": "attribute_not_exists(PK)",
                    }
                },
                {
                    "Update": {
                        "TableName": self.table.name,
                        "Key": {
                            "PK": {"S": TOTALS_PK},
                            "SK": {"S": FUNDING_SUM_SK}
                        },
                        "UpdateExpression": "SET #total = if_not_exists(#total, :start) + :inc",
                        "ExpressionAttributeNames": {
                            "#total": "TotalAmountCents"
                        },
                        "ExpressionAttributeValues": {
                            ":inc": _serializer.serialize(entry.amount_cents),
                            ":start": {"N": "0"}
                        },
                    }
                },
            ])
        except ClientError as e:
            logger.error(f"Error recording funding entry {entry.id}: {e}")
            raise
        return _from_item(item)

    def get_total_funding(self) -> int:
        response = self.table.get_item(Key={"PK": TOTALS_PK, "SK": FUNDING_SUM_SK})
        item = response.get("Item")

        if item and 'TotalAmountCents' in item:
            return int(item['TotalAmountCents'])

        return 0

    # ------------------------------------------------------------------
    # Districts and upazilas
    # ------------------------------------------------------------------

    def put_districts(self, districts: Iterable[District]) -> int:
        count = 0
        with self.table.batch_writer() as batch:
            for district in districts:
                batch.put_item(Item=_to_item(
                    district,
                    PK=f"{DISTRICT_PREFIX}{district.id}",
                    SK=DETAILS_SK,
                    entity=DISTRICT_ENTITY,
                    sort_key=_sortable_id(district.id),
                ))
                count += 1
        return count

    def put_upazilas(self, upazilas: Iterable[Upazila]) -> int:
        count = 0
        with self.table.batch_writer() as batch:
            for upazila in upazilas:
                batch.put_item(Item=_to_item(
                    upazila,
                    PK=f"{DISTRICT_PREFIX}{upazila.district_id}",
                    SK=f"{UPAZILA_PREFIX}{upazila.id}",
                    entity=UPAZILA_ENTITY,
                    sort_key=_sortable_id(upazila.id),
                ))
                count += 1
        return count

    def list_districts(self) -> list[dict]:
        return self._query_entity(DISTRICT_ENTITY)

    def list_upazilas(self, district_id: str | None = None) -> list[dict]:
        if district_id is None:
            return self._query_entity(UPAZILA_ENTITY)

        items = sorted(
            self._query_pages(
                KeyConditionExpression=Key("PK").eq(f"{DISTRICT_PREFIX}{district_id}") &
                                     Key("SK").begins_with(UPAZILA_PREFIX)
            ),
            key=lambda item: item["sort_key"],
        )
        return [_from_item(item) for item in items]
