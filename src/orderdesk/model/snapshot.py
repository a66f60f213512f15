"""Snapshot models for data fetched from the order, picklist and dealer services.

These mirror the external services' JSON contracts and are never mutated by
this context: every action refetches instead of patching a snapshot. Fields
accept both the services' camelCase names and snake_case names.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN_DEALER = "Unknown Dealer"


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class DealerAssignment(_Snapshot):
    """An explicit per-SKU dealer assignment made by an admin."""

    dealer_id: Any = Field(default=None, validation_alias=AliasChoices("dealerId", "dealer_id"))


class LineItem(_Snapshot):
    """One SKU entry within an order."""

    sku: str | None = None
    product_id: str | None = Field(default=None, validation_alias=AliasChoices("productId", "product_id"))
    product_name: str | None = Field(default=None, validation_alias=AliasChoices("productName", "product_name"))
    quantity: int | None = None
    mrp: float | None = None
    gst: float | str | None = None
    total_price: float | None = Field(default=None, validation_alias=AliasChoices("totalPrice", "total_price"))

    # Legacy single reference: string, number, populated object or placeholder
    dealer_id: Any = Field(default=None, validation_alias=AliasChoices("dealerId", "dealer_id"))
    dealer_mapped: list[DealerAssignment] = Field(
        default_factory=list,
        validation_alias=AliasChoices("dealerMapped", "dealer_mapped"),
    )

    picklist_generated: bool = Field(
        default=False,
        validation_alias=AliasChoices("picklistGenerated", "piclistGenerated", "picklist_generated"),
    )
    inspection_started: bool = Field(
        default=False,
        validation_alias=AliasChoices("inspectionStarted", "inspection_started"),
    )
    inspection_completed: bool = Field(
        default=False,
        validation_alias=AliasChoices("inspectionCompleted", "inspection_completed"),
    )
    mark_as_packed: bool = Field(
        default=False,
        validation_alias=AliasChoices("markAsPacked", "mark_as_packed"),
    )
    tracking_status: str | None = Field(
        default=None,
        validation_alias=AliasChoices("trackingStatus", "tracking_status"),
    )

    @model_validator(mode="before")
    @classmethod
    def lift_tracking_info(cls, data: Any) -> Any:
        # The order service nests the legacy label as tracking_info.status
        if isinstance(data, dict) and not data.get("trackingStatus") and not data.get("tracking_status"):
            info = data.get("tracking_info")
            if isinstance(info, dict) and info.get("status"):
                data = {**data, "tracking_status": info["status"]}
        return data

    @field_validator(
        "picklist_generated",
        "inspection_started",
        "inspection_completed",
        "mark_as_packed",
        mode="before",
    )
    @classmethod
    def absent_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("dealer_mapped", mode="before")
    @classmethod
    def absent_mapping_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Order(_Snapshot):
    order_id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "orderId", "order_id"))
    status: str = ""
    customer_details: dict = Field(
        default_factory=dict,
        validation_alias=AliasChoices("customerDetails", "customer_details"),
    )
    items: list[LineItem] = Field(default_factory=list, validation_alias=AliasChoices("skus", "items"))

    @field_validator("status", mode="before")
    @classmethod
    def absent_status_is_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("customer_details", "items", mode="before")
    @classmethod
    def absent_collection_is_empty(cls, value: Any, info) -> Any:
        if value is None:
            return {} if info.field_name == "customer_details" else []
        return value


class SkuEntry(_Snapshot):
    sku: str
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def absent_quantity_is_one(cls, value: Any) -> Any:
        return 1 if value is None else value


class Picklist(_Snapshot):
    """A dealer-and-staff-scoped work order for one order."""

    picklist_id: str = Field(validation_alias=AliasChoices("picklistId", "_id", "picklist_id"))
    order_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("linkedOrderId", "orderId", "order_id"),
    )
    dealer_id: Any = Field(default=None, validation_alias=AliasChoices("dealerId", "dealer_id"))
    fulfilment_staff: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fulfilmentStaff", "fulfilment_staff"),
    )
    sku_list: list[SkuEntry] = Field(default_factory=list, validation_alias=AliasChoices("skuList", "sku_list"))
    # Applies to the whole picklist, not per SKU
    scan_status: str | None = Field(default=None, validation_alias=AliasChoices("scanStatus", "scan_status"))

    @field_validator("sku_list", mode="before")
    @classmethod
    def drop_blank_skus(cls, value: Any) -> Any:
        if value is None:
            return []
        return [entry for entry in value if not isinstance(entry, dict) or entry.get("sku")]


class Dealer(_Snapshot):
    dealer_id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "dealerId", "dealer_id"))
    trade_name: str = ""
    legal_name: str = ""

    @field_validator("trade_name", "legal_name", mode="before")
    @classmethod
    def absent_name_is_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def display_name(self) -> str:
        return self.trade_name or self.legal_name or UNKNOWN_DEALER


class Employee(_Snapshot):
    employee_id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "employeeId", "employee_id"))
    user_id: str | None = Field(default=None, validation_alias=AliasChoices("user_id", "userId"))
    role: str | None = None
    name: str | None = None
