"""
Data models for catalog batch requests and responses
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

PRODUCT_ITEM = "PRODUCT_ITEM"


class Method:
    """Verbs accepted by the items_batch endpoint"""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def _is_empty(value: Any) -> bool:
    # numbers are never empty, inventory=0 is a real stock level
    if isinstance(value, (str, list, tuple, dict)):
        return not value
    return value is None


def _encode(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _omit_empty(obj, required: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """Dump a dataclass, dropping unset optional fields instead of emitting nulls"""
    out = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.name in required:
            out[f.name] = _encode(value)
            continue
        encoded = _encode(value)
        if _is_empty(value) or _is_empty(encoded):
            continue
        out[f.name] = encoded
    return out


@dataclass
class Media:
    """Image or video entry"""
    url: str
    tag: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _omit_empty(self, required=("url",))


@dataclass
class Applink:
    """Deep-link metadata per platform"""
    ios_url: Optional[str] = None
    ios_app_store_id: Optional[str] = None
    ios_app_name: Optional[str] = None
    iphone_url: Optional[str] = None
    iphone_app_store_id: Optional[str] = None
    iphone_app_name: Optional[str] = None
    ipad_url: Optional[str] = None
    ipad_app_store_id: Optional[str] = None
    ipad_app_name: Optional[str] = None
    android_url: Optional[str] = None
    android_package: Optional[str] = None
    android_class: Optional[str] = None
    android_app_name: Optional[str] = None
    windows_phone_url: Optional[str] = None
    windows_phone_app_id: Optional[str] = None
    windows_phone_app_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _omit_empty(self)


@dataclass
class Product:
    """A catalog product item"""
    id: str
    title: str
    description: str
    availability: str  # in stock, out of stock, available for order, discontinued
    condition: str  # new, refurbished, used
    price: str  # e.g. "9.99 USD"
    link: str
    image_link: Optional[str] = None  # Not required if image is provided
    image: List[Media] = field(default_factory=list)
    video: List[Media] = field(default_factory=list)
    additional_image_link: List[str] = field(default_factory=list)
    additional_variant_attribute: List[Dict[str, str]] = field(default_factory=list)
    age_group: Optional[str] = None  # newborn, infant, toddler, kids, adult
    applink: Optional[Applink] = None
    brand: Optional[str] = None
    color: Optional[str] = None
    custom_label_0: Optional[str] = None
    custom_label_1: Optional[str] = None
    custom_label_2: Optional[str] = None
    custom_label_3: Optional[str] = None
    custom_label_4: Optional[str] = None
    disabled_capabilities: List[str] = field(default_factory=list)
    gender: Optional[str] = None  # male, female, unisex
    google_product_category: Optional[str] = None
    gtin: Optional[str] = None
    inventory: Optional[int] = None
    item_group_id: Optional[str] = None
    manufacturer_part_number: Optional[str] = None
    mpn: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    product_tags: List[str] = field(default_factory=list)
    sale_price: Optional[str] = None  # Needed for the overlay feature in catalog ads
    sale_price_effective_date: Optional[str] = None
    shipping: Optional[str] = None
    size: Optional[str] = None

    REQUIRED_FIELDS = ("id", "title", "description", "availability", "condition", "price", "link")

    def to_dict(self) -> Dict[str, Any]:
        return _omit_empty(self, required=self.REQUIRED_FIELDS)


@dataclass
class Request:
    """A single operation within a batch"""
    method: str
    data: Product

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method, "data": self.data.to_dict()}


@dataclass(frozen=True)
class BatchRequest:
    """Envelope sent to the items_batch endpoint"""
    access_token: str
    requests: Tuple[Request, ...]
    item_type: str = PRODUCT_ITEM
    allow_upsert: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "item_type": self.item_type,
            "requests": [r.to_dict() for r in self.requests],
            "allow_upsert": self.allow_upsert,
        }


@dataclass(frozen=True)
class ErrorRecord:
    """Error or warning reported by the remote service"""
    message: str = ""
    type: str = ""
    code: int = 0
    fbtrace_id: str = ""

    def __str__(self) -> str:
        return f"{self.type} {self.code} {self.message}"


@dataclass(frozen=True)
class ValidationStatus:
    """Per-item validation block from a batch response"""
    retailer_id: str = ""
    errors: Tuple[ErrorRecord, ...] = ()
    warnings: Tuple[ErrorRecord, ...] = ()


@dataclass(frozen=True)
class BatchResponse:
    """Success-shaped response body"""
    handles: Tuple[str, ...] = ()
    validation_status: Tuple[ValidationStatus, ...] = ()


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a successful submission"""
    status_code: int
    handles: Tuple[str, ...] = ()
    validation_status: Tuple[ValidationStatus, ...] = ()

    @property
    def warnings(self) -> List[Tuple[str, ErrorRecord]]:
        return [(vs.retailer_id, w) for vs in self.validation_status for w in vs.warnings]
