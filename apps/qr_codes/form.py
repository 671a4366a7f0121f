"""State machine behind the QR code edit page.

The controller owns the editable fields and reconciles server responses into
field state. Rendering is left to the caller; notifications, navigation,
the product picker and the transport to the detail route are injected as
plain callables so the controller can run without a browser.

Server responses have one of three shapes::

    {"qrCode": {...}}              saved record
    {"errors": {field: message}}   validation failure
    {"deletedId": "12"}            record removed
"""
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from .records import DESTINATION_PRODUCT, FORM_FIELDS, Draft, Existing, validate_qr_code

CLEAN = "clean"
DIRTY = "dirty"
SUBMITTING = "submitting"
ERROR = "error"
DELETING = "deleting"

LISTING_PATH = "/app"
ERROR_BANNER_TITLE = "There were errors with your submission"
SAVED_MESSAGE = "QR code saved"
DELETED_MESSAGE = "QR code deleted"


def _frozen(mapping):
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class SelectedProduct:
    title: str
    handle: str
    image_url: str = None
    image_alt: str = ""


@dataclass(frozen=True)
class FormState:
    ref: object
    status: str
    fields: MappingProxyType
    saved_fields: MappingProxyType
    errors: MappingProxyType = field(default_factory=lambda: _frozen({}))
    selected_product: SelectedProduct = None
    record: MappingProxyType = field(default_factory=lambda: _frozen({}))
    deleted_id: str = None


@dataclass(frozen=True)
class Result:
    value: object = None
    errors: object = None

    @property
    def ok(self):
        return self.errors is None


def fields_from_record(record):
    return _frozen(
        {
            "title": record.get("title") or "",
            "productId": record.get("productId") or "",
            "productVariantId": record.get("productVariantId") or "",
            "productHandle": record.get("productHandle") or "",
            "destination": record.get("destination") or DESTINATION_PRODUCT,
        }
    )


def _selected_product(record):
    if not record.get("productId"):
        return None
    return SelectedProduct(
        title=record.get("productTitle") or "",
        handle=record.get("productHandle") or "",
        image_url=record.get("productImage"),
        image_alt=record.get("productAlt") or "",
    )


def initial_state(ref, loader_data):
    record = loader_data.get("qrCode") or loader_data
    fields = fields_from_record(record)
    return FormState(
        ref=ref,
        status=CLEAN,
        fields=fields,
        saved_fields=fields,
        selected_product=_selected_product(record),
        record=_frozen(record),
    )


def change_field(state, name, value):
    if name not in state.fields:
        raise KeyError(name)
    fields = dict(state.fields)
    fields[name] = value
    return replace(state, fields=_frozen(fields), status=DIRTY)


def apply_product_selection(state, products):
    """Apply a resource picker result; a dismissed picker yields no products."""
    if not products:
        return state

    product = products[0]
    variants = product.get("variants") or []
    images = product.get("images") or []

    state = change_field(state, "productId", product["id"])
    state = change_field(state, "productVariantId", variants[0]["id"] if variants else "")
    state = change_field(state, "productHandle", product.get("handle") or "")

    image = images[0] if images else {}
    selected = SelectedProduct(
        title=product.get("title") or "",
        handle=product.get("handle") or "",
        image_url=image.get("originalSrc") or image.get("url"),
        image_alt=image.get("altText") or "",
    )
    return replace(state, selected_product=selected)


def reduce(state, response):
    if "qrCode" in response:
        record = response["qrCode"]
        fields = fields_from_record(record)
        return replace(
            state,
            ref=Existing(int(record["id"])),
            status=CLEAN,
            fields=fields,
            saved_fields=fields,
            errors=_frozen({}),
            record=_frozen({**state.record, **record}),
        )

    if "errors" in response:
        return replace(state, status=ERROR, errors=_frozen(response["errors"]))

    if "deletedId" in response:
        return replace(state, status=DELETING, deleted_id=str(response["deletedId"]))

    raise ValueError(f"Unexpected response: {response!r}")


class QRCodeFormController:
    def __init__(self, ref, loader_data, transport, notify, navigate, pick_product):
        self.started_as_draft = isinstance(ref, Draft)
        self.state = initial_state(ref, loader_data)
        self.transport = transport
        self.notify = notify
        self.navigate = navigate
        self.pick_product = pick_product

    @property
    def is_new(self):
        return isinstance(self.state.ref, Draft)

    @property
    def heading(self):
        return "Create QR code" if self.is_new else "Edit QR code"

    @property
    def primary_action_label(self):
        return "Save"

    @property
    def can_delete(self):
        return not self.is_new

    @property
    def is_deleting(self):
        return self.state.deleted_id is not None and self.state.deleted_id == self.state.ref.route_id

    def field_error(self, name):
        return self.state.errors.get(name)

    def error_banner(self):
        if not self.state.errors:
            return None
        return {"title": ERROR_BANNER_TITLE, "messages": list(self.state.errors.values())}

    def change(self, name, value):
        self.state = change_field(self.state, name, value)

    def select_product(self):
        products = self.pick_product()
        new_state = apply_product_selection(self.state, products)
        changed = new_state is not self.state
        self.state = new_state
        return changed

    def submit(self, values=None):
        for name, value in (values or {}).items():
            self.change(name, value)

        errors = validate_qr_code(self.state.fields)
        if errors:
            self.state = reduce(self.state, {"errors": errors})
            return Result(errors=errors)

        self.state = replace(self.state, status=SUBMITTING)
        response = self.transport({name: self.state.fields[name] for name in FORM_FIELDS})
        self.state = reduce(self.state, response)

        if "qrCode" not in response:
            return Result(errors=dict(response.get("errors") or {}))

        record = response["qrCode"]
        self.notify(SAVED_MESSAGE)
        if self.started_as_draft:
            self.started_as_draft = False
            self.navigate(f"{LISTING_PATH}/qrcodes/{record['id']}")
        return Result(value=record)

    def delete(self):
        if self.is_new:
            return Result(errors={"id": "An unsaved QR code cannot be deleted"})

        self.state = replace(self.state, status=DELETING)
        response = self.transport({"action": "delete"})
        self.state = reduce(self.state, response)

        if "deletedId" not in response:
            return Result(errors=dict(response.get("errors") or {}))

        self.notify(DELETED_MESSAGE)
        self.navigate(LISTING_PATH)
        return Result(value=self.state.deleted_id)
