import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from dealership.client.api_client import ApiClient, ApiError
from dealership.schemas.car_schemas import COLORS, MIN_YEAR, safe_parse_car

logger = logging.getLogger(__name__)

FORM_DEFAULTS: dict[str, Any] = {
    "brand": "",
    "model": "",
    "color": "",
    "year_manufacture": "",
    "imported": False,
    "plates": "",
    "selling_date": None,
    "selling_price": "",
    "customer_id": "",
}

LIST_ROUTE = "/cars"

# Brazilian plates, old (ABC-1234) and Mercosul (ABC-1D23) formats
PLATE_MASK = "AAA-9$99"
PLATE_MASK_CHARS = {
    "9": re.compile(r"[0-9]"),
    "$": re.compile(r"[0-9A-J]"),
    "A": re.compile(r"[A-Z]"),
}


def apply_plate_mask(raw: Optional[str]) -> str:
    """Fit typed characters into PLATE_MASK, skipping the ones a slot rejects.

    Stops at the first slot nothing fits, so partial input stays short.
    """
    if raw is None:
        return ""
    chars = [c for c in str(raw).upper() if c != "-" and not c.isspace()]
    result = []
    pos = 0
    for slot in PLATE_MASK:
        pattern = PLATE_MASK_CHARS.get(slot)
        if pattern is None:
            result.append(slot)
            continue
        while pos < len(chars) and not pattern.fullmatch(chars[pos]):
            pos += 1
        if pos == len(chars):
            break
        result.append(chars[pos])
        pos += 1
    return "".join(result)


def color_options() -> list[dict[str, str]]:
    return [{"value": color, "label": color} for color in COLORS]


def year_options() -> list[int]:
    """Years offered by the form, newest first."""
    return list(range(date.today().year, MIN_YEAR - 1, -1))


@dataclass
class Notification:
    message: str
    severity: str


class CarForm:
    """
    Create/edit form for a single car.

    Mirrors what the UI does: fields are edited locally, validated with the
    same schema the backend uses, then POSTed (new car) or PUT (existing car)
    and the user is sent back to the car list.
    """

    def __init__(
        self,
        api: ApiClient,
        car_id: Optional[int] = None,
        navigate: Optional[Callable[[str], None]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        self.api = api
        self.car_id = car_id
        self._navigate_cb = navigate
        self._confirm = confirm or (lambda message: True)

        self.car: dict[str, Any] = dict(FORM_DEFAULTS)
        self.form_modified = False
        self.input_errors: dict[str, str] = {}
        self.notifications: list[Notification] = []
        self.location: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.car_id is not None

    @property
    def title(self) -> str:
        return "Edit car" if self.is_edit else "New car"

    @property
    def submit_label(self) -> str:
        return "Save changes" if self.is_edit else "Create"

    def notify(self, message: str, severity: str = "success") -> None:
        self.notifications.append(Notification(message, severity))

    def navigate(self, route: str) -> None:
        self.location = route
        if self._navigate_cb:
            self._navigate_cb(route)

    def load(self) -> None:
        """Fill the form with the stored car when editing."""
        if not self.is_edit:
            return
        try:
            result = self.api.get(f"/cars/{self.car_id}")
        except ApiError as e:
            logger.error(f"Failed to load car {self.car_id}: {e.message}")
            self.notify("Error loading car data.", "error")
            return

        car = dict(FORM_DEFAULTS)
        for field in FORM_DEFAULTS:
            if result.get(field) is not None:
                car[field] = result[field]
        if car["selling_date"]:
            car["selling_date"] = date.fromisoformat(car["selling_date"])
        self.car = car

    def change_field(self, name: str, value: Any) -> None:
        if name not in FORM_DEFAULTS:
            raise ValueError(f"Unknown car form field: {name}")
        if name == "plates":
            value = apply_plate_mask(value)
        self.car[name] = value
        self.form_modified = True

    def submit(self) -> bool:
        """Validate and save. Returns True when the car was stored."""
        parsed, errors = safe_parse_car(self.car)
        if errors:
            self.input_errors = errors
            self.notify("Fix the errors before saving.", "error")
            return False

        self.input_errors = {}
        data = parsed.model_dump(mode="json")
        try:
            if self.is_edit:
                self.api.put(f"/cars/{self.car_id}", json=data)
                self.notify("Car updated successfully!", "success")
            else:
                self.api.post("/cars", json=data)
                self.notify("Car created successfully!", "success")
        except ApiError as e:
            backend_errors = e.details.get("errors") if isinstance(e.details, dict) else None
            if backend_errors:
                self.input_errors = backend_errors
                self.notify("Fix the errors before saving.", "error")
            else:
                self.notify(e.message or "Error saving.", "error")
            return False

        self.navigate(LIST_ROUTE)
        return True

    def back(self) -> None:
        """Leave the form, asking first when there are unsaved changes."""
        if self.form_modified and not self._confirm("Discard changes?"):
            return
        self.navigate(LIST_ROUTE)
