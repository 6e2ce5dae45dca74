"""Tests for the car form client, run against the API through TestClient."""

from datetime import date

import httpx
import pytest

from dealership.client.api_client import ApiClient, ApiError
from dealership.client.car_form import (
    FORM_DEFAULTS,
    LIST_ROUTE,
    CarForm,
    apply_plate_mask,
    color_options,
    year_options,
)
from dealership.models import Car


@pytest.fixture
def api(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]
    return ApiClient(base_url="http://testserver/api/v1", token=token, client=client)


def fill(form, **fields):
    for name, value in fields.items():
        form.change_field(name, value)


VALID_FIELDS = {
    "brand": "Chevrolet",
    "model": "Onix",
    "color": "BRANCO",
    "year_manufacture": "2020",
    "imported": False,
    "plates": "bra2e19",
    "selling_price": "",
}


class TestPlateMask:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("abc1d23", "ABC-1D23"),
            ("ABC-1234", "ABC-1234"),
            ("ab", "AB"),
            ("abc", "ABC-"),
            ("", ""),
            ("123", ""),
            ("abc1k23", "ABC-123"),
            (None, ""),
        ],
    )
    def test_apply_plate_mask(self, raw, expected):
        assert apply_plate_mask(raw) == expected


class TestOptions:
    def test_color_options(self):
        options = color_options()
        assert len(options) == 13
        assert options[0] == {"value": "AMARELO", "label": "AMARELO"}

    def test_year_options_newest_first(self):
        years = year_options()
        assert years[0] == date.today().year
        assert years[-1] == 1960


class TestNewCar:
    def test_defaults(self, api):
        form = CarForm(api)
        assert form.car == FORM_DEFAULTS
        assert form.title == "New car"
        assert not form.form_modified

    def test_submit_invalid_stays_on_form(self, api):
        navigated = []
        form = CarForm(api, navigate=navigated.append)
        fill(form, brand="Fiat")

        assert form.submit() is False
        assert "plates" in form.input_errors
        assert "year_manufacture" in form.input_errors
        assert form.notifications[-1].severity == "error"
        assert navigated == []

    def test_submit_creates_car_and_navigates(self, api, db_session):
        navigated = []
        form = CarForm(api, navigate=navigated.append)
        fill(form, **VALID_FIELDS)

        assert form.submit() is True
        assert form.input_errors == {}
        assert navigated == [LIST_ROUTE]
        assert form.notifications[-1].message == "Car created successfully!"

        car = db_session.query(Car).filter(Car.plates == "BRA-2E19").one()
        assert car.selling_price is None
        assert car.year_manufacture == 2020

    def test_backend_errors_are_shown(self, api):
        first = CarForm(api)
        fill(first, **VALID_FIELDS)
        assert first.submit()

        duplicate = CarForm(api)
        fill(duplicate, **VALID_FIELDS)
        assert duplicate.submit() is False
        assert duplicate.input_errors == {"plates": "A car with these plates already exists."}
        assert duplicate.location is None


class TestEditCar:
    def test_load_and_update(self, api, client, auth_headers, car_payload, db_session):
        client.post("/api/v1/cars", headers=auth_headers, json=car_payload)
        car_id = db_session.query(Car).one().id

        form = CarForm(api, car_id=car_id)
        form.load()
        assert form.title == "Edit car"
        assert form.car["brand"] == "Volkswagen"
        assert form.car["selling_date"] == date(2023, 5, 10)
        assert form.car["customer_id"] == ""
        assert not form.form_modified

        form.change_field("selling_price", "52000")
        assert form.submit() is True
        assert form.notifications[-1].message == "Car updated successfully!"

        db_session.expire_all()
        assert db_session.get(Car, car_id).selling_price == 52000.0

    def test_load_missing_car_notifies(self, api):
        form = CarForm(api, car_id=999)
        form.load()
        assert form.car == FORM_DEFAULTS
        assert form.notifications[-1].severity == "error"

    def test_update_missing_car_notifies(self, api):
        form = CarForm(api, car_id=999)
        fill(form, **VALID_FIELDS)
        assert form.submit() is False
        assert form.notifications[-1].message == "Car not found"


class TestBack:
    def test_back_without_changes(self, api):
        form = CarForm(api, confirm=lambda message: pytest.fail("should not ask"))
        form.back()
        assert form.location == LIST_ROUTE

    def test_back_with_changes_asks_for_confirmation(self, api):
        asked = []

        def refuse(message):
            asked.append(message)
            return False

        form = CarForm(api, confirm=refuse)
        form.change_field("brand", "Ford")
        form.back()
        assert asked == ["Discard changes?"]
        assert form.location is None

    def test_unknown_field(self, api):
        with pytest.raises(ValueError):
            CarForm(api).change_field("engine", "V8")


class TestApiClient:
    def test_error_details_are_decoded(self):
        def handler(request):
            return httpx.Response(400, json={"errors": {"plates": "bad"}})

        api = ApiClient(base_url="http://api.test", client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(ApiError) as exc_info:
            api.post("/cars", json={})
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"errors": {"plates": "bad"}}

    def test_bearer_token_is_sent(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(204)

        api = ApiClient(base_url="http://api.test/api/v1/", token="abc", client=httpx.Client(transport=httpx.MockTransport(handler)))
        assert api.delete("/cars/1") is None
        assert seen == {"auth": "Bearer abc", "url": "http://api.test/api/v1/cars/1"}

    def test_unreachable_server(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        api = ApiClient(base_url="http://api.test", client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(ApiError) as exc_info:
            api.get("/cars")
        assert exc_info.value.status_code == 0

    def test_login_stores_token(self, client, user):
        api = ApiClient(base_url="http://testserver/api/v1", client=client)
        token = api.login("seller", "secret123")
        assert api.token == token
        assert api.get("/auth/users/me")["username"] == "seller"
