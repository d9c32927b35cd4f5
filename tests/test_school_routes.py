"""Route tests: list, search, add form and live validation through the Flask test client."""

import io

from school_directory import create_app
from school_directory.services.school_api import ServerRejection, TransportError
from tests.fakes import PNG_BYTES, TestingConfig, make_school


def form_data(**overrides):
    data = {
        "name": "Green Valley High",
        "address": "12 Orchard Lane, Springfield",
        "city": "Austin",
        "state": "Texas",
        "contact": "5125550100",
        "email_id": "office@greenvalley.edu",
        "image": (io.BytesIO(PNG_BYTES), "campus.png", "image/png"),
    }
    data.update(overrides)
    return {key: value for key, value in data.items() if value is not None}


def post_school(client, **overrides):
    return client.post("/schools/add", data=form_data(**overrides), content_type="multipart/form-data")


# --- Navigation ---------------------------------------------------------------------

def test_root_redirects_to_school_list(client):
    res = client.get("/")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/schools/")


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_unknown_page_renders_404(client):
    res = client.get("/nowhere")
    assert res.status_code == 404
    assert b"Page not found" in res.data


# --- List and search ------------------------------------------------------------------

def test_list_shows_all_schools_and_stats(client, fake_api):
    res = client.get("/schools/")
    html = res.get_data(as_text=True)

    assert res.status_code == 200
    assert fake_api.fetch_calls == 1
    assert "Green Valley" in html
    assert "Blue Ridge" in html
    assert "2 schools found" in html
    assert "Total Schools" in html
    assert "http://schools-api.internal/uploads/green-valley.png" in html


def test_cards_show_school_id(client):
    html = client.get("/schools/").get_data(as_text=True)

    assert "ID: 1" in html
    assert "ID: 2" in html


def test_card_without_id_has_no_id_footer(client, fake_api):
    fake_api.schools = [make_school(id=None)]
    html = client.get("/schools/").get_data(as_text=True)

    assert "Green Valley" in html
    assert "ID:" not in html


def test_search_filters_by_city(client):
    html = client.get("/schools/?search_query=AUSTIN").get_data(as_text=True)

    assert "Green Valley" in html
    assert "Blue Ridge" not in html
    assert "1 school found" in html


def test_search_without_matches(client):
    html = client.get("/schools/?search_query=zzz").get_data(as_text=True)

    assert "No schools match your search" in html
    assert "Clear Search" in html


def test_empty_directory(client, fake_api):
    fake_api.schools = []
    html = client.get("/schools/").get_data(as_text=True)

    assert "No schools found" in html
    assert "Total Schools" not in html


def test_fetch_failure_shows_message_and_try_again(client, failing_fetch):
    res = client.get("/schools/")
    html = res.get_data(as_text=True)

    assert res.status_code == 200
    assert "Failed to fetch schools" in html
    assert "Try Again" in html


def test_try_again_repeats_fetch(client, failing_fetch):
    client.get("/schools/")
    failing_fetch.fetch_error = None

    html = client.get("/schools/").get_data(as_text=True)

    assert failing_fetch.fetch_calls == 2
    assert "Green Valley" in html


# --- Add form ---------------------------------------------------------------------------

def test_add_form_renders_empty(client):
    res = client.get("/schools/add")
    html = res.get_data(as_text=True)

    assert res.status_code == 200
    assert "Add New School" in html
    assert "is required" not in html


def test_invalid_submission_shows_errors_without_api_call(client, fake_api):
    res = post_school(client, contact="12345", image=None)
    html = res.get_data(as_text=True)

    assert res.status_code == 200
    assert fake_api.created == []
    assert "Contact must be exactly 10 digits" in html
    assert "School image is required" in html
    # Prior input is kept
    assert 'value="Green Valley High"' in html


def test_unsupported_image_type(client, fake_api):
    res = post_school(client, image=(io.BytesIO(b"%PDF-1.4"), "brochure.pdf", "application/pdf"))

    assert fake_api.created == []
    assert "Only .jpg, .jpeg, .png and .gif formats are supported" in res.get_data(as_text=True)


def test_successful_submission(client, fake_api):
    res = post_school(client)
    html = res.get_data(as_text=True)

    assert res.status_code == 200
    assert len(fake_api.created) == 1
    sent = fake_api.created[0]
    assert sent.name == "Green Valley High"
    assert sent.image.filename == "campus.png"
    assert sent.image.content_type == "image/png"
    assert sent.image.data == PNG_BYTES

    assert "School added successfully!" in html
    assert 'value="Green Valley High"' not in html
    assert 'http-equiv="refresh" content="2;url=/schools/"' in html


def test_server_rejection_keeps_input(client, fake_api):
    fake_api.create_error = ServerRejection("Duplicate school", 409)

    html = post_school(client).get_data(as_text=True)

    assert "Duplicate school" in html
    assert 'value="Green Valley High"' in html
    assert "http-equiv" not in html


def test_network_failure_message(client, fake_api):
    fake_api.create_error = TransportError("refused")

    html = post_school(client).get_data(as_text=True)

    assert "Network error. Please check your connection and try again." in html
    assert 'value="5125550100"' in html


def test_reset_returns_to_empty_form(client):
    res = client.post("/schools/add/reset", data=form_data(), content_type="multipart/form-data")

    assert res.status_code == 302
    assert res.headers["Location"].endswith("/schools/add")


def test_oversized_upload_reports_size_message(fake_api):
    class SmallUploadConfig(TestingConfig):
        MAX_CONTENT_LENGTH = 1024

    app = create_app(SmallUploadConfig)
    app.extensions["school_api"] = fake_api

    res = app.test_client().post(
        "/schools/add",
        data=form_data(image=(io.BytesIO(b"\x00" * 4096), "huge.png", "image/png")),
        content_type="multipart/form-data",
    )

    assert res.status_code == 413
    assert "File size should be less than 5MB" in res.get_data(as_text=True)
    assert fake_api.created == []


# --- Live validation -------------------------------------------------------------------

def test_validate_reports_only_touched_fields(client):
    res = client.post("/schools/validate", data={"contact": "12345", "touched": ["contact"]})
    body = res.get_json()

    assert body == {"valid": False, "errors": {"contact": "Contact must be exactly 10 digits"}}


def test_validate_full_form_is_valid(client):
    data = form_data(touched=["name", "address", "city", "state", "contact", "email_id", "image"])
    res = client.post("/schools/validate", data=data, content_type="multipart/form-data")

    assert res.get_json() == {"valid": True, "errors": {}}


def test_validate_ignores_unknown_touched_fields(client):
    res = client.post("/schools/validate", data={"touched": ["website"]})

    assert res.get_json()["errors"] == {}


def test_validate_image_alone_reports_only_image_error(client):
    data = {
        "image": (io.BytesIO(b"%PDF-1.4"), "brochure.pdf", "application/pdf"),
        "touched": ["image"],
    }
    res = client.post("/schools/validate", data=data, content_type="multipart/form-data")

    assert res.get_json()["errors"] == {"image": "Only .jpg, .jpeg, .png and .gif formats are supported"}


def test_validate_text_fields_without_image_upload(client):
    data = {"name": "Green Valley High", "contact": "12345", "touched": ["name", "contact"]}
    res = client.post("/schools/validate", data=data, content_type="multipart/form-data")

    assert res.get_json()["errors"] == {"contact": "Contact must be exactly 10 digits"}


def test_live_validation_script_uploads_image_only_on_image_change(client):
    script = client.get("/static/js/add_school.js").get_data(as_text=True)

    assert "new FormData(form)" not in script
    assert "event.target === imageInput" in script
    assert "input:not([type=file])" in script
