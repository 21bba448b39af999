"""End-to-end tests of the viewer blueprint through the Flask test client."""
import pytest

from portfolio_viewer.access_gate import ERROR_NOT_FOUND, ERROR_UNAVAILABLE
from portfolio_viewer.models import ERROR_INVALID_FORMAT


def submit_code(client, code):
    return client.post("/", data={"code": code}, follow_redirects=True)


def act(client, action, section=None):
    data = {"action": action}
    if section:
        data["section"] = section
    return client.post("/walkthrough", data=data, follow_redirects=True)


def text(response):
    return response.get_data(as_text=True)


def test_health(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_six_character_paths_are_always_deep_links(client, stub_repository, secondary_profile):
    stub_repository.profiles["health"] = {"code": "health", "portfolio": secondary_profile["portfolio"]}

    response = client.get("/health", follow_redirects=True)

    assert response.status_code == 200
    assert secondary_profile["portfolio"]["name"] in text(response)
    assert stub_repository.calls == ["health"]


def test_gate_renders_empty_form(client):
    response = client.get("/")

    body = text(response)
    assert response.status_code == 200
    assert "Portfolio Access" in body
    assert 'name="code"' in body
    assert 'role="alert"' not in body


def test_walkthrough_without_session_redirects_to_gate(client):
    response = client.get("/walkthrough")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_valid_code_opens_intro(client, primary_profile, stub_repository):
    response = submit_code(client, primary_profile["code"])

    body = text(response)
    assert response.status_code == 200
    assert primary_profile["portfolio"]["name"] in body
    assert primary_profile["portfolio"]["summary"] in body
    assert "Proceed &gt;" in body
    assert stub_repository.calls == [primary_profile["code"]]


def test_invalid_format_stays_on_gate_without_lookup(client, fixture_data, stub_repository):
    for code in fixture_data["access"]["invalidFormatCodes"]:
        response = submit_code(client, code)
        assert response.status_code == 200
        assert ERROR_INVALID_FORMAT in text(response)

    assert stub_repository.calls == []


def test_unknown_code_shows_not_found_and_keeps_input(client):
    response = submit_code(client, "zzz999")

    body = text(response)
    assert ERROR_NOT_FOUND in body
    assert 'value="zzz999"' in body
    assert client.get("/walkthrough").status_code == 302


def test_unavailable_service_message(client, stub_repository, primary_profile):
    stub_repository.unavailable = True

    response = submit_code(client, primary_profile["code"])

    assert ERROR_UNAVAILABLE in text(response)
    assert ERROR_NOT_FOUND not in text(response)


def test_deep_link_matches_form_submission(client, primary_profile):
    response = client.get(f"/{primary_profile['code'].lower()}", follow_redirects=True)

    assert response.status_code == 200
    assert primary_profile["portfolio"]["name"] in text(response)
    assert "Proceed &gt;" in text(response)


@pytest.mark.parametrize("code,status,message", [
    ("zzz999", 404, ERROR_NOT_FOUND),
    ("abc12", 400, ERROR_INVALID_FORMAT),
])
def test_deep_link_failures_render_gate_with_status(client, code, status, message):
    response = client.get(f"/{code}")

    assert response.status_code == status
    assert message in text(response)
    assert f'value="{code}"' in text(response)


def test_deep_link_unavailable_is_503(client, stub_repository, primary_profile):
    stub_repository.unavailable = True

    response = client.get(f"/{primary_profile['code']}")

    assert response.status_code == 503
    assert ERROR_UNAVAILABLE in text(response)


def test_gate_redirects_to_walkthrough_once_resolved(client, primary_profile):
    submit_code(client, primary_profile["code"])

    response = client.get("/")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/walkthrough")


def test_full_walkthrough(client, primary_profile):
    portfolio = primary_profile["portfolio"]
    submit_code(client, primary_profile["code"])

    menu = text(act(client, "proceed"))
    assert "Main Menu" in menu
    assert f"Experience ({len(portfolio['experience'])})" in menu
    assert f"Projects ({len(portfolio['project'])})" in menu
    assert f"Education ({len(portfolio['education'])})" in menu

    screen = text(act(client, "select", "experience"))
    assert portfolio["experience"][0]["company"] in screen
    assert f"1 of {len(portfolio['experience'])}" in screen
    assert "Return to Main Menu" in screen

    screen = text(act(client, "advance"))
    last = portfolio["experience"][-1]["company"]
    assert last in screen
    assert f"{len(portfolio['experience'])} of {len(portfolio['experience'])}" in screen
    assert "disabled>Next &gt;" in screen

    # Next at the last item changes nothing
    screen = text(act(client, "advance"))
    assert last in screen

    menu = text(act(client, "return"))
    assert "Main Menu" in menu
    assert "Experience (2) ✓" in menu

    screen = text(act(client, "select", "education"))
    assert portfolio["education"][0]["university"] in screen
    act(client, "return")

    screen = text(act(client, "advance"))
    assert "Certifications" in screen
    for certification in portfolio["certifications"]:
        assert certification in screen
    assert "Return to Main Menu" in screen

    menu = text(act(client, "return"))
    assert "Main Menu" in menu

    act(client, "advance")
    screen = text(act(client, "advance"))
    assert "Thanks for reviewing my portfolio walkthrough." in screen
    assert "Enter another code" in screen


def test_invalid_action_is_flashed_and_state_kept(client, primary_profile):
    submit_code(client, primary_profile["code"])

    screen = text(act(client, "return"))
    assert "That step is not available from here." in screen
    assert "Proceed &gt;" in screen

    screen = text(act(client, "fly"))
    assert "Unknown action" in screen

    act(client, "proceed")
    screen = text(act(client, "select", "certifications"))
    assert "That step is not available from here." in screen
    assert "Main Menu" in screen

    screen = text(act(client, "select", "nowhere"))
    assert "Unknown section" in screen


def test_switching_codes_does_not_leak_previous_portfolio(client, primary_profile, secondary_profile):
    submit_code(client, primary_profile["code"])
    act(client, "proceed")
    act(client, "select", "experience")

    screen = text(submit_code(client, secondary_profile["code"]))
    assert secondary_profile["portfolio"]["name"] in screen
    assert primary_profile["portfolio"]["name"] not in screen

    act(client, "proceed")
    screen = text(act(client, "select", "experience"))
    assert secondary_profile["portfolio"]["experience"][0]["company"] in screen
    for entry in primary_profile["portfolio"]["experience"]:
        assert entry["company"] not in screen


def test_failed_code_after_success_clears_portfolio(client, primary_profile):
    submit_code(client, primary_profile["code"])

    response = submit_code(client, "zzz999")

    assert ERROR_NOT_FOUND in text(response)
    assert client.get("/walkthrough").status_code == 302


def test_exit_returns_to_empty_gate(client, primary_profile):
    submit_code(client, primary_profile["code"])
    act(client, "proceed")
    act(client, "advance")
    act(client, "advance")

    response = client.post("/exit", follow_redirects=True)

    body = text(response)
    assert "Portfolio Access" in body
    assert 'value=""' in body
    assert client.get("/walkthrough").status_code == 302


def test_separate_browsers_have_separate_walkthroughs(app, primary_profile, secondary_profile):
    first = app.test_client()
    second = app.test_client()

    submit_code(first, primary_profile["code"])
    submit_code(second, secondary_profile["code"])
    act(first, "proceed")

    assert "Main Menu" in text(first.get("/walkthrough"))
    second_screen = text(second.get("/walkthrough"))
    assert secondary_profile["portfolio"]["name"] in second_screen
    assert "Proceed &gt;" in second_screen
