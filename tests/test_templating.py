"""
Tests for {{variable}} substitution and the email layouts.
"""
import uuid

import pytest

from relateai.config import settings
from relateai.models.account import Account
from relateai.models.contact import Contact
from relateai.models.user import User
from relateai.services.email_service import generate_template
from relateai.services.templating import (
    UnresolvedVariablesError,
    contact_variables,
    extract_variables,
    render_preview,
    render_strict,
)


def test_extract_variables_in_order_without_duplicates():
    content = "Hi {{firstName}}, how is {{ company }}? Bye {{firstName}}"
    assert extract_variables(content) == ["firstName", "company"]


def test_extract_variables_empty():
    assert extract_variables(None) == []
    assert extract_variables("No placeholders here") == []


def test_preview_marks_missing_values():
    rendered = render_preview("Hello {{name}}", "Hi {{name}}", {})

    assert rendered.subject == "Hello [name]"
    assert "[name]" in rendered.content


def test_preview_substitutes_values():
    rendered = render_preview("Hello {{name}}", "Hi {{name}}", {"name": "Jo"})

    assert rendered.subject == "Hello Jo"
    assert "Hi Jo" in rendered.content
    assert "Hi Jo" in rendered.html
    assert rendered.text == "Hi Jo"


def test_preview_to_dict():
    preview = render_preview("S", "C").to_dict()
    assert set(preview) == {"subject", "content", "html", "text"}


def test_strict_render_raises_on_missing():
    with pytest.raises(UnresolvedVariablesError) as exc_info:
        render_strict("Hello {{name}}", "About {{company}} and {{name}}", {"company": "Acme"})

    assert exc_info.value.missing == ["name"]
    assert "name" in str(exc_info.value)


def test_strict_render_treats_none_as_missing():
    with pytest.raises(UnresolvedVariablesError):
        render_strict("", "Hi {{title}}", {"title": None})


def test_strict_render_succeeds():
    rendered = render_strict("Hello {{name}}", "Hi {{name}}", {"name": "Jo"})
    assert rendered.subject == "Hello Jo"
    assert rendered.content == "Hi Jo"


def test_contact_variables():
    user = User(email="rep@relateai.com", password_hash="x", first_name="Riley", last_name="Rep", company="RelateAI")
    account = Account(owner_id=user.id, name="Acme Corp", industry="Software", website="https://acme.com")
    contact = Contact(
        user_id=user.id,
        account_id=uuid.uuid4(),
        first_name="Jane",
        last_name="Smith",
        email="jane@acme.com",
        company="Acme Corp",
    )

    values = contact_variables(contact, account, user)

    assert values["firstName"] == "Jane"
    assert values["first_name"] == "Jane"
    assert values["fullName"] == "Jane Smith"
    assert values["title"] == ""
    assert values["accountName"] == "Acme Corp"
    assert values["senderName"] == "Riley Rep"
    assert values["senderCompany"] == "RelateAI"


def test_basic_layout():
    layout = generate_template("basic", {"subject": "Hi there", "content": "<p>Body</p>"})

    assert "Hi there" in layout["html"]
    assert "<p>Body</p>" in layout["html"]
    assert settings.EMAIL_SIGNATURE in layout["html"]
    assert layout["text"] == "<p>Body</p>"


def test_follow_up_layout():
    layout = generate_template("follow_up", {"content": "Checking in"})

    assert "Following up" in layout["html"]
    assert layout["text"].startswith("Following up")


def test_unknown_layout_falls_back():
    layout = generate_template("nope", {"content": "Plain"})
    assert layout == {"html": "<div>Plain</div>", "text": "Plain"}
