"""
Tests for guest administration: codes, spreadsheet import/export and summary
"""

import asyncio
import io

import pandas as pd
import pytest

from wedding_rsvp.models import SaveTheDateView
from wedding_rsvp.services import guest_service
from wedding_rsvp.services.excel_service import ExcelService
from wedding_rsvp.services.exceptions import (
    CodeGenerationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from wedding_rsvp.services.guest_service import (
    CODE_ALPHABET,
    CODE_LENGTH,
    GuestService,
    generate_code,
    generate_unique_code,
    is_valid_code,
)
from wedding_rsvp.services.notifications import WEEKLY_SUMMARY
from wedding_rsvp.services.qr_service import QRService

from conftest import RecordingNotifier

@pytest.fixture
def service(repo, notifier):
    return GuestService(repo, notifier)

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

# Codes

def test_generated_codes_use_unambiguous_alphabet():
    for _ in range(200):
        code = generate_code()
        assert len(code) == CODE_LENGTH
        assert set(code) <= set(CODE_ALPHABET)
        assert not set(code) & set("O0I1L")

@pytest.mark.parametrize("code,valid", [
    ("ABC234", True),
    ("abc234", False),
    ("ABC10O", False),
    ("ABCDE", False),
    ("ABCDEFG", False),
])
def test_is_valid_code(code, valid):
    assert is_valid_code(code) is valid

def test_generate_unique_code_skips_taken(monkeypatch):
    codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    monkeypatch.setattr(guest_service, "generate_code", lambda: next(codes))
    assert generate_unique_code(lambda c: c == "AAAAAA") == "BBBBBB"

def test_generate_unique_code_gives_up():
    with pytest.raises(CodeGenerationError):
        generate_unique_code(lambda c: True)

# Guest creation

def test_create_guest_assigns_code(service, repo):
    guest = service.create_guest("Eddie Lee", plus_one_allowed=True, group_side="Groom")
    assert is_valid_code(guest.code)
    assert guest.group_side == "Groom"
    assert guest.attending is None
    assert repo.find_by_code(guest.code).name == "Eddie Lee"

def test_create_guest_with_explicit_code(service):
    guest = service.create_guest("Eddie Lee", code=" abc234 ")
    assert guest.code == "ABC234"

def test_create_guest_code_conflict(service):
    service.create_guest("Eddie Lee", code="ABC234")
    with pytest.raises(ConflictError):
        service.create_guest("Someone Else", code="ABC234")

def test_create_guest_invalid_code(service):
    with pytest.raises(ValidationError):
        service.create_guest("Eddie Lee", code="OOOOOO")

def test_create_guest_requires_name(service):
    with pytest.raises(ValidationError):
        service.create_guest("   ")

# Save-the-date

def test_save_the_date_records_view(service, db_session, make_guest):
    guest = make_guest(name="Carrie Brown", code="STD234", plus_one_allowed=True)

    info = service.get_save_the_date("std234")
    assert info.name == "Carrie Brown"
    assert info.plus_one_allowed is True
    assert info.rsvp_url.endswith("/rsvp")

    service.get_save_the_date("STD234")
    views = db_session.query(SaveTheDateView).filter(SaveTheDateView.guest_id == guest.id).count()
    assert views == 2

def test_save_the_date_unknown_code(service, make_guest):
    make_guest(code="STD234")
    with pytest.raises(NotFoundError, match="Invitation not found"):
        service.get_save_the_date("XYZ789")

def test_qr_code_is_png():
    image = QRService.generate_guest_qr("ABC234")
    assert image.startswith(b"\x89PNG")

# Summary

def test_summarize(service, repo, make_guest):
    alice = make_guest(name="Alice", plus_one_allowed=True)
    bob = make_guest(name="Bob")
    make_guest(name="Carol", plus_one_allowed=True)

    repo.update(alice.id, {"address_line1": "1 Main St", "attending": True,
                           "rsvp_submitted_at": alice.created_at})
    repo.update(bob.id, {"address_freeform": "Somewhere 1", "attending": False,
                         "rsvp_submitted_at": bob.created_at})

    summary = service.summarize()
    assert summary.total == 3
    assert summary.with_address == 2
    assert summary.without_address == 1
    assert summary.without_address_names == ["Carol"]
    assert summary.max_headcount == 3
    assert summary.rsvp_yes == 1
    assert summary.rsvp_no == 1
    assert summary.rsvp_pending == 1

def test_send_summary(service, notifier, make_guest):
    make_guest(name="Alice")
    assert asyncio.run(service.send_summary()) is True
    event, payload = notifier.sent[0]
    assert event == WEEKLY_SUMMARY
    assert payload["total"] == 1

def test_send_summary_failure(repo, make_guest):
    make_guest(name="Alice")
    service = GuestService(repo, RecordingNotifier(fail=True))
    assert asyncio.run(service.send_summary()) is False

# Spreadsheets

def test_validate_excel_structure_valid():
    df = pd.DataFrame({'Name': ['John Doe'], 'Plus One': ['TRUE'], 'Email': ['john@example.com']})
    valid, errors = ExcelService.validate_excel_structure(df)
    assert valid
    assert len(errors) == 0

def test_validate_excel_structure_missing_columns():
    df = pd.DataFrame({'Name': ['John Doe']})
    valid, errors = ExcelService.validate_excel_structure(df)
    assert not valid
    assert 'missing required columns' in errors[0].lower()
    assert 'plus one' in errors[0]

def test_validate_excel_structure_case_insensitive():
    df = pd.DataFrame({' NAME ': ['John Doe'], 'plus ONE': ['no']})
    valid, _ = ExcelService.validate_excel_structure(df)
    assert valid

def test_validate_data_constraints():
    df = pd.DataFrame({
        'Name': ['A', 'B', 'C', 'D', ''],
        'Plus One': ['yes', 'no', 'no', 'no', 'no'],
        'Group Side': ['Bride', 'uncle', 'groom', '', ''],
        'Code': ['ABC234', 'ABC234', 'XYZ789', 'OOPS', 'BAD'],
    })
    valid, errors = ExcelService.validate_data_constraints(df)
    assert not valid
    assert any("Row 3: group side" in e for e in errors)
    assert any("Row 3: duplicate code 'ABC234'" in e for e in errors)
    assert not any("Row 4" in e for e in errors)
    assert any("Row 5: invalid code 'OOPS'" in e for e in errors)
    # rows without a name are skipped
    assert not any("BAD" in e for e in errors)

@pytest.mark.parametrize("value,expected", [
    ("TRUE", True), ("yes", True), ("x", True), ("1", True),
    ("FALSE", False), ("no", False), ("", False),
])
def test_parse_plus_one(value, expected):
    assert ExcelService.parse_plus_one(value) is expected

def test_process_excel_upload(service, repo):
    content = create_test_excel({
        'Name': ['Carrie Brown', 'Eddie Lee', None],
        'Plus One': ['TRUE', 'FALSE', None],
        'Email': ['carrie@example.com', None, None],
        'Group Side': ['bride', 'Groom', None],
        'Code': ['CAR234', None, None],
    })

    success, errors, count = ExcelService.process_excel_upload(content, service)
    assert success, errors
    assert count == 2

    carrie = repo.find_by_code("CAR234")
    assert carrie.name == "Carrie Brown"
    assert carrie.plus_one_allowed is True
    assert carrie.email == "carrie@example.com"
    assert carrie.group_side == "Bride"

    eddie = repo.find_by_name("eddie lee")
    assert eddie.plus_one_allowed is False
    assert is_valid_code(eddie.code)

def test_process_excel_upload_rejects_before_writing(service, repo):
    content = create_test_excel({
        'Name': ['Carrie Brown', 'Eddie Lee'],
        'Plus One': ['TRUE', 'FALSE'],
        'Code': ['CAR234', 'CAR234'],
    })

    success, errors, count = ExcelService.process_excel_upload(content, service)
    assert not success
    assert count == 0
    assert repo.list_all() == []

def test_process_excel_upload_unreadable(service):
    success, errors, count = ExcelService.process_excel_upload(b"not a spreadsheet", service)
    assert not success
    assert "Error reading Excel file" in errors[0]

def test_reimport_updates_existing_guests(service, repo, make_guest):
    guest = make_guest(name="Carrie Brown", code="CAR234", plus_one_allowed=False)
    repo.update(guest.id, {"attending": True, "rsvp_submitted_at": guest.created_at,
                           "address_freeform": "Somewhere 1"})

    content = create_test_excel({
        'Name': ['Carrie Brown-Smith', 'Eddie Lee'],
        'Plus One': ['yes', 'no'],
        'Email': ['carrie@example.com', None],
        'Group Side': ['Groom', None],
        'Code': ['car234', None],
    })

    success, errors, count = ExcelService.process_excel_upload(content, service)
    assert success, errors
    assert count == 2
    assert len(repo.list_all()) == 2

    updated = repo.find_by_code("CAR234")
    assert updated.id == guest.id
    assert updated.name == "Carrie Brown-Smith"
    assert updated.plus_one_allowed is True
    assert updated.email == "carrie@example.com"
    assert updated.group_side == "Groom"
    assert updated.attending is True
    assert updated.address_freeform == "Somewhere 1"
    assert repo.find_by_name("carrie brown-smith").id == guest.id

def test_import_numeric_plus_one_column(service, repo):
    content = create_test_excel({
        'Name': ['Carrie Brown', 'Eddie Lee', 'Rob Kamphuis'],
        'Plus One': [1, None, 0],
    })

    success, errors, count = ExcelService.process_excel_upload(content, service)
    assert success, errors
    assert repo.find_by_name("carrie brown").plus_one_allowed is True
    assert repo.find_by_name("eddie lee").plus_one_allowed is False
    assert repo.find_by_name("rob kamphuis").plus_one_allowed is False

def test_template_matches_import_columns(service):
    content = ExcelService.create_template()
    df = pd.read_excel(io.BytesIO(content))
    valid, _ = ExcelService.validate_excel_structure(df)
    assert valid
    assert len(df) == 2

    success, errors, count = ExcelService.process_excel_upload(content, service)
    assert success, errors
    assert count == 2

def test_export_guests(service, repo, make_guest):
    guest = make_guest(name="Carrie Brown", code="CAR234", plus_one_allowed=True)
    repo.update(guest.id, {"attending": True, "rsvp_submitted_at": guest.created_at,
                           "address_formatted": "1 Main St\nSpringfield"})

    content = ExcelService.export_guests(repo.list_all())
    df = pd.read_excel(io.BytesIO(content))
    row = df.iloc[0]
    assert row['Code'] == "CAR234"
    assert row['RSVP'] == "Yes"
    assert row['Plus One Allowed'] == "Yes"
    assert row['Invitation Name'] == "Carrie Brown"
    assert row['Mailing Address'] == "1 Main St\nSpringfield"
