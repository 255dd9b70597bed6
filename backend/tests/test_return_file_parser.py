"""
Unit tests for the bank return file parser.
"""

from backend.app.domain.remittance.return_file_parser import parse_return_file, resolve_status

ID_A = "a1b2c3d4e5f60001"
ID_B = "a1b2c3d4e5f60002"


def test_paid_and_rejected_lines():
    content = (
        "H HEADER DO BANCO\n"
        f"T{ID_A}00\n"
        "\n"
        f"T{ID_B}07\n"
        "Z TRAILER\n"
    ).encode("latin-1")

    outcomes = list(parse_return_file(content))

    assert len(outcomes) == 2
    assert outcomes[0].charge_identifier == ID_A
    assert outcomes[0].resolved_status == "Pago"
    assert outcomes[1].charge_identifier == ID_B
    assert outcomes[1].occurrence_code == "07"
    assert outcomes[1].resolved_status == "Rejeitado (07)"
    assert not any(o.malformed for o in outcomes)


def test_crlf_line_endings_and_trailing_data():
    content = f"T{ID_A}PG   RESTO DO REGISTRO\r\nT{ID_B}03\r\n".encode("latin-1")

    outcomes = list(parse_return_file(content))

    assert [o.resolved_status for o in outcomes] == ["Pago", "Rejeitado (03)"]


def test_leading_utf8_bom_is_ignored():
    content = b"\xef\xbb\xbf" + f"T{ID_A}00\nT{ID_B}07\n".encode("latin-1")

    outcomes = list(parse_return_file(content))

    assert [o.charge_identifier for o in outcomes] == [ID_A, ID_B]
    assert outcomes[0].line_number == 1
    assert outcomes[0].is_paid


def test_short_identifier_is_trimmed():
    content = b"T12345           00\n"

    (outcome,) = parse_return_file(content)

    assert outcome.charge_identifier == "12345"
    assert outcome.is_paid


def test_short_line_is_malformed():
    content = f"T{ID_A}\nT\n".encode("latin-1")

    outcomes = list(parse_return_file(content))

    assert len(outcomes) == 2
    assert all(o.malformed for o in outcomes)
    assert all(o.resolved_status is None for o in outcomes)


def test_sequence_is_restartable():
    parsed = parse_return_file(f"T{ID_A}00\nT{ID_B}11\n".encode("latin-1"))

    assert list(parsed) == list(parsed)
    assert len(list(parsed)) == 2


def test_blank_and_non_transaction_lines_ignored():
    content = b"   \r\nHEADER\nt-lowercase-is-not-a-transaction00\n\n"

    assert list(parse_return_file(content)) == []


def test_resolve_status():
    assert resolve_status("00") == "Pago"
    assert resolve_status("PG") == "Pago"
    assert resolve_status("99") == "Rejeitado (99)"
    assert resolve_status("") is None
