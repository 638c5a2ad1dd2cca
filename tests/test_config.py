from consent_form_service.config import load_settings


def test_defaults(monkeypatch, tmp_path):
    for var in (
        "CONSENT_FORM_PROCEDURE_TYPE",
        "CONSENT_FORM_NOTIFY_ON_SUBMIT",
        "CONSENT_FORM_DATE_DISPLAY_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    s = load_settings(tmp_path / "missing.env")
    assert s.procedure_type == "tattoo"
    assert s.notify_on_submit is True
    assert s.date_display_format == "%d/%m/%Y"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CONSENT_FORM_PROCEDURE_TYPE", "piercing")
    monkeypatch.setenv("CONSENT_FORM_NOTIFY_ON_SUBMIT", "0")
    monkeypatch.setenv("CONSENT_FORM_ISSUES_FIELD", "conditions")
    monkeypatch.setenv("CONSENT_FORM_FIELD_NAME_HEX_LENGTH", "2")
    s = load_settings(tmp_path / "missing.env")
    assert s.procedure_type == "piercing"
    assert s.notify_on_submit is False
    assert s.issues_field == "conditions"
    assert s.field_name_hex_length == 4


def test_dotenv_does_not_override_environment(monkeypatch, tmp_path):
    env = tmp_path / ".env"
    env.write_text("CONSENT_FORM_PROCEDURE_TYPE=piercing\nCONSENT_FORM_DATE_DISPLAY_FORMAT=%Y-%m-%d\n")
    monkeypatch.setenv("CONSENT_FORM_PROCEDURE_TYPE", "tattoo")
    monkeypatch.setenv("CONSENT_FORM_DATE_DISPLAY_FORMAT", "unset")
    monkeypatch.delenv("CONSENT_FORM_DATE_DISPLAY_FORMAT")
    s = load_settings(env)
    assert s.procedure_type == "tattoo"
    assert s.date_display_format == "%Y-%m-%d"
