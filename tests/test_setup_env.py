from automation.setup_env import write_env


def test_write_env_template(tmp_path):
    target = tmp_path / ".env"
    write_env(str(target))
    text = target.read_text()
    assert "SUPABASE_URL=" in text
    assert "BACKEND_API_KEY=" in text
    assert "CONFERENCE_CODE=ICHR2026" in text
