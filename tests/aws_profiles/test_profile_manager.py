import pytest
from awsso.aws_profiles.errors import ConfigError, ProfileNotFoundError
from awsso.aws_profiles.profile_manager import (
    load_profiles,
    get_profile,
    list_profiles,
    section_name_for,
    ProfileSection
)


def test_load_profiles_keeps_raw_section_names(aws_dir):
    """Test that config sections keep their prefix."""
    aws_dir.write_config()

    profiles = load_profiles(aws_dir.paths.config)

    assert list(profiles) == ["default", "profile work", "profile admin"]


def test_short_name_is_last_token(aws_dir):
    """Test that the short name is the last whitespace-separated token."""
    aws_dir.write_config()

    for raw_name, section in load_profiles(aws_dir.paths.config).items():
        assert section.name == raw_name
        assert section.short_name == raw_name.split()[-1]


def test_load_profiles_skips_empty_sections(aws_dir):
    """Test that sections without keys are skipped."""
    aws_dir.write_config()

    profiles = load_profiles(aws_dir.paths.config)

    assert "sso-session corp" not in profiles


def test_load_profiles_reads_sso_settings(aws_dir):
    """Test reading the SSO keys of a profile."""
    aws_dir.write_config()

    work = load_profiles(aws_dir.paths.config)["profile work"]

    assert work.region == "eu-west-1"
    assert work.sso_account_id == "123456789012"
    assert work.sso_role_name == "Developer"
    assert work.sso_start_url == "https://x.awsapps.com/start"
    assert work.sso_region == "eu-west-1"
    assert work.is_sso


def test_load_profiles_missing_file(aws_dir):
    """Test that a missing config file is a ConfigError."""
    with pytest.raises(ConfigError, match="not found"):
        load_profiles(aws_dir.paths.config)


def test_load_profiles_malformed_file(aws_dir):
    """Test that a file without section headers is a ConfigError."""
    aws_dir.write_config("region = us-east-1\n")

    with pytest.raises(ConfigError, match="Malformed"):
        load_profiles(aws_dir.paths.config)


def test_load_profiles_duplicate_section(aws_dir):
    """Test that duplicate sections are a ConfigError."""
    aws_dir.write_config("[profile a]\nregion = x\n[profile a]\nregion = y\n")

    with pytest.raises(ConfigError):
        load_profiles(aws_dir.paths.config)


def test_load_profiles_does_not_interpolate(aws_dir):
    """Test that values containing % are read verbatim."""
    aws_dir.write_config("[profile pct]\nsso_start_url = https://x.example/start%20here\n")

    section = load_profiles(aws_dir.paths.config)["profile pct"]

    assert section.sso_start_url == "https://x.example/start%20here"


def test_load_profiles_uses_aws_config_file_env(aws_dir, monkeypatch):
    """Test that AWS_CONFIG_FILE selects the config file."""
    path = aws_dir.write_config()
    monkeypatch.setenv("AWS_CONFIG_FILE", str(path))

    assert "profile work" in load_profiles()


def test_section_name_for():
    """Test mapping a bare profile name to its config section."""
    assert section_name_for("work") == "profile work"
    assert section_name_for("default") == "default"


def test_get_profile(aws_dir):
    """Test looking up a profile by its bare name."""
    aws_dir.write_config()

    profile = get_profile("admin", aws_dir.paths.config)

    assert profile.name == "profile admin"
    assert profile.short_name == "admin"
    assert profile.sso_role_name == "AdministratorAccess"


def test_get_profile_not_found(aws_dir):
    """Test that an unknown profile raises ProfileNotFoundError."""
    aws_dir.write_config()

    with pytest.raises(ProfileNotFoundError) as exc_info:
        get_profile("missing", aws_dir.paths.config)

    assert exc_info.value.profile_name == "missing"


def test_get_profile_requires_prefix(aws_dir):
    """Test that an unprefixed section does not match a bare name lookup."""
    aws_dir.write_config("[work]\nregion = us-east-1\n")

    with pytest.raises(ProfileNotFoundError):
        get_profile("work", aws_dir.paths.config)


def test_list_profiles_sso_only(aws_dir):
    """Test filtering the listing to SSO profiles."""
    aws_dir.write_config()

    all_names = [p.short_name for p in list_profiles(aws_dir.paths.config)]
    sso_names = [p.short_name for p in list_profiles(aws_dir.paths.config, sso_only=True)]

    assert all_names == ["default", "work", "admin"]
    assert sso_names == ["work", "admin"]


def test_profile_section_str():
    """Test the string representation of a profile section."""
    section = ProfileSection("profile work", region="eu-west-1",
                             sso_account_id="123456789012", sso_role_name="Developer")

    assert str(section) == "work - eu-west-1 - Account: 123456789012 [Developer]"


def test_profile_section_attributes_are_plain():
    """Test that short_name and is_sso follow reassigned attributes."""
    section = ProfileSection("profile work", region="eu-west-1")

    section.name = "profile other"
    section.sso_start_url = "https://x.awsapps.com/start"

    assert section.short_name == "other"
    assert section.is_sso
    assert str(section) == "other - eu-west-1"
