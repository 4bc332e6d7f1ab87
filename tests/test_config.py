"""Tests for active24_solver.config."""

import logging

import pytest

from active24_solver.exceptions import ConfigInvalid


def test_load_config_required_vars(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.setenv("GROUP_NAME", "acme.example.com")
    monkeypatch.delenv("SECRET_STORE", raising=False)
    monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
    monkeypatch.delenv("KUBERNETES_SERVICE_PORT", raising=False)
    monkeypatch.delenv("AZURE_KEYVAULT_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    cfg = load_config()
    assert cfg.group_name == "acme.example.com"
    assert cfg.secret_store == "kubernetes"
    assert cfg.kubernetes_api_url == "https://kubernetes.default.svc:443"
    assert cfg.keyvault_url is None
    assert cfg.log_level == "INFO"


def test_load_config_custom_optionals(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.setenv("GROUP_NAME", "acme.example.com")
    monkeypatch.setenv("SECRET_STORE", "KeyVault")
    monkeypatch.setenv("AZURE_KEYVAULT_URL", "https://myvault.vault.azure.net")
    monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
    monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "6443")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_config()
    assert cfg.secret_store == "keyvault"
    assert cfg.keyvault_url == "https://myvault.vault.azure.net"
    assert cfg.kubernetes_api_url == "https://10.0.0.1:6443"
    assert cfg.log_level == "DEBUG"


def test_load_config_ipv6_kubernetes_host(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.setenv("GROUP_NAME", "acme.example.com")
    monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "fd00::1")
    monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")

    assert load_config().kubernetes_api_url == "https://[fd00::1]:443"


def test_load_config_missing_group_name(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.delenv("GROUP_NAME", raising=False)

    with pytest.raises(ValueError, match="GROUP_NAME"):
        load_config()


def test_load_config_unknown_secret_store(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.setenv("GROUP_NAME", "acme.example.com")
    monkeypatch.setenv("SECRET_STORE", "vault")

    with pytest.raises(ValueError, match="SECRET_STORE"):
        load_config()


def test_load_config_invalid_log_level(monkeypatch):
    from active24_solver.config import load_config

    monkeypatch.setenv("GROUP_NAME", "acme.example.com")
    monkeypatch.setenv("LOG_LEVEL", "loud")

    with pytest.raises(ValueError, match="LOG_LEVEL"):
        load_config()


def test_configure_logging_sets_package_level():
    from active24_solver.config import AppConfig, configure_logging

    logger = logging.getLogger("active24_solver")
    previous = logger.level
    try:
        configure_logging(AppConfig(group_name="g", log_level="DEBUG"))
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)


def _blob(**overrides):
    blob = {
        "apiKeySecretRef": {"name": "active24-credentials"},
        "apiSecretSecretRef": {"name": "active24-credentials"},
        "serviceID": 12345,
    }
    blob.update(overrides)
    return blob


class TestSolverConfig:
    def test_defaults(self):
        from active24_solver.config import SecretKeySelector, SolverConfig

        cfg = SolverConfig.from_dict(_blob())

        assert cfg.api_key_secret_ref == SecretKeySelector(name="active24-credentials", key="apiKey")
        assert cfg.api_secret_secret_ref == SecretKeySelector(name="active24-credentials", key="apiSecret")
        assert cfg.service_id == 12345
        assert cfg.domain == ""
        assert cfg.api_url == "https://rest.active24.cz"
        assert cfg.max_pages == 10

    def test_overrides(self):
        from active24_solver.config import SolverConfig

        cfg = SolverConfig.from_dict(
            _blob(
                apiKeySecretRef={"name": "creds", "key": "key"},
                apiSecretSecretRef={"name": "creds", "key": "secret"},
                domain="example.org",
                apiUrl="https://api.example.test",
                maxPages=3,
            )
        )

        assert cfg.api_key_secret_ref.key == "key"
        assert cfg.api_secret_secret_ref.key == "secret"
        assert cfg.domain == "example.org"
        assert cfg.api_url == "https://api.example.test"
        assert cfg.max_pages == 3

    def test_zero_max_pages_uses_default(self):
        from active24_solver.config import SolverConfig

        assert SolverConfig.from_dict(_blob(maxPages=0)).max_pages == 10

    def test_negative_max_pages_rejected(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="maxPages"):
            SolverConfig.from_dict(_blob(maxPages=-1))

    def test_missing_config_rejected(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="config is required"):
            SolverConfig.from_dict(None)

    def test_non_object_config_rejected(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="must be an object"):
            SolverConfig.from_dict(["serviceID", 1])

    def test_missing_service_id_rejected(self):
        from active24_solver.config import SolverConfig

        blob = _blob()
        del blob["serviceID"]
        with pytest.raises(ConfigInvalid, match="serviceID"):
            SolverConfig.from_dict(blob)

    @pytest.mark.parametrize("value", ["12345", 1.5, True])
    def test_non_integer_service_id_rejected(self, value):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="serviceID"):
            SolverConfig.from_dict(_blob(serviceID=value))

    def test_missing_secret_ref_name_rejected(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="apiSecretSecretRef.name"):
            SolverConfig.from_dict(_blob(apiSecretSecretRef={"key": "apiSecret"}))

    def test_missing_secret_ref_rejected(self):
        from active24_solver.config import SolverConfig

        blob = _blob()
        del blob["apiKeySecretRef"]
        with pytest.raises(ConfigInvalid, match="apiKeySecretRef"):
            SolverConfig.from_dict(blob)

    def test_non_string_domain_rejected(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ConfigInvalid, match="domain"):
            SolverConfig.from_dict(_blob(domain=42))

    def test_config_invalid_is_a_value_error(self):
        from active24_solver.config import SolverConfig

        with pytest.raises(ValueError):
            SolverConfig.from_dict(None)


def test_reconciler_config_repr_hides_credentials():
    from active24_solver.config import ReconcilerConfig

    cfg = ReconcilerConfig(api_key="key-123", api_secret="secret-456", service_id=1, domain="example.com")

    assert "key-123" not in repr(cfg)
    assert "secret-456" not in repr(cfg)
    assert "example.com" in repr(cfg)
