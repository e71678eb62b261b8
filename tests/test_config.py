"""Tests for YAML configuration and building a client from it."""

import httpx
import pytest

from conftest import API_V3_KEY, MCHID
from wechatpay import WechatPay, WechatPayConfig
from wechatpay.config import DEFAULT_BASE_URL
from wechatpay.core.errors import ConfigurationError

CONFIG = f"""\
mchid: "{MCHID}"
api_v3_key: "{API_V3_KEY}"
private_key_path: apiclient_key.pem
certificate_path: apiclient_cert.pem
platform_certificate_paths:
  - wechatpay_platform.pem
timeout: 5
"""


def write_config(tmp_path, text):
    path = tmp_path / "wechatpay.yaml"
    path.write_text(text)
    return path


def test_from_yaml_resolves_relative_paths(tmp_path, pem_files):
    config = WechatPayConfig.from_yaml(write_config(tmp_path, CONFIG))

    assert config.mchid == MCHID
    assert config.private_key_path == pem_files["key"]
    assert config.certificate_path == pem_files["certificate"]
    assert config.platform_certificate_paths == [pem_files["platform"]]
    assert config.timeout == 5
    assert config.timestamp_tolerance == 300
    assert config.base_url == DEFAULT_BASE_URL


def test_client_from_config(tmp_path, pem_files, provider, platform_serial):
    """Test building a working client from a configuration file."""
    config = WechatPayConfig.from_yaml(write_config(tmp_path, CONFIG))
    http_client = httpx.Client(transport=httpx.MockTransport(provider.handler))
    provider.add("GET", "/v3/pay/transactions/id/T1", {"trade_state": "NOTPAY"})

    with WechatPay.from_config(config, http_client=http_client) as client:
        assert client.certificate_serial_no == "ABC123"
        assert platform_serial in client.certificates
        assert client.order_query_by_transaction_id("T1").trade_state == "NOTPAY"


def test_client_from_config_missing_key(tmp_path, pem_files):
    pem_files["key"].unlink()
    config = WechatPayConfig.from_yaml(write_config(tmp_path, CONFIG))

    with pytest.raises(ConfigurationError, match="Private key file not found"):
        WechatPay.from_config(config)


@pytest.mark.parametrize(
    "text",
    [
        CONFIG.replace(API_V3_KEY, "too-short"),
        CONFIG.replace(f'"{MCHID}"', '"  "'),
        CONFIG.replace("timeout: 5", "timeout: 0"),
        "mchid: [unclosed\n",
        "mchid: only\n",
    ],
)
def test_from_yaml_invalid(tmp_path, text):
    with pytest.raises(ConfigurationError):
        WechatPayConfig.from_yaml(write_config(tmp_path, text))


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        WechatPayConfig.from_yaml(tmp_path / "missing.yaml")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
