"""Tests for command-line wiring."""

from order_dashboard.api_client import OrderApiClient
from order_dashboard.main import build_parser, build_source
from order_dashboard.sample_data import SampleOrderSource


def test_demo_flag_uses_sample_source():
    args = build_parser().parse_args(["--demo"])
    assert isinstance(build_source(args), SampleOrderSource)


def test_endpoint_and_timeout_reach_client():
    args = build_parser().parse_args(["--endpoint", "https://example.test/exec", "--timeout", "3"])

    source = build_source(args)

    assert isinstance(source, OrderApiClient)
    assert source.endpoint == "https://example.test/exec"
    assert source.timeout == 3.0
