import pytest

from lxi import (
    DEFAULT_PORT,
    InvalidPortError,
    MalformedResourceError,
    ResourceError,
    UnsupportedInterfaceError,
    UnsupportedResourceClassError,
    VisaResource,
    parse_resource,
)


class TestParseValid:
    def test_full_socket_form(self):
        res = parse_resource("TCPIP::192.168.1.100::5025::SOCKET")
        assert res.host_address == "192.168.1.100"
        assert res.port == 5025
        assert res.address == ("192.168.1.100", 5025)

    def test_hostname_and_custom_port(self):
        res = parse_resource("TCPIP::scope.lab.local::5555::SOCKET")
        assert res.address == ("scope.lab.local", 5555)

    def test_missing_port_uses_default(self):
        res = parse_resource("TCPIP::192.168.1.10::SOCKET")
        assert res.port == DEFAULT_PORT == 5025

    def test_host_only(self):
        res = parse_resource("TCPIP::10.0.0.2")
        assert res.address == ("10.0.0.2", DEFAULT_PORT)

    def test_port_without_suffix(self):
        res = parse_resource("TCPIP::10.0.0.2::9221")
        assert res.port == 9221

    def test_board_index(self):
        res = parse_resource("TCPIP1::10.0.0.2::5025::SOCKET")
        assert res.board_index == 1
        assert parse_resource("TCPIP::10.0.0.2").board_index == 0

    def test_case_insensitive_tokens(self):
        res = parse_resource("tcpip0::10.0.0.2::5025::socket")
        assert res.address == ("10.0.0.2", 5025)
        assert res.resource_class == "SOCKET"

    def test_keeps_resource_string(self):
        text = "TCPIP::10.0.0.2::5025::SOCKET"
        assert parse_resource(text).resource_string == text

    def test_surrounding_whitespace_ignored(self):
        res = parse_resource("  TCPIP::10.0.0.2::5025::SOCKET\n")
        assert res.address == ("10.0.0.2", 5025)

    def test_str_is_canonical(self):
        res = parse_resource("tcpip::10.0.0.2::socket")
        assert str(res) == "TCPIP0::10.0.0.2::5025::SOCKET"

    def test_bracketed_ipv6_host(self):
        res = parse_resource("TCPIP::[fe80::1]::5025::SOCKET")
        assert res.address == ("fe80::1", 5025)

    def test_ipv6_loopback_without_port(self):
        res = parse_resource("TCPIP::[::1]::SOCKET")
        assert res.address == ("::1", DEFAULT_PORT)

    def test_str_brackets_ipv6(self):
        res = parse_resource("TCPIP::[fe80::1]")
        assert str(res) == "TCPIP0::[fe80::1]::5025::SOCKET"

    def test_is_immutable(self):
        res = parse_resource("TCPIP::10.0.0.2")
        with pytest.raises(AttributeError):
            res.port = 1

    def test_equal_to_constructed(self):
        res = parse_resource("TCPIP::10.0.0.2::5025::SOCKET")
        assert res == VisaResource(
            "10.0.0.2", 5025, resource_string="TCPIP::10.0.0.2::5025::SOCKET"
        )


class TestParseErrors:
    @pytest.mark.parametrize(
        "address",
        [
            "",
            "TCPIP",
            "TCPIP::",
            "TCPIP::::5025::SOCKET",
            "TCPIP::10.0.0.2::5025::SOCKET::EXTRA",
            "TCPIP:10.0.0.2:5025",
            "TCPIP::[]::5025::SOCKET",
            "TCPIP::[fe80::1::5025::SOCKET",
            "TCPIP::[fe80::1::5025",
        ],
    )
    def test_malformed(self, address):
        with pytest.raises(MalformedResourceError):
            parse_resource(address)

    @pytest.mark.parametrize(
        "address",
        [
            "GPIB0::22::INSTR",
            "USB0::0x0957::0x0407::MY123",
            "ASRL1::INSTR",
            "TCPIPX::10.0.0.2::5025::SOCKET",
        ],
    )
    def test_unsupported_interface(self, address):
        with pytest.raises(UnsupportedInterfaceError):
            parse_resource(address)

    def test_instr_resource_class_rejected(self):
        with pytest.raises(UnsupportedResourceClassError):
            parse_resource("TCPIP::10.0.0.2::INSTR")

    def test_unknown_suffix_with_port_rejected(self):
        with pytest.raises(UnsupportedResourceClassError):
            parse_resource("TCPIP::10.0.0.2::5025::HISLIP")

    def test_non_numeric_port(self):
        with pytest.raises(InvalidPortError):
            parse_resource("TCPIP::10.0.0.2::http::SOCKET")

    @pytest.mark.parametrize("port", ["0", "65536", "99999"])
    def test_port_out_of_range(self, port):
        with pytest.raises(InvalidPortError):
            parse_resource(f"TCPIP::10.0.0.2::{port}::SOCKET")

    def test_failures_share_base_class(self):
        for address in ("", "GPIB0::1::INSTR", "TCPIP::h::x::SOCKET"):
            with pytest.raises(ResourceError):
                parse_resource(address)
