"""Unit tests for models and exceptions."""

import pytest
from pydantic import ValidationError

from stackit_webhook.exceptions import (
    ConfigDecodeError,
    CredentialResolutionError,
    RRSetLookupError,
    RRSetNotFoundError,
    RRSetWriteError,
    WebhookError,
    ZoneLookupError,
    ZoneNotFoundError,
)
from stackit_webhook.models import (
    ChallengeRequest,
    Record,
    RRSet,
    Zone,
    normalize_name,
    unquote_txt,
)


class TestChallengeRequestModel:
    """Tests for ChallengeRequest model."""

    def test_challenge_request_from_json(self):
        """Parse a challenge request as sent by cert-manager."""
        data = {
            "uid": "1234",
            "action": "Present",
            "type": "dns-01",
            "dnsName": "example.com",
            "key": "abc",
            "resourceNamespace": "default",
            "resolvedFQDN": "_acme-challenge.example.com.",
            "resolvedZone": "example.com.",
            "allowAmbientCredentials": False,
            "config": {"projectId": "p"},
        }
        request = ChallengeRequest.model_validate(data)

        assert request.dns_name == "example.com"
        assert request.resource_namespace == "default"
        assert request.resolved_zone == "example.com."
        assert request.config == {"projectId": "p"}

    def test_record_name_prefers_resolved_fqdn(self):
        """The host-resolved FQDN is used as is."""
        request = ChallengeRequest(
            dns_name="example.com", resolved_fqdn="_acme-challenge.alias.net"
        )

        assert request.record_name == "_acme-challenge.alias.net."

    def test_record_name_from_dns_name(self):
        """Without a resolved FQDN the prefix is added to the domain."""
        request = ChallengeRequest(dns_name="www.example.com.")

        assert request.record_name == "_acme-challenge.www.example.com."

    def test_challenge_request_is_frozen(self):
        """Requests are read-only for the solver."""
        request = ChallengeRequest(dns_name="example.com")

        with pytest.raises(ValidationError):
            request.key = "changed"


class TestDnsModels:
    """Tests for Zone and RRSet models."""

    def test_zone_from_api(self):
        """Parse a zone from an API listing, ignoring unknown fields."""
        zone = Zone.model_validate(
            {"id": "z1", "dnsName": "example.com", "state": "CREATE_SUCCEEDED", "serialNumber": 1}
        )

        assert zone.id == "z1"
        assert zone.dns_name == "example.com"
        assert zone.state == "CREATE_SUCCEEDED"

    def test_rrset_defaults(self):
        """New RRSets default to TXT with the standard TTL."""
        rrset = RRSet(name="_acme-challenge.example.com.")

        assert rrset.type == "TXT"
        assert rrset.ttl == 600
        assert rrset.records == []
        assert rrset.id is None

    def test_rrset_contents_unquotes(self):
        """contents() strips TXT quoting."""
        rrset = RRSet(
            name="_acme-challenge.example.com.",
            records=[Record(content='"quoted"'), Record(content="plain")],
        )

        assert rrset.contents() == ["quoted", "plain"]


class TestHelpers:
    """Tests for name and value helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [('"abc"', "abc"), ("abc", "abc"), ('"', '"'), ('""', "")],
    )
    def test_unquote_txt(self, value, expected):
        assert unquote_txt(value) == expected

    def test_normalize_name(self):
        assert normalize_name("WWW.Example.COM.") == "www.example.com"


class TestExceptionHierarchy:
    """Tests for the stage-tagged exception classes."""

    @pytest.mark.parametrize(
        ("error_cls", "stage"),
        [
            (ConfigDecodeError, "decode_config"),
            (CredentialResolutionError, "resolve_credential"),
            (ZoneLookupError, "resolve_zone"),
            (ZoneNotFoundError, "resolve_zone"),
            (RRSetLookupError, "check_rrset"),
            (RRSetNotFoundError, "check_rrset"),
            (RRSetWriteError, "write_rrset"),
        ],
    )
    def test_stage(self, error_cls, stage):
        """Each error names the stage it belongs to."""
        error = error_cls("boom")

        assert isinstance(error, WebhookError)
        assert error.stage == stage
        assert str(error) == "boom"

    def test_not_found_is_lookup_error(self):
        """Not-found conditions are specializations of lookup errors."""
        assert issubclass(ZoneNotFoundError, ZoneLookupError)
        assert issubclass(RRSetNotFoundError, RRSetLookupError)
