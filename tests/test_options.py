"""
Tests for filter option validation at construction time.
"""

import pytest

from hookline_common.errors import ConfigurationError
from hookline_filter.options import BodyFormat, FilterConfig, Verb


def _opts(**overrides):
    opts = {"url": "http://stringsize.com", "target_body": "size"}
    opts.update(overrides)
    return opts


class TestVerb:
    @pytest.mark.parametrize("verb", ["GET", "HEAD", "POST", "DELETE", "Post", " delete "])
    def test_valid_verbs_are_lowercased(self, verb):
        config = FilterConfig.from_options(_opts(verb=verb))
        assert config.verb.value == verb.strip().lower()

    def test_defaults_to_get(self):
        assert FilterConfig.from_options(_opts()).verb is Verb.get

    def test_method_is_an_alias(self):
        assert FilterConfig.from_options(_opts(method="post")).verb is Verb.post

    @pytest.mark.parametrize("verb", ["something else", "put", "", 3])
    def test_invalid_verb_is_a_configuration_error(self, verb):
        with pytest.raises(ConfigurationError) as exc_info:
            FilterConfig.from_options(_opts(verb=verb))
        assert "verb" in str(exc_info.value)


class TestTarget:
    @pytest.mark.parametrize("fallback", [None, {"fallback1": True, "fallback2": True}])
    def test_empty_target_is_a_configuration_error(self, fallback):
        opts = _opts(target_body="")
        if fallback is not None:
            opts["fallback"] = fallback
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(opts)

    def test_blank_target_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(target_body="   "))

    def test_target_is_required(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options({"url": "http://stringsize.com"})

    def test_target_alias(self):
        config = FilterConfig.from_options({"url": "http://x", "target": "[rest][body]"})
        assert config.target.parts == ("rest", "body")

    def test_malformed_target_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(target_body="[rest"))

    def test_empty_target_headers_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(target_headers=""))

    @pytest.mark.parametrize(
        "body, headers", [("rest", "[rest][headers]"), ("[meta][body]", "meta"), ("rest", "rest")]
    )
    def test_overlapping_targets_are_a_configuration_error(self, body, headers):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(target_body=body, target_headers=headers))


class TestOtherOptions:
    def test_url_is_required(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options({"target_body": "rest"})

    def test_body_format_defaults_to_json(self):
        assert FilterConfig.from_options(_opts(body={"a": 1})).body_format is BodyFormat.json

    def test_body_format_is_case_insensitive(self):
        assert FilterConfig.from_options(_opts(body_format="TEXT")).body_format is BodyFormat.text

    def test_unknown_body_format_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(body_format="xml"))

    def test_text_body_must_be_a_string(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(body_format="text", body={"hey": "you"}))

    def test_unknown_option_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(json=True))

    def test_failure_tags(self):
        assert FilterConfig.from_options(_opts()).tag_on_request_failure == ["_httprequestfailure"]
        config = FilterConfig.from_options(_opts(tag_on_request_failure="_lookupfailed"))
        assert config.tag_on_request_failure == ["_lookupfailed"]

    def test_timeout_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(_opts(timeout_seconds=0))

    def test_options_must_be_a_mapping(self):
        with pytest.raises(ConfigurationError):
            FilterConfig.from_options(["url", "http://x"])
