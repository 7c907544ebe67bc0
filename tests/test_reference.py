"""Tests for image reference parsing."""

import pytest

from constants import TAG_UNSPECIFIED
from core.reference import parse_image_reference


class TestParseImageReference:
    """Tests for parse_image_reference."""

    def test_repository_and_tag(self):
        ref = parse_image_reference("nginx:1.25")
        assert ref.repository == "nginx"
        assert ref.tag == "1.25"
        assert ref.digest is None

    def test_repository_only_uses_placeholder_tag(self):
        ref = parse_image_reference("nginx")
        assert ref.repository == "nginx"
        assert ref.tag == TAG_UNSPECIFIED
        assert ref.has_tag is False

    def test_digest_only(self):
        ref = parse_image_reference("ghcr.io/org/app@sha256:abc123")
        assert ref.repository == "ghcr.io/org/app"
        assert ref.tag == TAG_UNSPECIFIED
        assert ref.digest == "abc123"

    def test_tag_and_digest(self):
        ref = parse_image_reference("nginx:1.25@sha256:deadbeef")
        assert ref.repository == "nginx"
        assert ref.tag == "1.25"
        assert ref.digest == "deadbeef"

    @pytest.mark.parametrize("image", [
        "nginx@sha256:abc:def",
        "registry:5000/nginx@sha256:ab:cd",
        "nginx:1.25@sha256:x:y",
    ])
    def test_text_after_at_never_becomes_tag(self, image):
        ref = parse_image_reference(image)
        _, _, expected_digest = image.partition("@sha256:")
        assert ref.digest == expected_digest
        assert ":" not in ref.tag or ref.tag == TAG_UNSPECIFIED
        assert "@" not in ref.repository

    def test_registry_port_is_not_a_tag(self):
        ref = parse_image_reference("localhost:5000/team/app")
        assert ref.repository == "localhost:5000/team/app"
        assert ref.tag == TAG_UNSPECIFIED

    def test_registry_port_with_tag(self):
        ref = parse_image_reference("localhost:5000/team/app:v2")
        assert ref.repository == "localhost:5000/team/app"
        assert ref.tag == "v2"

    def test_registry_port_with_digest(self):
        ref = parse_image_reference("localhost:5000/app@sha256:abc")
        assert ref.repository == "localhost:5000/app"
        assert ref.digest == "abc"

    def test_non_sha256_digest_kept_whole(self):
        ref = parse_image_reference("nginx@md5:abc")
        assert ref.repository == "nginx@md5:abc"
        assert ref.digest is None

    @pytest.mark.parametrize("image,digest", [
        ("nginx@sha256:not-hex!!", "not-hex!!"),
        ("nginx@sha256:ABCdef01", "ABCdef01"),
    ])
    def test_digest_is_everything_after_prefix(self, image, digest):
        ref = parse_image_reference(image)
        assert ref.repository == "nginx"
        assert ref.digest == digest

    def test_empty_digest_kept_whole(self):
        ref = parse_image_reference("nginx@sha256:")
        assert ref.repository == "nginx@sha256:"
        assert ref.digest is None

    def test_trailing_colon_kept_whole(self):
        ref = parse_image_reference("nginx:")
        assert ref.repository == "nginx:"
        assert ref.tag == TAG_UNSPECIFIED

    def test_empty_string_is_invalid(self):
        ref = parse_image_reference("")
        assert ref.is_valid is False

    def test_surrounding_whitespace_ignored(self):
        ref = parse_image_reference("  busybox:1.36\n")
        assert ref.repository == "busybox"
        assert ref.tag == "1.36"


class TestImageReferenceProperties:
    """Tests for derived reference strings."""

    def test_inspectable_reference_prefers_digest(self):
        ref = parse_image_reference("nginx:1.25@sha256:abc")
        assert ref.inspectable_reference == "nginx@sha256:abc"
        assert ref.qualified_digest == "sha256:abc"

    def test_inspectable_reference_with_tag(self):
        assert parse_image_reference("nginx:1.25").inspectable_reference == "nginx:1.25"

    def test_inspectable_reference_without_tag(self):
        assert parse_image_reference("nginx").inspectable_reference == "nginx"
