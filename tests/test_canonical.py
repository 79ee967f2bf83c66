"""Tests for canonical string construction."""

import pytest

from bouncer.auth.canonical import HttpVerb, build_canonical, canonical_fields


class TestCanonicalFields:
    """Tests for the positional field layout."""

    @pytest.mark.parametrize(
        "headers",
        [
            [],
            [("Date", "Tue, 27 Mar 2007 19:36:42 +0000")],
            [("Content-MD5", "abc"), ("Content-Type", "text/plain")],
            [("x-amz-date", "now"), ("x-amz-acl", "private"), ("Date", "ignored")],
        ],
    )
    def test_always_six_fields(self, headers):
        """Six fields come back whatever headers are present."""
        assert len(canonical_fields("GET", headers, "/")) == 6

    def test_missing_headers_are_empty(self):
        """Absent optional headers become empty fields."""
        assert canonical_fields("HEAD", [], "/bucket") == ("HEAD", "", "", "", "", "/bucket")

    def test_field_values(self):
        """Each header lands in its own slot."""
        fields = canonical_fields(
            "PUT",
            [
                ("Content-MD5", "4gJE4saaMU4BqNR0kLY+lw=="),
                ("Content-Type", "application/x-download"),
                ("Date", "Tue, 27 Mar 2007 21:06:08 +0000"),
                ("X-Amz-Acl", "public-read"),
            ],
            "/db-backup.dat.gz",
        )
        assert fields == (
            "PUT",
            "4gJE4saaMU4BqNR0kLY+lw==",
            "application/x-download",
            "Tue, 27 Mar 2007 21:06:08 +0000",
            "x-amz-acl:public-read\n",
            "/db-backup.dat.gz",
        )

    def test_custom_prefix(self):
        """A different vendor prefix selects different custom headers."""
        headers = [("X-Basho-Meta", "1"), ("X-Amz-Meta", "2")]
        assert canonical_fields("GET", headers, "/", prefix="x-basho-")[4] == "x-basho-meta:1\n"


class TestBuildCanonical:
    """Tests for build_canonical()."""

    def test_minimal_request(self):
        """Only verb and date present."""
        canonical = build_canonical(
            HttpVerb.GET,
            {"Host": "johnsmith.s3.amazonaws.com", "Date": "Tue, 27 Mar 2007 19:36:42 +0000"},
            "/johnsmith/photos/puppy.jpg",
        )
        assert canonical == (
            b"GET\n\n\nTue, 27 Mar 2007 19:36:42 +0000\n/johnsmith/photos/puppy.jpg"
        )

    def test_empty_request_keeps_separators(self):
        """Every empty field still contributes its separator."""
        assert build_canonical("DELETE", [], "/") == b"DELETE\n\n\n\n/"

    def test_vendor_date_overrides_date(self):
        """A vendor date header blanks the Date field and is signed in the custom block."""
        canonical = build_canonical(
            "DELETE",
            [
                ("Date", "Tue, 27 Mar 2007 21:20:27 +0000"),
                ("x-amz-date", "Tue, 27 Mar 2007 21:20:26 +0000"),
            ],
            "/johnsmith/photos/puppy.jpg",
        )
        assert canonical == (
            b"DELETE\n\n\n\nx-amz-date:Tue, 27 Mar 2007 21:20:26 +0000\n/johnsmith/photos/puppy.jpg"
        )

    def test_vendor_date_makes_date_irrelevant(self):
        """With a vendor date, requests differing only in Date are identical."""
        vendor = ("X-Amz-Date", "Tue, 27 Mar 2007 21:20:26 +0000")
        with_date = build_canonical("GET", [vendor, ("Date", "Wed, 28 Mar 2007 01:00:00 +0000")], "/")
        without_date = build_canonical("GET", [vendor], "/")
        assert with_date == without_date

    def test_path_is_not_reencoded(self):
        """Path and query are used exactly as presented."""
        path = "/dictionary/fran%C3%A7ais/pr%c3%a9f%c3%a8re?acl&b=2&a=1"
        assert build_canonical("GET", [], path).endswith(path.encode("utf-8"))

    def test_verb_case_normalized(self):
        """Lowercase verb names map to the enum."""
        assert build_canonical("get", [], "/") == build_canonical(HttpVerb.GET, [], "/")

    def test_unknown_verb_rejected(self):
        """Verbs outside the scheme raise ValueError."""
        with pytest.raises(ValueError):
            build_canonical("PATCH", [], "/")

    def test_header_name_case_does_not_matter(self):
        """Header casing has no effect on the canonical string."""
        upper = build_canonical("PUT", [("CONTENT-TYPE", "text/plain"), ("X-AMZ-ACL", "private")], "/")
        lower = build_canonical("PUT", [("content-type", "text/plain"), ("x-amz-acl", "private")], "/")
        assert upper == lower

    def test_deterministic(self):
        """Same input, same output."""
        headers = [("Date", "now"), ("x-amz-meta-a", "1")]
        assert build_canonical("POST", headers, "/buckets") == build_canonical(
            "POST", headers, "/buckets"
        )

    def test_text_and_wire_bytes_agree(self):
        """A UTF-8 value signs the same whether given as text or as received bytes."""
        as_text = build_canonical("GET", [("X-Amz-Meta-Name", "café")], "/")
        as_bytes = build_canonical("GET", [(b"x-amz-meta-name", "café".encode("utf-8"))], "/")
        assert as_text == as_bytes
        assert b"x-amz-meta-name:caf\xc3\xa9\n" in as_text

    def test_undecodable_bytes_survive(self):
        """Bytes that are not valid UTF-8 reach the canonical string unchanged."""
        canonical = build_canonical("GET", [(b"x-amz-meta-name", b"caf\xe9")], "/")
        assert canonical.endswith(b"x-amz-meta-name:caf\xe9\n/")
