"""Tests for the IPX transform URL builder."""

from __future__ import annotations

from urllib.parse import unquote

import pytest

from sizeset.config import SizesetConfig
from sizeset.directives import Directives
from sizeset.exceptions import EncodingFailureError
from sizeset.providers.ipx import IPXProvider, encode_path, format_directive


@pytest.fixture
def provider() -> IPXProvider:
    return IPXProvider(SizesetConfig(_env_file=None))  # type: ignore[call-arg]


class TestEncodePath:
    """Percent-encoding of source paths."""

    def test_ascii_untouched(self) -> None:
        assert encode_path("images/photo-1.png") == "images/photo-1.png"

    def test_non_ascii_escaped(self) -> None:
        assert encode_path("/汉字.png") == "/%E6%B1%89%E5%AD%97.png"

    def test_space_and_percent(self) -> None:
        assert encode_path("my photo 100%.png") == "my%20photo%20100%25.png"

    def test_separators_preserved(self) -> None:
        assert encode_path("a/b/c d/e.png") == "a/b/c%20d/e.png"

    @pytest.mark.parametrize(
        "path",
        ["/汉字.png", "/фото/кот.jpg", "/a b/c?d#e.png", "/100%/ünïcødé.webp", "https://cdn.test/x y.png"],
    )
    def test_lossless(self, path: str) -> None:
        assert unquote(encode_path(path)) == path

    def test_lone_surrogate_raises(self) -> None:
        with pytest.raises(EncodingFailureError) as excinfo:
            encode_path("/bad\ud800.png")
        assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)


class TestFormatDirective:
    """Rendering of individual directives."""

    def test_size(self) -> None:
        assert format_directive("size", (500, 400)) == "s_500x400"
        assert format_directive("size", (500, None)) == "w_500"
        assert format_directive("size", (None, 400)) == "h_400"

    def test_short_keys(self) -> None:
        assert format_directive("format", "webp") == "f_webp"
        assert format_directive("quality", 50) == "q_50"
        assert format_directive("crop", "center") == "c_center"


class TestIPXProvider:
    """Full request path construction."""

    def test_name(self, provider: IPXProvider) -> None:
        assert provider.name == "ipx"
        assert provider.prefix == "_ipx"

    def test_size_only(self, provider: IPXProvider) -> None:
        assert provider.build_url("/image.png", Directives(width=900, height=900)) == "/_ipx/s_900x900/image.png"

    def test_all_directives_in_fixed_order(self, provider: IPXProvider) -> None:
        directives = Directives(width=10, height=10, format="webp", quality=50, crop="center")
        assert (
            provider.build_url("/image.png", directives)
            == "/_ipx/s_10x10&f_webp&q_50&c_center/image.png"
        )

    def test_crop_omitted_unless_set(self, provider: IPXProvider) -> None:
        assert "c_" not in provider.build_url("/image.png", Directives(width=1, height=1))

    def test_empty_directives(self, provider: IPXProvider) -> None:
        assert provider.build_url("/image.png", Directives()) == "/_ipx/_/image.png"

    def test_source_without_leading_slash(self, provider: IPXProvider) -> None:
        assert provider.build_url("image.png", Directives(quality=80)) == "/_ipx/q_80/image.png"

    def test_absolute_source(self, provider: IPXProvider) -> None:
        url = provider.build_url("https://images.test/a b.jpg", Directives(width=100))
        assert url == "/_ipx/w_100/https://images.test/a%20b.jpg"

    def test_encodes_non_ascii(self, provider: IPXProvider) -> None:
        url = provider.build_url("/汉字.png", Directives(width=900, height=900))
        assert url == "/_ipx/s_900x900/%E6%B1%89%E5%AD%97.png"

    def test_custom_prefix(self) -> None:
        provider = IPXProvider(SizesetConfig(_env_file=None, provider_prefix="/img/"))  # type: ignore[call-arg]
        assert provider.build_url("/a.png", Directives(width=5, height=5)) == "/img/s_5x5/a.png"

    def test_deterministic(self, provider: IPXProvider) -> None:
        a = provider.build_url("/汉字.png", Directives(width=1, height=2, format="avif", quality=3))
        b = provider.build_url("/汉字.png", Directives(quality=3, format="avif", height=2, width=1))
        assert a == b

    @pytest.mark.parametrize(
        "other",
        [
            Directives(width=11, height=10, format="webp", quality=50),
            Directives(width=10, height=11, format="webp", quality=50),
            Directives(width=10, height=10, format="avif", quality=50),
            Directives(width=10, height=10, format="webp", quality=51),
            Directives(width=10, height=10, format="webp", quality=50, crop="top"),
            Directives(width=10, format="webp", quality=50),
        ],
    )
    def test_distinct_directives_distinct_urls(self, provider: IPXProvider, other: Directives) -> None:
        base = Directives(width=10, height=10, format="webp", quality=50)
        assert provider.build_url("/image.png", base) != provider.build_url("/image.png", other)
