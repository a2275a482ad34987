"""Tests for wikilink options."""

import dataclasses

import pytest

from wikilinks_plus.config import (
    ConfigError,
    ImageEmbedOptions,
    PageLinkOptions,
    WikilinksOptions,
    resolve_options,
)
from wikilinks_plus.diagnostics import DiagnosticCollector


class TestDefaults:
    """Tests for default option values."""

    def test_page_link_defaults(self):
        """Page links default to relative URLs with trimmed targets."""
        options = resolve_options()
        page = options.page_link
        assert page.absolute_base_url == "/"
        assert page.relative_base_url == "./"
        assert page.force_all_links_absolute is False
        assert page.allow_link_label_formatting is True
        assert page.uri_suffix == ""
        assert page.post_process_link_target("  a  ") == "a"
        assert page.post_process_link_label("  b  ") == "b"

    def test_image_embed_defaults(self):
        """Image embeds default to the common image extensions."""
        image = resolve_options().image_embed
        assert image.absolute_base_url == "/"
        assert image.relative_base_url == "./"
        assert image.force_all_image_urls_absolute is False
        assert image.image_file_ext == ("bmp", "gif", "jpeg", "jpg", "png", "svg", "webp")
        assert image.default_alt_text is False
        assert dict(image.html_attributes) == {}

    def test_default_image_target_is_sanitized(self):
        """The default image target hook trims and sanitizes each segment."""
        image = resolve_options().image_embed
        assert image.post_process_image_target("  ../img/a?.png ") == "/img/a.png"

    def test_alt_text_passes_through_when_not_given(self):
        """Without a user hook alt text is not trimmed."""
        image = resolve_options().image_embed
        assert image.post_process_alt_text("  spaced  ") == "  spaced  "

    def test_alt_text_passes_through_when_none(self):
        """An explicit None also means pass-through."""
        image = resolve_options({"image_embed": {"post_process_alt_text": None}}).image_embed
        assert image.post_process_alt_text("  spaced  ") == "  spaced  "

    def test_user_alt_text_hook_is_kept(self):
        """A user-supplied alt text hook replaces the default."""
        image = resolve_options(
            {"image_embed": {"post_process_alt_text": str.upper}}
        ).image_embed
        assert image.post_process_alt_text("cat") == "CAT"

    def test_dataclass_default_strips_alt_text(self):
        """Building the dataclass directly keeps the stripping hook."""
        assert ImageEmbedOptions().post_process_alt_text("  x  ") == "x"


class TestMerging:
    """Tests for merging user options over defaults."""

    def test_overrides_only_given_keys(self):
        """Unspecified options keep their defaults."""
        options = resolve_options({"page_link": {"uri_suffix": ".html"}})
        assert options.page_link.uri_suffix == ".html"
        assert options.page_link.relative_base_url == "./"
        assert options.image_embed.image_file_ext[0] == "bmp"

    def test_normalizes_base_urls(self):
        """Base URLs are normalized when options are resolved."""
        options = resolve_options(
            {
                "page_link": {"absolute_base_url": "blog", "relative_base_url": "/pages"},
                "image_embed": {"absolute_base_url": "a//b/../c", "relative_base_url": ""},
            }
        )
        assert options.page_link.absolute_base_url == "/blog/"
        assert options.page_link.relative_base_url == "pages/"
        assert options.image_embed.absolute_base_url == "/a/c/"
        assert options.image_embed.relative_base_url == "./"

    def test_normalizes_extensions(self):
        """Extensions are lower-cased, trimmed and lose their dot."""
        options = resolve_options({"image_embed": {"image_file_ext": [".PNG", " Jpg "]}})
        assert options.image_embed.image_file_ext == ("png", "jpg")

    def test_user_extension_list_replaces_default(self):
        """A user list is not merged index by index with the defaults."""
        options = resolve_options({"image_embed": {"image_file_ext": ["png"]}})
        assert options.image_embed.image_file_ext == ("png",)

    def test_accepts_profile_instances(self):
        """Ready-made profiles are used as they are."""
        page = PageLinkOptions(uri_suffix="/")
        options = resolve_options({"page_link": page})
        assert options.page_link is page

    def test_resolved_options_pass_through(self):
        """Resolving already-resolved options returns them unchanged."""
        options = resolve_options()
        assert resolve_options(options) is options

    def test_unknown_key_reported_with_suggestion(self):
        """Typos are reported with the closest valid key."""
        collector = DiagnosticCollector()
        options = resolve_options({"page_link": {"uri_sufix": ".html"}}, reporter=collector)
        assert options.page_link.uri_suffix == ""
        assert collector.codes == ["unknown-option"]
        assert "Did you mean 'uri_suffix'?" in collector.diagnostics[0].message

    def test_unknown_section_reported(self):
        """Unknown top-level sections are reported too."""
        collector = DiagnosticCollector()
        resolve_options({"pageLink": {}}, reporter=collector)
        assert collector.codes == ["unknown-option"]
        assert "Did you mean 'page_link'?" in collector.diagnostics[0].message

    def test_no_suggestion_for_unrelated_key(self):
        """Keys that resemble nothing get no suggestion."""
        collector = DiagnosticCollector()
        resolve_options({"image_embed": {"zzz": 1}}, reporter=collector)
        assert "Did you mean" not in collector.diagnostics[0].message


class TestImmutability:
    """Tests for read-only options."""

    def test_frozen(self):
        """Options cannot be reassigned."""
        options = resolve_options()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.page_link.uri_suffix = ".html"

    def test_html_attributes_read_only(self):
        """Static attribute maps cannot be mutated after construction."""
        attrs = {"loading": "lazy"}
        options = resolve_options({"image_embed": {"html_attributes": attrs}})
        attrs["class"] = "changed"
        assert dict(options.image_embed.html_attributes) == {"loading": "lazy"}
        with pytest.raises(TypeError):
            options.image_embed.html_attributes["class"] = "x"

    def test_with_absolute_urls(self):
        """with_absolute_urls returns a forced-absolute copy."""
        options = resolve_options({"page_link": {"absolute_base_url": "blog"}})
        absolute = options.with_absolute_urls()
        assert absolute.page_link.force_all_links_absolute is True
        assert absolute.image_embed.force_all_image_urls_absolute is True
        assert absolute.page_link.absolute_base_url == "/blog/"
        assert options.page_link.force_all_links_absolute is False

    def test_base_url_property(self):
        """base_url follows the force-absolute flag."""
        assert PageLinkOptions().base_url == "./"
        assert PageLinkOptions(force_all_links_absolute=True).base_url == "/"
        assert ImageEmbedOptions(relative_base_url="img").base_url == "img/"


class TestLoad:
    """Tests for loading options from TOML."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """A missing file means default options."""
        options = WikilinksOptions.load(tmp_path / ".wikilinks" / "config.toml")
        assert options.page_link.relative_base_url == "./"

    def test_loads_sections(self, tmp_path):
        """Both tables are read and merged over defaults."""
        config_path = tmp_path / "config.toml"
        config_path.write_text(
            """
[page_link]
absolute_base_url = "blog"
force_all_links_absolute = true
uri_suffix = ".html"

[image_embed]
image_file_ext = [".PNG", "Jpg"]
default_alt_text = true
"""
        )

        options = WikilinksOptions.load(config_path)

        assert options.page_link.absolute_base_url == "/blog/"
        assert options.page_link.force_all_links_absolute is True
        assert options.page_link.uri_suffix == ".html"
        assert options.image_embed.image_file_ext == ("png", "jpg")
        assert options.image_embed.default_alt_text is True

    def test_hook_options_in_file_are_ignored(self, tmp_path):
        """Hooks cannot come from TOML and are reported."""
        config_path = tmp_path / "config.toml"
        config_path.write_text('[page_link]\npost_process_link_target = "upper"\n')
        collector = DiagnosticCollector()

        options = WikilinksOptions.load(config_path, reporter=collector)

        assert options.page_link.post_process_link_target(" a ") == "a"
        assert collector.codes == ["unknown-option"]
        assert "post_process_link_target" in collector.diagnostics[0].message

    def test_unknown_keys_mention_file(self, tmp_path):
        """Unknown keys are reported with the file they came from."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("[image_embed]\nimage_file_exts = ['png']\n")
        collector = DiagnosticCollector()

        WikilinksOptions.load(config_path, reporter=collector)

        message = collector.diagnostics[0].message
        assert str(config_path) in message
        assert "Did you mean 'image_file_ext'?" in message

    def test_invalid_toml_raises(self, tmp_path):
        """Broken TOML raises ConfigError."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("[page_link\n")

        with pytest.raises(ConfigError, match="Could not read"):
            WikilinksOptions.load(config_path)


class TestFindConfig:
    """Tests for WikilinksOptions.find_config()."""

    def test_find_config_in_current_dir(self, tmp_path):
        """Finds config in the start directory."""
        config_dir = tmp_path / ".wikilinks"
        config_dir.mkdir()
        config_path = config_dir / "config.toml"
        config_path.write_text("[page_link]\n")

        assert WikilinksOptions.find_config(tmp_path) == config_path

    def test_find_config_in_parent_dir(self, tmp_path):
        """Finds config in a parent directory."""
        config_dir = tmp_path / ".wikilinks"
        config_dir.mkdir()
        config_path = config_dir / "config.toml"
        config_path.write_text("[page_link]\n")

        child_dir = tmp_path / "notes" / "nested"
        child_dir.mkdir(parents=True)

        assert WikilinksOptions.find_config(child_dir) == config_path

    def test_find_config_not_found(self, tmp_path):
        """Returns None when no config exists."""
        assert WikilinksOptions.find_config(tmp_path) is None
