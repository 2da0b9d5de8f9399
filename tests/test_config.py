"""Tests for configuration models."""

import pytest
import yaml
from pydantic import ValidationError
from wikipull.models import DEFAULT_BASE_URL, ImageConfig, WikipullConfig


class TestWikipullConfig:
    """Test WikipullConfig."""

    def test_defaults(self):
        config = WikipullConfig()

        assert config.base_url == DEFAULT_BASE_URL
        assert config.images.min_width == 50
        assert config.images.min_height == 50
        assert config.cache.max_size == 100
        assert config.cache.ttl_seconds == 300.0
        assert config.markdown.toc_heading == "Table of Contents"
        assert config.performance.batch_concurrency == 3

    def test_trailing_slash_stripped(self):
        config = WikipullConfig(base_url="https://en.wikipedia.org/")

        assert config.base_url == "https://en.wikipedia.org"

    @pytest.mark.parametrize("url", ["zh.minecraft.wiki", "ftp://wiki.example", "/w/", ""])
    def test_invalid_base_url(self, url):
        with pytest.raises(ValidationError):
            WikipullConfig(base_url=url)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            WikipullConfig.model_validate({"images": {"min_size": 20}})

    @pytest.mark.parametrize(
        "data",
        [
            {"cache": {"max_size": 0}},
            {"cache": {"ttl_seconds": 0}},
            {"images": {"min_width": -1}},
            {"performance": {"batch_concurrency": 0}},
            {"log_level": "TRACE"},
        ],
    )
    def test_out_of_range_values(self, data):
        with pytest.raises(ValidationError):
            WikipullConfig.model_validate(data)

    def test_nested_model(self):
        config = WikipullConfig(images=ImageConfig(min_width=32, min_height=32))

        assert config.images.min_width == 32
        assert config.images.remove_small_images is True

    def test_wiki_hosts(self):
        config = WikipullConfig(base_url="https://Wiki.Example.org")

        assert "wiki.example.org" in config.wiki_hosts
        assert "minecraft.wiki" in config.wiki_hosts


class TestYaml:
    """Test YAML loading and dumping."""

    def test_load_from_file(self, tmp_path):
        yaml_file = tmp_path / "wikipull.yaml"
        yaml_file.write_text(
            """
base_url: https://en.wikipedia.org
images:
  min_width: 32
  min_height: 24
links:
  wiki_hosts:
    - wikipedia.org
cache:
  max_size: 500
log_level: DEBUG
""",
            encoding="utf-8",
        )

        config = WikipullConfig.from_yaml_file(yaml_file)

        assert config.base_url == "https://en.wikipedia.org"
        assert config.images.min_width == 32
        assert config.images.min_height == 24
        assert config.links.wiki_hosts == ["wikipedia.org"]
        assert config.cache.max_size == 500
        assert config.log_level == "DEBUG"

    def test_empty_document(self):
        assert WikipullConfig.from_yaml("") == WikipullConfig()

    def test_round_trip(self):
        config = WikipullConfig.model_validate(
            {"base_url": "https://en.wikipedia.org", "markdown": {"toc_heading": "目录"}}
        )

        dumped = config.to_yaml()

        assert yaml.safe_load(dumped)["markdown"]["toc_heading"] == "目录"
        assert WikipullConfig.from_yaml(dumped) == config

    def test_invalid_yaml_values(self):
        with pytest.raises(ValidationError):
            WikipullConfig.from_yaml("cache:\n  enabled: maybe\n")
