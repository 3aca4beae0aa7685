"""Tests for settings and the command-line runner."""

import pytest
from pydantic import ValidationError

from catalog_scraper import runner
from catalog_scraper.config import Settings
from catalog_scraper.scrapers.base import CrawlOptions, ProductRecord
from catalog_scraper.scrapers.profiles import resolve_profile


def make_settings(**overrides) -> Settings:
    values = {"OUTPUT_DIR": "unused"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("CONFIG_NAME", "MAX_PAGES", "BOT_MITIGATION", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.CONFIG_NAME == "calian-gnss"
        assert config.MAX_PAGES == 5
        assert config.BOT_MITIGATION is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_PAGES", "3")
        monkeypatch.setenv("BOT_MITIGATION", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = Settings(_env_file=None)

        assert config.MAX_PAGES == 3
        assert config.BOT_MITIGATION is True
        assert config.LOG_LEVEL == "DEBUG"

    def test_rejects_zero_pages(self):
        with pytest.raises(ValidationError):
            make_settings(MAX_PAGES=0)

    def test_debug_implies_visual(self):
        options = make_settings(APP_DEBUG=True, MAX_PAGES=2).crawl_options()

        assert options == CrawlOptions(max_pages=2, humanize=False, visual=True, debug=True)


class TestParseArgs:

    def test_defaults_from_settings(self):
        config = make_settings(CONFIG_NAME="shopify-store", MAX_PAGES=7, BOT_MITIGATION=True)

        args = runner.parse_args([], config)

        assert args.profile == "shopify-store"
        assert args.max_pages == 7
        assert args.stealth is True
        assert args.output_dir == "unused"

    def test_flags_override_settings(self):
        args = runner.parse_args(
            ["--site-url", "https://store.example/all", "--max-pages", "2", "--debug"],
            make_settings(),
        )

        assert args.site_url == "https://store.example/all"
        assert args.max_pages == 2
        assert args.debug is True

    def test_profile_sources_are_exclusive(self):
        with pytest.raises(SystemExit):
            runner.parse_args(["--profile", "shopify-store", "--site-url", "https://x.example"], make_settings())

    def test_rejects_zero_pages(self):
        with pytest.raises(SystemExit):
            runner.parse_args(["--max-pages", "0"], make_settings())

    def test_profile_flag_beats_environment_sources(self):
        config = make_settings(SITE_URL="https://env.example/all", PROFILE_PATH="/tmp/env-profile.json")

        args = runner.parse_args(["--profile", "calian-gnss"], config)
        profile = resolve_profile(
            config_name=args.profile,
            profile_path=args.profile_file,
            site_url=args.site_url,
        )

        assert args.site_url == ""
        assert args.profile_file == ""
        assert profile.site_name == "Calian GNSS"

    def test_profile_file_flag_beats_environment_site_url(self):
        config = make_settings(SITE_URL="https://env.example/all")

        args = runner.parse_args(["--profile-file", "acme.json"], config)

        assert args.profile_file == "acme.json"
        assert args.site_url == ""

    def test_environment_sources_used_without_flags(self):
        config = make_settings(SITE_URL="https://env.example/all", CONFIG_NAME="shopify-store")

        args = runner.parse_args([], config)

        assert args.site_url == "https://env.example/all"
        assert args.profile == "shopify-store"


class TestMain:

    async def test_unknown_profile_exits_with_2(self, tmp_path):
        config = make_settings()
        args = runner.parse_args(["--profile", "nope", "--output-dir", str(tmp_path)], config)

        assert await runner.main(args, config) == 2
        assert list(tmp_path.iterdir()) == []

    async def test_saves_crawled_records(self, tmp_path, monkeypatch):
        captured = {}

        async def fake_run_crawl(profile, options, result, headless=True, retry_delay=2.0):
            captured["options"] = options
            captured["retry_delay"] = retry_delay
            result.records.append(
                ProductRecord(
                    title="Widget",
                    description="A widget.",
                    image_url="",
                    url="https://shopify.example/products/widget",
                    product_id="widget",
                )
            )
            return result

        monkeypatch.setattr(runner, "run_crawl", fake_run_crawl)
        config = make_settings(NAVIGATION_RETRY_DELAY=0.5)
        args = runner.parse_args(
            ["--profile", "shopify-store", "--max-pages", "1", "--output-dir", str(tmp_path)],
            config,
        )

        assert await runner.main(args, config) == 0
        assert captured["options"].max_pages == 1
        assert captured["retry_delay"] == 0.5
        assert sorted(p.suffix for p in tmp_path.iterdir()) == [".json", ".txt"]

    async def test_no_records_writes_nothing(self, tmp_path, monkeypatch):
        async def empty_run_crawl(profile, options, result, headless=True, retry_delay=2.0):
            return result

        monkeypatch.setattr(runner, "run_crawl", empty_run_crawl)
        config = make_settings()
        args = runner.parse_args(["--profile", "shopify-store", "--output-dir", str(tmp_path)], config)

        assert await runner.main(args, config) == 0
        assert list(tmp_path.iterdir()) == []
