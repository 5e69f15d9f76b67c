import json

import pytest

import main
from models.scrape_result import ScrapeResult


def test_scrape_rejects_unsupported_host(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["scrape", "https://example.com/item"]) == 2
    assert "Unsupported product URL" in capsys.readouterr().out


def test_scrape_any_host_prints_result(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    seen = []

    def fake_scrape(url, **_):
        seen.append(url)
        return ScrapeResult.failed(url)

    monkeypatch.setattr(main, "scrape_product_info", fake_scrape)

    assert main.main(["scrape", "--any-host", "https://example.com/item"]) == 1
    assert seen == ["https://example.com/item"]
    printed = json.loads(capsys.readouterr().out)
    assert printed["name"] == "Imported Item"
    assert printed["scraped_successfully"] is False
