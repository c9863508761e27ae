import pytest

from s3deployer.errors import RewriteFailed
from s3deployer.services.entry_rewriter import EntryRewriter, rewrite_references


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_relative_script_and_stylesheet_are_prefixed_with_version():
    html = (
        '<link href="styles.css" rel="stylesheet">'
        '<script src="./app.js"></script>'
        '<script src="https://cdn.example.com/x.js"></script>'
    )

    rewritten, count = rewrite_references(html, "v1")

    assert count == 2
    assert 'src="/v1/app.js"' in rewritten
    assert 'href="/v1/styles.css"' in rewritten
    assert 'src="https://cdn.example.com/x.js"' in rewritten


def test_parent_traversal_and_other_extensions_are_left_alone():
    html = (
        '<script src="../shared/vendor.js"></script>'
        '<link href="favicon.ico" rel="icon">'
        '<script src="//cdn.example.com/lib.js"></script>'
        '<a href="about.html">About</a>'
    )

    rewritten, count = rewrite_references(html, "v1")

    assert count == 0
    assert rewritten == html


def test_root_relative_paths_keep_subdirectories_and_quote_style():
    html = "<script src='/static/js/main.JS'></script><link HREF=\"css/site.css\">"

    rewritten, count = rewrite_references(html, "1700000000-abc1234")

    assert count == 2
    assert "src='/1700000000-abc1234/static/js/main.JS'" in rewritten
    assert 'HREF="/1700000000-abc1234/css/site.css"' in rewritten


def test_rewrite_updates_entry_document_on_disk(tmp_path):
    entry = tmp_path / "index.html"
    entry.write_text('<script src="app.js"></script>', encoding="utf-8")

    count = EntryRewriter(logger=DummyLogger()).rewrite(str(entry), "v2")

    assert count == 1
    assert entry.read_text(encoding="utf-8") == '<script src="/v2/app.js"></script>'


def test_rewrite_fails_when_entry_document_is_missing(tmp_path):
    with pytest.raises(RewriteFailed, match="Could not rewrite entry document"):
        EntryRewriter(logger=DummyLogger()).rewrite(str(tmp_path / "index.html"), "v1")


def test_second_deploy_does_not_prefix_an_already_versioned_reference(tmp_path):
    (tmp_path / "app.js").write_text("console.log(1);", encoding="utf-8")
    entry = tmp_path / "index.html"
    entry.write_text('<script src="app.js"></script>', encoding="utf-8")
    rewriter = EntryRewriter(logger=DummyLogger())

    assert rewriter.rewrite(str(entry), "v1") == 1
    assert rewriter.rewrite(str(entry), "v2") == 0
    assert entry.read_text(encoding="utf-8") == '<script src="/v1/app.js"></script>'


def test_root_relative_build_paths_are_still_prefixed(tmp_path):
    (tmp_path / "static" / "js").mkdir(parents=True)
    (tmp_path / "static" / "js" / "main.js").write_text("", encoding="utf-8")

    rewritten, count = rewrite_references('<script src="/static/js/main.js"></script>', "v3", root=str(tmp_path))

    assert count == 1
    assert rewritten == '<script src="/v3/static/js/main.js"></script>'
