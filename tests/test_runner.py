"""Tests for the run driver (source globs, destinations, failures)."""

import logging
from pathlib import Path

import pytest

from includereplace.config import Configuration, FileMapping
from includereplace.exceptions import IncludeSyntaxError
from includereplace.runner import IncludeReplaceRunner, is_directory_dest


@pytest.fixture
def site(tmp_path, monkeypatch):
    """A small source tree with the working directory set to its root."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'src' / 'blog').mkdir(parents=True)
    (tmp_path / 'src' / 'index.html').write_text('<h1>@@site</h1>@@include("parts/footer.html")')
    (tmp_path / 'src' / 'blog' / 'post.html').write_text('<a href="@@docrootindex.html">home</a>')
    (tmp_path / 'src' / 'parts').mkdir()
    (tmp_path / 'src' / 'parts' / 'footer.html').write_text('<footer>@@year</footer>')
    return tmp_path


def test_is_directory_dest():
    assert is_directory_dest('dist/')
    assert not is_directory_dest('dist/index.html')


def test_directory_dest_joins_source_path(site):
    config = Configuration(
        globals={'site': 'Example', 'year': 2024},
        docroot='src',
        files=[FileMapping(src=['src/index.html', 'src/blog/*.html'], dest='dist/')]
    )

    result = IncludeReplaceRunner(config).run()

    assert result.ok
    assert result.processed == [
        ('src/index.html', 'dist/src/index.html'),
        ('src/blog/post.html', 'dist/src/blog/post.html'),
    ]
    assert (site / 'dist' / 'src' / 'index.html').read_text() == '<h1>Example</h1><footer>2024</footer>'
    assert (site / 'dist' / 'src' / 'blog' / 'post.html').read_text() == '<a href="../index.html">home</a>'


def test_cwd_makes_destinations_relative(site):
    config = Configuration(
        globals={'site': 'Example', 'year': 2024},
        files=[FileMapping(src=['*.html'], dest='dist/', cwd='src')]
    )

    result = IncludeReplaceRunner(config).run()

    assert result.processed == [('src/index.html', 'dist/index.html')]
    assert (site / 'dist' / 'index.html').read_text() == '<h1>Example</h1><footer>2024</footer>'


def test_file_dest(site):
    config = Configuration(
        globals={'site': 'S', 'year': 1},
        files=[FileMapping(src=['src/index.html'], dest='out/home.html')]
    )

    IncludeReplaceRunner(config).run()

    assert (site / 'out' / 'home.html').read_text() == '<h1>S</h1><footer>1</footer>'


def test_exclusion_patterns(site):
    config = Configuration(
        files=[FileMapping(src=['src/**/*.html', '!src/parts/*.html', '!src/index.html'], dest='dist/')]
    )

    result = IncludeReplaceRunner(config).run()

    assert result.processed == [('src/blog/post.html', 'dist/src/blog/post.html')]


def test_missing_sources_warn(site, caplog):
    config = Configuration(files=[FileMapping(src=['nope/*.html'], dest='dist/')])

    with caplog.at_level(logging.WARNING):
        result = IncludeReplaceRunner(config).run()

    assert not result.ok
    assert result.processed == []
    assert 'Source file(s) not found: nope/*.html' in caplog.text


def test_non_file_matches_are_skipped(site):
    config = Configuration(files=[FileMapping(src=['src/*'], dest='dist/')])

    result = IncludeReplaceRunner(config).run()

    assert [src for src, _ in result.processed] == ['src/index.html']
    assert any('Ignoring non file' in w for w in result.warnings)


def test_include_warnings_are_reported(site):
    (site / 'src' / 'broken.html').write_text('@@include("missing.html")')
    config = Configuration(files=[FileMapping(src=['src/broken.html'], dest='dist/')])

    result = IncludeReplaceRunner(config).run()

    assert (site / 'dist' / 'src' / 'broken.html').read_text() == ''
    assert len(result.warnings) == 1
    assert 'Include file(s) not found' in result.warnings[0]


def test_fatal_error_keeps_earlier_output(site):
    (site / 'src' / 'a.html').write_text('fine')
    (site / 'src' / 'b.html').write_text('@@include("a.html", {oops})')
    (site / 'src' / 'c.html').write_text('never')
    config = Configuration(files=[FileMapping(src=['src/a.html', 'src/b.html', 'src/c.html'], dest='dist/')])

    with pytest.raises(IncludeSyntaxError):
        IncludeReplaceRunner(config).run()

    assert (site / 'dist' / 'src' / 'a.html').read_text() == 'fine'
    assert not (site / 'dist' / 'src' / 'b.html').exists()
    assert not (site / 'dist' / 'src' / 'c.html').exists()


def test_encoding_is_used(site):
    (site / 'src' / 'latin.html').write_bytes('café @@x'.encode('latin-1'))
    config = Configuration(
        encoding='latin-1',
        globals={'x': 'über'},
        files=[FileMapping(src=['src/latin.html'], dest='dist/')]
    )

    IncludeReplaceRunner(config).run()

    assert (site / 'dist' / 'src' / 'latin.html').read_bytes() == 'café über'.encode('latin-1')


def test_repeated_run_reports_warnings_once(site):
    (site / 'src' / 'broken.html').write_text('@@include("missing.html")')
    config = Configuration(files=[FileMapping(src=['src/broken.html', 'nope/*.html'], dest='dist/')])
    runner = IncludeReplaceRunner(config)

    first = runner.run()
    second = runner.run()

    assert len(first.warnings) == 2
    assert len(second.warnings) == 2
    assert second.processed == [('src/broken.html', 'dist/src/broken.html')]
