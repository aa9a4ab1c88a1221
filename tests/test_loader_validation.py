"""Tests for configuration loading and strict validation."""

import pytest
from pathlib import Path

from includereplace.config import Configuration, FileMapping
from includereplace.exceptions import ConfigValidationError
from includereplace.loader import ConfigLoader


def load(tmp_path: Path, text: str) -> Configuration:
    config_path = tmp_path / 'includereplace.yaml'
    config_path.write_text(text)
    return ConfigLoader().load(config_path)


def test_defaults_for_empty_file(tmp_path):
    config = load(tmp_path, '')
    assert config == Configuration()
    assert config.prefix == '@@'
    assert config.suffix == ''
    assert config.use_mustache is True
    assert config.max_depth == 100


def test_full_configuration(tmp_path):
    config = load(tmp_path, """
prefix: "<!--@"
suffix: "-->"
globals:
  site: Example
  year: 2024
  nav: [home, about]
includes_dir: partials
docroot: site
encoding: latin-1
use_mustache: false
always_unescaped: true
max_depth: 20
files:
  - src: "site/**/*.html"
    dest: dist/
  - src: [a.html, "!b.html"]
    dest: out/a.html
    cwd: pages
""")

    assert config.prefix == '<!--@'
    assert config.suffix == '-->'
    assert config.globals == {'site': 'Example', 'year': 2024, 'nav': ['home', 'about']}
    assert config.includes_dir == 'partials'
    assert config.docroot == 'site'
    assert config.encoding == 'latin-1'
    assert config.use_mustache is False
    assert config.always_unescaped is True
    assert config.max_depth == 20
    assert config.files == [
        FileMapping(src=['site/**/*.html'], dest='dist/'),
        FileMapping(src=['a.html', '!b.html'], dest='out/a.html', cwd='pages'),
    ]


def test_camel_case_aliases(tmp_path):
    config = load(tmp_path, """
includesDir: inc
useMustache: false
alwaysUnescaped: true
""")
    assert config.includes_dir == 'inc'
    assert config.use_mustache is False
    assert config.always_unescaped is True


def test_unknown_options_are_ignored(tmp_path):
    config = load(tmp_path, """
prefix: "##"
banner: "/* generated */"
""")
    assert config.prefix == '##'


def test_yes_no_globals_stay_strings(tmp_path):
    config = load(tmp_path, """
globals:
  lang: no
  robots: off
  enabled: true
""")
    assert config.globals == {'lang': 'no', 'robots': 'off', 'enabled': True}


def test_hook_import_string(tmp_path):
    config = load(tmp_path, 'process_include_contents: "os.path:join"\n')
    import os.path
    assert config.process_include_contents is os.path.join


def test_errors_are_collected(tmp_path):
    with pytest.raises(ConfigValidationError) as exc_info:
        load(tmp_path, """
prefix: ""
suffix: 5
globals: [a, b]
use_mustache: "yes please"
max_depth: 0
files:
  - dest: dist/
""")

    paths = [error.path for error in exc_info.value.errors]
    assert paths == ['suffix', 'prefix', 'use_mustache', 'globals', 'max_depth', 'files[0]']
    assert exc_info.value.exit_code == 2


def test_bad_hook_reference(tmp_path):
    with pytest.raises(ConfigValidationError) as exc_info:
        load(tmp_path, 'processIncludeContents: "os:sep"\n')
    assert 'not callable' in str(exc_info.value)

    with pytest.raises(ConfigValidationError) as exc_info:
        load(tmp_path, 'process_include_contents: "no_such_module_xyz:fn"\n')
    assert 'cannot import' in str(exc_info.value)


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(ConfigValidationError):
        load(tmp_path, '- just\n- a list\n')


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigValidationError) as exc_info:
        load(tmp_path, 'prefix: [unclosed\n')
    assert 'Failed to load configuration' in str(exc_info.value)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigValidationError):
        ConfigLoader().load(tmp_path / 'missing.yaml')


def test_with_globals_overlays():
    config = Configuration(globals={'a': '1', 'b': '2'})
    merged = config.with_globals({'b': 'x'})
    assert merged.globals == {'a': '1', 'b': 'x'}
    assert config.globals == {'a': '1', 'b': '2'}
