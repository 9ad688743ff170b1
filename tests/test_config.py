from pathlib import Path

import pytest

from budget_insights import config


def test_rules_file_ships_the_50_30_20_split():
    assert config.get_rule('split') == {'needs': 0.5, 'wants': 0.3, 'savings': 0.2}
    assert config.get_rule('variance', 'yearly_absolute_threshold') == 1200


def test_missing_rule_returns_default():
    assert config.get_rule('variance', 'nope', default=7) == 7
    assert config.get_rule('split', 'needs', 'deeper', default='x') == 'x'


def test_missing_rule_file(monkeypatch, tmp_path):
    monkeypatch.setattr(config, 'RULES_DIR', tmp_path)

    with pytest.raises(FileNotFoundError):
        config.load_rules('not_there')
    assert config.get_rule('split', name='not_there', default={}) == {}



def test_package_metadata_does_not_publish_design_notes():
    pyproject = (Path(__file__).resolve().parents[1] / 'pyproject.toml').read_text(encoding='utf-8')

    assert 'readme' not in pyproject
